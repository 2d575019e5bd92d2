"""Incremental decoder and encoder state machines."""

from .decoder import Decoder, DecoderPhase
from .encoder import Encoder

__all__ = [
    "Decoder",
    "DecoderPhase",
    "Encoder",
]
