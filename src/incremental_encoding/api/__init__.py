"""Single-shot and streaming conversion built on the incremental protocol."""

from .convenience import (
    decode,
    decode_with_bom_removal,
    decode_without_bom_handling,
    decode_without_bom_handling_and_without_replacement,
    encode,
)
from .stream import iter_decode, iter_encode

__all__ = [
    "decode",
    "decode_with_bom_removal",
    "decode_without_bom_handling",
    "decode_without_bom_handling_and_without_replacement",
    "encode",
    "iter_decode",
    "iter_encode",
]
