"""Shared utilities for incremental encoding conversion.

This module provides the configuration objects, result types, exceptions and
logging helpers used across the registry, codec, core and api layers.
"""

from .config import (
    BomHandling,
    ConfigError,
    ConfigValidationError,
    ConversionConfig,
    StreamConfig,
)
from .errors import (
    IncrementalEncodingError,
    MalformedInputError,
    StreamFinishedError,
    UnknownEncodingError,
    UnmappableCharacterError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    ConversionMetrics,
    DecodeOutcome,
    DecoderResult,
    EncodeOutcome,
    EncoderResult,
    TextDecodeOutcome,
)

__all__ = [
    "BomHandling",
    "ConfigError",
    "ConfigValidationError",
    "ConversionConfig",
    "StreamConfig",
    "IncrementalEncodingError",
    "MalformedInputError",
    "StreamFinishedError",
    "UnknownEncodingError",
    "UnmappableCharacterError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "ConversionMetrics",
    "DecodeOutcome",
    "DecoderResult",
    "EncodeOutcome",
    "EncoderResult",
    "TextDecodeOutcome",
]
