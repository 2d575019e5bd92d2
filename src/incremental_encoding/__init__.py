"""Incremental Encoding.

Streaming conversion between Unicode and the legacy encodings of the WHATWG
Encoding Standard, under caller-controlled buffer limits, with or without
automatic replacement of malformed and unmappable input.

Progressive API Disclosure:
- Level 1: Single-shot functions - decode(), encode() and the Encoding constants
- Level 2: Incremental conversion - Decoder and Encoder via Encoding.new_*()
- Level 3: Streaming helpers - iter_decode(), iter_encode() with ConversionConfig
"""

__version__ = "0.1.0"
__author__ = "Incremental Encoding Team"

# Progressive API disclosure - Level 1: Single-shot functions
# Progressive API disclosure - Level 3: Streaming helpers
from .api import (
    decode,
    decode_with_bom_removal,
    decode_without_bom_handling,
    decode_without_bom_handling_and_without_replacement,
    encode,
    iter_decode,
    iter_encode,
)

# Progressive API disclosure - Level 2: Incremental conversion
from .core import Decoder, DecoderPhase, Encoder
from .registry import (
    ALL_ENCODINGS,
    ENCODING_LABELS,
    Encoding,
    UTF_8,
    IBM866,
    ISO_8859_2,
    ISO_8859_3,
    ISO_8859_4,
    ISO_8859_5,
    ISO_8859_6,
    ISO_8859_7,
    ISO_8859_8,
    ISO_8859_8_I,
    ISO_8859_10,
    ISO_8859_13,
    ISO_8859_14,
    ISO_8859_15,
    ISO_8859_16,
    KOI8_R,
    KOI8_U,
    MACINTOSH,
    WINDOWS_874,
    WINDOWS_1250,
    WINDOWS_1251,
    WINDOWS_1252,
    WINDOWS_1253,
    WINDOWS_1254,
    WINDOWS_1255,
    WINDOWS_1256,
    WINDOWS_1257,
    WINDOWS_1258,
    X_MAC_CYRILLIC,
    GBK,
    GB18030,
    BIG5,
    EUC_JP,
    ISO_2022_JP,
    SHIFT_JIS,
    EUC_KR,
    REPLACEMENT,
    UTF_16BE,
    UTF_16LE,
    X_USER_DEFINED,
)

# Configuration classes for advanced usage
from .shared.config import BomHandling, ConversionConfig, StreamConfig

# Core result objects and exceptions for all API levels
from .shared.errors import (
    IncrementalEncodingError,
    MalformedInputError,
    StreamFinishedError,
    UnknownEncodingError,
    UnmappableCharacterError,
)
from .shared.result import (
    ConversionMetrics,
    DecodeOutcome,
    DecoderResult,
    EncodeOutcome,
    EncoderResult,
    TextDecodeOutcome,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Single-shot functions (progressive disclosure entry point)
    "decode",
    "decode_with_bom_removal",
    "decode_without_bom_handling",
    "decode_without_bom_handling_and_without_replacement",
    "encode",

    # Level 2: Incremental decoder and encoder
    "Decoder",
    "DecoderPhase",
    "Encoder",

    # Level 3: Streaming helpers
    "iter_decode",
    "iter_encode",

    # Result objects
    "ConversionMetrics",
    "DecodeOutcome",
    "DecoderResult",
    "EncodeOutcome",
    "EncoderResult",
    "TextDecodeOutcome",

    # Exceptions
    "IncrementalEncodingError",
    "MalformedInputError",
    "StreamFinishedError",
    "UnknownEncodingError",
    "UnmappableCharacterError",

    # Configuration classes for advanced usage
    "BomHandling",
    "ConversionConfig",
    "StreamConfig",

    # Encodings
    "ALL_ENCODINGS",
    "ENCODING_LABELS",
    "Encoding",
    "UTF_8",
    "IBM866",
    "ISO_8859_2",
    "ISO_8859_3",
    "ISO_8859_4",
    "ISO_8859_5",
    "ISO_8859_6",
    "ISO_8859_7",
    "ISO_8859_8",
    "ISO_8859_8_I",
    "ISO_8859_10",
    "ISO_8859_13",
    "ISO_8859_14",
    "ISO_8859_15",
    "ISO_8859_16",
    "KOI8_R",
    "KOI8_U",
    "MACINTOSH",
    "WINDOWS_874",
    "WINDOWS_1250",
    "WINDOWS_1251",
    "WINDOWS_1252",
    "WINDOWS_1253",
    "WINDOWS_1254",
    "WINDOWS_1255",
    "WINDOWS_1256",
    "WINDOWS_1257",
    "WINDOWS_1258",
    "X_MAC_CYRILLIC",
    "GBK",
    "GB18030",
    "BIG5",
    "EUC_JP",
    "ISO_2022_JP",
    "SHIFT_JIS",
    "EUC_KR",
    "REPLACEMENT",
    "UTF_16BE",
    "UTF_16LE",
    "X_USER_DEFINED",
]
