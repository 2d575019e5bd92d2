"""Result objects and status types for incremental conversion.

Every ``decode_*`` and ``encode_*`` call returns an outcome tuple whose first
item says why the call returned. The three reasons are mutually exclusive:
the input was exhausted, the output buffer could not take the next character,
or (fatal variants only) an error stopped the conversion.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple, Optional


class DecoderResult(Enum):
    """Why a ``decode_*`` call returned."""

    INPUT_EMPTY = auto()   # All of src was consumed
    OUTPUT_FULL = auto()   # The next character might not fit into dst
    MALFORMED = auto()     # Malformed sequence (without-replacement variants)


class EncoderResult(Enum):
    """Why an ``encode_*`` call returned."""

    INPUT_EMPTY = auto()   # All of src was consumed
    OUTPUT_FULL = auto()   # The next character might not fit into dst
    UNMAPPABLE = auto()    # Unmappable character (without-replacement variants)


class DecodeOutcome(NamedTuple):
    """Outcome of one ``decode_*`` call.

    Attributes:
        result: Reason for returning
        read: Number of bytes consumed from ``src``
        written: Number of code units (bytes or UTF-16 units) written to ``dst``
        had_replacements: Whether a REPLACEMENT CHARACTER was substituted
        malformed_length: Length of the malformed sequence when ``result`` is
            ``MALFORMED``; the sequence may begin in an earlier buffer
    """

    result: DecoderResult
    read: int
    written: int
    had_replacements: bool = False
    malformed_length: int = 0


class EncodeOutcome(NamedTuple):
    """Outcome of one ``encode_*`` call.

    Attributes:
        result: Reason for returning
        read: Number of input code units consumed from ``src``
        written: Number of bytes written to ``dst``
        had_replacements: Whether a numeric character reference was substituted
        unmappable: The unmappable character when ``result`` is ``UNMAPPABLE``
    """

    result: EncoderResult
    read: int
    written: int
    had_replacements: bool = False
    unmappable: Optional[str] = None


class TextDecodeOutcome(NamedTuple):
    """Outcome of ``Decoder.decode_to_str``; ``text`` replaces ``written``."""

    result: DecoderResult
    read: int
    text: str
    had_replacements: bool = False
    malformed_length: int = 0


@dataclass
class ConversionMetrics:
    """Counters collected by the streaming helpers."""

    calls: int = 0
    bytes_read: int = 0
    units_read: int = 0
    units_written: int = 0
    output_full_turnarounds: int = 0
    calls_with_replacements: int = 0
    chunks: int = 0

    @property
    def expansion_ratio(self) -> float:
        """Output units per input unit."""
        consumed = self.bytes_read + self.units_read
        if consumed == 0:
            return 0.0
        return self.units_written / consumed

    @property
    def had_errors(self) -> bool:
        """Whether any replacement happened during the conversion."""
        return self.calls_with_replacements > 0
