"""ISO-2022-JP codec.

ISO-2022-JP is stateful in both directions: escape sequences switch between
ASCII, JIS X 0201 Roman, JIS X 0201 katakana (decode only) and JIS X 0208.
An escape sequence that is immediately followed by another escape sequence
is malformed, so that escapes cannot be used to smuggle invisible state
changes into text.
"""

from enum import Enum, auto
from typing import NamedTuple, Optional

from . import indexes
from .base import Codec, DecodeStep, EncodeStep

ESC = 0x1B
TO_ASCII = b"\x1b(B"
TO_ROMAN = b"\x1b(J"
TO_JIS0208 = b"\x1b$B"

# Half-width katakana U+FF61-U+FF9F and their full-width equivalents
HALF_TO_FULL_WIDTH = (
    "。「」、・ヲァィゥェォャュョッーアイウエオカキクケコサシスセソタチツテト"
    "ナニヌネノハヒフヘホマミムメモヤユヨラリルレロワン゛゜"
)


class DecoderMode(Enum):
    """Where the ISO-2022-JP decoder is in the byte stream."""

    ASCII = auto()
    ROMAN = auto()
    KATAKANA = auto()
    LEAD_BYTE = auto()       # JIS X 0208, expecting a lead byte
    TRAIL_BYTE = auto()      # JIS X 0208, expecting a trail byte
    ESCAPE_START = auto()    # Seen ESC
    ESCAPE = auto()          # Seen ESC and "$" or "("


class EncoderMode(Enum):
    """Character set the ISO-2022-JP encoder has switched to."""

    ASCII = auto()
    ROMAN = auto()
    JIS0208 = auto()


class Iso2022JpState(NamedTuple):
    """Decoder state.

    Attributes:
        mode: Current position in the byte stream
        output_mode: Character set to return to after a failed escape
        lead: Pending lead byte or escape intermediate byte
        output: Whether a character has been produced since the last escape
    """

    mode: DecoderMode = DecoderMode.ASCII
    output_mode: DecoderMode = DecoderMode.ASCII
    lead: int = 0
    output: bool = False


INITIAL = Iso2022JpState()

_ESCAPES = {
    (0x28, 0x42): DecoderMode.ASCII,
    (0x28, 0x4A): DecoderMode.ROMAN,
    (0x28, 0x49): DecoderMode.KATAKANA,
    (0x24, 0x40): DecoderMode.LEAD_BYTE,
    (0x24, 0x42): DecoderMode.LEAD_BYTE,
}


def _emit(state: Iso2022JpState, char: str) -> DecodeStep:
    return DecodeStep(state._replace(output=False), char)


def _error(state: Iso2022JpState, **kwargs) -> DecodeStep:
    return DecodeStep(state._replace(output=False), malformed=1, **kwargs)


def decode_byte(state: Iso2022JpState, byte: int) -> DecodeStep:
    mode = state.mode

    if mode is DecoderMode.ESCAPE_START:
        if byte in (0x24, 0x28):
            return DecodeStep(state._replace(mode=DecoderMode.ESCAPE, lead=byte))
        return DecodeStep(
            state._replace(mode=state.output_mode, output=False),
            malformed=1,
            consumed=False,
        )

    if mode is DecoderMode.ESCAPE:
        lead = state.lead
        target = _ESCAPES.get((lead, byte))
        if target is None:
            return DecodeStep(
                state._replace(mode=state.output_mode, lead=0, output=False),
                malformed=1,
                consumed=False,
                prepend=bytes((lead,)),
            )
        switched = Iso2022JpState(target, target, 0, True)
        if state.output:
            # Two escape sequences in a row
            return DecodeStep(switched, malformed=3)
        return DecodeStep(switched)

    if byte == ESC:
        if mode is DecoderMode.TRAIL_BYTE:
            return DecodeStep(
                state._replace(mode=DecoderMode.ESCAPE_START, lead=0, output=False),
                malformed=1,
            )
        return DecodeStep(state._replace(mode=DecoderMode.ESCAPE_START))

    if mode is DecoderMode.ASCII:
        if byte < 0x80 and byte not in (0x0E, 0x0F):
            return _emit(state, chr(byte))
        return _error(state)

    if mode is DecoderMode.ROMAN:
        if byte == 0x5C:
            return _emit(state, "\u00a5")
        if byte == 0x7E:
            return _emit(state, "\u203e")
        if byte < 0x80 and byte not in (0x0E, 0x0F):
            return _emit(state, chr(byte))
        return _error(state)

    if mode is DecoderMode.KATAKANA:
        if 0x21 <= byte <= 0x5F:
            return _emit(state, chr(0xFF61 - 0x21 + byte))
        return _error(state)

    if mode is DecoderMode.LEAD_BYTE:
        if 0x21 <= byte <= 0x7E:
            return DecodeStep(
                state._replace(mode=DecoderMode.TRAIL_BYTE, lead=byte, output=False)
            )
        return _error(state)

    # TRAIL_BYTE
    after = state._replace(mode=DecoderMode.LEAD_BYTE, lead=0, output=False)
    if 0x21 <= byte <= 0x7E:
        code_point = indexes.jis0208_code_point((state.lead - 0x21) * 94 + byte - 0x21)
        if code_point is None:
            return DecodeStep(after, malformed=2)
        return DecodeStep(after, chr(code_point))
    return DecodeStep(after, malformed=2)


def decode_eof(state: Iso2022JpState) -> Optional[DecodeStep]:
    mode = state.mode
    if mode is DecoderMode.TRAIL_BYTE:
        return DecodeStep(
            state._replace(mode=DecoderMode.LEAD_BYTE, lead=0, output=False), malformed=1
        )
    if mode is DecoderMode.ESCAPE_START:
        return DecodeStep(state._replace(mode=state.output_mode), malformed=1)
    if mode is DecoderMode.ESCAPE:
        return DecodeStep(
            state._replace(mode=state.output_mode, lead=0),
            malformed=1,
            prepend=bytes((state.lead,)),
        )
    return None


def pending_length(state: Iso2022JpState) -> int:
    if state.mode in (DecoderMode.TRAIL_BYTE, DecoderMode.ESCAPE_START):
        return 1
    if state.mode is DecoderMode.ESCAPE:
        return 2
    return 0


def encode_char(mode: EncoderMode, code_point: int) -> EncodeStep:
    if mode is not EncoderMode.JIS0208 and code_point in (0x0E, 0x0F, ESC):
        return EncodeStep(mode, unmappable=0xFFFD)

    if mode is EncoderMode.ASCII and code_point < 0x80:
        return EncodeStep(mode, bytes((code_point,)))
    if mode is EncoderMode.ROMAN:
        if code_point < 0x80 and code_point not in (0x5C, 0x7E):
            return EncodeStep(mode, bytes((code_point,)))
        if code_point == 0x00A5:
            return EncodeStep(mode, b"\x5c")
        if code_point == 0x203E:
            return EncodeStep(mode, b"\x7e")

    if code_point < 0x80:
        return EncodeStep(EncoderMode.ASCII, TO_ASCII, consumed=False)
    if code_point in (0x00A5, 0x203E):
        return EncodeStep(EncoderMode.ROMAN, TO_ROMAN, consumed=False)

    target = code_point
    if target == 0x2212:
        target = 0xFF0D
    if 0xFF61 <= target <= 0xFF9F:
        target = ord(HALF_TO_FULL_WIDTH[target - 0xFF61])

    pointer = indexes.jis0208_pointer(target)
    if pointer is None or pointer >= indexes.JIS0208_ROWS_LIMIT:
        if mode is EncoderMode.JIS0208:
            return EncodeStep(EncoderMode.ASCII, TO_ASCII, consumed=False)
        return EncodeStep(mode, unmappable=code_point)

    if mode is not EncoderMode.JIS0208:
        return EncodeStep(EncoderMode.JIS0208, TO_JIS0208, consumed=False)
    row, cell = divmod(pointer, 94)
    return EncodeStep(mode, bytes((row + 0x21, cell + 0x21)))


def encode_eof(mode: EncoderMode) -> Optional[EncodeStep]:
    if mode is EncoderMode.ASCII:
        return None
    return EncodeStep(EncoderMode.ASCII, TO_ASCII)


def max_length_from_utf8(byte_length: int) -> int:
    # An ASCII byte may need a three-byte escape first; the stream may need a
    # final return to ASCII.
    return 4 * byte_length + 3


def max_length_from_units(length: int) -> int:
    return 5 * length + 3


CODEC = Codec(
    name="ISO-2022-JP",
    ascii_compatible=False,
    initial_decoder_state=INITIAL,
    decode_byte=decode_byte,
    decode_eof=decode_eof,
    pending_length=pending_length,
    initial_encoder_state=EncoderMode.ASCII,
    encode_char=encode_char,
    encode_eof=encode_eof,
    max_length_from_utf8=max_length_from_utf8,
    max_length_from_utf16=max_length_from_units,
    max_length_from_str=max_length_from_units,
    ncr_overhead=len(TO_ASCII) + 10,
)
