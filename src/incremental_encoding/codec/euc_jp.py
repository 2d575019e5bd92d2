"""EUC-JP codec.

The decoder understands JIS X 0208, half-width katakana (0x8E prefix) and
JIS X 0212 (0x8F prefix); the encoder produces only the first two.
"""

from typing import NamedTuple, Optional

from . import indexes
from .base import Codec, DecodeStep, EncodeStep, double_length, same_length


class EucJpState(NamedTuple):
    """Pending lead byte and whether a 0x8F prefix preceded it."""

    lead: int = 0
    jis0212: bool = False


INITIAL = EucJpState()


def decode_byte(state: EucJpState, byte: int) -> DecodeStep:
    lead, jis0212 = state

    if lead == 0x8E and 0xA1 <= byte <= 0xDF:
        return DecodeStep(INITIAL, chr(0xFF61 - 0xA1 + byte))
    if lead == 0x8F and 0xA1 <= byte <= 0xFE:
        return DecodeStep(EucJpState(byte, True))

    if lead:
        code_point = None
        if 0xA1 <= lead <= 0xFE and 0xA1 <= byte <= 0xFE:
            pointer = (lead - 0xA1) * 94 + byte - 0xA1
            if jis0212:
                code_point = indexes.jis0212_code_point(pointer)
            else:
                code_point = indexes.jis0208_code_point(pointer)
        if code_point is not None:
            return DecodeStep(INITIAL, chr(code_point))
        prefix = 2 if jis0212 else 1
        if byte < 0x80:
            return DecodeStep(INITIAL, malformed=prefix, consumed=False)
        return DecodeStep(INITIAL, malformed=prefix + 1)

    if byte < 0x80:
        return DecodeStep(state, chr(byte))
    if byte in (0x8E, 0x8F) or 0xA1 <= byte <= 0xFE:
        return DecodeStep(EucJpState(byte))
    return DecodeStep(state, malformed=1)


def decode_eof(state: EucJpState) -> Optional[DecodeStep]:
    pending = pending_length(state)
    if pending == 0:
        return None
    return DecodeStep(INITIAL, malformed=pending)


def pending_length(state: EucJpState) -> int:
    return (1 if state.lead else 0) + (1 if state.jis0212 else 0)


def encode_char(state: None, code_point: int) -> EncodeStep:
    if code_point < 0x80:
        return EncodeStep(None, bytes((code_point,)))
    if code_point == 0x00A5:
        return EncodeStep(None, b"\x5c")
    if code_point == 0x203E:
        return EncodeStep(None, b"\x7e")
    if 0xFF61 <= code_point <= 0xFF9F:
        return EncodeStep(None, bytes((0x8E, code_point - 0xFF61 + 0xA1)))
    if code_point == 0x2212:
        code_point = 0xFF0D
    pointer = indexes.jis0208_pointer(code_point)
    if pointer is None or pointer >= indexes.JIS0208_ROWS_LIMIT:
        return EncodeStep(None, unmappable=code_point)
    row, cell = divmod(pointer, 94)
    return EncodeStep(None, bytes((row + 0xA1, cell + 0xA1)))


CODEC = Codec(
    name="EUC-JP",
    ascii_compatible=True,
    initial_decoder_state=INITIAL,
    decode_byte=decode_byte,
    decode_eof=decode_eof,
    pending_length=pending_length,
    encode_char=encode_char,
    max_length_from_utf8=same_length,
    max_length_from_utf16=double_length,
    max_length_from_str=double_length,
)
