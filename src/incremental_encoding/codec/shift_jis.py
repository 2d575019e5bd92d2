"""Shift_JIS codec (the Windows-31J flavour).

Leads 0xF0-0xF9 form the end-user-defined area, decoded to the Private Use
Area and never produced by the encoder.
"""

from typing import Optional

from . import indexes
from .base import Codec, DecodeStep, EncodeStep, double_length, same_length


def decode_byte(lead: int, byte: int) -> DecodeStep:
    if lead:
        pointer = None
        if 0x40 <= byte <= 0x7E or 0x80 <= byte <= 0xFC:
            offset = 0x40 if byte < 0x7F else 0x41
            lead_offset = 0x81 if lead < 0xA0 else 0xC1
            pointer = (lead - lead_offset) * 188 + byte - offset
        if pointer is not None:
            if indexes.SHIFT_JIS_EUDC_FIRST <= pointer <= indexes.SHIFT_JIS_EUDC_LAST:
                return DecodeStep(0, chr(0xE000 - indexes.SHIFT_JIS_EUDC_FIRST + pointer))
            code_point = indexes.jis0208_code_point(pointer)
            if code_point is not None:
                return DecodeStep(0, chr(code_point))
        if byte < 0x80:
            return DecodeStep(0, malformed=1, consumed=False)
        return DecodeStep(0, malformed=2)

    if byte <= 0x80:
        return DecodeStep(0, chr(byte))
    if 0xA1 <= byte <= 0xDF:
        return DecodeStep(0, chr(0xFF61 - 0xA1 + byte))
    if 0x81 <= byte <= 0x9F or 0xE0 <= byte <= 0xFC:
        return DecodeStep(byte)
    return DecodeStep(0, malformed=1)


def decode_eof(lead: int) -> Optional[DecodeStep]:
    if lead:
        return DecodeStep(0, malformed=1)
    return None


def pending_length(lead: int) -> int:
    return 1 if lead else 0


def encode_char(state: None, code_point: int) -> EncodeStep:
    if code_point <= 0x80:
        return EncodeStep(None, bytes((code_point,)))
    if code_point == 0x00A5:
        return EncodeStep(None, b"\x5c")
    if code_point == 0x203E:
        return EncodeStep(None, b"\x7e")
    if 0xFF61 <= code_point <= 0xFF9F:
        return EncodeStep(None, bytes((code_point - 0xFF61 + 0xA1,)))
    if code_point == 0x2212:
        code_point = 0xFF0D
    pointer = indexes.shift_jis_pointer(code_point)
    if pointer is None:
        return EncodeStep(None, unmappable=code_point)
    lead, trail = divmod(pointer, 188)
    lead += 0x81 if lead < 0x1F else 0xC1
    trail += 0x40 if trail < 0x3F else 0x41
    return EncodeStep(None, bytes((lead, trail)))


CODEC = Codec(
    name="Shift_JIS",
    ascii_compatible=True,
    initial_decoder_state=0,
    decode_byte=decode_byte,
    decode_eof=decode_eof,
    pending_length=pending_length,
    encode_char=encode_char,
    max_length_from_utf8=same_length,
    max_length_from_utf16=double_length,
    max_length_from_str=double_length,
)
