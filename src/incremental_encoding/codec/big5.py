"""Big5 codec (Big5 with the HKSCS extensions)."""

from typing import Optional

from . import indexes
from .base import Codec, DecodeStep, EncodeStep, double_length, same_length


def decode_byte(lead: int, byte: int) -> DecodeStep:
    if lead:
        pointer = None
        if 0x40 <= byte <= 0x7E or 0xA1 <= byte <= 0xFE:
            offset = 0x40 if byte < 0x7F else 0x62
            pointer = (lead - 0x81) * 157 + byte - offset
        if pointer in indexes.BIG5_SEQUENCES:
            return DecodeStep(0, indexes.BIG5_SEQUENCES[pointer])
        code_point = indexes.big5_code_point(pointer) if pointer is not None else None
        if code_point is not None:
            return DecodeStep(0, chr(code_point))
        if byte < 0x80:
            return DecodeStep(0, malformed=1, consumed=False)
        return DecodeStep(0, malformed=2)

    if byte < 0x80:
        return DecodeStep(0, chr(byte))
    if 0x81 <= byte <= 0xFE:
        return DecodeStep(byte)
    return DecodeStep(0, malformed=1)


def decode_eof(lead: int) -> Optional[DecodeStep]:
    if lead:
        return DecodeStep(0, malformed=1)
    return None


def pending_length(lead: int) -> int:
    return 1 if lead else 0


def encode_char(state: None, code_point: int) -> EncodeStep:
    if code_point < 0x80:
        return EncodeStep(None, bytes((code_point,)))
    pointer = indexes.big5_pointer(code_point)
    if pointer is None:
        return EncodeStep(None, unmappable=code_point)
    lead, trail = divmod(pointer, 157)
    trail += 0x40 if trail < 0x3F else 0x62
    return EncodeStep(None, bytes((lead + 0x81, trail)))


CODEC = Codec(
    name="Big5",
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
