"""EUC-KR codec (the Unified Hangul Code superset)."""

from typing import Optional

from . import indexes
from .base import Codec, DecodeStep, EncodeStep, double_length, same_length


def decode_byte(lead: int, byte: int) -> DecodeStep:
    if lead:
        code_point = None
        if 0x41 <= byte <= 0xFE:
            code_point = indexes.euc_kr_code_point((lead - 0x81) * 190 + byte - 0x41)
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
    pointer = indexes.euc_kr_pointer(code_point)
    if pointer is None:
        return EncodeStep(None, unmappable=code_point)
    lead, trail = divmod(pointer, 190)
    return EncodeStep(None, bytes((lead + 0x81, trail + 0x41)))


CODEC = Codec(
    name="EUC-KR",
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
