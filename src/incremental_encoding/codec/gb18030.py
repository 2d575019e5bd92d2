"""gb18030 and GBK codecs.

Both share one decoder. The GBK encoder differs only in emitting 0x80 for
U+20AC and in having no four-byte sequences.
"""

from typing import NamedTuple, Optional

from . import indexes
from .base import (
    Codec,
    DecodeStep,
    EncodeStep,
    double_length,
    quadruple_length,
    same_length,
)


class Gb18030State(NamedTuple):
    """Pending bytes of a two- or four-byte sequence."""

    first: int = 0
    second: int = 0
    third: int = 0


INITIAL = Gb18030State()


def decode_byte(state: Gb18030State, byte: int) -> DecodeStep:
    first, second, third = state

    if third:
        if not 0x30 <= byte <= 0x39:
            return DecodeStep(
                INITIAL, malformed=1, consumed=False, prepend=bytes((second, third))
            )
        pointer = (((first - 0x81) * 10 + second - 0x30) * 126 + third - 0x81) * 10 + (
            byte - 0x30
        )
        code_point = indexes.gb18030_ranges_code_point(pointer)
        if code_point is None:
            return DecodeStep(INITIAL, malformed=4)
        return DecodeStep(INITIAL, chr(code_point))

    if second:
        if 0x81 <= byte <= 0xFE:
            return DecodeStep(Gb18030State(first, second, byte))
        return DecodeStep(
            INITIAL, malformed=1, consumed=False, prepend=bytes((second,))
        )

    if first:
        if 0x30 <= byte <= 0x39:
            return DecodeStep(Gb18030State(first, byte))
        code_point = None
        if 0x40 <= byte <= 0x7E or 0x80 <= byte <= 0xFE:
            offset = 0x40 if byte < 0x7F else 0x41
            code_point = indexes.gb18030_code_point((first - 0x81) * 190 + byte - offset)
        if code_point is not None:
            return DecodeStep(INITIAL, chr(code_point))
        if byte < 0x80:
            return DecodeStep(INITIAL, malformed=1, consumed=False)
        return DecodeStep(INITIAL, malformed=2)

    if byte < 0x80:
        return DecodeStep(state, chr(byte))
    if byte == 0x80:
        return DecodeStep(state, "\u20ac")
    if byte != 0xFF:
        return DecodeStep(Gb18030State(byte))
    return DecodeStep(state, malformed=1)


def decode_eof(state: Gb18030State) -> Optional[DecodeStep]:
    pending = pending_length(state)
    if pending == 0:
        return None
    return DecodeStep(INITIAL, malformed=pending)


def pending_length(state: Gb18030State) -> int:
    return sum(1 for byte in state if byte)


def _two_bytes(pointer: int) -> bytes:
    lead, trail = divmod(pointer, 190)
    trail += 0x40 if trail < 0x3F else 0x41
    return bytes((lead + 0x81, trail))


def _encode_char(code_point: int, gbk: bool) -> EncodeStep:
    if code_point < 0x80:
        return EncodeStep(None, bytes((code_point,)))
    if code_point == 0xE5E5:
        return EncodeStep(None, unmappable=code_point)
    if gbk and code_point == 0x20AC:
        return EncodeStep(None, b"\x80")
    pointer = indexes.gb18030_pointer(code_point)
    if pointer is not None:
        return EncodeStep(None, _two_bytes(pointer))
    if gbk:
        return EncodeStep(None, unmappable=code_point)
    four = indexes.gb18030_four_bytes(code_point)
    if four is None:
        return EncodeStep(None, unmappable=code_point)
    return EncodeStep(None, four)


def encode_char_gb18030(state: None, code_point: int) -> EncodeStep:
    return _encode_char(code_point, False)


def encode_char_gbk(state: None, code_point: int) -> EncodeStep:
    return _encode_char(code_point, True)


GB18030_CODEC = Codec(
    name="gb18030",
    ascii_compatible=True,
    initial_decoder_state=INITIAL,
    decode_byte=decode_byte,
    decode_eof=decode_eof,
    pending_length=pending_length,
    encode_char=encode_char_gb18030,
    max_length_from_utf8=double_length,
    max_length_from_utf16=quadruple_length,
    max_length_from_str=quadruple_length,
)

GBK_CODEC = Codec(
    name="GBK",
    ascii_compatible=True,
    initial_decoder_state=INITIAL,
    decode_byte=decode_byte,
    decode_eof=decode_eof,
    pending_length=pending_length,
    encode_char=encode_char_gbk,
    max_length_from_utf8=same_length,
    max_length_from_utf16=double_length,
    max_length_from_str=double_length,
)
