"""x-user-defined codec.

Bytes 0x80-0xFF map to the Private Use Area range U+F780-U+F7FF.
"""

from .base import Codec, DecodeStep, EncodeStep

_PUA_OFFSET = 0xF780 - 0x80


def decode_byte(state: None, byte: int) -> DecodeStep:
    if byte < 0x80:
        return DecodeStep(None, chr(byte))
    return DecodeStep(None, chr(byte + _PUA_OFFSET))


def encode_char(state: None, code_point: int) -> EncodeStep:
    if code_point < 0x80:
        return EncodeStep(None, bytes((code_point,)))
    if 0xF780 <= code_point <= 0xF7FF:
        return EncodeStep(None, bytes((code_point - _PUA_OFFSET,)))
    return EncodeStep(None, unmappable=code_point)


CODEC = Codec(
    name="x-user-defined",
    ascii_compatible=True,
    initial_decoder_state=None,
    decode_byte=decode_byte,
    encode_char=encode_char,
)
