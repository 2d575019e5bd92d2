"""The replacement pseudo-encoding.

Labels of encodings that are unsafe to decode (ISO-2022-KR, HZ-GB-2312 and
the ISO-2022-CN family) resolve here. A non-empty stream decodes to a single
REPLACEMENT CHARACTER; an empty stream decodes to nothing.
"""

from .base import Codec, DecodeStep


def decode_byte(emitted: bool, byte: int) -> DecodeStep:
    if emitted:
        return DecodeStep(True)
    return DecodeStep(True, malformed=1)


def max_utf16_length(emitted: bool, byte_length: int) -> int:
    return 1 if not emitted and byte_length > 0 else 0


def max_utf8_length(emitted: bool, byte_length: int) -> int:
    return 3 if not emitted and byte_length > 0 else 0


def max_utf8_length_without_replacement(emitted: bool, byte_length: int) -> int:
    return 0


CODEC = Codec(
    name="replacement",
    ascii_compatible=False,
    initial_decoder_state=False,
    decode_byte=decode_byte,
    max_utf16_length=max_utf16_length,
    max_utf8_length=max_utf8_length,
    max_utf8_length_without_replacement=max_utf8_length_without_replacement,
)
