"""UTF-8 codec.

The decoder follows the Encoding Standard's UTF-8 decoder: a malformed
sequence is the longest prefix of a well-formed sequence (the "maximal
subpart"), and the byte that revealed the error is fed again.
"""

from typing import NamedTuple, Optional

from .base import Codec, DecodeStep, EncodeStep, quadruple_length, same_length


class Utf8State(NamedTuple):
    """Partial sequence of the UTF-8 decoder."""

    code_point: int = 0
    seen: int = 0       # Bytes of the pending sequence, lead byte included
    needed: int = 0     # Continuation bytes still expected
    lower: int = 0x80   # Bounds for the next continuation byte
    upper: int = 0xBF


INITIAL = Utf8State()


def decode_byte(state: Utf8State, byte: int) -> DecodeStep:
    if state.needed == 0:
        if byte < 0x80:
            return DecodeStep(state, chr(byte))
        if 0xC2 <= byte <= 0xDF:
            return DecodeStep(Utf8State(byte & 0x1F, 1, 1))
        if 0xE0 <= byte <= 0xEF:
            lower = 0xA0 if byte == 0xE0 else 0x80
            upper = 0x9F if byte == 0xED else 0xBF
            return DecodeStep(Utf8State(byte & 0x0F, 1, 2, lower, upper))
        if 0xF0 <= byte <= 0xF4:
            lower = 0x90 if byte == 0xF0 else 0x80
            upper = 0x8F if byte == 0xF4 else 0xBF
            return DecodeStep(Utf8State(byte & 0x07, 1, 3, lower, upper))
        return DecodeStep(state, malformed=1)

    if not state.lower <= byte <= state.upper:
        return DecodeStep(INITIAL, malformed=state.seen, consumed=False)

    code_point = (state.code_point << 6) | (byte & 0x3F)
    if state.needed == 1:
        return DecodeStep(INITIAL, chr(code_point))
    return DecodeStep(Utf8State(code_point, state.seen + 1, state.needed - 1))


def decode_eof(state: Utf8State) -> Optional[DecodeStep]:
    if state.needed == 0:
        return None
    return DecodeStep(INITIAL, malformed=state.seen)


def pending_length(state: Utf8State) -> int:
    return state.seen


def encode_char(state: None, code_point: int) -> EncodeStep:
    return EncodeStep(None, chr(code_point).encode("utf-8"))


def max_utf16_length(state: Utf8State, byte_length: int) -> int:
    return byte_length


def max_utf8_length(state: Utf8State, byte_length: int) -> int:
    # Each malformed byte may turn into a three-byte REPLACEMENT CHARACTER.
    return 3 * byte_length


def max_utf8_length_without_replacement(state: Utf8State, byte_length: int) -> int:
    return byte_length


def max_length_from_utf16(unit_length: int) -> int:
    return 3 * unit_length


CODEC = Codec(
    name="UTF-8",
    ascii_compatible=True,
    initial_decoder_state=INITIAL,
    decode_byte=decode_byte,
    decode_eof=decode_eof,
    pending_length=pending_length,
    max_utf16_length=max_utf16_length,
    max_utf8_length=max_utf8_length,
    max_utf8_length_without_replacement=max_utf8_length_without_replacement,
    encode_char=encode_char,
    max_length_from_utf8=same_length,
    max_length_from_utf16=max_length_from_utf16,
    max_length_from_str=quadruple_length,
    ncr_overhead=0,
)
