"""UTF-16LE and UTF-16BE codecs.

Only decoders exist: the output encoding of both is UTF-8.
"""

from typing import NamedTuple, Optional

from .base import Codec, DecodeStep


class Utf16State(NamedTuple):
    """Pending lead byte and lead surrogate of the UTF-16 decoder."""

    lead_byte: Optional[int] = None
    lead_surrogate: Optional[int] = None


INITIAL = Utf16State()


def _unit_bytes(code_unit: int, big_endian: bool) -> bytes:
    high, low = code_unit >> 8, code_unit & 0xFF
    return bytes((high, low)) if big_endian else bytes((low, high))


def _decode_byte(state: Utf16State, byte: int, big_endian: bool) -> DecodeStep:
    if state.lead_byte is None:
        return DecodeStep(Utf16State(byte, state.lead_surrogate))

    if big_endian:
        code_unit = (state.lead_byte << 8) | byte
    else:
        code_unit = (byte << 8) | state.lead_byte

    if state.lead_surrogate is not None:
        if 0xDC00 <= code_unit <= 0xDFFF:
            code_point = 0x10000 + ((state.lead_surrogate - 0xD800) << 10) + (
                code_unit - 0xDC00
            )
            return DecodeStep(INITIAL, chr(code_point))
        # The lone lead surrogate is malformed; the unit after it starts over.
        return DecodeStep(
            INITIAL, malformed=2, prepend=_unit_bytes(code_unit, big_endian)
        )

    if 0xD800 <= code_unit <= 0xDBFF:
        return DecodeStep(Utf16State(None, code_unit))
    if 0xDC00 <= code_unit <= 0xDFFF:
        return DecodeStep(INITIAL, malformed=2)
    return DecodeStep(INITIAL, chr(code_unit))


def decode_byte_le(state: Utf16State, byte: int) -> DecodeStep:
    return _decode_byte(state, byte, False)


def decode_byte_be(state: Utf16State, byte: int) -> DecodeStep:
    return _decode_byte(state, byte, True)


def decode_eof(state: Utf16State) -> Optional[DecodeStep]:
    pending = pending_length(state)
    if pending == 0:
        return None
    return DecodeStep(INITIAL, malformed=pending)


def pending_length(state: Utf16State) -> int:
    return (1 if state.lead_byte is not None else 0) + (
        2 if state.lead_surrogate is not None else 0
    )


def max_utf16_length(state: Utf16State, byte_length: int) -> int:
    # Every complete or trailing partial code unit yields at most one unit.
    return (byte_length + 1) // 2


def max_utf8_length(state: Utf16State, byte_length: int) -> int:
    return 3 * ((byte_length + 1) // 2)


LE_CODEC = Codec(
    name="UTF-16LE",
    ascii_compatible=False,
    initial_decoder_state=INITIAL,
    decode_byte=decode_byte_le,
    decode_eof=decode_eof,
    pending_length=pending_length,
    max_utf16_length=max_utf16_length,
    max_utf8_length=max_utf8_length,
    max_utf8_length_without_replacement=max_utf8_length,
)

BE_CODEC = Codec(
    name="UTF-16BE",
    ascii_compatible=False,
    initial_decoder_state=INITIAL,
    decode_byte=decode_byte_be,
    decode_eof=decode_eof,
    pending_length=pending_length,
    max_utf16_length=max_utf16_length,
    max_utf8_length=max_utf8_length,
    max_utf8_length_without_replacement=max_utf8_length,
)
