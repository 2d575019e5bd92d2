"""Pure-function codec interface shared by every encoding.

A codec never holds mutable state. Decoders and encoders keep an immutable
state value (usually a ``NamedTuple``) and feed it, one byte or one code point
at a time, to the codec's step functions, which return the next state together
with whatever the step produced. The core state machines decide whether a
step's output fits before committing its new state, which is what makes
``OUTPUT_FULL`` safe to return at any point.
"""

from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional

# Longest numeric character reference: "&#1114111;".
NCR_EXTRA = 10


class DecodeStep(NamedTuple):
    """Result of feeding one byte (or end of stream) to a decoder.

    Attributes:
        state: Decoder state after the step
        output: Text produced by the step
        malformed: Length of the malformed sequence the step rejected, or 0
        consumed: Whether the byte fed to the step was consumed; an
            unconsumed byte is fed again on the next step
        prepend: Earlier bytes to feed again before the next byte
    """

    state: Any
    output: str = ""
    malformed: int = 0
    consumed: bool = True
    prepend: bytes = b""


class EncodeStep(NamedTuple):
    """Result of feeding one code point (or end of stream) to an encoder.

    Attributes:
        state: Encoder state after the step
        output: Bytes produced by the step
        unmappable: Code point to report as unmappable, or None
        consumed: Whether the code point was consumed; ISO-2022-JP emits an
            escape sequence and asks for the same code point again
    """

    state: Any
    output: bytes = b""
    unmappable: Optional[int] = None
    consumed: bool = True


def no_pending(state: Any) -> int:
    return 0


def no_decoder_eof(state: Any) -> Optional[DecodeStep]:
    return None


def no_encoder_eof(state: Any) -> Optional[EncodeStep]:
    return None


def one_unit_per_byte(state: Any, byte_length: int) -> int:
    return byte_length


def three_bytes_per_byte(state: Any, byte_length: int) -> int:
    return 3 * byte_length


def same_length(length: int) -> int:
    return length


def double_length(length: int) -> int:
    return 2 * length


def quadruple_length(length: int) -> int:
    return 4 * length


def decoder_only(state: Any, code_point: int) -> EncodeStep:
    """Encoder step for encodings that are never used as output encodings."""
    raise TypeError("This encoding is never used as an output encoding")


@dataclass(frozen=True)
class Codec:
    """Bundle of the step functions and buffer bounds for one encoding.

    Decoder bounds take the decoder state and the number of bytes that will
    still pass through the codec (new input plus anything already buffered)
    and return the largest output that processing those bytes and flushing
    the end of the stream can produce. Encoder bounds take the input length
    in the source's own units and include the end-of-stream flush.

    Attributes:
        name: Canonical name of the encoding
        ascii_compatible: Whether ASCII bytes and ASCII code points map to
            themselves while the codec is in its initial state
        initial_decoder_state: Decoder state at the start of a stream
        decode_byte: Step function for one byte
        decode_eof: Step function for end of stream; None once flushed
        pending_length: Number of bytes buffered in a decoder state
        max_utf16_length: Decoder bound in UTF-16 code units
        max_utf8_length: Decoder bound in UTF-8 bytes with replacement
        max_utf8_length_without_replacement: Decoder bound in UTF-8 bytes
            when malformed sequences stop the conversion
        initial_encoder_state: Encoder state at the start of a stream
        encode_char: Step function for one code point
        encode_eof: Step function for end of stream; None once flushed
        max_length_from_utf8: Encoder bound for UTF-8 input bytes
        max_length_from_utf16: Encoder bound for UTF-16 input code units
        max_length_from_str: Encoder bound for ``str`` input characters
        ncr_overhead: Extra room needed to fit one numeric character reference
    """

    name: str
    ascii_compatible: bool
    initial_decoder_state: Any
    decode_byte: Callable[[Any, int], DecodeStep]
    decode_eof: Callable[[Any], Optional[DecodeStep]] = no_decoder_eof
    pending_length: Callable[[Any], int] = no_pending
    max_utf16_length: Callable[[Any, int], int] = one_unit_per_byte
    max_utf8_length: Callable[[Any, int], int] = three_bytes_per_byte
    max_utf8_length_without_replacement: Callable[[Any, int], int] = three_bytes_per_byte
    initial_encoder_state: Any = None
    encode_char: Callable[[Any, int], EncodeStep] = decoder_only
    encode_eof: Callable[[Any], Optional[EncodeStep]] = no_encoder_eof
    max_length_from_utf8: Callable[[int], int] = same_length
    max_length_from_utf16: Callable[[int], int] = same_length
    max_length_from_str: Callable[[int], int] = same_length
    ncr_overhead: int = NCR_EXTRA
