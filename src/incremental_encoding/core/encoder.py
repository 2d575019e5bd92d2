"""Incremental encoder: Unicode to bytes in an output encoding.

An :class:`Encoder` mirrors :class:`~incremental_encoding.core.decoder.Decoder`
with source and target swapped. Input is UTF-8 bytes, UTF-16 code units or a
``str``; each call returns an :class:`EncodeOutcome`:

- ``INPUT_EMPTY``: all of ``src`` was consumed.
- ``OUTPUT_FULL``: the next character would not fit; pass ``src[read:]``
  again with a fresh output buffer.
- ``UNMAPPABLE`` (``*_without_replacement`` only): the character reported in
  ``unmappable`` has no representation and was consumed.

The replacing variants write ``&#N;`` for each unmappable character. For
ISO-2022-JP only the concatenation of everything written since the start of
the stream is guaranteed to be valid, because escape sequences carry state.
"""

from typing import Any, MutableSequence, Optional, Sequence, Tuple

from ..codec import Codec, codec_for
from ..registry.encoding import Encoding
from ..shared.errors import StreamFinishedError
from ..shared.logging import get_logger
from ..shared.result import EncodeOutcome, EncoderResult
from .buffers import StrSource, Utf8Source, Utf16Source


class Encoder:
    """Stream-scoped encoder bound to one output encoding.

    Create instances through :meth:`Encoding.new_encoder`, which resolves
    UTF-16LE, UTF-16BE and the replacement encoding to UTF-8.
    """

    def __init__(self, encoding: Encoding) -> None:
        if encoding.output_encoding() is not encoding:
            raise ValueError(f"{encoding.name} is not an output encoding")
        self._encoding = encoding
        self._codec: Codec = codec_for(encoding.name)
        self._state: Any = self._codec.initial_encoder_state
        self._finished = False
        self._logger = get_logger(__name__, component="encoder").bind(
            encoding=encoding.name
        )

    def encoding(self) -> Encoding:
        return self._encoding

    # Buffer-fit queries

    def max_buffer_length_from_utf8_without_replacement(self, byte_length: int) -> int:
        """Output length that fits ``byte_length`` UTF-8 bytes of mappable text."""
        return self._codec.max_length_from_utf8(byte_length)

    def max_buffer_length_from_utf8_if_no_unmappables(self, byte_length: int) -> int:
        """Output length that fits ``byte_length`` UTF-8 bytes when replacing.

        Exact only while no unmappable character turns up; enough room for one
        numeric character reference is added so that a caller growing its
        buffer on demand always makes progress.
        """
        return self._codec.max_length_from_utf8(byte_length) + self._codec.ncr_overhead

    def max_buffer_length_from_utf16_without_replacement(self, unit_length: int) -> int:
        """Output length that fits ``unit_length`` UTF-16 units of mappable text."""
        return self._codec.max_length_from_utf16(unit_length)

    def max_buffer_length_from_utf16_if_no_unmappables(self, unit_length: int) -> int:
        """Output length that fits ``unit_length`` UTF-16 units when replacing."""
        return self._codec.max_length_from_utf16(unit_length) + self._codec.ncr_overhead

    def max_buffer_length_from_str_without_replacement(self, length: int) -> int:
        """Output length that fits a ``str`` of ``length`` mappable characters."""
        return self._codec.max_length_from_str(length)

    def max_buffer_length_from_str_if_no_unmappables(self, length: int) -> int:
        """Output length that fits a ``str`` of ``length`` characters when replacing."""
        return self._codec.max_length_from_str(length) + self._codec.ncr_overhead

    # Encoding

    def encode_from_utf8(
        self, src: bytes, dst: MutableSequence[int], last: bool
    ) -> EncodeOutcome:
        """Encode valid UTF-8, writing ``&#N;`` for unmappable characters.

        Raises:
            UnicodeDecodeError: If ``src`` is not valid UTF-8
        """
        return self._encode(Utf8Source(src), dst, last, True)

    def encode_from_utf8_without_replacement(
        self, src: bytes, dst: MutableSequence[int], last: bool
    ) -> EncodeOutcome:
        """Encode valid UTF-8, stopping at unmappable characters."""
        return self._encode(Utf8Source(src), dst, last, False)

    def encode_from_utf16(
        self, src: Sequence[int], dst: MutableSequence[int], last: bool
    ) -> EncodeOutcome:
        """Encode UTF-16 code units, writing ``&#N;`` for unmappable characters."""
        return self._encode(Utf16Source(src), dst, last, True)

    def encode_from_utf16_without_replacement(
        self, src: Sequence[int], dst: MutableSequence[int], last: bool
    ) -> EncodeOutcome:
        """Encode UTF-16 code units, stopping at unmappable characters."""
        return self._encode(Utf16Source(src), dst, last, False)

    def encode_from_str(self, src: str, dst: MutableSequence[int], last: bool) -> EncodeOutcome:
        """Encode a ``str``, writing ``&#N;`` for unmappable characters."""
        return self._encode(StrSource(src), dst, last, True)

    def encode_from_str_without_replacement(
        self, src: str, dst: MutableSequence[int], last: bool
    ) -> EncodeOutcome:
        """Encode a ``str``, stopping at unmappable characters."""
        return self._encode(StrSource(src), dst, last, False)

    def _encode_char(self, state: Any, code_point: int) -> Tuple[Any, bytes, Optional[int]]:
        """Run the codec until ``code_point`` is consumed or found unmappable."""
        output = b""
        while True:
            step = self._codec.encode_char(state, code_point)
            state = step.state
            output += step.output
            if step.unmappable is not None:
                return state, output, step.unmappable
            if step.consumed:
                return state, output, None

    def _encode(self, source: Any, dst: MutableSequence[int], last: bool,
                replace: bool) -> EncodeOutcome:
        if self._finished:
            raise StreamFinishedError(
                f"{self._encoding.name} encoder was already used to finish a stream"
            )

        ascii_fast_path = self._codec.ascii_compatible
        initial = self._codec.initial_encoder_state
        state = self._state
        room = len(dst)
        pieces = []
        written = 0
        read = 0
        had_replacements = False

        def flush() -> None:
            data = b"".join(pieces)
            dst[0:len(data)] = data

        while read < source.length:
            if ascii_fast_path and state == initial and room > 0:
                run = source.ascii_run(read, min(source.length, read + room))
                if run is not None:
                    pieces.append(run)
                    room -= len(run)
                    written += len(run)
                    read += len(run)
                    continue

            code_point, width = source.code_point_at(read)
            next_state, output, unmappable = self._encode_char(state, code_point)

            if unmappable is not None and replace:
                for char in f"&#{unmappable};":
                    next_state, reference, _ = self._encode_char(next_state, ord(char))
                    output += reference

            if len(output) > room:
                self._state = state
                flush()
                return EncodeOutcome(
                    EncoderResult.OUTPUT_FULL, read, written, had_replacements
                )

            pieces.append(output)
            room -= len(output)
            written += len(output)
            read += width
            state = next_state

            if unmappable is not None:
                if not replace:
                    self._logger.debug(
                        "Unmappable character",
                        extra={"code_point": f"U+{unmappable:04X}"},
                    )
                    self._state = state
                    flush()
                    return EncodeOutcome(
                        EncoderResult.UNMAPPABLE, read, written, False, chr(unmappable)
                    )
                had_replacements = True

        if last:
            step = self._codec.encode_eof(state)
            if step is not None:
                if len(step.output) > room:
                    self._state = state
                    flush()
                    return EncodeOutcome(
                        EncoderResult.OUTPUT_FULL, read, written, had_replacements
                    )
                pieces.append(step.output)
                written += len(step.output)
                state = step.state
            self._finished = True

        self._state = state
        flush()
        return EncodeOutcome(EncoderResult.INPUT_EMPTY, read, written, had_replacements)
