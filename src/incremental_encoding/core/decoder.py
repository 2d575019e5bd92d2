"""Incremental decoder: bytes in any supported encoding to Unicode.

A :class:`Decoder` converts one stream, buffer by buffer. Each call consumes
as much of ``src`` as possible and returns a :class:`DecodeOutcome` telling the
caller why it stopped:

- ``INPUT_EMPTY``: all of ``src`` was consumed; pass the next buffer (or an
  empty one with ``last=True`` to finish the stream).
- ``OUTPUT_FULL``: the next character would not fit; pass ``src[read:]``
  again with a fresh output buffer.
- ``MALFORMED`` (``*_without_replacement`` only): ``read`` includes the
  malformed bytes; abort, or pass ``src[read:]`` to continue after them.

Output never ends in the middle of a character: a step's output is only
committed if all of it fits.
"""

import re
from enum import Enum, auto
from typing import Any, Callable, MutableSequence

from ..codec import Codec, codec_for
from ..registry.encoding import UTF_8, UTF_16BE, UTF_16LE, Encoding
from ..shared.errors import StreamFinishedError
from ..shared.logging import get_logger
from ..shared.result import DecodeOutcome, DecoderResult, TextDecodeOutcome
from .buffers import TextSink, Utf8Sink, Utf16Sink

_NON_ASCII = re.compile(rb"[\x80-\xff]")

_BOMS = {
    UTF_8: b"\xef\xbb\xbf",
    UTF_16LE: b"\xff\xfe",
    UTF_16BE: b"\xfe\xff",
}


class DecoderPhase(Enum):
    """Lifecycle of a decoder."""

    SNIFFING = auto()      # Looking for any BOM; may switch encoding
    REMOVING_BOM = auto()  # Looking for the BOM of its own encoding
    CONVERTING = auto()    # Decoding with a settled encoding
    FINISHED = auto()      # The stream has ended


class Decoder:
    """Stream-scoped decoder bound to one encoding.

    Create instances through :meth:`Encoding.new_decoder`,
    :meth:`Encoding.new_decoder_with_bom_removal` or
    :meth:`Encoding.new_decoder_without_bom_handling`. An instance decodes a
    single stream and must not be shared between threads without external
    locking.
    """

    def __init__(self, encoding: Encoding, phase: DecoderPhase) -> None:
        self._encoding = encoding
        self._codec: Codec = codec_for(encoding.name)
        self._state: Any = self._codec.initial_decoder_state
        self._phase = phase
        # BOM candidate bytes held back while sniffing
        self._bom_prefix = bytearray()
        # Bytes already read that the codec pushed back onto the stream
        self._replay = bytearray()
        self._logger = get_logger(__name__, component="decoder").bind(
            encoding=encoding.name
        )

    @classmethod
    def with_bom_sniffing(cls, encoding: Encoding) -> "Decoder":
        return cls(encoding, DecoderPhase.SNIFFING)

    @classmethod
    def with_bom_removal(cls, encoding: Encoding) -> "Decoder":
        phase = DecoderPhase.REMOVING_BOM if encoding in _BOMS else DecoderPhase.CONVERTING
        return cls(encoding, phase)

    @classmethod
    def without_bom_handling(cls, encoding: Encoding) -> "Decoder":
        return cls(encoding, DecoderPhase.CONVERTING)

    def encoding(self) -> Encoding:
        """The encoding being decoded.

        A sniffing decoder reports the encoding it was created for until a
        BOM selects UTF-8, UTF-16LE or UTF-16BE instead.
        """
        return self._encoding

    @property
    def phase(self) -> DecoderPhase:
        return self._phase

    # Buffer-fit queries

    def max_utf16_buffer_length(self, byte_length: int) -> int:
        """UTF-16 output length that guarantees no ``OUTPUT_FULL``.

        Args:
            byte_length: Number of bytes the next call will be given

        Returns:
            Output buffer length in code units sufficient for decoding
            ``byte_length`` more bytes and, if ``last``, flushing the stream
        """
        return self._max_length(byte_length, lambda codec: codec.max_utf16_length)

    def max_utf8_buffer_length(self, byte_length: int) -> int:
        """UTF-8 output length that guarantees no ``OUTPUT_FULL`` with replacement."""
        return self._max_length(byte_length, lambda codec: codec.max_utf8_length)

    def max_utf8_buffer_length_without_replacement(self, byte_length: int) -> int:
        """UTF-8 output length that guarantees no ``OUTPUT_FULL`` without replacement."""
        return self._max_length(
            byte_length, lambda codec: codec.max_utf8_length_without_replacement
        )

    def _max_length(
        self, byte_length: int, bound: Callable[[Codec], Callable[[Any, int], int]]
    ) -> int:
        if byte_length < 0:
            raise ValueError("byte_length must be >= 0")
        pending = (
            len(self._bom_prefix)
            + len(self._replay)
            + self._codec.pending_length(self._state)
        )
        total = pending + byte_length
        length = bound(self._codec)(self._state, total)
        if self._phase is DecoderPhase.SNIFFING:
            for encoding in _BOMS:
                codec = codec_for(encoding.name)
                length = max(length, bound(codec)(codec.initial_decoder_state, total))
        return length

    # Decoding

    def decode_to_utf8(
        self, src: bytes, dst: MutableSequence[int], last: bool
    ) -> DecodeOutcome:
        """Decode into a UTF-8 byte buffer, replacing malformed sequences."""
        return self._decode(src, Utf8Sink(dst), last, True)

    def decode_to_utf8_without_replacement(
        self, src: bytes, dst: MutableSequence[int], last: bool
    ) -> DecodeOutcome:
        """Decode into a UTF-8 byte buffer, stopping at malformed sequences."""
        return self._decode(src, Utf8Sink(dst), last, False)

    def decode_to_utf16(
        self, src: bytes, dst: MutableSequence[int], last: bool
    ) -> DecodeOutcome:
        """Decode into a UTF-16 code unit buffer, replacing malformed sequences."""
        return self._decode(src, Utf16Sink(dst), last, True)

    def decode_to_utf16_without_replacement(
        self, src: bytes, dst: MutableSequence[int], last: bool
    ) -> DecodeOutcome:
        """Decode into a UTF-16 code unit buffer, stopping at malformed sequences."""
        return self._decode(src, Utf16Sink(dst), last, False)

    def decode_to_str(self, src: bytes, max_length: int, last: bool) -> TextDecodeOutcome:
        """Decode into a ``str`` of at most ``max_length`` UTF-16 code units."""
        sink = TextSink(max_length)
        outcome = self._decode(src, sink, last, True)
        return TextDecodeOutcome(outcome.result, outcome.read, sink.text,
                                 outcome.had_replacements, outcome.malformed_length)

    def decode_to_str_without_replacement(
        self, src: bytes, max_length: int, last: bool
    ) -> TextDecodeOutcome:
        """Decode into a ``str``, stopping at malformed sequences."""
        sink = TextSink(max_length)
        outcome = self._decode(src, sink, last, False)
        return TextDecodeOutcome(outcome.result, outcome.read, sink.text,
                                 outcome.had_replacements, outcome.malformed_length)

    def _decode(self, src: bytes, sink: Any, last: bool, replace: bool) -> DecodeOutcome:
        if self._phase is DecoderPhase.FINISHED:
            raise StreamFinishedError(
                f"{self._encoding.name} decoder was already used to finish a stream"
            )
        if not isinstance(src, bytes):
            src = bytes(src)

        read = 0
        if self._phase is not DecoderPhase.CONVERTING:
            read = self._handle_bom(src, last)
            if self._phase is not DecoderPhase.CONVERTING:
                # Still collecting a possible BOM
                sink.finish("")
                return DecodeOutcome(DecoderResult.INPUT_EMPTY, read, 0)

        codec = self._codec
        decode_byte = codec.decode_byte
        initial = codec.initial_decoder_state
        state = self._state
        replay = self._replay
        room = sink.capacity
        measure = sink.measure
        pieces = []
        had_replacements = False
        length = len(src)

        while True:
            from_replay = bool(replay)
            if from_replay:
                step = decode_byte(state, replay[0])
            elif read < length:
                if codec.ascii_compatible and state == initial and room > 0:
                    # ASCII maps to itself in the initial state.
                    limit = min(length, read + room)
                    match = _NON_ASCII.search(src, read, limit)
                    end = match.start() if match else limit
                    if end > read:
                        pieces.append(src[read:end].decode("ascii"))
                        room -= end - read
                        read = end
                        continue
                step = decode_byte(state, src[read])
            elif last:
                step = codec.decode_eof(state)
                if step is None:
                    break
            else:
                break

            if step.malformed and not replace:
                self._logger.debug(
                    "Malformed sequence",
                    extra={"malformed_length": step.malformed},
                )
                state = step.state
                if step.consumed and from_replay:
                    del replay[0]
                elif step.consumed and read < length:
                    read += 1
                if step.prepend:
                    replay[0:0] = step.prepend
                self._state = state
                written = sink.finish("".join(pieces))
                return DecodeOutcome(
                    DecoderResult.MALFORMED, read, written, False, step.malformed
                )

            text = step.output + "\ufffd" if step.malformed else step.output
            if text:
                needed = measure(text)
                if needed > room:
                    self._state = state
                    written = sink.finish("".join(pieces))
                    return DecodeOutcome(
                        DecoderResult.OUTPUT_FULL, read, written, had_replacements
                    )
                room -= needed
                pieces.append(text)
                had_replacements = had_replacements or bool(step.malformed)

            state = step.state
            if step.consumed:
                if from_replay:
                    del replay[0]
                elif read < length:
                    read += 1
            if step.prepend:
                replay[0:0] = step.prepend

        self._state = state
        if last:
            self._phase = DecoderPhase.FINISHED
        written = sink.finish("".join(pieces))
        return DecodeOutcome(DecoderResult.INPUT_EMPTY, read, written, had_replacements)

    def _handle_bom(self, src: bytes, last: bool) -> int:
        """Feed bytes to the BOM matcher; return how many of ``src`` it took."""
        if self._phase is DecoderPhase.SNIFFING:
            candidates = _BOMS
        else:
            candidates = {self._encoding: _BOMS[self._encoding]}

        read = 0
        while read < len(src):
            self._bom_prefix.append(src[read])
            read += 1
            prefix = bytes(self._bom_prefix)
            for encoding, bom in candidates.items():
                if prefix == bom:
                    self._settle(encoding, bom_found=True)
                    return read
            if not any(bom.startswith(prefix) for bom in candidates.values()):
                self._settle(self._encoding, bom_found=False)
                return read

        if last:
            self._settle(self._encoding, bom_found=False)
        return read

    def _settle(self, encoding: Encoding, bom_found: bool) -> None:
        if bom_found:
            if encoding is not self._encoding:
                self._logger.debug(
                    "BOM switched decoder encoding",
                    extra={"from_encoding": self._encoding.name,
                           "to_encoding": encoding.name},
                )
                self._encoding = encoding
                self._logger = self._logger.bind(encoding=encoding.name)
                self._codec = codec_for(encoding.name)
                self._state = self._codec.initial_decoder_state
        else:
            # Not a BOM after all; decode the held-back bytes normally.
            self._replay[0:0] = self._bom_prefix
        self._bom_prefix.clear()
        self._phase = DecoderPhase.CONVERTING
