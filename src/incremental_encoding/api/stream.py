"""Chunked streaming conversion with a fixed-size output buffer.

This module drives one Decoder or Encoder over a sequence of input chunks and
yields the converted pieces as they become available, so arbitrarily large
inputs are converted in bounded memory.

Input may be an iterable of chunks, a file object opened in the matching mode
(read ``StreamConfig.chunk_size`` at a time) or one complete ``bytes``/``str``
value that is split into chunks.
"""

import logging
from typing import BinaryIO, Iterable, Iterator, Optional, TextIO, Union

from ..core.buffers import utf16_length
from ..core.decoder import Decoder
from ..registry.encoding import Encoding
from ..shared.config import BomHandling, ConversionConfig
from ..shared.errors import MalformedInputError, UnmappableCharacterError
from ..shared.logging import get_logger
from ..shared.result import ConversionMetrics, DecoderResult, EncoderResult

# Type definitions for input data
ByteInput = Union[bytes, bytearray, BinaryIO, Iterable[bytes]]
TextInput = Union[str, TextIO, Iterable[str]]


def _new_decoder(encoding: Encoding, bom_handling: BomHandling) -> Decoder:
    if bom_handling is BomHandling.SNIFF:
        return encoding.new_decoder()
    if bom_handling is BomHandling.REMOVE:
        return encoding.new_decoder_with_bom_removal()
    return encoding.new_decoder_without_bom_handling()


def _chunks(source, chunk_size: int) -> Iterator:
    """Normalize the accepted input types to an iterator of chunks."""
    if isinstance(source, (bytes, bytearray, str)):
        for start in range(0, len(source), chunk_size):
            yield source[start:start + chunk_size]
    elif hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            yield chunk
    else:
        yield from source


def iter_decode(
    source: ByteInput,
    encoding: Encoding,
    config: Optional[ConversionConfig] = None,
    metrics: Optional[ConversionMetrics] = None,
) -> Iterator[str]:
    """Decode a byte stream chunk by chunk.

    Args:
        source: Bytes, a binary file object or an iterable of byte chunks
        encoding: Encoding to decode, subject to ``StreamConfig.bom_handling``
        config: Optional configuration; ``replacement=False`` makes malformed
            input fatal
        metrics: Optional metrics object updated while the stream is consumed

    Yields:
        Decoded text pieces, none of which ends inside a character

    Raises:
        MalformedInputError: In fatal mode, at the first malformed sequence

    Examples:
        >>> from incremental_encoding import UTF_8
        >>> "".join(iter_decode([b"\\xe2\\x82", b"\\xac"], UTF_8))
        '\\u20ac'
    """
    config = config or ConversionConfig()
    stream_config = config.stream
    metrics = metrics if metrics is not None else ConversionMetrics()
    logger = get_logger(__name__, config.correlation_id, "iter_decode").bind(
        encoding=encoding.name
    )
    decoder = _new_decoder(encoding, stream_config.bom_handling)
    decode = (
        decoder.decode_to_str if stream_config.replacement
        else decoder.decode_to_str_without_replacement
    )
    max_length = stream_config.output_buffer_size
    position = 0

    logger.info(
        "Starting streaming decode",
        extra={
            "bom_handling": stream_config.bom_handling.value,
            "replacement": stream_config.replacement,
        },
    )

    def convert(data: bytes, last: bool) -> Iterator[str]:
        nonlocal position
        while True:
            outcome = decode(data, max_length, last)
            metrics.calls += 1
            metrics.bytes_read += outcome.read
            position += outcome.read
            if outcome.text:
                metrics.units_written += utf16_length(outcome.text)
                yield outcome.text
            if outcome.had_replacements:
                metrics.calls_with_replacements += 1
            data = data[outcome.read:]

            if outcome.result is DecoderResult.INPUT_EMPTY:
                return
            if outcome.result is DecoderResult.OUTPUT_FULL:
                metrics.output_full_turnarounds += 1
                continue
            logger.warning(
                "Malformed input in fatal mode",
                extra={"encoding": decoder.encoding().name, "position": position},
            )
            raise MalformedInputError(
                decoder.encoding().name, position, outcome.malformed_length
            )

    for chunk in _chunks(source, stream_config.chunk_size):
        metrics.chunks += 1
        yield from convert(bytes(chunk), False)
    yield from convert(b"", True)

    logger.info(
        "Streaming decode complete",
        extra={
            "encoding": decoder.encoding().name,
            "bytes_read": metrics.bytes_read,
            "calls": metrics.calls,
            "had_errors": metrics.had_errors,
        },
    )


def iter_encode(
    source: TextInput,
    encoding: Encoding,
    config: Optional[ConversionConfig] = None,
    metrics: Optional[ConversionMetrics] = None,
) -> Iterator[bytes]:
    """Encode a text stream chunk by chunk into the output encoding.

    Args:
        source: A ``str``, a text file object or an iterable of text chunks
        encoding: Requested encoding; its output encoding is used
        config: Optional configuration; ``replacement=False`` makes
            unmappable characters fatal
        metrics: Optional metrics object updated while the stream is consumed

    Yields:
        Encoded byte pieces; for ISO-2022-JP only their concatenation is
        guaranteed to be valid

    Raises:
        UnmappableCharacterError: In fatal mode, at the first unmappable
            character
    """
    config = config or ConversionConfig()
    stream_config = config.stream
    metrics = metrics if metrics is not None else ConversionMetrics()
    encoder = encoding.new_encoder()
    logger = get_logger(__name__, config.correlation_id, "iter_encode").bind(
        encoding=encoder.encoding().name
    )
    encode = (
        encoder.encode_from_str if stream_config.replacement
        else encoder.encode_from_str_without_replacement
    )
    dst = bytearray(stream_config.output_buffer_size)
    position = 0

    logger.info(
        "Starting streaming encode",
        extra={"replacement": stream_config.replacement},
    )

    def convert(text: str, last: bool) -> Iterator[bytes]:
        nonlocal position
        while True:
            outcome = encode(text, dst, last)
            metrics.calls += 1
            metrics.units_read += outcome.read
            metrics.units_written += outcome.written
            position += outcome.read
            if outcome.written:
                yield bytes(dst[:outcome.written])
            if outcome.had_replacements:
                metrics.calls_with_replacements += 1
            text = text[outcome.read:]

            if outcome.result is EncoderResult.INPUT_EMPTY:
                return
            if outcome.result is EncoderResult.OUTPUT_FULL:
                metrics.output_full_turnarounds += 1
                continue
            logger.warning(
                "Unmappable character in fatal mode",
                extra={"position": position - 1},
            )
            raise UnmappableCharacterError(
                encoder.encoding().name, outcome.unmappable, position - 1
            )

    for chunk in _chunks(source, stream_config.chunk_size):
        metrics.chunks += 1
        yield from convert(chunk, False)
    yield from convert("", True)

    if logger.is_enabled_for(logging.DEBUG):
        logger.debug(
            "Streaming encode complete",
            extra={
                "units_read": metrics.units_read,
                "bytes_written": metrics.units_written,
                "expansion_ratio": metrics.expansion_ratio,
            },
        )
