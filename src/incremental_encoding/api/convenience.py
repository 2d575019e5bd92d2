"""Single-shot conversion of complete buffers.

These functions implement the Encoding Standard's "decode", "UTF-8 decode"
style and "encode" algorithms on top of the incremental Decoder and Encoder,
for callers that hold the whole input in memory. They are also reachable as
methods on :class:`~incremental_encoding.registry.Encoding`.

Examples:
    >>> from incremental_encoding import ISO_8859_2, WINDOWS_1252, decode, encode
    >>> decode(b"\\xef\\xbb\\xbfhi", WINDOWS_1252)
    ('hi', Encoding('UTF-8'), False)
    >>> encode("\\u20ac", ISO_8859_2)
    (b'&#8364;', Encoding('ISO-8859-2'), True)
"""

import re
from typing import Optional, Tuple

from ..core.decoder import Decoder
from ..registry.encoding import UTF_8, Encoding
from ..shared.config import ConversionConfig
from ..shared.logging import get_logger
from ..shared.result import DecoderResult, EncoderResult

_SURROGATES = re.compile("[\ud800-\udfff]")


def decode(
    data: bytes, encoding: Encoding, config: Optional[ConversionConfig] = None
) -> Tuple[str, Encoding, bool]:
    """Decode ``data``, letting a BOM override ``encoding``.

    The BOM, if any, is removed. Malformed sequences become U+FFFD.

    Args:
        data: Complete input
        encoding: Fallback encoding when ``data`` has no BOM
        config: Optional configuration (only the correlation ID is used)

    Returns:
        ``(text, encoding actually used, had_errors)``
    """
    config = config or ConversionConfig()
    data = bytes(data)
    bom_encoding, bom_length = Encoding.for_bom(data)
    if bom_encoding is not None:
        get_logger(__name__, config.correlation_id, "decode").debug(
            "BOM overrides requested encoding",
            extra={"requested": encoding.name, "detected": bom_encoding.name},
        )
        encoding = bom_encoding
        data = data[bom_length:]
    text, had_errors = decode_without_bom_handling(data, encoding)
    return text, encoding, had_errors


def decode_with_bom_removal(data: bytes, encoding: Encoding) -> Tuple[str, bool]:
    """Decode ``data`` in ``encoding``, removing a BOM of ``encoding`` only.

    A BOM of a different encoding is decoded as ordinary input.

    Returns:
        ``(text, had_errors)``
    """
    data = bytes(data)
    bom_encoding, bom_length = Encoding.for_bom(data)
    if bom_encoding is encoding:
        data = data[bom_length:]
    return decode_without_bom_handling(data, encoding)


def decode_without_bom_handling(data: bytes, encoding: Encoding) -> Tuple[str, bool]:
    """Decode ``data`` in ``encoding`` with no BOM handling.

    Returns:
        ``(text, had_errors)``
    """
    data = bytes(data)
    if encoding is UTF_8:
        try:
            return data.decode("utf-8"), False
        except UnicodeDecodeError:
            # Replacement has to follow the maximal-subpart rule.
            pass
    decoder = Decoder.without_bom_handling(encoding)
    pieces = []
    had_errors = False
    while True:
        outcome = decoder.decode_to_str(
            data, decoder.max_utf16_buffer_length(len(data)), True
        )
        pieces.append(outcome.text)
        had_errors = had_errors or outcome.had_replacements
        if outcome.result is DecoderResult.INPUT_EMPTY:
            return "".join(pieces), had_errors
        data = data[outcome.read:]


def decode_without_bom_handling_and_without_replacement(
    data: bytes, encoding: Encoding
) -> Optional[str]:
    """Decode ``data`` in ``encoding``; return None on any malformed sequence."""
    data = bytes(data)
    if encoding is UTF_8:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return None
    decoder = Decoder.without_bom_handling(encoding)
    pieces = []
    while True:
        outcome = decoder.decode_to_str_without_replacement(
            data, decoder.max_utf16_buffer_length(len(data)), True
        )
        if outcome.result is DecoderResult.MALFORMED:
            return None
        pieces.append(outcome.text)
        if outcome.result is DecoderResult.INPUT_EMPTY:
            return "".join(pieces)
        data = data[outcome.read:]


def encode(
    text: str, encoding: Encoding, config: Optional[ConversionConfig] = None
) -> Tuple[bytes, Encoding, bool]:
    """Encode ``text`` into the output encoding of ``encoding``.

    Unmappable characters are written as decimal numeric character
    references. Lone surrogates are encoded as U+FFFD.

    Args:
        text: Complete input
        encoding: Requested encoding; UTF-16LE, UTF-16BE and replacement
            encode as UTF-8
        config: Optional configuration; ``growth_factor`` controls how the
            working buffer grows

    Returns:
        ``(data, output encoding, had_errors)``
    """
    config = config or ConversionConfig()
    output_encoding = encoding.output_encoding()
    if output_encoding is UTF_8 and not _SURROGATES.search(text):
        return text.encode("utf-8"), output_encoding, False

    logger = get_logger(__name__, config.correlation_id, "encode").bind(
        encoding=output_encoding.name
    )
    encoder = output_encoding.new_encoder()
    capacity = encoder.max_buffer_length_from_str_if_no_unmappables(len(text))
    pieces = []
    had_errors = False
    while True:
        dst = bytearray(capacity)
        outcome = encoder.encode_from_str(text, dst, True)
        pieces.append(bytes(dst[:outcome.written]))
        had_errors = had_errors or outcome.had_replacements
        if outcome.result is EncoderResult.INPUT_EMPTY:
            return b"".join(pieces), output_encoding, had_errors

        text = text[outcome.read:]
        capacity = max(
            int(capacity * config.growth_factor),
            encoder.max_buffer_length_from_str_if_no_unmappables(len(text)),
        )
        logger.debug(
            "Growing encode buffer",
            extra={"capacity": capacity, "remaining": len(text)},
        )
