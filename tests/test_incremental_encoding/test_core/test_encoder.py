"""Tests for the incremental Encoder."""

import logging
from array import array

import pytest

from incremental_encoding.core import Encoder
from incremental_encoding.registry import (
    ISO_2022_JP,
    ISO_8859_2,
    REPLACEMENT,
    SHIFT_JIS,
    UTF_8,
    UTF_16BE,
    UTF_16LE,
    WINDOWS_1252,
)
from incremental_encoding.shared.errors import StreamFinishedError
from incremental_encoding.shared.result import EncoderResult


class TestConstruction:
    """Test encoder construction and output-encoding resolution."""

    @pytest.mark.parametrize("encoding", [UTF_16LE, UTF_16BE, REPLACEMENT])
    def test_new_encoder_resolves_output_encoding(self, encoding):
        """Test that encodings without their own encoder get a UTF-8 one."""
        assert encoding.new_encoder().encoding() is UTF_8

    def test_direct_construction_requires_output_encoding(self):
        """Test that building an encoder for UTF-16 directly is refused."""
        with pytest.raises(ValueError):
            Encoder(UTF_16LE)


class TestEncodeFromStr:
    """Test encoding Python strings."""

    def test_mappable_text(self):
        """Test a run of mappable characters."""
        encoder = WINDOWS_1252.new_encoder()
        dst = bytearray(8)

        outcome = encoder.encode_from_str("caf\u00e9\u20ac", dst, True)

        assert outcome.result is EncoderResult.INPUT_EMPTY
        assert outcome.read == 5
        assert bytes(dst[:outcome.written]) == b"caf\xe9\x80"
        assert outcome.had_replacements is False

    def test_numeric_character_reference(self):
        """Test that an unmappable character is written as a reference."""
        encoder = ISO_8859_2.new_encoder()
        dst = bytearray(16)

        outcome = encoder.encode_from_str("a\u20acb", dst, True)

        assert bytes(dst[:outcome.written]) == b"a&#8364;b"
        assert outcome.had_replacements is True

    def test_unmappable_without_replacement(self):
        """Test that a fatal encode stops after the unmappable character."""
        # Arrange
        encoder = ISO_8859_2.new_encoder()
        dst = bytearray(16)
        src = "a\u20acb"

        # Act
        first = encoder.encode_from_str_without_replacement(src, dst, True)
        first_bytes = bytes(dst[:first.written])
        second = encoder.encode_from_str_without_replacement(src[first.read:], dst, True)

        # Assert
        assert first.result is EncoderResult.UNMAPPABLE
        assert first.unmappable == "\u20ac"
        assert first.read == 2
        assert first_bytes == b"a"
        assert second.result is EncoderResult.INPUT_EMPTY
        assert bytes(dst[:second.written]) == b"b"

    def test_unmappable_is_logged(self, caplog):
        """Test that unmappable characters are logged at DEBUG."""
        encoder = ISO_8859_2.new_encoder()

        with caplog.at_level(logging.DEBUG, logger="incremental_encoding"):
            encoder.encode_from_str_without_replacement("\u20ac", bytearray(4), True)

        assert any(
            getattr(record, "code_point", None) == "U+20AC" for record in caplog.records
        )

    def test_output_full(self):
        """Test that output stops when the buffer is full."""
        encoder = WINDOWS_1252.new_encoder()
        dst = bytearray(2)

        outcome = encoder.encode_from_str("abc", dst, True)

        assert outcome.result is EncoderResult.OUTPUT_FULL
        assert outcome.read == 2
        assert bytes(dst) == b"ab"

    def test_reference_is_never_split(self):
        """Test that a reference that does not fit is left for the next call."""
        encoder = ISO_8859_2.new_encoder()

        first = encoder.encode_from_str("\u20ac", bytearray(6), True)
        dst = bytearray(7)
        second = encoder.encode_from_str("\u20ac", dst, True)

        assert (first.result, first.read, first.written) == (EncoderResult.OUTPUT_FULL, 0, 0)
        assert second.result is EncoderResult.INPUT_EMPTY
        assert bytes(dst) == b"&#8364;"

    def test_lone_surrogate(self):
        """Test that a lone surrogate is encoded as U+FFFD."""
        encoder = UTF_8.new_encoder()
        dst = bytearray(8)

        outcome = encoder.encode_from_str("a\ud800b", dst, True)

        assert bytes(dst[:outcome.written]) == b"a\xef\xbf\xbdb"
        assert outcome.had_replacements is False

    def test_memoryview_destination(self):
        """Test that a writable memoryview works as a destination."""
        encoder = SHIFT_JIS.new_encoder()
        buffer = bytearray(4)

        outcome = encoder.encode_from_str("\u3042", memoryview(buffer), True)

        assert outcome.written == 2
        assert bytes(buffer[:2]) == b"\x82\xa0"


class TestEncodeFromUtf8:
    """Test encoding UTF-8 input."""

    def test_read_counts_bytes(self):
        """Test that ``read`` is measured in input bytes."""
        encoder = WINDOWS_1252.new_encoder()
        dst = bytearray(4)

        outcome = encoder.encode_from_utf8("\u00e9\u20ac".encode("utf-8"), dst, True)

        assert outcome.read == 5
        assert bytes(dst[:outcome.written]) == b"\xe9\x80"

    def test_invalid_utf8_rejected(self):
        """Test that invalid UTF-8 input is a ValueError."""
        encoder = UTF_8.new_encoder()

        with pytest.raises(ValueError):
            encoder.encode_from_utf8(b"\xff", bytearray(4), True)

    def test_unmappable_without_replacement(self):
        """Test the reported character and position for UTF-8 input."""
        encoder = ISO_8859_2.new_encoder()

        outcome = encoder.encode_from_utf8_without_replacement(
            "\u20ac!".encode("utf-8"), bytearray(4), True
        )

        assert outcome.result is EncoderResult.UNMAPPABLE
        assert outcome.read == 3
        assert outcome.unmappable == "\u20ac"


class TestEncodeFromUtf16:
    """Test encoding UTF-16 code units."""

    def test_surrogate_pair(self):
        """Test that a surrogate pair is one character."""
        encoder = UTF_8.new_encoder()
        dst = bytearray(8)

        outcome = encoder.encode_from_utf16(array("H", [0xD83D, 0xDE00]), dst, True)

        assert outcome.read == 2
        assert bytes(dst[:outcome.written]) == "\U0001f600".encode("utf-8")

    def test_unpaired_surrogates(self):
        """Test that unpaired surrogates are encoded as U+FFFD."""
        encoder = UTF_8.new_encoder()
        dst = bytearray(16)

        outcome = encoder.encode_from_utf16([0x41, 0xDE00, 0xD800, 0x42, 0xD800], dst, True)

        assert outcome.read == 5
        assert bytes(dst[:outcome.written]) == "A\ufffd\ufffdB\ufffd".encode("utf-8")

    def test_reference_for_astral_character(self):
        """Test that references use the scalar value, not the code units."""
        encoder = WINDOWS_1252.new_encoder()
        dst = bytearray(16)

        outcome = encoder.encode_from_utf16([0xD83D, 0xDE00], dst, True)

        assert bytes(dst[:outcome.written]) == b"&#128512;"

    def test_without_replacement(self):
        """Test the fatal variant for UTF-16 input."""
        encoder = WINDOWS_1252.new_encoder()

        outcome = encoder.encode_from_utf16_without_replacement(
            [0x61, 0x3042], bytearray(4), True
        )

        assert outcome.result is EncoderResult.UNMAPPABLE
        assert outcome.unmappable == "\u3042"
        assert outcome.read == 2


class TestStatefulEncoding:
    """Test ISO-2022-JP state across calls and at end of stream."""

    def test_return_to_ascii_on_last_call(self):
        """Test that the final call writes the escape back to ASCII."""
        encoder = ISO_2022_JP.new_encoder()
        dst = bytearray(16)

        first = encoder.encode_from_str("\u3042", dst, False)
        first_bytes = bytes(dst[:first.written])
        second = encoder.encode_from_str("", dst, True)

        assert first_bytes == b"\x1b$B$\""
        assert bytes(dst[:second.written]) == b"\x1b(B"

    def test_final_escape_that_does_not_fit(self):
        """Test that a final escape without room is retried on the next call."""
        encoder = ISO_2022_JP.new_encoder()

        first = encoder.encode_from_str("\u3042", bytearray(5), True)
        dst = bytearray(3)
        second = encoder.encode_from_str("", dst, True)

        assert first.result is EncoderResult.OUTPUT_FULL
        assert (first.read, first.written) == (1, 5)
        assert second.result is EncoderResult.INPUT_EMPTY
        assert bytes(dst) == b"\x1b(B"

    def test_ascii_stream_needs_no_escape(self):
        """Test that ASCII-only input is passed through unchanged."""
        encoder = ISO_2022_JP.new_encoder()
        dst = bytearray(8)

        outcome = encoder.encode_from_str("abc", dst, True)

        assert bytes(dst[:outcome.written]) == b"abc"


class TestBufferBounds:
    """Test the encoder's buffer-fit queries."""

    def test_utf8_has_no_reference_overhead(self):
        """Test that UTF-8 never needs room for references."""
        encoder = UTF_8.new_encoder()

        assert encoder.max_buffer_length_from_utf16_without_replacement(2) == 6
        assert encoder.max_buffer_length_from_utf16_if_no_unmappables(2) == 6
        assert encoder.max_buffer_length_from_utf8_if_no_unmappables(5) == 5

    def test_single_byte_reference_overhead(self):
        """Test that replacing bounds leave room for one reference."""
        encoder = WINDOWS_1252.new_encoder()

        assert encoder.max_buffer_length_from_str_without_replacement(3) == 3
        assert encoder.max_buffer_length_from_str_if_no_unmappables(3) == 13

    def test_iso_2022_jp_bounds(self):
        """Test that ISO-2022-JP bounds cover escapes and the final escape."""
        encoder = ISO_2022_JP.new_encoder()

        assert encoder.max_buffer_length_from_str_without_replacement(1) == 8
        assert (
            encoder.max_buffer_length_from_str_if_no_unmappables(1)
            - encoder.max_buffer_length_from_str_without_replacement(1)
        ) == 13

    def test_bound_is_sufficient(self):
        """Test that a buffer of the replacing bound never fills up."""
        encoder = ISO_2022_JP.new_encoder()
        text = "a\u3042\uff71\u00a5\u20acb"
        dst = bytearray(encoder.max_buffer_length_from_str_if_no_unmappables(len(text)))

        outcome = encoder.encode_from_str(text, dst, True)

        assert outcome.result is EncoderResult.INPUT_EMPTY


class TestLifecycle:
    """Test encoder reuse rules."""

    def test_reuse_after_finish_raises(self):
        """Test that a finished encoder refuses further input."""
        encoder = UTF_8.new_encoder()
        encoder.encode_from_str("abc", bytearray(4), True)

        with pytest.raises(StreamFinishedError):
            encoder.encode_from_str("", bytearray(4), True)

    def test_not_finished_without_last(self):
        """Test that calls with ``last=False`` can be repeated."""
        encoder = UTF_8.new_encoder()

        encoder.encode_from_str("a", bytearray(4), False)
        outcome = encoder.encode_from_str("b", bytearray(4), True)

        assert outcome.result is EncoderResult.INPUT_EMPTY
