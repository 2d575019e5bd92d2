"""Tests for the chunked streaming helpers."""

import io
import logging

import pytest

from incremental_encoding import (
    ISO_2022_JP,
    ISO_8859_2,
    UTF_8,
    UTF_16LE,
    WINDOWS_1252,
    BomHandling,
    ConversionConfig,
    ConversionMetrics,
    MalformedInputError,
    UnmappableCharacterError,
    iter_decode,
    iter_encode,
)


class TestIterDecode:
    """Test streaming decoding."""

    def test_character_split_across_chunks(self):
        """Test that a character split between chunks is decoded once."""
        assert "".join(iter_decode([b"\xe2\x82", b"\xac"], UTF_8)) == "\u20ac"

    def test_bytes_input_is_chunked(self):
        """Test that a bytes value is split by the configured chunk size."""
        config = ConversionConfig().override(stream__chunk_size=1)
        metrics = ConversionMetrics()

        text = "".join(iter_decode(b"\xe2\x82\xac!", UTF_8, config, metrics))

        assert text == "\u20ac!"
        assert metrics.chunks == 4
        assert metrics.bytes_read == 4

    def test_binary_file_input(self):
        """Test reading from a binary file object."""
        config = ConversionConfig().override(stream__chunk_size=3)
        source = io.BytesIO("\u65e5\u672c\u8a9e\u30c6\u30ad\u30b9\u30c8".encode("utf-8"))

        assert "".join(iter_decode(source, UTF_8, config)) == "\u65e5\u672c\u8a9e\u30c6\u30ad\u30b9\u30c8"

    def test_bytearray_input(self):
        """Test that a bytearray is accepted."""
        assert "".join(iter_decode(bytearray(b"caf\xe9"), WINDOWS_1252)) == "caf\u00e9"

    def test_metrics(self):
        """Test the counters collected while decoding."""
        metrics = ConversionMetrics()

        list(iter_decode([b"abc"], UTF_8, metrics=metrics))

        assert metrics.chunks == 1
        assert metrics.calls == 2
        assert metrics.bytes_read == 3
        assert metrics.units_written == 3
        assert metrics.output_full_turnarounds == 0
        assert metrics.had_errors is False

    def test_small_output_buffer(self):
        """Test that a full output buffer is turned around without losing text."""
        # Arrange
        config = ConversionConfig().override(stream__output_buffer_size=13)
        metrics = ConversionMetrics()

        # Act
        pieces = list(iter_decode([b"a" * 100], UTF_8, config, metrics))

        # Assert
        assert "".join(pieces) == "a" * 100
        assert max(len(piece) for piece in pieces) == 13
        assert metrics.output_full_turnarounds == 7
        assert metrics.calls == 9

    def test_replacement(self):
        """Test that malformed input is replaced and counted."""
        metrics = ConversionMetrics()

        text = "".join(iter_decode([b"a\xff", b"b"], UTF_8, metrics=metrics))

        assert text == "a\ufffdb"
        assert metrics.had_errors is True

    def test_fatal_mode(self):
        """Test that fatal mode raises at the malformed sequence."""
        # Arrange
        stream = iter_decode([b"ab", b"\xffcd"], UTF_8, ConversionConfig.strict())

        # Act
        first = next(stream)
        with pytest.raises(MalformedInputError) as excinfo:
            list(stream)

        # Assert
        assert first == "ab"
        assert excinfo.value.encoding == "UTF-8"
        assert excinfo.value.position == 3
        assert excinfo.value.length == 1

    def test_fatal_truncated_sequence_at_end(self):
        """Test that an incomplete sequence at end of stream is fatal."""
        with pytest.raises(MalformedInputError) as excinfo:
            list(iter_decode([b"a\xe2\x82"], UTF_8, ConversionConfig.strict()))

        assert excinfo.value.length == 2
        assert excinfo.value.position == 3

    def test_bom_sniffing(self):
        """Test that the default configuration follows a BOM."""
        assert "".join(iter_decode([b"\xff", b"\xfeA\x00"], WINDOWS_1252)) == "A"

    def test_bom_removal(self):
        """Test that BOM removal ignores the BOM of another encoding."""
        config = ConversionConfig().override(stream__bom_handling=BomHandling.REMOVE)

        assert "".join(iter_decode([b"\xff\xfeA"], WINDOWS_1252, config)) == "\u00ff\u00feA"

    def test_no_bom_handling(self):
        """Test that BOM bytes can be kept as input."""
        config = ConversionConfig().override(stream__bom_handling=BomHandling.NONE)

        assert "".join(iter_decode([b"\xef\xbb\xbfA"], UTF_8, config)) == "\ufeffA"

    def test_logging(self, caplog):
        """Test that the start of a stream is logged with its correlation ID."""
        config = ConversionConfig(correlation_id="upload-3")

        with caplog.at_level(logging.INFO, logger="incremental_encoding"):
            list(iter_decode([b"\xff\xfeA\x00"], WINDOWS_1252, config))

        start = [r for r in caplog.records if r.getMessage() == "Starting streaming decode"]
        done = [r for r in caplog.records if r.getMessage() == "Streaming decode complete"]
        assert start[0].encoding == "windows-1252"
        assert start[0].correlation_id == "upload-3"
        assert done[0].encoding == "UTF-16LE"


class TestIterEncode:
    """Test streaming encoding."""

    def test_text_file_input(self):
        """Test reading from a text file object."""
        config = ConversionConfig().override(stream__chunk_size=2)

        data = b"".join(iter_encode(io.StringIO("h\u00e9llo"), WINDOWS_1252, config))

        assert data == b"h\xe9llo"

    def test_str_input(self):
        """Test that a str is accepted and chunked."""
        config = ConversionConfig().override(stream__chunk_size=1)
        metrics = ConversionMetrics()

        data = b"".join(iter_encode("a\u20ac", UTF_16LE, config, metrics))

        assert data == b"a\xe2\x82\xac"
        assert metrics.chunks == 2
        assert metrics.units_read == 2
        assert metrics.units_written == 4
        assert metrics.expansion_ratio == 2.0

    def test_state_carries_across_chunks(self):
        """Test that ISO-2022-JP escapes follow the text across chunks."""
        data = b"".join(iter_encode(["\u3042", "a"], ISO_2022_JP))

        assert data == b"\x1b$B$\"\x1b(Ba"

    def test_final_escape(self):
        """Test that the stream ends in ASCII mode."""
        data = b"".join(iter_encode(["a\u3042"], ISO_2022_JP))

        assert data == b"a\x1b$B$\"\x1b(B"

    def test_replacement(self):
        """Test that unmappable characters become references."""
        metrics = ConversionMetrics()

        data = b"".join(iter_encode(["a\u20ac"], ISO_8859_2, metrics=metrics))

        assert data == b"a&#8364;"
        assert metrics.had_errors is True

    def test_fatal_mode(self):
        """Test that fatal mode raises at the unmappable character."""
        with pytest.raises(UnmappableCharacterError) as excinfo:
            list(iter_encode(["ab", "c\u20acd"], ISO_8859_2, ConversionConfig.strict()))

        assert excinfo.value.encoding == "ISO-8859-2"
        assert excinfo.value.character == "\u20ac"
        assert excinfo.value.position == 3

    def test_small_output_buffer(self):
        """Test that references are never split across output pieces."""
        config = ConversionConfig().override(stream__output_buffer_size=13)

        pieces = list(iter_encode(["\u20ac\u20ac\u20ac"], ISO_8859_2, config))

        assert pieces == [b"&#8364;"] * 3
