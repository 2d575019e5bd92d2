"""Tests for the sinks and sources used by the decoder and encoder."""

from array import array

from incremental_encoding.core.buffers import (
    StrSource,
    TextSink,
    Utf8Sink,
    Utf8Source,
    Utf16Sink,
    Utf16Source,
    utf16_length,
)


class TestSinks:
    """Test output measuring and writing."""

    def test_utf16_length(self):
        """Test that astral characters count as two units."""
        assert utf16_length("") == 0
        assert utf16_length("a\u00e9") == 2
        assert utf16_length("a\U0001f600") == 3

    def test_utf8_sink(self):
        """Test measuring and writing UTF-8."""
        dst = bytearray(8)
        sink = Utf8Sink(dst)

        assert sink.capacity == 8
        assert sink.measure("\u20ac") == 3
        assert sink.finish("a\u20ac") == 4
        assert bytes(dst[:4]) == b"a\xe2\x82\xac"

    def test_utf16_sink(self):
        """Test writing code units in native order."""
        dst = array("H", [0] * 4)
        sink = Utf16Sink(dst)

        assert sink.finish("\U0001f600a") == 3
        assert list(dst) == [0xD83D, 0xDE00, 0x61, 0]

    def test_text_sink(self):
        """Test collecting a str."""
        sink = TextSink(5)

        assert sink.finish("\U0001f600") == 2
        assert sink.text == "\U0001f600"


class TestSources:
    """Test reading code points from encoder input."""

    def test_str_source(self):
        """Test code points, lone surrogates and ASCII runs in a str."""
        source = StrSource("ab\ud800\u00e9")

        assert source.length == 4
        assert source.code_point_at(2) == (0xFFFD, 1)
        assert source.code_point_at(3) == (0xE9, 1)
        assert source.ascii_run(0, 4) == b"ab"
        assert source.ascii_run(0, 1) == b"a"
        assert source.ascii_run(2, 4) is None

    def test_utf8_source(self):
        """Test that code points carry their width in bytes."""
        source = Utf8Source("a\u00e9\u20ac\U0001f600".encode("utf-8"))

        assert source.length == 10
        assert source.code_point_at(0) == (0x61, 1)
        assert source.code_point_at(1) == (0xE9, 2)
        assert source.code_point_at(3) == (0x20AC, 3)
        assert source.code_point_at(6) == (0x1F600, 4)
        assert source.ascii_run(1, 10) is None

    def test_utf16_source(self):
        """Test pairs, unpaired surrogates and a lead surrogate at the end."""
        source = Utf16Source([0x61, 0xD83D, 0xDE00, 0xDE00, 0xD83D])

        assert source.ascii_run(0, 5) == b"a"
        assert source.code_point_at(1) == (0x1F600, 2)
        assert source.code_point_at(3) == (0xFFFD, 1)
        assert source.code_point_at(4) == (0xFFFD, 1)
