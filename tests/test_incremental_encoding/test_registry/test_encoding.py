"""Tests for the encoding registry.

This module tests label resolution, exact-name lookup, BOM detection, the
attributes of every encoding and the validity scanners.
"""

import logging

import pytest

from incremental_encoding.core import Decoder, Encoder
from incremental_encoding.registry import (
    ALL_ENCODINGS,
    ENCODING_LABELS,
    GB18030,
    GBK,
    ISO_2022_JP,
    ISO_8859_8_I,
    REPLACEMENT,
    SHIFT_JIS,
    UTF_8,
    UTF_16BE,
    UTF_16LE,
    WINDOWS_1252,
    X_USER_DEFINED,
    Encoding,
)
from incremental_encoding.shared.errors import UnknownEncodingError


class TestForLabel:
    """Test the "get an encoding" algorithm."""

    def test_utf8_labels_resolve_to_same_instance(self):
        """Test that label case and surrounding whitespace are ignored."""
        # Arrange & Act
        first = Encoding.for_label("UTF-8")
        second = Encoding.for_label("  utf8  ")

        # Assert
        assert first is UTF_8
        assert second is first

    @pytest.mark.parametrize("label", [
        b"\t\n\x0c\r latin1 \r\n",
        "ISO-8859-1",
        "ascii",
        "US-ASCII",
        "windows-1252",
    ])
    def test_latin1_family_is_windows_1252(self, label):
        """Test that ISO-8859-1 and ASCII labels resolve to windows-1252."""
        assert Encoding.for_label(label) is WINDOWS_1252

    @pytest.mark.parametrize("label, expected", [
        ("sjis", SHIFT_JIS),
        ("gb2312", GBK),
        ("GB18030", GB18030),
        ("utf-16", UTF_16LE),
        ("unicodeFFFE", UTF_16BE),
        ("logical", ISO_8859_8_I),
        ("csISO2022JP", ISO_2022_JP),
    ])
    def test_various_labels(self, label, expected):
        """Test a sample of labels across encoding families."""
        assert Encoding.for_label(label) is expected

    @pytest.mark.parametrize("label", [
        "",
        "utf 8",
        "utf-7",
        " utf-8",
        "utf-8\x0b",
        b"utf-8\xff",
        "replacement",
    ])
    def test_unknown_labels(self, label):
        """Test that non-labels, including the name "replacement", give None."""
        assert Encoding.for_label(label) is None

    def test_replacement_labels(self):
        """Test that unsafe ISO-2022 labels map to the replacement encoding."""
        assert Encoding.for_label("iso-2022-kr") is REPLACEMENT
        assert Encoding.for_label_no_replacement("iso-2022-kr") is None

    def test_no_replacement_passes_other_encodings(self):
        """Test that for_label_no_replacement only filters replacement."""
        assert Encoding.for_label_no_replacement("utf-8") is UTF_8
        assert Encoding.for_label_no_replacement("bogus") is None

    def test_every_label_resolves_to_its_encoding(self):
        """Test the complete label table."""
        for name, labels in ENCODING_LABELS.items():
            for label in labels:
                assert Encoding.for_label(label).name == name
                assert Encoding.for_label(label.upper()).name == name


class TestForName:
    """Test exact, case-sensitive lookup by canonical name."""

    def test_known_names(self):
        """Test that every canonical name resolves to its encoding."""
        for encoding in ALL_ENCODINGS:
            assert Encoding.for_name(encoding.name) is encoding

    def test_bytes_name(self):
        """Test that names may be given as bytes."""
        assert Encoding.for_name(b"Shift_JIS") is SHIFT_JIS

    @pytest.mark.parametrize("name", ["utf-8", "shift_jis", "latin1", ""])
    def test_unknown_name_raises(self, name):
        """Test that anything but an exact canonical name raises."""
        with pytest.raises(UnknownEncodingError) as exc_info:
            Encoding.for_name(name)

        assert exc_info.value.name == name

    def test_unknown_name_is_logged_at_debug(self, caplog):
        """Test that failed exact lookups are a caller error, not a warning."""
        with caplog.at_level(logging.DEBUG, logger="incremental_encoding"):
            with pytest.raises(LookupError):
                Encoding.for_name("no-such-encoding")

        records = [r for r in caplog.records if getattr(r, "encoding_name", None) == "no-such-encoding"]
        assert [record.levelno for record in records] == [logging.DEBUG]


class TestForBom:
    """Test byte order mark detection."""

    @pytest.mark.parametrize("data, expected", [
        (b"\xef\xbb\xbfA", (UTF_8, 3)),
        (b"\xef\xbb\xbf", (UTF_8, 3)),
        (b"\xff\xfeA\x00", (UTF_16LE, 2)),
        (b"\xfe\xff\x00A", (UTF_16BE, 2)),
        (b"\xef\xbb", (None, 0)),
        (b"\xff", (None, 0)),
        (b"", (None, 0)),
        (b"A\xef\xbb\xbf", (None, 0)),
    ])
    def test_for_bom(self, data, expected):
        """Test complete, partial and absent BOMs."""
        assert Encoding.for_bom(data) == expected

    def test_bom_then_decode(self):
        """Test that the bytes after a detected BOM decode on their own."""
        # Arrange
        data = b"\xef\xbb\xbfA"

        # Act
        encoding, length = Encoding.for_bom(data)
        text, had_errors = encoding.decode_without_bom_handling(data[length:])

        # Assert
        assert text == "A"
        assert had_errors is False


class TestEncodingAttributes:
    """Test per-encoding attributes."""

    def test_forty_distinct_encodings(self):
        """Test that the registry holds exactly the forty standard encodings."""
        assert len(ALL_ENCODINGS) == 40
        assert len({encoding.name for encoding in ALL_ENCODINGS}) == 40

    def test_repr(self):
        """Test the debugging representation."""
        assert repr(SHIFT_JIS) == "Encoding('Shift_JIS')"

    def test_immutable(self):
        """Test that encodings cannot be modified."""
        with pytest.raises(AttributeError):
            UTF_8.name = "UTF-7"

    @pytest.mark.parametrize("encoding", [UTF_16LE, UTF_16BE, REPLACEMENT])
    def test_utf8_output_encoding(self, encoding):
        """Test the encodings that cannot be produced by an encoder."""
        assert encoding.output_encoding() is UTF_8
        assert encoding.can_encode_everything() is True

    @pytest.mark.parametrize("encoding", [SHIFT_JIS, WINDOWS_1252, ISO_2022_JP, X_USER_DEFINED])
    def test_legacy_output_encoding_is_self(self, encoding):
        """Test that legacy encodings encode to themselves."""
        assert encoding.output_encoding() is encoding
        assert encoding.can_encode_everything() is False

    def test_utf8_can_encode_everything(self):
        """Test UTF-8 attributes."""
        assert UTF_8.output_encoding() is UTF_8
        assert UTF_8.can_encode_everything() is True
        assert UTF_8.is_ascii_compatible() is True

    def test_ascii_compatibility(self):
        """Test the four ASCII-incompatible encodings."""
        incompatible = {e for e in ALL_ENCODINGS if not e.is_ascii_compatible()}

        assert incompatible == {UTF_16LE, UTF_16BE, ISO_2022_JP, REPLACEMENT}

    def test_factories(self):
        """Test decoder and encoder factories."""
        assert isinstance(SHIFT_JIS.new_decoder(), Decoder)
        assert SHIFT_JIS.new_decoder_with_bom_removal().encoding() is SHIFT_JIS
        assert SHIFT_JIS.new_decoder_without_bom_handling().encoding() is SHIFT_JIS
        assert isinstance(SHIFT_JIS.new_encoder(), Encoder)
        assert UTF_16LE.new_encoder().encoding() is UTF_8


class TestValidityScanners:
    """Test the prefix validity scanners."""

    @pytest.mark.parametrize("data, expected", [
        (b"", 0),
        (b"abc", 3),
        (b"a\xe2\x82\xacb", 5),
        (b"a\xe2\x82", 1),
        (b"ab\xff", 2),
        (b"\xed\xa0\x80", 0),
        (b"\xc0\x80", 0),
    ])
    def test_utf8_valid_up_to(self, data, expected):
        """Test UTF-8 validity including surrogates and overlong forms."""
        assert Encoding.utf8_valid_up_to(data) == expected

    def test_ascii_valid_up_to(self):
        """Test the ASCII prefix scanner."""
        assert Encoding.ascii_valid_up_to(b"abc\x80def") == 3
        assert Encoding.ascii_valid_up_to(b"abc") == 3

    def test_iso_2022_jp_ascii_valid_up_to(self):
        """Test that shift and escape bytes end the ISO-2022-JP ASCII prefix."""
        assert Encoding.iso_2022_jp_ascii_valid_up_to(b"ab\x1b$B") == 2
        assert Encoding.iso_2022_jp_ascii_valid_up_to(b"a\x0eb") == 1
        assert Encoding.iso_2022_jp_ascii_valid_up_to(b"a\x0fb") == 1
        assert Encoding.iso_2022_jp_ascii_valid_up_to(b"abc") == 3
