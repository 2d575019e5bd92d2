"""Encoding identities and label lookup.

There is exactly one :class:`Encoding` instance per encoding of the Encoding
Standard, created at import time. Instances compare by identity, so
``Encoding.for_label("latin1") is WINDOWS_1252`` holds.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, FrozenSet, Optional, Tuple, Union

from ..shared.errors import UnknownEncodingError
from ..shared.logging import get_logger
from .labels import ASCII_INCOMPATIBLE, ENCODING_LABELS, UTF8_OUTPUT

if TYPE_CHECKING:
    from ..core.decoder import Decoder
    from ..core.encoder import Encoder

logger = get_logger(__name__, component="registry")

LabelType = Union[bytes, bytearray, str]

# ASCII whitespace stripped from labels: TAB, LF, FF, CR and SPACE
_LABEL_WHITESPACE = b"\t\n\x0c\r "

_NON_ASCII = re.compile(rb"[\x80-\xff]")
_NON_ISO_2022_JP_ASCII = re.compile(rb"[\x0e\x0f\x1b\x80-\xff]")


@dataclass(frozen=True, eq=False)
class Encoding:
    """An encoding of the Encoding Standard.

    Attributes:
        name: Canonical name, e.g. ``"UTF-8"`` or ``"Shift_JIS"``
        labels: ASCII-lowercase labels that resolve to this encoding
    """

    name: str
    labels: FrozenSet[str]

    def __repr__(self) -> str:
        return f"Encoding({self.name!r})"

    # Lookup

    @staticmethod
    def for_label(label: LabelType) -> Optional["Encoding"]:
        """Implement the "get an encoding" algorithm.

        Leading and trailing ASCII whitespace is removed and ASCII letters are
        compared case-insensitively.

        Args:
            label: Label as bytes or text

        Returns:
            The matching encoding, or None if ``label`` is not a label
        """
        if isinstance(label, str):
            try:
                label = label.encode("ascii")
            except UnicodeEncodeError:
                return None
        normalized = bytes(label).strip(_LABEL_WHITESPACE).lower()
        if _NON_ASCII.search(normalized):
            return None
        return _BY_LABEL.get(normalized.decode("ascii"))

    @staticmethod
    def for_label_no_replacement(label: LabelType) -> Optional["Encoding"]:
        """Like :meth:`for_label`, but the replacement encoding is not a match."""
        encoding = Encoding.for_label(label)
        if encoding is REPLACEMENT:
            return None
        return encoding

    @staticmethod
    def for_name(name: LabelType) -> "Encoding":
        """Look up an encoding by its exact, case-sensitive canonical name.

        Raises:
            UnknownEncodingError: If ``name`` is not a canonical name
        """
        if isinstance(name, (bytes, bytearray)):
            name = bytes(name).decode("ascii", errors="replace")
        encoding = _BY_NAME.get(name)
        if encoding is None:
            logger.debug(
                "Exact encoding name lookup failed", extra={"encoding_name": name}
            )
            raise UnknownEncodingError(name)
        return encoding

    @staticmethod
    def for_bom(buffer: bytes) -> Tuple[Optional["Encoding"], int]:
        """Detect a byte order mark at the start of ``buffer``.

        Returns:
            ``(encoding, bom_length)``, or ``(None, 0)`` when ``buffer`` does
            not start with a complete BOM
        """
        if buffer[:3] == b"\xef\xbb\xbf":
            return UTF_8, 3
        if buffer[:2] == b"\xff\xfe":
            return UTF_16LE, 2
        if buffer[:2] == b"\xfe\xff":
            return UTF_16BE, 2
        return None, 0

    # Attributes

    def output_encoding(self) -> "Encoding":
        """Encoding used when this encoding's text has to be serialised again."""
        if self.name in UTF8_OUTPUT:
            return UTF_8
        return self

    def is_ascii_compatible(self) -> bool:
        """Whether bytes 0x00-0x7F always stand for the ASCII characters."""
        return self.name not in ASCII_INCOMPATIBLE

    def can_encode_everything(self) -> bool:
        """Whether every Unicode scalar value is mappable to the output encoding."""
        return self.output_encoding() is UTF_8

    # Validity scanners

    @staticmethod
    def utf8_valid_up_to(buffer: bytes) -> int:
        """Length of the longest prefix of ``buffer`` that is valid UTF-8."""
        try:
            bytes(buffer).decode("utf-8")
        except UnicodeDecodeError as e:
            return e.start
        return len(buffer)

    @staticmethod
    def ascii_valid_up_to(buffer: bytes) -> int:
        """Length of the longest prefix of ``buffer`` that is ASCII."""
        match = _NON_ASCII.search(buffer)
        return match.start() if match else len(buffer)

    @staticmethod
    def iso_2022_jp_ascii_valid_up_to(buffer: bytes) -> int:
        """Length of the longest prefix that ISO-2022-JP decodes as plain ASCII.

        The shift-out, shift-in and escape bytes end the prefix.
        """
        match = _NON_ISO_2022_JP_ASCII.search(buffer)
        return match.start() if match else len(buffer)

    # Factories

    def new_decoder(self) -> "Decoder":
        """Create a decoder that sniffs for a BOM and honours it."""
        from ..core.decoder import Decoder

        return Decoder.with_bom_sniffing(self)

    def new_decoder_with_bom_removal(self) -> "Decoder":
        """Create a decoder that removes a BOM of this encoding only."""
        from ..core.decoder import Decoder

        return Decoder.with_bom_removal(self)

    def new_decoder_without_bom_handling(self) -> "Decoder":
        """Create a decoder that treats BOM bytes as ordinary input."""
        from ..core.decoder import Decoder

        return Decoder.without_bom_handling(self)

    def new_encoder(self) -> "Encoder":
        """Create an encoder for this encoding's output encoding."""
        from ..core.encoder import Encoder

        return Encoder(self.output_encoding())

    # Single-shot conversion

    def decode(self, data: bytes) -> Tuple[str, "Encoding", bool]:
        """Decode ``data`` the way a browser decodes a document.

        A BOM overrides this encoding and is removed.

        Returns:
            ``(text, encoding actually used, had_errors)``
        """
        from ..api.convenience import decode

        return decode(data, self)

    def decode_with_bom_removal(self, data: bytes) -> Tuple[str, bool]:
        """Decode ``data``, removing a leading BOM of this encoding only."""
        from ..api.convenience import decode_with_bom_removal

        return decode_with_bom_removal(data, self)

    def decode_without_bom_handling(self, data: bytes) -> Tuple[str, bool]:
        """Decode ``data`` with REPLACEMENT CHARACTER for malformed sequences."""
        from ..api.convenience import decode_without_bom_handling

        return decode_without_bom_handling(data, self)

    def decode_without_bom_handling_and_without_replacement(
        self, data: bytes
    ) -> Optional[str]:
        """Decode ``data``; None if it contains any malformed sequence."""
        from ..api.convenience import (
            decode_without_bom_handling_and_without_replacement,
        )

        return decode_without_bom_handling_and_without_replacement(data, self)

    def encode(self, text: str) -> Tuple[bytes, "Encoding", bool]:
        """Encode ``text`` into this encoding's output encoding.

        Returns:
            ``(data, output encoding, had_errors)``
        """
        from ..api.convenience import encode

        return encode(text, self)


_BY_NAME: Dict[str, Encoding] = {
    name: Encoding(name, frozenset(labels)) for name, labels in ENCODING_LABELS.items()
}
_BY_LABEL: Dict[str, Encoding] = {
    label: encoding for encoding in _BY_NAME.values() for label in encoding.labels
}

UTF_8 = _BY_NAME["UTF-8"]
IBM866 = _BY_NAME["IBM866"]
ISO_8859_2 = _BY_NAME["ISO-8859-2"]
ISO_8859_3 = _BY_NAME["ISO-8859-3"]
ISO_8859_4 = _BY_NAME["ISO-8859-4"]
ISO_8859_5 = _BY_NAME["ISO-8859-5"]
ISO_8859_6 = _BY_NAME["ISO-8859-6"]
ISO_8859_7 = _BY_NAME["ISO-8859-7"]
ISO_8859_8 = _BY_NAME["ISO-8859-8"]
ISO_8859_8_I = _BY_NAME["ISO-8859-8-I"]
ISO_8859_10 = _BY_NAME["ISO-8859-10"]
ISO_8859_13 = _BY_NAME["ISO-8859-13"]
ISO_8859_14 = _BY_NAME["ISO-8859-14"]
ISO_8859_15 = _BY_NAME["ISO-8859-15"]
ISO_8859_16 = _BY_NAME["ISO-8859-16"]
KOI8_R = _BY_NAME["KOI8-R"]
KOI8_U = _BY_NAME["KOI8-U"]
MACINTOSH = _BY_NAME["macintosh"]
WINDOWS_874 = _BY_NAME["windows-874"]
WINDOWS_1250 = _BY_NAME["windows-1250"]
WINDOWS_1251 = _BY_NAME["windows-1251"]
WINDOWS_1252 = _BY_NAME["windows-1252"]
WINDOWS_1253 = _BY_NAME["windows-1253"]
WINDOWS_1254 = _BY_NAME["windows-1254"]
WINDOWS_1255 = _BY_NAME["windows-1255"]
WINDOWS_1256 = _BY_NAME["windows-1256"]
WINDOWS_1257 = _BY_NAME["windows-1257"]
WINDOWS_1258 = _BY_NAME["windows-1258"]
X_MAC_CYRILLIC = _BY_NAME["x-mac-cyrillic"]
GBK = _BY_NAME["GBK"]
GB18030 = _BY_NAME["gb18030"]
BIG5 = _BY_NAME["Big5"]
EUC_JP = _BY_NAME["EUC-JP"]
ISO_2022_JP = _BY_NAME["ISO-2022-JP"]
SHIFT_JIS = _BY_NAME["Shift_JIS"]
EUC_KR = _BY_NAME["EUC-KR"]
REPLACEMENT = _BY_NAME["replacement"]
UTF_16BE = _BY_NAME["UTF-16BE"]
UTF_16LE = _BY_NAME["UTF-16LE"]
X_USER_DEFINED = _BY_NAME["x-user-defined"]

ALL_ENCODINGS: Tuple[Encoding, ...] = tuple(_BY_NAME.values())
