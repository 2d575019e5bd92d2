"""Single-byte legacy encodings.

The upper halves of the tables are read from the charmap codecs bundled with
Python and corrected where the Encoding Standard's indexes differ:

- the windows-* encodings map otherwise undefined bytes 0x80-0x9F to the C1
  control with the same value;
- KOI8-U uses the KOI8-RU letters at 0xAE and 0xBE;
- windows-1255 maps 0xCA to HEBREW POINT HOLAM HASER FOR VAV.
"""

import threading
from functools import partial
from typing import Dict, Optional, Tuple

from .base import Codec, DecodeStep, EncodeStep

# Canonical name -> Python codec holding the same upper half
PYTHON_CODECS: Dict[str, str] = {
    "IBM866": "cp866",
    "ISO-8859-2": "iso8859_2",
    "ISO-8859-3": "iso8859_3",
    "ISO-8859-4": "iso8859_4",
    "ISO-8859-5": "iso8859_5",
    "ISO-8859-6": "iso8859_6",
    "ISO-8859-7": "iso8859_7",
    "ISO-8859-8": "iso8859_8",
    "ISO-8859-8-I": "iso8859_8",
    "ISO-8859-10": "iso8859_10",
    "ISO-8859-13": "iso8859_13",
    "ISO-8859-14": "iso8859_14",
    "ISO-8859-15": "iso8859_15",
    "ISO-8859-16": "iso8859_16",
    "KOI8-R": "koi8_r",
    "KOI8-U": "koi8_u",
    "macintosh": "mac_roman",
    "windows-874": "cp874",
    "windows-1250": "cp1250",
    "windows-1251": "cp1251",
    "windows-1252": "cp1252",
    "windows-1253": "cp1253",
    "windows-1254": "cp1254",
    "windows-1255": "cp1255",
    "windows-1256": "cp1256",
    "windows-1257": "cp1257",
    "windows-1258": "cp1258",
    "x-mac-cyrillic": "mac_cyrillic",
}

OVERRIDES: Dict[str, Dict[int, int]] = {
    "KOI8-U": {0xAE: 0x045E, 0xBE: 0x040E},
    "windows-1255": {0xCA: 0x05BA},
}

DecodeTable = Tuple[Optional[str], ...]
EncodeTable = Dict[int, int]

_tables: Dict[str, Tuple[DecodeTable, EncodeTable]] = {}
_tables_lock = threading.Lock()


def _build_tables(name: str) -> Tuple[DecodeTable, EncodeTable]:
    python_codec = PYTHON_CODECS[name]
    overrides = OVERRIDES.get(name, {})
    c1_passthrough = name.startswith("windows-")

    upper = []
    for byte in range(0x80, 0x100):
        if byte in overrides:
            upper.append(chr(overrides[byte]))
            continue
        try:
            upper.append(bytes((byte,)).decode(python_codec))
        except UnicodeDecodeError:
            upper.append(chr(byte) if c1_passthrough and byte < 0xA0 else None)

    reverse: EncodeTable = {}
    for offset, char in enumerate(upper):
        if char is not None:
            reverse.setdefault(ord(char), 0x80 + offset)
    return tuple(upper), reverse


def tables(name: str) -> Tuple[DecodeTable, EncodeTable]:
    """Return the decode table (bytes 0x80-0xFF) and reverse map of ``name``.

    Tables are built on first use and shared afterwards.
    """
    built = _tables.get(name)
    if built is None:
        with _tables_lock:
            built = _tables.get(name)
            if built is None:
                built = _build_tables(name)
                _tables[name] = built
    return built


def _decode_byte(upper: DecodeTable, state: None, byte: int) -> DecodeStep:
    if byte < 0x80:
        return DecodeStep(None, chr(byte))
    char = upper[byte - 0x80]
    if char is None:
        return DecodeStep(None, malformed=1)
    return DecodeStep(None, char)


def _encode_char(reverse: EncodeTable, state: None, code_point: int) -> EncodeStep:
    if code_point < 0x80:
        return EncodeStep(None, bytes((code_point,)))
    byte = reverse.get(code_point)
    if byte is None:
        return EncodeStep(None, unmappable=code_point)
    return EncodeStep(None, bytes((byte,)))


def make_codec(name: str) -> Codec:
    """Create the codec for the single-byte encoding ``name``."""
    upper, reverse = tables(name)
    return Codec(
        name=name,
        ascii_compatible=True,
        initial_decoder_state=None,
        decode_byte=partial(_decode_byte, upper),
        encode_char=partial(_encode_char, reverse),
    )
