"""Pointer lookups into the multi-byte indexes of the Encoding Standard.

An index maps a pointer (a number computed from a multi-byte sequence) to a
code point. The index data comes from the CJK codecs bundled with Python:
each pointer is turned back into the byte sequence of a codec whose layout
matches the index and decoded with it.

| Index      | Python codec   | Pointer layout                       |
|------------|----------------|--------------------------------------|
| jis0208    | ``cp932``      | Shift_JIS lead/trail, 188 per lead   |
| jis0212    | ``euc_jp``     | 0x8F + two bytes, 94 per row         |
| gb18030    | ``gb18030``    | lead/trail, 190 per lead             |
| big5       | ``big5hkscs``  | lead/trail, 157 per lead             |
| euc-kr     | ``cp949``      | lead/trail, 190 per lead             |

Forward lookups are memoised per pointer. Reverse maps (code point to
pointer) are built on first use under a lock and shared by all encoders.
"""

import threading
from functools import lru_cache
from typing import Callable, Dict, FrozenSet, Iterable, Optional

JIS0208_POINTERS = 11280   # Leads 0x81-0x9F and 0xE0-0xFC, 188 trails each
JIS0208_ROWS_LIMIT = 94 * 94
SHIFT_JIS_EUDC_FIRST = 8836
SHIFT_JIS_EUDC_LAST = 10715
# NEC-selected IBM extensions, duplicated by the IBM extensions at 0xFA-0xFC
SHIFT_JIS_SKIPPED_FIRST = 8272
SHIFT_JIS_SKIPPED_LAST = 8835

JIS0212_POINTERS = 94 * 94
GB18030_POINTERS = 126 * 190
GB18030_RANGES_BMP_LAST = 39419
GB18030_RANGES_ASTRAL_FIRST = 189000
GB18030_RANGES_ASTRAL_LAST = 1237575
BIG5_POINTERS = 126 * 157
BIG5_ENCODER_FIRST = (0xA1 - 0x81) * 157
EUC_KR_POINTERS = 126 * 190

# Where the Encoding Standard's jis0208 index departs from cp932
_JIS0208_OVERRIDES = {
    32: 0x301C,   # WAVE DASH
    33: 0x2016,   # DOUBLE VERTICAL LINE
}

# Where the Encoding Standard's gb18030 index departs from Python's gb18030
_GB18030_OVERRIDES = {
    6555: 0x3000,   # A3 A0, also at A1 A1; PUA U+E5E5 in Python
    7534: 0x1E3F,   # A8 BC; PUA U+E7C7 in Python
}

# Big5 pointers that decode to two code points
BIG5_SEQUENCES = {
    1133: "\u00ca\u0304",
    1135: "\u00ca\u030c",
    1164: "\u00ea\u0304",
    1166: "\u00ea\u030c",
}

# Where the Encoding Standard's Big5 index departs from big5hkscs
_BIG5_OVERRIDES = {
    5029: 0x2027,   # HYPHENATION POINT
    5038: 0xFE51,   # SMALL IDEOGRAPHIC COMMA
}

# Code points whose Big5 encoding uses the last of their pointers
_BIG5_PREFER_LAST = frozenset({0x2550, 0x255E, 0x2561, 0x256A, 0x5341, 0x5345})

_reverse_maps: Dict[str, Dict[int, int]] = {}
_reverse_lock = threading.Lock()


def _decode_single(data: bytes, python_codec: str) -> Optional[int]:
    try:
        text = data.decode(python_codec)
    except UnicodeDecodeError:
        return None
    if len(text) != 1:
        return None
    return ord(text)


@lru_cache(maxsize=None)
def jis0208_code_point(pointer: int) -> Optional[int]:
    """Code point for ``pointer`` in index jis0208."""
    if not 0 <= pointer < JIS0208_POINTERS:
        return None
    if SHIFT_JIS_EUDC_FIRST <= pointer <= SHIFT_JIS_EUDC_LAST:
        return None
    if pointer in _JIS0208_OVERRIDES:
        return _JIS0208_OVERRIDES[pointer]
    lead, trail = divmod(pointer, 188)
    lead += 0x81 if lead < 0x1F else 0xC1
    trail += 0x40 if trail < 0x3F else 0x41
    return _decode_single(bytes((lead, trail)), "cp932")


@lru_cache(maxsize=None)
def jis0212_code_point(pointer: int) -> Optional[int]:
    """Code point for ``pointer`` in index jis0212."""
    if not 0 <= pointer < JIS0212_POINTERS:
        return None
    row, cell = divmod(pointer, 94)
    return _decode_single(bytes((0x8F, row + 0xA1, cell + 0xA1)), "euc_jp")


@lru_cache(maxsize=None)
def gb18030_code_point(pointer: int) -> Optional[int]:
    """Code point for ``pointer`` in index gb18030 (two-byte sequences)."""
    if not 0 <= pointer < GB18030_POINTERS:
        return None
    if pointer in _GB18030_OVERRIDES:
        return _GB18030_OVERRIDES[pointer]
    lead, trail = divmod(pointer, 190)
    trail += 0x40 if trail < 0x3F else 0x41
    return _decode_single(bytes((lead + 0x81, trail)), "gb18030")


def gb18030_ranges_code_point(pointer: int) -> Optional[int]:
    """Code point for a four-byte gb18030 pointer."""
    if GB18030_RANGES_BMP_LAST < pointer < GB18030_RANGES_ASTRAL_FIRST:
        return None
    if pointer > GB18030_RANGES_ASTRAL_LAST:
        return None
    if pointer == 7457:
        return 0xE7C7
    first, rest = divmod(pointer, 12600)
    second, rest = divmod(rest, 1260)
    third, fourth = divmod(rest, 10)
    data = bytes((first + 0x81, second + 0x30, third + 0x81, fourth + 0x30))
    return _decode_single(data, "gb18030")


def gb18030_four_bytes(code_point: int) -> Optional[bytes]:
    """Four-byte gb18030 sequence for a code point outside index gb18030."""
    if code_point == 0xE7C7:
        return b"\x81\x35\xf4\x37"
    try:
        data = chr(code_point).encode("gb18030")
    except UnicodeEncodeError:
        return None
    return data if len(data) == 4 else None


@lru_cache(maxsize=None)
def big5_code_point(pointer: int) -> Optional[int]:
    """Code point for ``pointer`` in index Big5.

    The four pointers in :data:`BIG5_SEQUENCES` are handled by the decoder.
    """
    if not 0 <= pointer < BIG5_POINTERS or pointer in BIG5_SEQUENCES:
        return None
    if pointer in _BIG5_OVERRIDES:
        return _BIG5_OVERRIDES[pointer]
    lead, trail = divmod(pointer, 157)
    trail += 0x40 if trail < 0x3F else 0x62
    return _decode_single(bytes((lead + 0x81, trail)), "big5hkscs")


@lru_cache(maxsize=None)
def euc_kr_code_point(pointer: int) -> Optional[int]:
    """Code point for ``pointer`` in index EUC-KR."""
    if not 0 <= pointer < EUC_KR_POINTERS:
        return None
    lead, trail = divmod(pointer, 190)
    return _decode_single(bytes((lead + 0x81, trail + 0x41)), "cp949")


def _build_reverse(
    lookup: Callable[[int], Optional[int]],
    pointers: Iterable[int],
    prefer_last: FrozenSet[int] = frozenset(),
) -> Dict[int, int]:
    reverse: Dict[int, int] = {}
    for pointer in pointers:
        code_point = lookup(pointer)
        if code_point is None:
            continue
        if code_point not in reverse or code_point in prefer_last:
            reverse[code_point] = pointer
    return reverse


def _reverse_map(key: str, build: Callable[[], Dict[int, int]]) -> Dict[int, int]:
    reverse = _reverse_maps.get(key)
    if reverse is None:
        with _reverse_lock:
            reverse = _reverse_maps.get(key)
            if reverse is None:
                reverse = build()
                _reverse_maps[key] = reverse
    return reverse


def jis0208_pointer(code_point: int) -> Optional[int]:
    """First pointer of ``code_point`` in index jis0208."""
    reverse = _reverse_map(
        "jis0208", lambda: _build_reverse(jis0208_code_point, range(JIS0208_POINTERS))
    )
    return reverse.get(code_point)


def shift_jis_pointer(code_point: int) -> Optional[int]:
    """First pointer of ``code_point`` in index jis0208 usable by Shift_JIS."""

    def build() -> Dict[int, int]:
        pointers = (
            pointer
            for pointer in range(JIS0208_POINTERS)
            if not SHIFT_JIS_SKIPPED_FIRST <= pointer <= SHIFT_JIS_SKIPPED_LAST
        )
        return _build_reverse(jis0208_code_point, pointers)

    return _reverse_map("shift_jis", build).get(code_point)


def gb18030_pointer(code_point: int) -> Optional[int]:
    """First pointer of ``code_point`` in index gb18030."""
    reverse = _reverse_map(
        "gb18030", lambda: _build_reverse(gb18030_code_point, range(GB18030_POINTERS))
    )
    return reverse.get(code_point)


def big5_pointer(code_point: int) -> Optional[int]:
    """Pointer used to encode ``code_point`` in Big5.

    HKSCS pointers below :data:`BIG5_ENCODER_FIRST` are never produced.
    """
    reverse = _reverse_map(
        "big5",
        lambda: _build_reverse(
            big5_code_point, range(BIG5_ENCODER_FIRST, BIG5_POINTERS), _BIG5_PREFER_LAST
        ),
    )
    return reverse.get(code_point)


def euc_kr_pointer(code_point: int) -> Optional[int]:
    """First pointer of ``code_point`` in index EUC-KR."""
    reverse = _reverse_map(
        "euc_kr", lambda: _build_reverse(euc_kr_code_point, range(EUC_KR_POINTERS))
    )
    return reverse.get(code_point)
