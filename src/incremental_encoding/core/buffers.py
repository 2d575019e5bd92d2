"""Output sinks and input sources for the incremental state machines.

Sinks measure decoded text in the caller's output units (UTF-8 bytes or
UTF-16 code units) so the decoder can check whether a step fits before
committing it, and write everything a call produced in one go at the end.

Sources present encoder input (UTF-8 bytes, UTF-16 code units or a ``str``)
as a sequence of Unicode scalar values, each with its width in input units.
"""

import re
import sys
from array import array
from typing import MutableSequence, Optional, Sequence, Tuple

_NATIVE_UTF16 = "utf-16-le" if sys.byteorder == "little" else "utf-16-be"

_NON_ASCII_BYTES = re.compile(rb"[\x80-\xff]")
_NON_ASCII_TEXT = re.compile(r"[^\x00-\x7f]")


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units needed for ``text``."""
    return len(text) + sum(1 for char in text if ord(char) > 0xFFFF)


class Utf8Sink:
    """Writes decoded text as UTF-8 into a writable byte buffer."""

    def __init__(self, dst: MutableSequence[int]) -> None:
        self.dst = dst
        self.capacity = len(dst)

    @staticmethod
    def measure(text: str) -> int:
        return len(text.encode("utf-8"))

    def finish(self, text: str) -> int:
        data = text.encode("utf-8")
        self.dst[0:len(data)] = data
        return len(data)


class Utf16Sink:
    """Writes decoded text as UTF-16 code units into a mutable sequence.

    ``dst`` may be an ``array('H')``, a list of ints or a ``memoryview`` with
    format ``'H'``.
    """

    def __init__(self, dst: MutableSequence[int]) -> None:
        self.dst = dst
        self.capacity = len(dst)

    measure = staticmethod(utf16_length)

    def finish(self, text: str) -> int:
        units = array("H")
        units.frombytes(text.encode(_NATIVE_UTF16))
        self.dst[0:len(units)] = units
        return len(units)


class TextSink:
    """Collects decoded text as a ``str`` limited to a UTF-16 length."""

    def __init__(self, max_length: int) -> None:
        self.capacity = max_length
        self.text = ""

    measure = staticmethod(utf16_length)

    def finish(self, text: str) -> int:
        self.text = text
        return utf16_length(text)


class StrSource:
    """Encoder input from a Python ``str``; lone surrogates read as U+FFFD."""

    def __init__(self, src: str) -> None:
        self.src = src
        self.length = len(src)

    def code_point_at(self, position: int) -> Tuple[int, int]:
        code_point = ord(self.src[position])
        if 0xD800 <= code_point <= 0xDFFF:
            return 0xFFFD, 1
        return code_point, 1

    def ascii_run(self, position: int, limit: int) -> Optional[bytes]:
        match = _NON_ASCII_TEXT.search(self.src, position, limit)
        end = match.start() if match else limit
        if end == position:
            return None
        return self.src[position:end].encode("ascii")


class Utf8Source:
    """Encoder input from UTF-8 bytes.

    Raises:
        UnicodeDecodeError: If ``src`` is not valid UTF-8
    """

    def __init__(self, src: bytes) -> None:
        self.src = bytes(src)
        self.src.decode("utf-8")
        self.length = len(self.src)

    def code_point_at(self, position: int) -> Tuple[int, int]:
        lead = self.src[position]
        if lead < 0x80:
            return lead, 1
        width = 2 if lead < 0xE0 else 3 if lead < 0xF0 else 4
        return ord(self.src[position:position + width].decode("utf-8")), width

    def ascii_run(self, position: int, limit: int) -> Optional[bytes]:
        match = _NON_ASCII_BYTES.search(self.src, position, limit)
        end = match.start() if match else limit
        if end == position:
            return None
        return self.src[position:end]


class Utf16Source:
    """Encoder input from UTF-16 code units.

    Unpaired surrogates read as U+FFFD, including a lead surrogate that ends
    the buffer: a surrogate pair must not be split across calls.
    """

    def __init__(self, src: Sequence[int]) -> None:
        self.src = src
        self.length = len(src)

    def code_point_at(self, position: int) -> Tuple[int, int]:
        unit = self.src[position]
        if unit < 0xD800 or unit > 0xDFFF:
            return unit, 1
        if unit <= 0xDBFF and position + 1 < self.length:
            trail = self.src[position + 1]
            if 0xDC00 <= trail <= 0xDFFF:
                return 0x10000 + ((unit - 0xD800) << 10) + (trail - 0xDC00), 2
        return 0xFFFD, 1

    def ascii_run(self, position: int, limit: int) -> Optional[bytes]:
        end = position
        while end < limit and self.src[end] < 0x80:
            end += 1
        if end == position:
            return None
        return bytes(self.src[index] for index in range(position, end))
