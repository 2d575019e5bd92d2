"""Codec table: step functions and buffer bounds for every encoding.

Codecs are selected by canonical encoding name and created on first use.
"""

from functools import lru_cache
from typing import Dict

from . import big5, euc_jp, euc_kr, gb18030, iso_2022_jp, replacement, shift_jis
from . import single_byte, user_defined, utf8, utf16
from .base import NCR_EXTRA, Codec, DecodeStep, EncodeStep

_FIXED: Dict[str, Codec] = {
    "UTF-8": utf8.CODEC,
    "UTF-16LE": utf16.LE_CODEC,
    "UTF-16BE": utf16.BE_CODEC,
    "replacement": replacement.CODEC,
    "x-user-defined": user_defined.CODEC,
    "gb18030": gb18030.GB18030_CODEC,
    "GBK": gb18030.GBK_CODEC,
    "Big5": big5.CODEC,
    "EUC-JP": euc_jp.CODEC,
    "ISO-2022-JP": iso_2022_jp.CODEC,
    "Shift_JIS": shift_jis.CODEC,
    "EUC-KR": euc_kr.CODEC,
}


@lru_cache(maxsize=None)
def codec_for(name: str) -> Codec:
    """Return the codec of the encoding with canonical name ``name``.

    Raises:
        KeyError: If ``name`` is not the canonical name of an encoding
    """
    if name in _FIXED:
        return _FIXED[name]
    if name in single_byte.PYTHON_CODECS:
        return single_byte.make_codec(name)
    raise KeyError(name)


__all__ = [
    "NCR_EXTRA",
    "Codec",
    "DecodeStep",
    "EncodeStep",
    "codec_for",
]
