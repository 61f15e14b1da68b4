"""
Charset service: byte <-> text conversion by charset label.

Declared charsets are resolved through Python codecs. Labels Python does not
know fall back to charset-normalizer detection, then to UTF-8 with
replacement characters, so decoding never raises.
"""

import codecs
import re
from typing import Optional

import charset_normalizer
import structlog

from ..config import settings

logger = structlog.get_logger(__name__)

# Labels seen in the wild that Python codecs do not resolve directly
CHARSET_ALIASES = {
    "utf8": "utf-8",
    "unicode11utf8": "utf-8",
    "ks_c_5601-1987": "cp949",
    "x-gbk": "gbk",
    "gb2312": "gb18030",
    "x-sjis": "shift_jis",
    "iso-8859-8-i": "iso-8859-8",
    "windows-874": "cp874",
}

GB_CHARSET_PATTERN = re.compile(r"gbk|gb2312|gb18030|cp936", re.IGNORECASE)


def normalize_name(label: Optional[str]) -> str:
    """
    Normalize a charset label to the Python codec name.

    Args:
        label: Charset label as declared in a header (e.g. '"ISO-8859-2"')

    Returns:
        Canonical codec name (e.g. 'iso8859-2'). Unknown labels are returned
        lower-cased and unquoted.
    """
    if not label:
        return codecs.lookup(settings.default_charset).name

    cleaned = label.strip().strip("\"'").lower()
    cleaned = CHARSET_ALIASES.get(cleaned, cleaned)
    try:
        return codecs.lookup(cleaned).name
    except LookupError:
        return cleaned


def is_utf8(label: Optional[str]) -> bool:
    return normalize_name(label) == "utf-8"


def is_gb_charset(value: Optional[str]) -> bool:
    """True if a charset label or Content-Type references a GB codepage."""
    return bool(value and GB_CHARSET_PATTERN.search(value))


def decode(data: bytes, charset: Optional[str] = None) -> str:
    """
    Decode bytes using the declared charset.

    Falls back to charset-normalizer detection when the label is unknown or
    the bytes are invalid for it, and finally to UTF-8 with replacement.

    Args:
        data: Raw bytes
        charset: Declared charset label (default: settings.default_charset)

    Returns:
        Decoded text
    """
    if not data:
        return ""

    name = normalize_name(charset)
    try:
        return data.decode(name)
    except LookupError:
        logger.debug("unknown_charset", charset=charset)
    except UnicodeDecodeError:
        logger.debug("charset_mismatch", charset=charset, size=len(data))

    detected = charset_normalizer.from_bytes(data).best()
    if detected:
        return str(detected)

    return data.decode("utf-8", errors="replace")


def encode(text: str) -> bytes:
    """Encode text as UTF-8."""
    return text.encode("utf-8")


def convert(data: bytes, from_charset: str) -> bytes:
    """
    Re-encode bytes from one charset to UTF-8.

    Args:
        data: Bytes in `from_charset`
        from_charset: Source charset label

    Returns:
        UTF-8 bytes
    """
    return encode(decode(data, from_charset))


def gb2312_to_utf8(data: bytes) -> bytes:
    """Remap GB2312/GBK bytes to UTF-8 (GB18030 is a superset of both)."""
    return convert(data, "gb18030")


def to_raw_bytes(text: str) -> bytes:
    """
    Recover the original bytes of EML text.

    Text loaded with load_eml_bytes() keeps undecodable bytes as surrogates,
    which this function turns back into the original bytes.
    """
    try:
        return text.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        # Lone surrogates that did not come from load_eml_bytes()
        return text.encode("utf-8", errors="replace")


def restore_text(text: str, charset: Optional[str] = None) -> str:
    """
    Decode raw 8bit bytes carried as surrogate escapes.

    Args:
        text: Parser text, possibly loaded with load_eml_bytes()
        charset: Charset of the raw bytes (default: settings.default_charset)

    Returns:
        `text` unchanged if it holds no escapes, otherwise its original bytes
        decoded with decode()
    """
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return decode(to_raw_bytes(text), charset)
    return text


def load_eml_bytes(data: bytes) -> str:
    """
    Turn raw .eml file bytes into parser input without losing 8bit content.

    Args:
        data: Raw file bytes

    Returns:
        Text where invalid UTF-8 bytes are preserved as surrogate escapes
    """
    return data.decode("utf-8", errors="surrogateescape")
