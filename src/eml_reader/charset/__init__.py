# Charset service

from .codec import (
    convert,
    decode,
    encode,
    gb2312_to_utf8,
    is_gb_charset,
    is_utf8,
    load_eml_bytes,
    normalize_name,
    restore_text,
    to_raw_bytes,
)

__all__ = [
    "convert",
    "decode",
    "encode",
    "gb2312_to_utf8",
    "is_gb_charset",
    "is_utf8",
    "load_eml_bytes",
    "normalize_name",
    "restore_text",
    "to_raw_bytes",
]
