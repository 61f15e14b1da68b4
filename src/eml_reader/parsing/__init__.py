# EML parsing module

from .addresses import get_email_address, parse_address_list, to_email_address
from .content_decoder import (
    build_attachment,
    decode_content,
    decode_header_value,
    get_attachment_name,
    get_boundary,
    get_charset,
    mime_decode,
    unquote_printable,
)
from .extractor import extract
from .header_reader import HeaderFoldingReader
from .multipart_parser import (
    parse_boundary_marker,
    parse_eml_text,
    parse_recursive,
    split_lines,
)

__all__ = [
    "parse_eml_text",
    "parse_recursive",
    "parse_boundary_marker",
    "split_lines",
    "HeaderFoldingReader",
    "decode_content",
    "decode_header_value",
    "unquote_printable",
    "mime_decode",
    "get_charset",
    "get_boundary",
    "get_attachment_name",
    "build_attachment",
    "extract",
    "get_email_address",
    "parse_address_list",
    "to_email_address",
]
