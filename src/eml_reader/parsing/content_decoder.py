"""
Content decoding for EML parts and headers.

Applies Content-Transfer-Encoding and charset rules to raw part bodies,
decodes RFC 2047 encoded-words in header values, and builds attachment
metadata. Decoding is lenient: anomalies are logged and the raw value is kept.
"""

import base64
import binascii
import re
from typing import Optional, Union
from urllib.parse import unquote

import structlog

from ..charset import (
    decode,
    gb2312_to_utf8,
    is_gb_charset,
    is_utf8,
    restore_text,
    to_raw_bytes,
)
from ..models.eml_tree import (
    CONTENT_DISPOSITION_NAMES,
    CONTENT_ID_NAMES,
    CONTENT_TYPE_NAMES,
    HeaderMap,
    get_header,
)
from ..models.extracted import Attachment

logger = structlog.get_logger(__name__)

CHARSET_PATTERN = re.compile(r"charset\s*=\W*([\w\-]+)", re.IGNORECASE)
QUOTED_BOUNDARY_PATTERN = re.compile(r'boundary\s*=\s*"([^"]+)"', re.IGNORECASE)
BARE_BOUNDARY_PATTERN = re.compile(r"boundary\s*=\s*([^\s;\"]+)", re.IGNORECASE)

ENCODED_WORD_PATTERN = re.compile(r"=\?([^?\s]+)\?([BbQq])\?(.*?)\?=")
LINE_BREAK_PATTERN = re.compile(r"\r?\n")
FOLDED_BREAK_PATTERN = re.compile(r"[ \t]*\r?\n[ \t]*")

QP_TRAILING_WHITESPACE = re.compile(r"[\t ]+(?=\r?\n|\Z)")
QP_SOFT_BREAK = re.compile(r"=(?:\r?\n|\Z)")
QP_ESCAPE_PATTERN = re.compile(r"=([0-9A-Fa-f]{2})")

EIGHT_BIT_ENCODING = re.compile(r"^(binary|8bit)")

NAME_PARAM_PATTERN = re.compile(
    r"^\s*(filename|name)(?:\*\d+)?(\*)?\s*=\s*(.*?)\s*$", re.IGNORECASE
)
EXTENDED_VALUE_PREFIX = re.compile(r"^[\w\-]*'[\w\-]*'")
SIZE_PARAM_PATTERN = re.compile(r"size\s*=\s*\"?([0-9]+)", re.IGNORECASE)
INLINE_PATTERN = re.compile(r"^\s*inline", re.IGNORECASE)

NAME_HEADER_NAMES = CONTENT_DISPOSITION_NAMES + CONTENT_TYPE_NAMES


def get_charset(content_type: Optional[str]) -> Optional[str]:
    """
    Get charset parameter from a Content-Type value.

    Args:
        content_type: e.g. 'text/plain; charset="iso-8859-2"'

    Returns:
        Charset label (e.g. 'iso-8859-2') or None
    """
    if not content_type:
        return None
    match = CHARSET_PATTERN.search(content_type)
    return match.group(1) if match else None


def get_boundary(content_type: Optional[str]) -> Optional[str]:
    """
    Get boundary parameter from a multipart Content-Type value.

    Args:
        content_type: e.g. 'multipart/mixed; boundary="----=_Part_1"'

    Returns:
        Boundary token or None
    """
    if not content_type:
        return None
    match = QUOTED_BOUNDARY_PATTERN.search(content_type)
    if not match:
        match = BARE_BOUNDARY_PATTERN.search(content_type)
    return match.group(1) if match else None


def decode_base64(value: str) -> bytes:
    """
    Decode Base64 text, ignoring line breaks and missing padding.

    Raises:
        binascii.Error: If the payload cannot be decoded at all
    """
    cleaned = re.sub(r"\s+", "", value)
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned)


def mime_decode(value: str, charset: Optional[str] = None) -> str:
    """
    Translate =HH escapes to bytes and decode the result with `charset`.

    Args:
        value: Quoted-printable text with soft line breaks already joined
        charset: Charset of the encoded bytes

    Returns:
        Decoded text
    """
    buffer = bytearray()
    position = 0
    for match in QP_ESCAPE_PATTERN.finditer(value):
        buffer += to_raw_bytes(value[position:match.start()])
        buffer.append(int(match.group(1), 16))
        position = match.end()
    buffer += to_raw_bytes(value[position:])
    return decode(bytes(buffer), charset)


def unquote_printable(value: str, charset: Optional[str] = None, q_encoding: bool = False) -> str:
    """
    Decode quoted-printable text.

    Args:
        value: Quoted-printable text
        charset: Charset of the encoded bytes
        q_encoding: RFC 2047 Q-encoding, where '_' stands for a space

    Returns:
        Decoded text
    """
    raw = QP_TRAILING_WHITESPACE.sub("", value)
    raw = QP_SOFT_BREAK.sub("", raw)
    if q_encoding:
        raw = raw.replace("_", " ")
    return mime_decode(raw, charset)


def decode_encoded_word(charset: str, kind: str, payload: str) -> str:
    """
    Decode the parts of one RFC 2047 encoded-word.

    Raises:
        binascii.Error: If a B payload is not Base64
    """
    # RFC 2231 language suffix, e.g. 'utf-8*en'
    charset = charset.split("*", 1)[0]
    if kind.upper() == "B":
        return decode(decode_base64(payload), charset)
    return unquote_printable(payload, charset, q_encoding=True)


def decode_header_value(value: Optional[str]) -> str:
    """
    Decode all RFC 2047 encoded-words in a header value.

    Each encoded-word is decoded independently and substituted in place.
    Whitespace is dropped only where it separates two encoded-words, so a
    value without encoded-words comes back unchanged apart from unfolding.
    Malformed words are left as literal text.

    Folded line breaks collapse to a single space rather than being removed
    outright, keeping the words on either side of a fold apart. Remaining
    bare line breaks are removed.

    Args:
        value: Raw header value

    Returns:
        Decoded single-line header value
    """
    if not value:
        return value or ""

    pieces = []
    position = 0
    for index, match in enumerate(ENCODED_WORD_PATTERN.finditer(value)):
        gap = value[position:match.start()]
        if not (index and gap.isspace()):
            pieces.append(gap)
        try:
            pieces.append(decode_encoded_word(*match.groups()))
        except (binascii.Error, ValueError) as e:
            logger.warning("malformed_encoded_word", word=match.group(0), error=str(e))
            pieces.append(match.group(0))
        position = match.end()
    pieces.append(value[position:])

    text = FOLDED_BREAK_PATTERN.sub(" ", "".join(pieces))
    return LINE_BREAK_PATTERN.sub("", text)


def restore_headers(headers: HeaderMap) -> HeaderMap:
    """
    Decode raw 8bit header names and values kept as surrogate escapes.

    The charset declared in the part's own Content-Type is used, then
    settings.default_charset with detection as fallback.

    Args:
        headers: Header map of a part

    Returns:
        Header map holding only encodable text
    """
    charset = get_charset(get_header(headers, *CONTENT_TYPE_NAMES))
    return {
        restore_text(name, charset): [restore_text(value, charset) for value in values]
        for name, values in headers.items()
    }


def decoded_charset(content_type: Optional[str], encoding: Optional[str]) -> Optional[str]:
    """Charset of the bytes returned by decode_content() for this part."""
    charset = get_charset(content_type)
    if _normalize_encoding(encoding) == "base64" and (
        is_gb_charset(content_type) or is_gb_charset(charset)
    ):
        return "utf-8"
    return charset


def _normalize_encoding(encoding: Optional[str]) -> str:
    return (encoding or "").strip().lower()


def decode_content(
    value: str, encoding: Optional[str], content_type: Optional[str] = None
) -> Union[bytes, str]:
    """
    Apply Content-Transfer-Encoding and charset rules to a raw body.

    - base64: bytes (GB2312/GBK payloads remapped to UTF-8)
    - quoted-printable: text decoded with the declared charset
    - 8bit/binary with a non UTF-8 charset: text decoded with that charset
    - anything else: unchanged, except raw 8bit bytes, which are decoded with
      the declared charset

    Args:
        value: Raw body string
        encoding: Content-Transfer-Encoding header value
        content_type: Content-Type header value

    Returns:
        Decoded bytes or text. Undecodable Base64 is returned unchanged.
    """
    charset = get_charset(content_type)
    encoding = _normalize_encoding(encoding)

    if encoding == "base64":
        try:
            data = decode_base64(value)
        except (binascii.Error, ValueError) as e:
            logger.warning("invalid_base64_body", content_type=content_type, error=str(e))
            return value
        if is_gb_charset(content_type) or is_gb_charset(charset):
            return gb2312_to_utf8(data)
        return data

    if encoding == "quoted-printable":
        return unquote_printable(value, charset)

    if encoding and charset and not is_utf8(charset) and EIGHT_BIT_ENCODING.match(encoding):
        # '8bit', 'binary', '8bitmime', 'binarymime'
        return decode(to_raw_bytes(value), charset)

    return restore_text(value, charset)


def content_as_text(content: Union[bytes, str], charset: Optional[str]) -> str:
    if isinstance(content, bytes):
        return decode(content, charset)
    return content


def _name_from_header(value: str) -> str:
    filename_pieces = []
    name_pieces = []
    for param in LINE_BREAK_PATTERN.sub("", value).split(";"):
        match = NAME_PARAM_PATTERN.match(param)
        if not match:
            continue
        kind, extended, piece = match.groups()
        piece = piece.strip("\"'")
        if extended:
            piece = EXTENDED_VALUE_PREFIX.sub("", piece)
        if kind.lower() == "filename":
            filename_pieces.append(piece)
        else:
            name_pieces.append(piece)
    return "".join(filename_pieces) or "".join(name_pieces)


def get_attachment_name(headers: HeaderMap) -> Optional[str]:
    """
    Find the attachment file name.

    Scans Content-Disposition, then Content-Type (both spellings), joining
    RFC 2231 continuations. The name is percent-decoded, then encoded-word
    decoded.

    Args:
        headers: Header map of the part

    Returns:
        File name, or None if no header carries one
    """
    raw_name = None
    for header_name in NAME_HEADER_NAMES:
        value = get_header(headers, header_name)
        if value:
            raw_name = _name_from_header(value)
            if raw_name:
                break

    if not raw_name:
        return None

    try:
        name = unquote(raw_name, errors="strict")
    except UnicodeDecodeError as e:
        logger.warning("unparsable_attachment_name", name=raw_name, error=str(e))
        name = raw_name
    return decode_header_value(name)


def build_attachment(headers: HeaderMap, content: Union[bytes, str]) -> Attachment:
    """
    Build attachment metadata for a non-body leaf part.

    Args:
        headers: Header map of the part
        content: Content already passed through decode_content()

    Returns:
        Attachment with name, type, id, inline flag, size and content
    """
    content_id = get_header(headers, *CONTENT_ID_NAMES)
    if content_id:
        content_id = content_id.strip()
        if content_id.startswith("<"):
            content_id = content_id[1:]
        if content_id.endswith(">"):
            content_id = content_id[:-1]

    disposition = get_header(headers, *CONTENT_DISPOSITION_NAMES) or ""
    size_match = SIZE_PARAM_PATTERN.search(disposition)

    return Attachment(
        name=get_attachment_name(headers),
        content_type=get_header(headers, *CONTENT_TYPE_NAMES),
        content_id=content_id or None,
        inline=bool(INLINE_PATTERN.match(disposition)),
        size=int(size_match.group(1)) if size_match else 0,
        content=content,
    )
