"""
Tree flattening: turns a parsed Part tree into an ExtractedResult.

Root headers give the scalar fields (date, subject, addresses). The body tree
is walked in document order; text/plain and text/html leaves without a
Content-Disposition accumulate into text and html, every other leaf becomes an
Attachment. Nested multiparts (typically multipart/alternative inside
multipart/mixed or multipart/related) are walked with the same recursion at
any depth.
"""

import base64
import binascii
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional, Union

import structlog

from ..charset import restore_text
from ..errors import MissingHeaders
from ..models.eml_tree import (
    CONTENT_DISPOSITION_NAMES,
    CONTENT_TYPE_NAMES,
    TRANSFER_ENCODING_NAMES,
    HeaderMap,
    Part,
    get_header,
)
from ..models.extracted import ExtractedResult, MultipartAlternative
from ..models.options import EmlOptions
from .addresses import get_email_address
from .content_decoder import (
    build_attachment,
    content_as_text,
    decode_content,
    decode_header_value,
    decoded_charset,
    restore_headers,
)
from .multipart_parser import MULTIPART_PATTERN

logger = structlog.get_logger(__name__)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a Date header.

    Args:
        value: Raw Date header value

    Returns:
        Parsed datetime, or None if missing or unparsable
    """
    if not value:
        return None
    try:
        return parsedate_to_datetime(value.replace("\r\n", " "))
    except (TypeError, ValueError):
        logger.warning("unparsable_date", date=value)
        return None


def _decode_optional(value: Optional[str]) -> Optional[str]:
    return None if value is None else decode_header_value(value)


def unwrap_double_base64(html: str, charset: Optional[str] = None) -> str:
    """
    Decode an HTML body that was Base64-encoded twice.

    The body is decoded again only if it is strict Base64 and re-encoding the
    decoded bytes reproduces it exactly. This is a heuristic: short HTML-free
    bodies made only of Base64 characters are decoded too.

    Args:
        html: HTML body after transfer decoding
        charset: Charset of the inner payload

    Returns:
        Inner payload, or `html` unchanged
    """
    candidate = html.strip()
    if not candidate:
        return html
    try:
        inner = base64.b64decode(candidate, validate=True)
    except (binascii.Error, ValueError):
        return html
    if base64.b64encode(inner).decode("ascii") != candidate:
        return html
    return content_as_text(inner, charset)


class TreeExtractor:
    """
    Single accumulating pass over one parsed tree.

    Attributes:
        options: Per-call options
        result: Result being populated
    """

    def __init__(self, options: EmlOptions):
        self.options = options
        self.result = ExtractedResult()

    def extract(self, tree: Part) -> ExtractedResult:
        headers = restore_headers(tree.headers)
        self.result = ExtractedResult(
            date=parse_date(get_header(headers, "Date")),
            subject=_decode_optional(get_header(headers, "Subject")),
            from_=get_email_address(get_header(headers, "From")),
            to=get_email_address(get_header(headers, "To")),
            cc=get_email_address(get_header(headers, "Cc", "CC")),
            headers=headers,
        )

        if isinstance(tree.body, list):
            self._walk(tree)
        elif isinstance(tree.body, str):
            if MULTIPART_PATTERN.match(tree.content_type or ""):
                self._append_data(tree.body)
            else:
                self._append(tree.headers, tree.body)
        elif self.options.verbose:
            logger.info("message_without_body")

        return self.result

    def _walk(self, container: Part) -> None:
        for node in container.body:
            part = node.part
            if part.body is None:
                if self.options.verbose:
                    logger.warning("boundary_without_body", boundary=node.delimiter)
                continue

            if isinstance(part.body, list):
                content_type = part.content_type
                if self.options.verbose:
                    logger.info("nested_multipart", content_type=content_type)
                if (
                    MULTIPART_PATTERN.match(content_type or "")
                    and self.result.multipart_alternative is None
                ):
                    self.result.multipart_alternative = MultipartAlternative(
                        content_type=restore_text(content_type)
                    )
                self._walk(part)
                continue

            if MULTIPART_PATTERN.match(part.content_type or ""):
                # Multipart declared without a usable boundary
                self._append_data(part.body)
                continue

            self._append(part.headers, part.body)

    def _append_data(self, body: str) -> None:
        body = restore_text(body)
        self.result.data = body if self.result.data is None else self.result.data + body

    def _append(self, headers: HeaderMap, body: str) -> None:
        """Dispatch one decodable leaf to html, text, or attachments."""
        headers = restore_headers(headers)
        content_type = get_header(headers, *CONTENT_TYPE_NAMES)
        disposition = get_header(headers, *CONTENT_DISPOSITION_NAMES)
        encoding = get_header(headers, *TRANSFER_ENCODING_NAMES)
        encoding = encoding.strip().lower() if encoding else ""

        kind = (content_type or "").lower()

        content = decode_content(body, encoding, content_type)
        charset = decoded_charset(content_type, encoding)

        if not disposition and "text/html" in kind:
            html = content_as_text(content, charset)
            html = html.replace("\r\n", "").replace('\\"', '"')
            if self.options.unwrap_double_base64:
                html = unwrap_double_base64(html, charset)
            self.result.html = html if self.result.html is None else self.result.html + html
            self.result.html_headers = {
                "Content-Type": content_type,
                "Content-Transfer-Encoding": encoding,
            }
        elif not disposition and "text/plain" in kind:
            text = content_as_text(content, charset)
            self.result.text = text if self.result.text is None else self.result.text + text
            self.result.text_headers = {
                "Content-Type": content_type,
                "Content-Transfer-Encoding": encoding,
            }
        elif not disposition and not content_type:
            # text/plain is the default type
            text = content_as_text(content, charset)
            self.result.text = text if self.result.text is None else self.result.text + text
        else:
            self.result.attachments.append(build_attachment(headers, content))


def extract(tree: Union[Part, dict], options: Optional[EmlOptions] = None) -> ExtractedResult:
    """
    Flatten a parsed tree into an ExtractedResult.

    Args:
        tree: Root Part, or its dict/JSON form
        options: Per-call options

    Returns:
        Fully populated ExtractedResult

    Raises:
        MissingHeaders: If the structure has no header map
    """
    if isinstance(tree, dict):
        if tree.get("headers") is None:
            raise MissingHeaders("Parsed tree has no headers")
        tree = Part.model_validate(tree)
    if tree.headers is None:
        raise MissingHeaders("Parsed tree has no headers")
    return TreeExtractor(options or EmlOptions()).extract(tree)
