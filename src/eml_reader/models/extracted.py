"""
Extracted email model - the user-facing result of read().

This module defines the flat representation built from a parsed tree:
decoded headers, accumulated text/HTML bodies and attachments.
"""

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from .eml_tree import HeaderMap, get_header


class AddressRecord(BaseModel):
    """One mailbox from an address header."""

    name: Optional[str] = Field(None, description="Display name (decoded)")
    email: Optional[str] = Field(None, description="addr-spec")


AddressField = Optional[Union[AddressRecord, List[AddressRecord]]]


class Attachment(BaseModel):
    """A non-body leaf part, with its content in decoded form."""

    name: Optional[str] = Field(None, description="File name from disposition/type")
    content_type: Optional[str] = Field(None, description="Raw Content-Type value")
    content_id: Optional[str] = Field(None, description="Content-ID without brackets")
    inline: bool = Field(False, description="Content-Disposition is inline")
    size: int = Field(0, description="size= parameter of Content-Disposition")
    content: Union[bytes, str] = Field(
        description="Decoded content: bytes for base64, text otherwise"
    )

    # Binary payloads are rarely valid UTF-8
    model_config = {"ser_json_bytes": "base64", "val_json_bytes": "base64"}


class MultipartAlternative(BaseModel):
    """Content-Type of the first nested multipart container."""

    content_type: str


class ExtractedResult(BaseModel):
    """
    Flat, user-facing representation of an EML message.

    Built by a single pass over the parsed tree. Optional fields stay None when
    the message does not carry the matching header or body.
    """

    date: Optional[datetime] = Field(None, description="Parsed Date header")
    subject: Optional[str] = Field(None, description="Decoded Subject header")
    from_: AddressField = Field(None, alias="from", description="From header")
    to: AddressField = Field(None, description="To header")
    cc: AddressField = Field(None, description="Cc header")
    headers: HeaderMap = Field(default_factory=dict, description="Root header map")

    text: Optional[str] = Field(None, description="Concatenated text/plain bodies")
    html: Optional[str] = Field(None, description="Concatenated text/html bodies")
    text_headers: Optional[Dict[str, str]] = Field(
        None, description="Content-Type/Transfer-Encoding of the last text part"
    )
    html_headers: Optional[Dict[str, str]] = Field(
        None, description="Content-Type/Transfer-Encoding of the last HTML part"
    )

    attachments: List[Attachment] = Field(default_factory=list)
    multipart_alternative: Optional[MultipartAlternative] = None
    data: Optional[str] = Field(
        None, description="Multipart body that could not be split into parts"
    )

    model_config = {"populate_by_name": True}

    def header(self, *names: str) -> Optional[str]:
        """First value of the first matching root header spelling."""
        return get_header(self.headers, *names)
