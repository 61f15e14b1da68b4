"""
Address header parsing.

Tokenizes address-list headers (From, To, Cc) into AddressRecord entries and
formats records back into a header string.
"""

import re
from email.utils import getaddresses
from typing import List, Optional, Union

from ..models.extracted import AddressField, AddressRecord
from .content_decoder import decode_header_value

LINE_BREAK_PATTERN = re.compile(r"\r?\n")


def parse_address_list(raw: Optional[str]) -> List[AddressRecord]:
    """
    Parse an address-list header value.

    Display names may contain RFC 2047 encoded-words; they are decoded after
    tokenizing so that decoded commas cannot split an address.

    Args:
        raw: Raw header value (may be folded)

    Returns:
        Ordered list of AddressRecord (empty entries dropped)
    """
    if not raw:
        return []

    records = []
    for name, address in getaddresses([LINE_BREAK_PATTERN.sub(" ", raw)]):
        if not name and not address:
            continue
        records.append(
            AddressRecord(
                name=decode_header_value(name) or None,
                email=address or None,
            )
        )
    return records


def get_email_address(raw: Optional[str]) -> AddressField:
    """
    Parse an address header into a scalar, a list, or None.

    Args:
        raw: Raw header value

    Returns:
        None for no address, a single AddressRecord for one, a list otherwise
    """
    records = parse_address_list(raw)
    if not records:
        return None
    if len(records) == 1:
        return records[0]
    return records


def to_email_address(data: Union[str, AddressRecord, List[AddressRecord], None]) -> str:
    """
    Format address records as a header value.

    e.g. AddressRecord(name="PayPal", email="noreply@paypal.com")
    -> '"PayPal" <noreply@paypal.com>'
    """
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    if isinstance(data, AddressRecord):
        data = [data]

    formatted = []
    for record in data:
        parts = []
        if record.name:
            parts.append('"' + record.name.strip().strip('"') + '"')
        if record.email:
            parts.append("<" + record.email + ">")
        if parts:
            formatted.append(" ".join(parts))
    return ", ".join(formatted)
