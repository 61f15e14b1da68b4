"""
Parsed EML tree - the structural representation produced by parse().

A Part holds its headers and a body that is either absent, a single string,
or an ordered list of BoundaryNode children (one per MIME sub-part).
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

# Header name -> ordered values (length >= 1). Names are case-sensitive.
HeaderMap = Dict[str, List[str]]

CONTENT_TYPE_NAMES = ("Content-Type", "Content-type")
CONTENT_DISPOSITION_NAMES = ("Content-Disposition",)
TRANSFER_ENCODING_NAMES = ("Content-Transfer-Encoding", "Content-transfer-encoding")
CONTENT_ID_NAMES = ("Content-ID", "Content-Id")


def get_header(headers: HeaderMap, *names: str) -> Optional[str]:
    """
    Return the first value of the first header present under any of `names`.

    Args:
        headers: Header map of a part
        names: Spellings to look up, in priority order

    Returns:
        First header value, or None if none of the names is present
    """
    for name in names:
        values = headers.get(name)
        if values:
            return values[0]
    return None


class BoundaryNode(BaseModel):
    """One MIME sub-part of a multipart body, with the delimiter that opened it."""

    delimiter: str = Field(description="Boundary token as found on the marker line")
    part: "Part" = Field(description="Resolved sub-part")

    model_config = {"frozen": True}


class Part(BaseModel):
    """A MIME entity: header map plus body."""

    headers: HeaderMap = Field(default_factory=dict, description="Header map")
    body: Optional[Union[str, List[BoundaryNode]]] = Field(
        None, description="Body string, child parts, or None when not read"
    )

    model_config = {"frozen": True}

    def header(self, *names: str) -> Optional[str]:
        """First value of the first matching header spelling."""
        return get_header(self.headers, *names)

    @property
    def content_type(self) -> Optional[str]:
        return get_header(self.headers, *CONTENT_TYPE_NAMES)

    @property
    def is_multipart(self) -> bool:
        return isinstance(self.body, list)

    def iter_leaves(self):
        """Yield every terminal part (body not further split) in document order."""
        if isinstance(self.body, list):
            for node in self.body:
                yield from node.part.iter_leaves()
        else:
            yield self


BoundaryNode.model_rebuild()

# The root of a parsed message
ParsedTree = Part
