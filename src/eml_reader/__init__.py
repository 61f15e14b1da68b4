# EML reader: parse EML text into a part tree and extract user-facing content

from .errors import (
    EmlError,
    ExtractionFailure,
    InvalidInput,
    MalformedBoundaryMarker,
    MissingHeaders,
    ParseFailure,
)
from .models import (
    AddressRecord,
    Attachment,
    BoundaryNode,
    EmlOptions,
    ExtractedResult,
    Part,
)
from .reader import parse, read

__all__ = [
    "parse",
    "read",
    "EmlOptions",
    "Part",
    "BoundaryNode",
    "ExtractedResult",
    "AddressRecord",
    "Attachment",
    "EmlError",
    "InvalidInput",
    "MissingHeaders",
    "MalformedBoundaryMarker",
    "ParseFailure",
    "ExtractionFailure",
]
