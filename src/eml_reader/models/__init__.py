# Data models for the EML reader

from .parser_version import ParserVersion
from .eml_tree import BoundaryNode, HeaderMap, ParsedTree, Part, get_header
from .extracted import AddressRecord, Attachment, ExtractedResult, MultipartAlternative
from .options import EmlOptions
from .api_models import (
    HealthResponse,
    ParseEmlResponse,
    ReadEmlResponse,
    VersionResponse,
)

__all__ = [
    "ParserVersion",
    "BoundaryNode",
    "HeaderMap",
    "ParsedTree",
    "Part",
    "get_header",
    "AddressRecord",
    "Attachment",
    "ExtractedResult",
    "MultipartAlternative",
    "EmlOptions",
    "HealthResponse",
    "ParseEmlResponse",
    "ReadEmlResponse",
    "VersionResponse",
]
