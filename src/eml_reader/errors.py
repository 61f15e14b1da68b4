"""
Error taxonomy for EML parsing and extraction.

The public parse/read functions never raise these: they return the error
instance (and pass it to the optional callback). Internal functions raise
them normally.
"""


class EmlError(Exception):
    """Base class for all eml_reader errors."""


class InvalidInput(EmlError):
    """Argument is not EML text (or a parsed tree) where one is required."""


class MissingHeaders(EmlError):
    """Extraction was attempted on a structure without a header map."""


class MalformedBoundaryMarker(EmlError):
    """A multipart boundary line whose delimiter token cannot be parsed."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Malformed boundary marker: {line!r}")


class ParseFailure(EmlError):
    """Unexpected exception while building the part tree."""


class ExtractionFailure(EmlError):
    """Unexpected exception while flattening a parsed tree."""
