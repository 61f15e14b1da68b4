"""
Version constants for the EML reader.

Component versions are reported by the API and the CLI so that a result can be
traced back to the parser and extractor that produced it.
"""

from .models.parser_version import ParserVersion

# API Version
API_VERSION = "1.0.0"

# Component versions (update these when implementations change)
PARSER_VERSION = "eml-parser-1.0.0"
DECODER_VERSION = "content-decoder-1.0.0"
EXTRACTOR_VERSION = "extractor-1.0.0"


def get_current_parser_version() -> ParserVersion:
    """
    Get current parser version configuration.

    Returns:
        ParserVersion instance with current versions
    """
    return ParserVersion(
        parser_version=PARSER_VERSION,
        decoder_version=DECODER_VERSION,
        extractor_version=EXTRACTOR_VERSION,
    )
