"""
Parser version model for reproducible output.

Same version parameters + same input = same tree and same extracted result.
"""

from pydantic import BaseModel, Field


class ParserVersion(BaseModel):
    """Immutable version contract for the parse/read pipeline."""

    parser_version: str = Field(
        description="Multipart parser version", examples=["eml-parser-1.0.0"]
    )
    decoder_version: str = Field(
        description="Content decoder version", examples=["content-decoder-1.0.0"]
    )
    extractor_version: str = Field(
        description="Tree extractor version", examples=["extractor-1.0.0"]
    )

    model_config = {"frozen": True}

    def to_repr(self) -> str:
        """
        Short representation for logging.

        Returns:
            Compact string representation with all component versions.
        """
        return f"{self.parser_version}/{self.decoder_version}/{self.extractor_version}"
