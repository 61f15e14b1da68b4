"""
API response models for FastAPI endpoints.

This module defines the Pydantic models used for API response validation.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .eml_tree import Part
from .extracted import ExtractedResult
from .parser_version import ParserVersion


class ReadEmlResponse(BaseModel):
    """Response model for the read endpoint."""

    success: bool = Field(description="Whether extraction succeeded")
    result: Optional[ExtractedResult] = Field(None, description="Extracted message")
    error: Optional[str] = Field(None, description="Error message if failed")
    error_type: Optional[str] = Field(None, description="Error class name if failed")


class ParseEmlResponse(BaseModel):
    """Response model for the parse endpoint."""

    success: bool = Field(description="Whether parsing succeeded")
    tree: Optional[Part] = Field(None, description="Parsed part tree")
    error: Optional[str] = Field(None, description="Error message if failed")
    error_type: Optional[str] = Field(None, description="Error class name if failed")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status", examples=["healthy"])
    version: str = Field(description="API version", examples=["1.0.0"])
    parser: str = Field(
        description="Parser/decoder/extractor versions",
        examples=["eml-parser-1.0.0/content-decoder-1.0.0/extractor-1.0.0"],
    )
    max_email_size_mb: int = Field(description="Upload size limit")
    uptime_seconds: float = Field(description="Service uptime")


class VersionResponse(BaseModel):
    """Version information response."""

    api_version: str = Field(description="API version")
    parser_version: ParserVersion = Field(description="Current parser version")
