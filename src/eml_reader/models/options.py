"""
Per-call options for parse() and read().

Every internal parsing and extraction function receives the options object of
the call it belongs to, so concurrent calls never share diagnostic state.
"""

from pydantic import BaseModel, Field

from ..config import settings


class EmlOptions(BaseModel):
    """
    Options recognised by parse() and read().

    Dict options may use either the field names or the camelCase spellings
    (`headersOnly`, `unwrapDoubleBase64`). Unknown keys are rejected.
    """

    headers_only: bool = Field(
        default=False,
        alias="headersOnly",
        description="Stop at the end of the root header section",
    )
    verbose: bool = Field(
        default_factory=lambda: settings.parser_verbose,
        description="Emit diagnostic log events while parsing and extracting",
    )
    unwrap_double_base64: bool = Field(
        default_factory=lambda: settings.unwrap_double_base64,
        alias="unwrapDoubleBase64",
        description=(
            "Decode HTML bodies once more when they round-trip as Base64. "
            "Heuristic: valid HTML that happens to be Base64 alphabet is altered."
        ),
    )

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}
