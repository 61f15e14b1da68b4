"""
EML endpoints - parse and read uploaded .eml files.
"""

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
import structlog

from ...charset import load_eml_bytes
from ...config import settings
from ...errors import EmlError, InvalidInput, MissingHeaders
from ...models.api_models import ParseEmlResponse, ReadEmlResponse
from ...models.options import EmlOptions
from ...reader import parse, read

logger = structlog.get_logger(__name__)
router = APIRouter()


async def _load_upload(file: UploadFile, keep_raw_bytes: bool = True) -> str:
    """
    Validate and decode an uploaded .eml file.

    Args:
        file: Uploaded file
        keep_raw_bytes: Preserve invalid UTF-8 bytes for charset decoding.
            Otherwise they are replaced, so raw bodies stay JSON-encodable.

    Raises:
        HTTPException: 400 for non-.eml files, 413 above the size limit
    """
    if not file.filename or not file.filename.lower().endswith(".eml"):
        raise HTTPException(status_code=400, detail="File must be .eml format")

    eml_bytes = await file.read()

    size_mb = len(eml_bytes) / (1024 * 1024)
    if size_mb > settings.max_email_size_mb:
        raise HTTPException(
            status_code=413,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum ({settings.max_email_size_mb}MB)",
        )

    logger.info("eml_received", filename=file.filename, size_bytes=len(eml_bytes))
    if not keep_raw_bytes:
        return eml_bytes.decode("utf-8", errors="replace")
    return load_eml_bytes(eml_bytes)


def _status_for(error: EmlError) -> int:
    if isinstance(error, (InvalidInput, MissingHeaders)):
        return 400
    return 422


@router.post("/read", response_model=ReadEmlResponse)
async def read_eml_file(
    file: UploadFile = File(..., description=".eml file to read"),
    headers_only: bool = Query(default=False, description="Only read the root headers"),
    unwrap_double_base64: bool = Query(
        default=False, description="Decode HTML bodies that were Base64-encoded twice"
    ),
) -> ReadEmlResponse:
    """
    Read an .eml file into text, HTML, attachments and decoded headers.

    Args:
        file: Uploaded .eml file
        headers_only: Stop after the root header section
        unwrap_double_base64: Enable the double Base64 HTML heuristic

    Returns:
        ReadEmlResponse with the extracted result or error
    """
    eml = await _load_upload(file)
    options = EmlOptions(headers_only=headers_only, unwrap_double_base64=unwrap_double_base64)

    outcome = read(eml, options)
    if isinstance(outcome, EmlError):
        logger.warning("eml_read_failed", error_type=type(outcome).__name__, error=str(outcome))
        raise HTTPException(status_code=_status_for(outcome), detail=str(outcome))

    logger.info(
        "eml_read",
        subject=outcome.subject,
        attachments_count=len(outcome.attachments),
        has_html=outcome.html is not None,
    )
    return ReadEmlResponse(success=True, result=outcome)


@router.post("/parse", response_model=ParseEmlResponse)
async def parse_eml_file(
    file: UploadFile = File(..., description=".eml file to parse"),
    headers_only: bool = Query(default=False, description="Only parse the root headers"),
) -> ParseEmlResponse:
    """
    Parse an .eml file into its MIME part tree.

    Args:
        file: Uploaded .eml file
        headers_only: Stop after the root header section

    Returns:
        ParseEmlResponse with the part tree or error
    """
    # The tree carries undecoded bodies
    eml = await _load_upload(file, keep_raw_bytes=False)

    outcome = parse(eml, EmlOptions(headers_only=headers_only))
    if isinstance(outcome, EmlError):
        logger.warning("eml_parse_failed", error_type=type(outcome).__name__, error=str(outcome))
        raise HTTPException(status_code=_status_for(outcome), detail=str(outcome))

    return ParseEmlResponse(success=True, tree=outcome)
