"""
Public entry points: parse() and read().

Both functions never raise. They return either the result or an EmlError
instance, and pass the same pair to an optional callback(error, result) before
returning.
"""

from typing import Any, Callable, Mapping, Optional, Tuple, Union

import structlog
from pydantic import ValidationError

from .errors import (
    EmlError,
    ExtractionFailure,
    InvalidInput,
    MissingHeaders,
    ParseFailure,
)
from .models.eml_tree import Part
from .models.extracted import ExtractedResult
from .models.options import EmlOptions
from .parsing.extractor import extract
from .parsing.multipart_parser import parse_eml_text

logger = structlog.get_logger(__name__)

Callback = Callable[[Optional[EmlError], Any], None]
OptionsArg = Union[EmlOptions, Mapping[str, Any], Callback, None]


def _shift_arguments(
    options: OptionsArg, callback: Optional[Callback]
) -> Tuple[EmlOptions, Optional[Callback]]:
    if callable(options) and callback is None:
        callback, options = options, None
    if options is None:
        return EmlOptions(), callback
    if isinstance(options, EmlOptions):
        return options, callback
    if isinstance(options, Mapping):
        return EmlOptions.model_validate(dict(options)), callback
    raise InvalidInput(f"Unsupported options type: {type(options).__name__}")


def _finish(callback: Optional[Callback], error: Optional[EmlError], result: Any):
    if callback is not None:
        callback(error, result)
    return error if error is not None else result


def parse(
    eml: str,
    options: OptionsArg = None,
    callback: Optional[Callback] = None,
) -> Union[Part, EmlError]:
    """
    Parse EML text into a Part tree.

    Args:
        eml: Complete EML text (CRLF or LF line endings)
        options: EmlOptions, a dict of option values, or the callback
        callback: Optional callback(error, tree), called before returning

    Returns:
        Root Part on success, EmlError instance on failure
    """
    error: Optional[EmlError] = None
    tree: Optional[Part] = None
    try:
        options, callback = _shift_arguments(options, callback)
        tree = parse_eml_text(eml, options)
    except EmlError as e:
        error = e
    except ValidationError as e:
        error = InvalidInput(f"Invalid options: {e}")
    except Exception as e:
        logger.error("parse_failed", error=str(e), exc_info=True)
        error = ParseFailure(f"Failed to parse EML: {e}")
        error.__cause__ = e

    if error is not None:
        logger.debug("parse_error", error_type=type(error).__name__, error=str(error))
    return _finish(callback, error, tree)


def read(
    eml: Union[str, Part, Mapping[str, Any]],
    options: OptionsArg = None,
    callback: Optional[Callback] = None,
) -> Union[ExtractedResult, EmlError]:
    """
    Parse (if needed) and flatten an EML message into an ExtractedResult.

    Args:
        eml: EML text, a Part tree from parse(), or a tree in dict form
        options: EmlOptions, a dict of option values, or the callback
        callback: Optional callback(error, result), called before returning

    Returns:
        ExtractedResult on success, EmlError instance on failure
    """
    error: Optional[EmlError] = None
    result: Optional[ExtractedResult] = None
    try:
        options, callback = _shift_arguments(options, callback)
    except EmlError as e:
        return _finish(callback, e, None)
    except ValidationError as e:
        return _finish(callback, InvalidInput(f"Invalid options: {e}"), None)

    if isinstance(eml, str):
        tree = parse(eml, options)
    elif isinstance(eml, Part):
        tree = eml
    elif isinstance(eml, Mapping):
        tree = _tree_from_mapping(eml)
    else:
        tree = InvalidInput("Missing EML file content")

    if isinstance(tree, EmlError):
        error = tree
    else:
        try:
            result = extract(tree, options)
        except EmlError as e:
            error = e
        except Exception as e:
            logger.error("extraction_failed", error=str(e), exc_info=True)
            error = ExtractionFailure(f"Failed to read EML: {e}")
            error.__cause__ = e

    return _finish(callback, error, result)


def _tree_from_mapping(data: Mapping[str, Any]) -> Union[Part, EmlError]:
    if data.get("headers") is None:
        return MissingHeaders("Parsed tree has no headers")
    try:
        return Part.model_validate(dict(data))
    except ValidationError as e:
        return InvalidInput(f"Invalid parsed tree: {e}")
