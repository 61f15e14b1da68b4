"""
Recursive multipart parser for EML text.

Splits a line sequence into headers and body and resolves nested MIME parts
into a Part tree whose depth equals the MIME nesting depth. Parsing is lenient:
a blank line before a boundary marker is not required, unclosed multipart
bodies are completed at end of input, and a stray blank line before the
Content-Type header does not end the header section.
"""

import re
from typing import List, Optional

import structlog

from ..errors import InvalidInput, MalformedBoundaryMarker
from ..models.eml_tree import BoundaryNode, Part
from ..models.options import EmlOptions
from .content_decoder import get_boundary
from .header_reader import HeaderFoldingReader

logger = structlog.get_logger(__name__)

LINE_SPLIT_PATTERN = re.compile(r"\r?\n")
MULTIPART_PATTERN = re.compile(r"^\s*multipart/", re.IGNORECASE)
BOUNDARY_MARKER_PATTERN = re.compile(r"^--(\S.*?)\s*$")


def split_lines(eml: str) -> List[str]:
    """Split EML text on CRLF or LF line endings."""
    return LINE_SPLIT_PATTERN.split(eml)


def parse_boundary_marker(line: str) -> str:
    """
    Extract the delimiter token from a boundary marker line.

    Args:
        line: Line starting with '--'

    Returns:
        Delimiter token (transport padding stripped)

    Raises:
        MalformedBoundaryMarker: If the line carries no delimiter token
    """
    match = BOUNDARY_MARKER_PATTERN.match(line)
    if not match:
        raise MalformedBoundaryMarker(line)
    return match.group(1)


def multipart_boundary(content_type: Optional[str], verbose: bool = False) -> Optional[str]:
    """
    Return the boundary token of a multipart Content-Type.

    Args:
        content_type: Raw Content-Type header value
        verbose: Log multipart types that lack a boundary at warning level

    Returns:
        Boundary token, or None if the part is not a splittable multipart
    """
    if not content_type or not MULTIPART_PATTERN.match(content_type):
        return None

    boundary = get_boundary(content_type)
    if not boundary:
        if verbose:
            logger.warning(
                "multipart_without_boundary",
                content_type=content_type.replace("\r\n", " "),
            )
        return None
    return boundary


def _resolve(delimiter: str, lines: List[str], options: EmlOptions) -> BoundaryNode:
    return BoundaryNode(delimiter=delimiter, part=parse_recursive(lines, 0, options))


def parse_recursive(
    lines: List[str], start: int = 0, options: Optional[EmlOptions] = None
) -> Part:
    """
    Parse lines[start:] into a Part.

    The header section ends at the first blank line that HeaderFoldingReader
    accepts. A multipart Content-Type with a boundary switches to multipart
    mode, where each '--boundary' line opens a new child and '--boundary--'
    closes the series; children are parsed recursively from their own lines.
    Any other body is kept as one string.

    Args:
        lines: Physical lines (no terminators)
        start: Index of the first header line
        options: Per-call options (headers_only, verbose)

    Returns:
        Resolved Part (body None when headers_only or when no body follows)

    Raises:
        MalformedBoundaryMarker: If a boundary line has no delimiter token
    """
    options = options or EmlOptions()
    reader = HeaderFoldingReader(verbose=options.verbose)

    inside_body = False
    boundary: Optional[str] = None
    children: Optional[List[BoundaryNode]] = None
    body: Optional[str] = None
    body_start = len(lines)

    open_delimiter: Optional[str] = None
    open_lines: Optional[List[str]] = None
    saw_marker = False

    for index in range(start, len(lines)):
        line = lines[index]

        if not inside_body:
            if line == "":
                if options.headers_only:
                    break
                if not reader.ends_headers(lines, index):
                    continue
                inside_body = True
                body_start = index + 1
                boundary = multipart_boundary(reader.content_type, options.verbose)
                if boundary is not None:
                    children = []
                continue

            # Marker directly after the headers, without the separating blank line
            if line.startswith("--"):
                early = multipart_boundary(reader.content_type, options.verbose)
                if early and line.startswith("--" + early):
                    if options.headers_only:
                        break
                    inside_body = True
                    body_start = index
                    boundary = early
                    children = []
                else:
                    reader.feed(line)
                    continue
            else:
                reader.feed(line)
                continue

        if children is None:
            body = "\r\n".join(lines[index:])
            break

        opening = "--" + boundary
        closing = opening + "--"

        if line.startswith(opening) and not line.startswith(closing):
            if open_lines is not None:
                children.append(_resolve(open_delimiter, open_lines, options))
            open_delimiter = parse_boundary_marker(line)
            open_lines = []
            saw_marker = True
            if options.verbose:
                logger.info("found_boundary", boundary=open_delimiter)
            continue

        if line.startswith(closing):
            saw_marker = True
            if open_lines is not None:
                children.append(_resolve(open_delimiter, open_lines, options))
                open_delimiter = open_lines = None
            continue

        if open_lines is not None:
            open_lines.append(line)

    if open_lines is not None:
        # Series never closed
        children.append(_resolve(open_delimiter, open_lines, options))

    if children is not None:
        if saw_marker:
            return Part(headers=reader.headers, body=children)
        if options.verbose:
            logger.warning("multipart_without_markers", boundary=boundary)
        remainder = lines[body_start:]
        body = "\r\n".join(remainder) if remainder else None

    return Part(headers=reader.headers, body=body)


def parse_eml_text(eml: str, options: Optional[EmlOptions] = None) -> Part:
    """
    Parse complete EML text into a Part tree.

    Args:
        eml: EML text with CRLF or LF line endings
        options: Per-call options

    Returns:
        Root Part

    Raises:
        InvalidInput: If `eml` is not a string
        MalformedBoundaryMarker: On unparsable boundary syntax
    """
    if not isinstance(eml, str):
        raise InvalidInput('Argument "eml" expected to be string')
    return parse_recursive(split_lines(eml), 0, options)
