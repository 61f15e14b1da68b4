"""
Header section reader for EML parts.

Reconstructs logical header lines from physical (folded) lines and merges
repeated header names into ordered value lists.
"""

import re
from typing import List, Optional

import structlog

from ..models.eml_tree import CONTENT_TYPE_NAMES, HeaderMap, get_header

logger = structlog.get_logger(__name__)

HEADER_LINE_PATTERN = re.compile(r"^([\w\-]+):\s*(.*)$")
CONTINUATION_LINE_PATTERN = re.compile(r"^\s+(.*)$")


class HeaderFoldingReader:
    """
    Incremental reader for one header section.

    Feed physical lines with feed() until a blank line is met, then ask
    ends_headers() whether that blank line really closes the section.

    Attributes:
        headers: Header map built so far (name -> ordered values)
        verbose: Emit diagnostics at warning level instead of debug
    """

    def __init__(self, verbose: bool = False):
        self.headers: HeaderMap = {}
        self.verbose = verbose
        self._last_name: Optional[str] = None
        self._checked_for_content_type = False
        self._content_type_follows = False

    @property
    def content_type(self) -> Optional[str]:
        return get_header(self.headers, *CONTENT_TYPE_NAMES)

    def feed(self, line: str) -> bool:
        """
        Consume one non-blank header line.

        Args:
            line: Physical line without its terminator

        Returns:
            True if the line was a header or a continuation, False if ignored
        """
        match = CONTINUATION_LINE_PATTERN.match(line)
        if match:
            value = match.group(1).strip()
            if self._last_name is None:
                self._diagnostic("orphan_header_continuation", line=line)
                return False
            if value:
                values = self.headers[self._last_name]
                values[-1] += "\r\n" + value
            return True

        match = HEADER_LINE_PATTERN.match(line)
        if match:
            name, value = match.group(1), match.group(2)
            self._last_name = name
            self.headers.setdefault(name, []).append(value)
            return True

        self._diagnostic("unrecognized_header_line", line=line)
        return False

    def ends_headers(self, lines: List[str], index: int) -> bool:
        """
        Decide whether the blank line at `index` ends the header section.

        Without a Content-Type so far, the next non-blank line is inspected
        once: if it starts a Content-Type header, the blank line is treated as
        a stray separator and header mode continues.

        Args:
            lines: All lines of the part
            index: Index of the blank line

        Returns:
            True if the body starts after this line
        """
        if self.content_type is not None:
            return True
        if self._checked_for_content_type:
            return not self._content_type_follows

        self._checked_for_content_type = True
        next_line = next((line for line in lines[index:] if line.strip()), "")
        if next_line.lstrip().startswith(CONTENT_TYPE_NAMES):
            self._content_type_follows = True
            return False

        self._diagnostic("undefined_content_type", headers=list(self.headers))
        return True

    def _diagnostic(self, event: str, **kwargs) -> None:
        if self.verbose:
            logger.warning(event, **kwargs)
        else:
            logger.debug(event, **kwargs)
