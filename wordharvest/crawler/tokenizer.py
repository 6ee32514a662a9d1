"""
Visible text extraction from HTML documents.
"""

import logging
from typing import Iterator, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.builder import ParserRejectedMarkup
from bs4.element import PreformattedString


SKIPPED_TAGS = frozenset(["script", "style"])

logger = logging.getLogger(__name__)


def iter_text(html: Union[str, bytes]) -> Iterator[str]:
    """
    Yield the visible text segments of an HTML document in document order.

    Only the most recently opened tag is remembered: text is dropped while
    that tag is ``script`` or ``style``. This is not a nesting stack, so text
    following ``</script>`` is dropped too until the next start tag appears.
    Void and self-closing elements such as ``<br/>`` count as start tags, so
    ``<script>x()</script><br/>after`` yields ``after``.

    Entities are decoded and each segment is stripped of surrounding
    whitespace; empty segments are not yielded. Markup the parser rejects
    ends the scan without raising.
    """
    try:
        soup = BeautifulSoup(html, "lxml")
    except ParserRejectedMarkup as e:
        logger.debug(f"Unparseable document, no text extracted: {e}")
        return

    last_start_tag: Optional[str] = None
    for node in soup.descendants:
        if isinstance(node, Tag):
            last_start_tag = node.name
            continue

        # Comments, doctypes, CDATA and processing instructions
        if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
            continue

        if last_start_tag in SKIPPED_TAGS:
            continue

        text = node.strip()
        if text:
            yield text
