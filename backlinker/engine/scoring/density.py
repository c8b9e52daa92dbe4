"""Over-linking filters.

Two checks run on every match before it is scored:
- Paragraph density: too many links already in the paragraph
- Proximity: the match sits right next to a link the author wrote
"""

import re
from collections.abc import Iterable

from .constants import PARAGRAPH_BREAK_PATTERN, PROXIMITY_MARGIN

_PARAGRAPH_BREAK_RE = re.compile(PARAGRAPH_BREAK_PATTERN)


def paragraph_bounds(text: str, offset: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the blank-line delimited paragraph holding ``offset``."""
    start = 0
    for brk in _PARAGRAPH_BREAK_RE.finditer(text):
        if brk.end() <= offset:
            start = brk.end()
        else:
            return start, brk.start()
    return start, len(text)


def count_links_in_paragraph(text: str, offset: int, link_pattern: re.Pattern[str]) -> int:
    """Count links in the paragraph that contains ``offset``.

    Args:
        text: Text being linked (masked form).
        offset: Position of the candidate match.
        link_pattern: Pattern matching one link (or one link placeholder).

    Returns:
        Number of link occurrences in that paragraph.
    """
    start, end = paragraph_bounds(text, offset)
    return sum(1 for _ in link_pattern.finditer(text, start, end))


def exceeds_paragraph_cap(
    text: str, offset: int, link_pattern: re.Pattern[str], max_links: int
) -> bool:
    """True when the paragraph already holds ``max_links`` links or more."""
    return count_links_in_paragraph(text, offset, link_pattern) >= max_links


def is_near_existing_link(
    offset: int,
    link_offsets: Iterable[int],
    title_length: int,
    margin: int = PROXIMITY_MARGIN,
) -> bool:
    """True when ``offset`` is within ``title_length + margin`` chars of a link."""
    reach = title_length + margin
    return any(abs(offset - pos) < reach for pos in link_offsets)
