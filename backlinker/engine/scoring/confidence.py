"""Confidence scoring for link suggestions.

This module scores a title match using:
- A fixed base score
- An exact-match bonus (whole word, same text ignoring case)
- A context bonus proportional to how many of the title's words
  appear around the match
"""

import logging
import re

from .constants import (
    ASCII_WORD_CLASS,
    CONFIDENCE_BASE,
    CONFIDENCE_CONTEXT_BONUS,
    CONFIDENCE_EXACT_BONUS,
    CONTEXT_WINDOW,
)

logger = logging.getLogger(__name__)

_ASCII_WORD_RE = re.compile(ASCII_WORD_CLASS)


def title_words(title: str) -> list[str]:
    """Split a title into lowercase whitespace-delimited words.

    Args:
        title: The note title.

    Returns:
        List of lowercase words, empty strings removed.
    """
    return [w for w in title.lower().split() if w]


def is_whole_word(text: str, start: int, end: int) -> bool:
    """Check that ``text[start:end]`` is not glued to neighbouring ASCII word chars.

    Args:
        text: Full text being scanned.
        start: Match start offset.
        end: Match end offset (exclusive).

    Returns:
        True if the characters on both sides are absent or non-word.
    """
    if start > 0 and _ASCII_WORD_RE.match(text[start - 1]):
        return False
    if end < len(text) and _ASCII_WORD_RE.match(text[end]):
        return False
    return True


def contains_word(text: str, word: str) -> bool:
    """True when ``word`` occurs in ``text`` with no word character glued to either side."""
    return re.search(rf"(?<!\w){re.escape(word)}(?!\w)", text) is not None


def surrounding_context(
    text: str, start: int, end: int, window: int = CONTEXT_WINDOW
) -> tuple[str, str]:
    """Return the text before and after a match, ``window`` characters each."""
    return text[max(0, start - window) : start], text[end : end + window]


def calculate_confidence(
    title: str,
    matched: str,
    text: str,
    start: int,
    end: int,
    whole_word: bool | None = None,
    window: int = CONTEXT_WINDOW,
) -> float:
    """Calculate how confident we are that a match really refers to the note.

    Scoring factors:
    - Base score for any match that survived the over-linking filters
    - Exact bonus when ``matched`` equals ``title`` ignoring case and the
      match is a whole word (only differs from a plain hit under partial
      matching)
    - Context bonus scaled by the fraction of the title's words present as
      whole words in the window around the match (the match itself excluded)

    Args:
        title: Target note title (or synonym text that was searched).
        matched: Text actually matched, particle suffix excluded.
        text: Text the match was found in.
        start: Offset of the match in ``text``.
        end: End offset of ``matched`` in ``text``.
        whole_word: Precomputed whole-word flag, computed if omitted.
        window: Characters of context on each side.

    Returns:
        Confidence in [0.0, 1.0].
    """
    score = CONFIDENCE_BASE

    if whole_word is None:
        whole_word = is_whole_word(text, start, end)
    if matched.lower() == title.lower() and whole_word:
        score += CONFIDENCE_EXACT_BONUS

    words = title_words(title)
    if words:
        before, after = surrounding_context(text, start, end, window)
        context_lower = f"{before} {after}".lower()
        hits = sum(1 for w in words if contains_word(context_lower, w))
        score += CONFIDENCE_CONTEXT_BONUS * (hits / len(words))

    return min(1.0, max(0.0, score))
