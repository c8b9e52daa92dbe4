"""Scoring and filtering for link synthesis.

This package decides whether a title match becomes a link:
- Confidence scoring (base + exact-match bonus + context bonus)
- Paragraph density cap
- Proximity to links the author already wrote

Usage:
    from backlinker.engine.scoring import (
        calculate_confidence,
        exceeds_paragraph_cap,
        is_near_existing_link,
    )
"""

from .confidence import (
    calculate_confidence,
    contains_word,
    is_whole_word,
    surrounding_context,
    title_words,
)
from .constants import (
    CONFIDENCE_BASE,
    CONFIDENCE_CONTEXT_BONUS,
    CONFIDENCE_EXACT_BONUS,
    CONTEXT_WINDOW,
    PARTICLES,
    PARTICLES_LONGEST_FIRST,
    PROXIMITY_MARGIN,
)
from .density import (
    count_links_in_paragraph,
    exceeds_paragraph_cap,
    is_near_existing_link,
    paragraph_bounds,
)

__all__ = [
    # Constants
    "CONFIDENCE_BASE",
    "CONFIDENCE_CONTEXT_BONUS",
    "CONFIDENCE_EXACT_BONUS",
    "CONTEXT_WINDOW",
    "PARTICLES",
    "PARTICLES_LONGEST_FIRST",
    "PROXIMITY_MARGIN",
    # Confidence
    "calculate_confidence",
    "contains_word",
    "is_whole_word",
    "surrounding_context",
    "title_words",
    # Density / proximity
    "count_links_in_paragraph",
    "exceeds_paragraph_cap",
    "is_near_existing_link",
    "paragraph_bounds",
]
