"""Engine core module.

This module contains the building blocks of link synthesis:
- Document records and the title index
- Candidate selection (self/low-value filtering, synonyms, subsumption)
- Title pattern compilation and caching
- Masking of existing links
"""

from .candidates import Candidate, expand_synonyms, is_linkable_title, select_candidates
from .document import DocumentRecord, TitleIndex, is_excluded, normalize_tag
from .masking import LINK_RE, PLACEHOLDER_RE, MaskedText, Slot, mask, unmask, unmask_fragment
from .patterns import (
    CompiledPattern,
    PatternCache,
    build_pattern,
    classify_title,
    has_hangul,
    is_latin_only,
)

__all__ = [
    # Documents / index
    "DocumentRecord",
    "TitleIndex",
    "is_excluded",
    "normalize_tag",
    # Candidates
    "Candidate",
    "expand_synonyms",
    "is_linkable_title",
    "select_candidates",
    # Masking
    "LINK_RE",
    "PLACEHOLDER_RE",
    "MaskedText",
    "Slot",
    "mask",
    "unmask",
    "unmask_fragment",
    # Patterns
    "CompiledPattern",
    "PatternCache",
    "build_pattern",
    "classify_title",
    "has_hangul",
    "is_latin_only",
]
