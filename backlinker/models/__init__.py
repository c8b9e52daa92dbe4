"""Pydantic models for the auto-backlinker.

This module re-exports all models. Import from submodules directly for
cleaner imports:

    from backlinker.models.enums import ChangeKind
    from backlinker.models.linking import SynthesisResult
"""

# ============ ENUMS ============
from .enums import ChangeKind, RunKind, ScriptClass

# ============ SYNTHESIS / BATCH MODELS ============
from .linking import (
    BatchProgress,
    BatchResult,
    ChangeEvent,
    LinkSuggestion,
    SynthesisResult,
)

# ============ OPTION RECORDS ============
from .options import ExclusionRules, LinkOptions, PatternOptions, SynonymGroup

# ============ STATISTICS ============
from .stats import LinkEvent, SessionStats, StatsSnapshot

__all__ = [
    # Enums
    "ChangeKind",
    "RunKind",
    "ScriptClass",
    # Synthesis / batch
    "BatchProgress",
    "BatchResult",
    "ChangeEvent",
    "LinkSuggestion",
    "SynthesisResult",
    # Options
    "ExclusionRules",
    "LinkOptions",
    "PatternOptions",
    "SynonymGroup",
    # Statistics
    "LinkEvent",
    "SessionStats",
    "StatsSnapshot",
]
