"""Enumeration types for the auto-backlinker."""

from enum import StrEnum


class ChangeKind(StrEnum):
    """Document store change notifications."""

    CREATED = "created"
    DELETED = "deleted"
    RENAMED = "renamed"
    MODIFIED = "modified"


class ScriptClass(StrEnum):
    """How a title is matched against text."""

    LATIN = "latin"  # ASCII only, word-boundary matching
    SCRIPT_SENSITIVE = "script_sensitive"  # Hangul or other non-ASCII, suffix-aware


class RunKind(StrEnum):
    """What triggered a linking run."""

    MANUAL = "manual"  # One-off, current note
    ON_SAVE = "on_save"  # Auto mode, modify notification
    VAULT = "vault"  # Whole vault
    INCREMENTAL = "incremental"  # Notes changed since last run
