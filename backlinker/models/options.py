"""Immutable option records derived from settings.

These are rebuilt wholesale on every settings change and handed to the
components that need them; nothing mutates them in place.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SynonymGroup(BaseModel):
    """A user-declared group of interchangeable names for one note."""

    model_config = ConfigDict(frozen=True)

    primary: str = Field(..., min_length=1, description="Primary word (usually a note title)")
    variants: tuple[str, ...] = Field(default=(), description="Alternative spellings")
    case_sensitive: bool = Field(default=False, description="Compare members case-sensitively")

    @field_validator("primary")
    @classmethod
    def _strip_primary(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("primary must not be blank")
        return value

    @field_validator("variants", mode="before")
    @classmethod
    def _split_variants(cls, value: Any) -> Any:
        # The synonym editor stores variants as a comma-separated string
        if isinstance(value, str):
            return tuple(v.strip() for v in value.split(",") if v.strip())
        return value

    @property
    def members(self) -> tuple[str, ...]:
        """Primary followed by the variants, blanks removed."""
        return tuple(m for m in (self.primary, *self.variants) if m.strip())


class PatternOptions(BaseModel):
    """Options that change how a title compiles. Part of the pattern cache key."""

    model_config = ConfigDict(frozen=True)

    ignore_case: bool = False
    partial_match: bool = False
    allow_particles: bool = True


class ExclusionRules(BaseModel):
    """Which documents never contribute a title and are never rewritten."""

    model_config = ConfigDict(frozen=True)

    folders: tuple[str, ...] = Field(default=(), description="Root folders, forward slashes")
    tags: frozenset[str] = Field(default=frozenset(), description="Normalized tag names")
    min_size: int = Field(default=0, ge=0, description="Minimum size in bytes (0 = no limit)")
    max_size: int = Field(default=0, ge=0, description="Maximum size in bytes (0 = no limit)")
    max_age_days: int = Field(default=0, ge=0, description="Maximum age in days (0 = no limit)")


class LinkOptions(BaseModel):
    """Everything the synthesizer needs to know about the current settings."""

    model_config = ConfigDict(frozen=True)

    pattern: PatternOptions = Field(default_factory=PatternOptions)
    enable_synonyms: bool = False
    synonyms: tuple[SynonymGroup, ...] = ()
    avoid_overlinking: bool = True
    max_links_per_paragraph: int = Field(default=3, ge=1)
    respect_existing_links: bool = True
    review_before_apply: bool = False
    confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
