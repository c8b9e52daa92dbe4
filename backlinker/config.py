"""Settings for the auto-backlinker.

Environment variables use the BACKLINKER_ prefix, e.g.
BACKLINKER_BATCH_SIZE=100 or BACKLINKER_EXCLUDE_FOLDERS="Templates;Daily Notes".

Malformed entries never fail startup: they are logged and dropped, and the
field falls back to its default.
"""

import logging
from datetime import datetime
from typing import Any

from pydantic import Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError
from .models.options import ExclusionRules, LinkOptions, PatternOptions, SynonymGroup

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_CONFIDENCE_THRESHOLD = 0.7

# field -> (lowest accepted value, fallback for unparseable input)
BOUNDED_INTS = {
    "max_links_per_paragraph": (1, 3),
    "min_file_size": (0, 0),
    "max_file_size": (0, 0),
    "max_age_days": (0, 0),
    "io_retry_attempts": (1, 3),
}
DEFAULT_RETRY_BASE_DELAY = 0.1


def parse_synonym_group(entry: Any) -> SynonymGroup:
    """Validate one synonym table entry.

    Raises:
        ConfigurationError: If the entry is not a usable group.
    """
    try:
        return SynonymGroup.model_validate(entry)
    except ValidationError as e:
        raise ConfigurationError(
            f"malformed synonym group {entry!r} ({e.error_count()} error(s))"
        ) from e


class Settings(BaseSettings):
    """Auto-backlinker settings.

    The persisted host configuration maps onto these fields one-to-one; a
    settings change is applied by building a new instance and handing it to
    ``AutoLinkEngine.apply_settings``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BACKLINKER_",
        extra="ignore",
    )

    # Matching
    allow_particles: bool = Field(default=True, description="Keep Korean particles outside links")
    ignore_case: bool = Field(default=False, description="Match titles case-insensitively")
    partial_match: bool = Field(default=False, description="Match titles inside longer words")
    enable_synonyms: bool = Field(default=False, description="Expand candidates with synonyms")
    synonyms: list[SynonymGroup] = Field(default_factory=list)

    # Over-linking control
    avoid_overlinking: bool = Field(default=True)
    max_links_per_paragraph: int = Field(default=3)
    respect_existing_links: bool = Field(default=True)

    # Review
    review_before_apply: bool = Field(default=False, description="Gate links on confidence")
    confidence_threshold: float = Field(default=DEFAULT_CONFIDENCE_THRESHOLD)

    # Exclusions
    exclude_folders: str = Field(default="", description='e.g. "Templates;Daily Notes"')
    exclude_tags: str = Field(default="", description='e.g. "private;draft"')
    min_file_size: int = Field(default=0)
    max_file_size: int = Field(default=0)
    max_age_days: int = Field(default=0)

    # Runs
    auto_link_on_save: bool = Field(default=False)
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE)
    io_retry_attempts: int = Field(default=3)
    io_retry_base_delay: float = Field(default=DEFAULT_RETRY_BASE_DELAY)
    enable_stats: bool = Field(default=True)
    last_run_at: datetime | None = Field(default=None, description="End of the last bulk run")

    log_level: str = Field(default="INFO")

    @field_validator("synonyms", mode="before")
    @classmethod
    def _drop_malformed_synonyms(cls, value: Any) -> list[Any]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            logger.warning(f"Ignoring synonym table of type {type(value).__name__}")
            return []
        groups: list[SynonymGroup] = []
        for entry in value:
            try:
                groups.append(parse_synonym_group(entry))
            except ConfigurationError as e:
                logger.warning(f"Ignoring entry: {e}")
        return groups

    @field_validator("batch_size", mode="before")
    @classmethod
    def _coerce_batch_size(cls, value: Any) -> int:
        try:
            size = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid batch size {value!r}, using {DEFAULT_BATCH_SIZE}")
            return DEFAULT_BATCH_SIZE
        return max(1, size)

    @field_validator(*BOUNDED_INTS, mode="before")
    @classmethod
    def _clamp_bounded_int(cls, value: Any, info: ValidationInfo) -> int:
        lowest, fallback = BOUNDED_INTS[info.field_name]
        try:
            number = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid {info.field_name} {value!r}, using {fallback}")
            return fallback
        if number < lowest:
            logger.warning(f"{info.field_name} {number} is below {lowest}, using {lowest}")
            return lowest
        return number

    @field_validator("io_retry_base_delay", mode="before")
    @classmethod
    def _clamp_retry_delay(cls, value: Any) -> float:
        try:
            delay = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid retry delay {value!r}, using {DEFAULT_RETRY_BASE_DELAY}")
            return DEFAULT_RETRY_BASE_DELAY
        return max(0.0, delay)

    @field_validator("confidence_threshold", mode="before")
    @classmethod
    def _clamp_threshold(cls, value: Any) -> float:
        try:
            threshold = float(value)
        except (TypeError, ValueError):
            logger.warning(
                f"Invalid confidence threshold {value!r}, using {DEFAULT_CONFIDENCE_THRESHOLD}"
            )
            return DEFAULT_CONFIDENCE_THRESHOLD
        return min(1.0, max(0.0, threshold))

    @property
    def excluded_roots(self) -> tuple[str, ...]:
        """Semicolon-separated folders, normalized to forward slashes."""
        roots = []
        for part in self.exclude_folders.split(";"):
            root = part.strip().replace("\\", "/").strip("/")
            if root:
                roots.append(root)
        return tuple(roots)

    @property
    def excluded_tags(self) -> frozenset[str]:
        """Tag names without '#', lowercased."""
        tags = set()
        for part in self.exclude_tags.replace(",", ";").split(";"):
            tag = part.strip().lstrip("#").lower()
            if tag:
                tags.add(tag)
        return frozenset(tags)

    def exclusion_rules(self) -> ExclusionRules:
        return ExclusionRules(
            folders=self.excluded_roots,
            tags=self.excluded_tags,
            min_size=self.min_file_size,
            max_size=self.max_file_size,
            max_age_days=self.max_age_days,
        )

    def pattern_options(self) -> PatternOptions:
        return PatternOptions(
            ignore_case=self.ignore_case,
            partial_match=self.partial_match,
            allow_particles=self.allow_particles,
        )

    def link_options(self) -> LinkOptions:
        return LinkOptions(
            pattern=self.pattern_options(),
            enable_synonyms=self.enable_synonyms,
            synonyms=tuple(self.synonyms),
            avoid_overlinking=self.avoid_overlinking,
            max_links_per_paragraph=self.max_links_per_paragraph,
            respect_existing_links=self.respect_existing_links,
            review_before_apply=self.review_before_apply,
            confidence_threshold=self.confidence_threshold,
        )


def configure_logging(level: str | int = "INFO") -> None:
    """Basic logging setup for hosts that do not configure logging themselves."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

