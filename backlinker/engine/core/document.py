"""Document records and the title index.

This module contains the core data structures for the set of notes that
can be linked to, and the exclusion rules that keep notes out of it.
"""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from ...models.options import ExclusionRules

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


@dataclass
class DocumentRecord:
    """A markdown note as enumerated by the document store.

    Attributes:
        path: Vault-relative path with forward slashes (document identity)
        title: Base name without the .md extension
        size: Size in bytes
        mtime: Last modification time (epoch seconds)
        tags: Normalized tags (lowercase, no leading '#')
    """

    path: str
    title: str
    size: int = 0
    mtime: float = 0.0
    tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_path(
        cls,
        path: str,
        size: int = 0,
        mtime: float = 0.0,
        tags: Iterable[str] = (),
    ) -> "DocumentRecord":
        """Build a record, deriving the title from the file name."""
        path = path.replace("\\", "/")
        name = path.rsplit("/", 1)[-1]
        title = name[:-3] if name.lower().endswith(".md") else name
        return cls(
            path=path,
            title=title,
            size=size,
            mtime=mtime,
            tags=frozenset(normalize_tag(t) for t in tags if normalize_tag(t)),
        )

    @property
    def is_markdown(self) -> bool:
        return self.path.lower().endswith(".md")


def normalize_tag(tag: str) -> str:
    """Lowercase a tag and drop the leading '#'."""
    return tag.strip().lstrip("#").lower()


def is_excluded(record: DocumentRecord, rules: ExclusionRules, now: float | None = None) -> bool:
    """Check a document against the exclusion rules.

    Args:
        record: Document to check.
        rules: Active exclusion rules.
        now: Reference time for the age rule (defaults to the current time).

    Returns:
        True if the document must not be indexed or rewritten.
    """
    if rules.folders:
        path = record.path.replace("\\", "/")
        if any(path == root or path.startswith(root + "/") for root in rules.folders):
            return True

    if rules.tags and record.tags & rules.tags:
        return True

    if rules.min_size and record.size < rules.min_size:
        return True
    if rules.max_size and record.size > rules.max_size:
        return True

    if rules.max_age_days:
        reference = time.time() if now is None else now
        if reference - record.mtime > rules.max_age_days * SECONDS_PER_DAY:
            return True

    return False


@dataclass
class TitleIndex:
    """Index of linkable note titles.

    Rebuilt wholesale from the corpus whenever notes are created, deleted
    or renamed, or the exclusion rules change. It is a set of titles: two
    notes sharing a base name contribute one entry.

    Attributes:
        titles: Current linkable titles
        document_count: Documents seen by the last rebuild
        excluded_count: Documents rejected by the exclusion rules
    """

    titles: frozenset[str] = field(default_factory=frozenset)
    document_count: int = 0
    excluded_count: int = 0

    def rebuild(
        self,
        corpus: Iterable[DocumentRecord],
        rules: ExclusionRules,
        now: float | None = None,
    ) -> frozenset[str]:
        """Replace the index with the titles of all non-excluded documents.

        Never fails; an empty corpus yields an empty index.
        """
        titles: set[str] = set()
        seen = 0
        excluded = 0
        for record in corpus:
            seen += 1
            if is_excluded(record, rules, now):
                excluded += 1
                continue
            titles.add(record.title)

        self.titles = frozenset(titles)
        self.document_count = seen
        self.excluded_count = excluded
        logger.info(
            f"Title index rebuilt: {len(self.titles)} titles from {seen} documents "
            f"({excluded} excluded)"
        )
        return self.titles

    def __contains__(self, title: object) -> bool:
        return title in self.titles

    def __len__(self) -> int:
        return len(self.titles)
