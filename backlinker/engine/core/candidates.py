"""Candidate selection for one document.

Derives the ordered, non-redundant list of strings to search for in a
note: its own title and low-value titles removed, synonyms expanded,
longest first, and any title contained in an already-kept longer one
dropped.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ...models.options import SynonymGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A string to search for and the note title it links to.

    Attributes:
        text: Literal text matched in the document
        target: Index title written into the link
    """

    text: str
    target: str

    @property
    def is_alias(self) -> bool:
        return self.text != self.target


def is_linkable_title(title: str, self_title: str | None = None) -> bool:
    """Check whether a title is worth linking at all.

    Args:
        title: Candidate title.
        self_title: Title of the document being processed (never self-link).

    Returns:
        False for blank titles, the document's own title and one-character
        titles; titles containing a space always qualify since they read as
        phrases.
    """
    t = title.strip()
    if not t:
        return False
    if self_title is not None and t == self_title.strip():
        return False
    if " " in t:
        return True
    return len(t) >= 2


def expand_synonyms(
    titles: Iterable[str],
    groups: Sequence[SynonymGroup],
) -> list[Candidate]:
    """Add synonym members for every group that touches a candidate title.

    A group is active when its primary or one of its variants is among
    ``titles`` (compared per the group's case sensitivity). Every member of
    an active group then links to the primary if the primary is a title,
    otherwise to the first member that is.

    Args:
        titles: Eligible titles for this document.
        groups: User-declared synonym groups.

    Returns:
        Candidates contributed by synonym groups (titles themselves excluded).
    """
    title_list = list(titles)
    exact = set(title_list)
    folded: dict[str, str] = {}
    for t in title_list:
        folded.setdefault(t.casefold(), t)

    def _lookup(member: str, case_sensitive: bool) -> str | None:
        if case_sensitive:
            return member if member in exact else None
        return folded.get(member.casefold())

    expanded: list[Candidate] = []
    for group in groups:
        members = group.members
        hits = [_lookup(m, group.case_sensitive) for m in members]
        present = [h for h in hits if h is not None]
        if not present:
            continue
        # Primary wins when it is an indexed title
        target = hits[0] if hits[0] is not None else present[0]
        for member in members:
            if member in exact:
                continue
            expanded.append(Candidate(text=member, target=target))
        logger.debug(f"Synonym group '{group.primary}' active, linking to '{target}'")

    return expanded


def select_candidates(
    all_titles: Iterable[str],
    self_title: str,
    synonyms: Sequence[SynonymGroup] | None = None,
) -> list[Candidate]:
    """Build the candidate list for one document.

    Steps, in order:
    1. Drop the document's own title and low-value titles
    2. Expand synonym groups (when ``synonyms`` is given)
    3. Sort longest first (ties alphabetical, for determinism)
    4. Drop every candidate contained in a previously kept one

    Step 4 is what keeps a shorter title from re-linking inside a longer
    link, so it must run before every synthesis pass.

    Args:
        all_titles: Current title index.
        self_title: Title of the document being processed.
        synonyms: Synonym groups, or None when synonym expansion is off.

    Returns:
        Longest-first, non-redundant candidates.
    """
    eligible = [t for t in all_titles if is_linkable_title(t, self_title)]
    pool = [Candidate(text=t, target=t) for t in eligible]

    if synonyms:
        for candidate in expand_synonyms(eligible, synonyms):
            if candidate.target == self_title:
                continue
            if not is_linkable_title(candidate.text, self_title):
                continue
            pool.append(candidate)

    pool.sort(key=lambda c: (-len(c.text), c.text))

    kept: list[Candidate] = []
    for candidate in pool:
        if any(candidate.text in k.text for k in kept):
            continue
        kept.append(candidate)

    return kept
