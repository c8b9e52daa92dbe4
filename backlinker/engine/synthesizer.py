"""Link synthesis for a single document.

The pass is a two-phase transform:
1. Mask every existing [[link]] so it can never be re-matched or nested
2. For each candidate (longest first), find matches, drop the ones that
   would over-link, score the rest and rewrite the approved ones
3. Restore every placeholder, pre-existing and new

Links created during the pass are protected the same way as pre-existing
ones, so a later (shorter) candidate cannot match inside them.
"""

import logging
from collections.abc import Callable, Sequence

from ..errors import PatternCompilationError
from ..models.linking import LinkSuggestion, SynthesisResult
from ..models.options import LinkOptions
from .core.candidates import Candidate
from .core.masking import PLACEHOLDER_RE, MaskedText, mask, unmask_fragment
from .core.patterns import CompiledPattern, PatternCache
from .scoring.confidence import calculate_confidence, is_whole_word
from .scoring.constants import CONTEXT_WINDOW
from .scoring.density import exceeds_paragraph_cap, is_near_existing_link

logger = logging.getLogger(__name__)

ApproveFunc = Callable[[LinkSuggestion], bool]


def render_link(target: str, matched: str) -> str:
    """Render a wikilink, aliased when the matched text differs from the target."""
    if matched == target:
        return f"[[{target}]]"
    return f"[[{target}|{matched}]]"


class LinkSynthesizer:
    """Rewrites title mentions in a document into wikilinks.

    The pattern cache is shared by every pass of the owning engine and
    cleared only through ``PatternCache.invalidate``.
    """

    def __init__(self, cache: PatternCache | None = None):
        self.cache = cache if cache is not None else PatternCache()

    def synthesize(
        self,
        text: str,
        candidates: Sequence[Candidate | str],
        self_title: str,
        options: LinkOptions,
        approve: ApproveFunc | None = None,
    ) -> SynthesisResult:
        """Link every eligible title mention in ``text``.

        Args:
            text: Raw document text.
            candidates: Output of ``select_candidates`` (plain strings are
                treated as titles linking to themselves).
            self_title: Title of the document (never linked).
            options: Active link options.
            approve: Optional decision hook; overrides the default approval
                policy, used to replay reviewed suggestions.

        Returns:
            SynthesisResult; ``content`` equals ``text`` when nothing changed.
        """
        masked = mask(text)
        suggestions: list[LinkSuggestion] = []
        targets: list[str] = []
        link_count = 0

        for item in candidates:
            candidate = item if isinstance(item, Candidate) else Candidate(text=item, target=item)
            if candidate.target == self_title:
                continue
            try:
                pattern = self.cache.get(candidate.text, options.pattern)
            except PatternCompilationError as e:
                logger.warning(f"Skipping title for '{self_title}': {e}")
                continue

            added = self._apply_candidate(
                masked, pattern, candidate, options, approve, suggestions
            )
            if added:
                link_count += added
                if candidate.target not in targets:
                    targets.append(candidate.target)

        if link_count == 0:
            return SynthesisResult(content=text, suggestions=suggestions)

        logger.debug(f"Linked {link_count} mention(s) in '{self_title}'")
        return SynthesisResult(
            content=masked.restore(),
            changed=True,
            link_count=link_count,
            suggestions=suggestions,
            targets=targets,
        )

    def _apply_candidate(
        self,
        masked: MaskedText,
        pattern: CompiledPattern,
        candidate: Candidate,
        options: LinkOptions,
        approve: ApproveFunc | None,
        suggestions: list[LinkSuggestion],
    ) -> int:
        """Scan ``masked`` for one candidate, rewriting approved matches in place."""
        added = 0
        pos = 0
        link_offsets = masked.preexisting_offsets() if options.respect_existing_links else []

        while True:
            m = pattern.search(masked.text, pos)
            if m is None:
                break

            start, title_end = m.span("title")
            matched = m.group("title")
            suffix = m.groupdict().get("suffix") or ""

            if options.avoid_overlinking and exceeds_paragraph_cap(
                masked.text, start, PLACEHOLDER_RE, options.max_links_per_paragraph
            ):
                pos = m.end()
                continue

            if options.respect_existing_links and is_near_existing_link(
                start, link_offsets, len(candidate.text)
            ):
                pos = m.end()
                continue

            suggestion = LinkSuggestion(
                original=matched,
                target=candidate.target,
                position=masked.original_offset(start),
                confidence=calculate_confidence(
                    candidate.text,
                    matched,
                    masked.text,
                    start,
                    title_end,
                    whole_word=is_whole_word(masked.text, start, m.end()),
                ),
                context=self._context(masked, start, title_end),
            )
            suggestion.approved = self._decide(suggestion, options, approve)
            suggestions.append(suggestion)

            if not suggestion.approved:
                pos = m.end()
                continue

            token = masked.protect(render_link(candidate.target, matched), source=matched)
            masked.text = masked.text[:start] + token + suffix + masked.text[m.end() :]
            pos = start + len(token) + len(suffix)
            added += 1
            if link_offsets:
                link_offsets = masked.preexisting_offsets()

        return added

    @staticmethod
    def _decide(
        suggestion: LinkSuggestion, options: LinkOptions, approve: ApproveFunc | None
    ) -> bool:
        if approve is not None:
            return approve(suggestion)
        if options.review_before_apply:
            return suggestion.confidence > options.confidence_threshold
        return True

    @staticmethod
    def _context(masked: MaskedText, start: int, end: int) -> str:
        fragment = masked.text[max(0, start - CONTEXT_WINDOW) : end + CONTEXT_WINDOW]
        return " ".join(unmask_fragment(fragment, masked.slots).split())
