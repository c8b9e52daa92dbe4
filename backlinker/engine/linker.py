"""Auto-link engine.

The facade the host talks to. It owns the title index, the pattern cache,
the statistics and the in-flight set, and wires the store to the
synthesizer for the four kinds of run:
- MANUAL: the current note
- ON_SAVE: a modify notification while auto mode is on
- VAULT: every indexed note
- INCREMENTAL: notes modified since the last bulk run
"""

import logging
import time
from collections.abc import Awaitable
from datetime import UTC, datetime
from typing import Protocol, TypeVar

from ..config import Settings
from ..models.enums import ChangeKind, RunKind
from ..models.linking import BatchResult, ChangeEvent, LinkSuggestion, SynthesisResult
from ..models.options import ExclusionRules
from ..models.stats import StatsSnapshot
from ..services.batch_runner import (
    BatchRunner,
    InFlightGuard,
    ProgressFunc,
    clamp_batch_size,
    with_retry,
)
from ..services.link_stats import LinkStatistics
from ..store import DocumentStore
from .core.candidates import Candidate, select_candidates
from .core.document import DocumentRecord, TitleIndex, is_excluded
from .core.patterns import PatternCache
from .synthesizer import LinkSynthesizer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Reviewer(Protocol):
    """Review surface: returns the suggestions the user approved."""

    async def review(
        self, document: DocumentRecord, suggestions: list[LinkSuggestion]
    ) -> list[LinkSuggestion]: ...


class AutoLinkEngine:
    """Links note titles across a vault.

    Example:
        engine = AutoLinkEngine(FileSystemStore("~/vault"), Settings())
        await engine.rebuild_index()
        result = await engine.process_vault()
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: Settings | None = None,
        reviewer: Reviewer | None = None,
        progress: ProgressFunc | None = None,
    ):
        self.store = store
        self.settings = settings if settings is not None else Settings()
        self.reviewer = reviewer

        self.index = TitleIndex()
        self.cache = PatternCache()
        self.synthesizer = LinkSynthesizer(self.cache)
        self.statistics = LinkStatistics()
        self.guard = InFlightGuard()
        self.runner = BatchRunner(
            self._link_document,
            guard=self.guard,
            batch_size=self.settings.batch_size,
            progress=progress,
        )

        self.options = self.settings.link_options()
        self.rules = self.settings.exclusion_rules()

    # ============ SETTINGS ============

    async def apply_settings(self, settings: Settings) -> None:
        """Swap in new settings.

        The whole pattern cache is dropped when matching options change and
        the index is rebuilt when the exclusion rules change.
        """
        options = settings.link_options()
        rules = settings.exclusion_rules()

        if options.pattern != self.options.pattern:
            self.cache.invalidate()

        rules_changed = rules != self.rules
        if settings.last_run_at is None:
            settings = settings.model_copy(update={"last_run_at": self.last_run_at})
        self.settings = settings
        self.options = options
        self.rules = rules
        self.runner.batch_size = clamp_batch_size(settings.batch_size)

        if rules_changed:
            await self.rebuild_index()

    def toggle_auto_mode(self) -> bool:
        """Flip linking on save. Returns the new state."""
        enabled = not self.settings.auto_link_on_save
        self.settings = self.settings.model_copy(update={"auto_link_on_save": enabled})
        logger.info(f"Auto-link on save {'enabled' if enabled else 'disabled'}")
        return enabled

    @property
    def auto_mode(self) -> bool:
        return self.settings.auto_link_on_save

    @property
    def last_run_at(self) -> datetime | None:
        """End of the last bulk run, kept in ``settings`` for the host to persist."""
        return self.settings.last_run_at

    def _mark_run(self) -> None:
        self.settings = self.settings.model_copy(update={"last_run_at": datetime.now(UTC)})

    # ============ INDEX ============

    async def rebuild_index(self) -> frozenset[str]:
        documents = await self.store.list_documents()
        return self.index.rebuild((d for d in documents if d.is_markdown), self.rules)

    def candidates_for(self, document: DocumentRecord) -> list[Candidate]:
        synonyms = self.options.synonyms if self.options.enable_synonyms else None
        return select_candidates(self.index.titles, document.title, synonyms)

    # ============ SINGLE DOCUMENT ============

    async def synthesize(self, document: DocumentRecord | str) -> SynthesisResult | None:
        """Link one document and write it back if anything changed.

        Returns None when the document is excluded or already being linked.
        """
        record = await self._record(document)
        with self.guard.claim(record.path) as acquired:
            if not acquired:
                logger.info(f"'{record.path}' is already being linked, skipping")
                return None
            return await self._link_document(record)

    async def preview(self, document: DocumentRecord | str) -> SynthesisResult | None:
        """Suggestions for one document, nothing written."""
        record = await self._record(document)
        if is_excluded(record, self.rules):
            return None
        text = await self._read(record)
        return self.synthesizer.synthesize(
            text, self.candidates_for(record), record.title, self.options
        )

    async def process_document(self, path: str) -> SynthesisResult | None:
        """Link the current note (manual run).

        Skipped (None) when the note is already being linked.
        """
        record = await self._record(path)
        with self.guard.claim(record.path) as acquired:
            if not acquired:
                logger.info(f"'{record.path}' is already being linked, skipping")
                return None
            return await self._run_timed(RunKind.MANUAL, self._link_document(record))

    # ============ BULK RUNS ============

    async def run_batch(
        self, documents: list[DocumentRecord], batch_size: int | None = None
    ) -> BatchResult:
        started = time.monotonic()
        try:
            return await self.runner.run(documents, batch_size)
        finally:
            self.statistics.record_session_time(time.monotonic() - started)

    async def process_vault(self) -> BatchResult:
        """Link every markdown note that is not excluded."""
        documents = await self._eligible()
        logger.info(f"{RunKind.VAULT} run over {len(documents)} documents")
        result = await self.run_batch(documents)
        self._mark_run()
        return result

    async def process_incremental(self, since: datetime | None = None) -> BatchResult:
        """Link notes modified after ``since`` (default: the last bulk run)."""
        since = since or self.last_run_at
        documents = await self._eligible()
        if since is not None:
            cutoff = since.timestamp()
            documents = [d for d in documents if d.mtime > cutoff]
        logger.info(f"{RunKind.INCREMENTAL} run over {len(documents)} documents")
        result = await self.run_batch(documents)
        self._mark_run()
        return result

    def pause(self) -> None:
        self.runner.pause()

    def resume(self) -> None:
        self.runner.resume()

    @property
    def paused(self) -> bool:
        return self.runner.paused

    # ============ STORE NOTIFICATIONS ============

    async def handle_change(self, event: ChangeEvent) -> SynthesisResult | None:
        """React to a store change notification.

        Created/deleted notes rebuild the index (markdown, not excluded);
        renames always rebuild it. A modified note is linked when auto mode
        is on, unless it is already in flight.
        """
        if event.kind is ChangeKind.RENAMED:
            await self.rebuild_index()
            return None

        if event.kind in (ChangeKind.CREATED, ChangeKind.DELETED):
            record = await self.store.get(event.path)
            if record is None:
                # Deleted: only the path rules can be checked
                record = DocumentRecord.from_path(event.path)
                excluded = is_excluded(record, ExclusionRules(folders=self.rules.folders))
            else:
                excluded = is_excluded(record, self.rules)
            if record.is_markdown and not excluded:
                await self.rebuild_index()
            return None

        if not self.settings.auto_link_on_save:
            return None

        record = await self._record(event.path)
        if not record.is_markdown:
            return None
        with self.guard.claim(record.path) as acquired:
            if not acquired:
                logger.debug(f"On-save link skipped for '{record.path}': already in flight")
                return None
            try:
                return await self._run_timed(RunKind.ON_SAVE, self._link_document(record))
            except Exception as e:
                # Never fail the save notification
                logger.error(f"On-save linking failed for '{record.path}': {e}")
                return None

    # ============ STATISTICS ============

    @property
    def stats(self) -> StatsSnapshot:
        return self.statistics.snapshot()

    # ============ INTERNALS ============

    async def _link_document(self, record: DocumentRecord) -> SynthesisResult | None:
        if is_excluded(record, self.rules):
            logger.debug(f"Skipping excluded document '{record.path}'")
            return None

        candidates = self.candidates_for(record)
        text = await self._read(record)
        result = self.synthesizer.synthesize(text, candidates, record.title, self.options)

        if self.reviewer is not None and self.options.review_before_apply and result.suggestions:
            approved = await self.reviewer.review(record, result.suggestions)
            keys = {s.key for s in approved}
            result = self.synthesizer.synthesize(
                text,
                candidates,
                record.title,
                self.options,
                approve=lambda s: s.key in keys,
            )

        if result.changed:
            await with_retry(
                lambda: self.store.write(record.path, result.content),
                record.path,
                action="write",
                attempts=self.settings.io_retry_attempts,
                base_delay=self.settings.io_retry_base_delay,
            )
            logger.info(f"Linked {result.link_count} mention(s) in '{record.path}'")

        if self.settings.enable_stats:
            self.statistics.record(record.path, result.link_count, result.targets)
        return result

    async def _read(self, record: DocumentRecord) -> str:
        return await with_retry(
            lambda: self.store.read(record.path),
            record.path,
            action="read",
            attempts=self.settings.io_retry_attempts,
            base_delay=self.settings.io_retry_base_delay,
        )

    async def _record(self, document: DocumentRecord | str) -> DocumentRecord:
        if isinstance(document, DocumentRecord):
            return document
        record = await self.store.get(document)
        return record if record is not None else DocumentRecord.from_path(document)

    async def _eligible(self) -> list[DocumentRecord]:
        documents = await self.store.list_documents()
        return [d for d in documents if d.is_markdown and not is_excluded(d, self.rules)]

    async def _run_timed(self, kind: RunKind, work: Awaitable[T]) -> T:
        started = time.monotonic()
        try:
            return await work
        finally:
            elapsed = time.monotonic() - started
            self.statistics.record_session_time(elapsed)
            logger.debug(f"{kind} run finished in {elapsed:.3f}s")
