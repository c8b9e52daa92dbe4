"""Batch orchestration for linking many notes.

Notes are processed in fixed-size batches: every note in a batch is marked
in flight, synthesized concurrently on the event loop, and released when it
finishes. Batch N completes (progress emitted) before batch N+1 starts, and
the loop yields between batches so the host stays responsive.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, TypeVar

from ..engine.core.document import DocumentRecord
from ..errors import TransientIOError
from ..models.linking import BatchProgress, BatchResult, SynthesisResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 50
MAX_BATCH_SIZE = 500

# I/O retry settings
MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 0.1

ProcessFunc = Callable[[DocumentRecord], Awaitable[SynthesisResult | None]]
ProgressFunc = Callable[[BatchProgress], Any]


def clamp_batch_size(size: int | None) -> int:
    if not size:
        return DEFAULT_BATCH_SIZE
    return max(1, min(int(size), MAX_BATCH_SIZE))


def chunks(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    path: str,
    action: str = "read",
    attempts: int = MAX_RETRIES,
    base_delay: float = RETRY_DELAY_SECONDS,
) -> T:
    """Run a store operation with exponential backoff.

    Retries ``OSError`` and ``TransientIOError``; a missing file is not
    transient and is raised immediately.

    Args:
        operation: Zero-argument coroutine factory.
        path: Document path, for logging and the final error.
        action: "read" or "write", for logging.
        attempts: Maximum attempts (at least 1).
        base_delay: Delay before the first retry, doubled each time.

    Raises:
        TransientIOError: When every attempt failed.
    """
    attempts = max(1, attempts)
    for attempt in range(attempts):
        try:
            return await operation()
        except FileNotFoundError:
            raise
        except (OSError, TransientIOError) as e:
            if attempt < attempts - 1:
                delay = base_delay * (2**attempt)  # Exponential backoff
                logger.warning(
                    f"{action.capitalize()} of '{path}' failed (attempt {attempt + 1}): {e}. "
                    f"Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
            else:
                logger.error(f"Failed to {action} '{path}' after {attempts} attempts: {e}")
                raise TransientIOError(path, f"{action} failed after {attempts} attempts") from e


class InFlightGuard:
    """Per-document mutual exclusion.

    The check-and-set in ``try_acquire`` has no suspension point, so on a
    single event loop it is atomic.
    """

    def __init__(self) -> None:
        self._keys: set[str] = set()

    def try_acquire(self, key: str) -> bool:
        if key in self._keys:
            return False
        self._keys.add(key)
        return True

    def release(self, key: str) -> None:
        self._keys.discard(key)

    @contextmanager
    def claim(self, key: str) -> Iterator[bool]:
        """Yield True if ``key`` was acquired; release it on exit."""
        acquired = self.try_acquire(key)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(key)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


class BatchRunner:
    """Runs a per-document coroutine over many notes in batches."""

    def __init__(
        self,
        process: ProcessFunc,
        guard: InFlightGuard | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        progress: ProgressFunc | None = None,
    ):
        self.process = process
        self.guard = guard if guard is not None else InFlightGuard()
        self.batch_size = clamp_batch_size(batch_size)
        self.progress = progress
        self._resume = asyncio.Event()
        self._resume.set()

    @property
    def paused(self) -> bool:
        return not self._resume.is_set()

    def pause(self) -> None:
        """Hold the run before the next batch. A running batch always completes."""
        if not self.paused:
            logger.info("Batch processing paused")
        self._resume.clear()

    def resume(self) -> None:
        if self.paused:
            logger.info("Batch processing resumed")
        self._resume.set()

    async def run(
        self, documents: Iterable[DocumentRecord], batch_size: int | None = None
    ) -> BatchResult:
        """Process ``documents`` batch by batch.

        Per-document failures are counted, never raised. Documents already
        in flight (e.g. an on-save pass) are skipped.

        Args:
            documents: Notes to process.
            batch_size: Override for this run (clamped to 1..500).

        Returns:
            BatchResult with processed/link/error counts.
        """
        docs = list(documents)
        size = clamp_batch_size(batch_size or self.batch_size)
        batch_count = (len(docs) + size - 1) // size
        result = BatchResult()

        logger.info(f"Batch run started: {len(docs)} documents in {batch_count} batches of {size}")

        for index, batch in enumerate(chunks(docs, size), start=1):
            await self._resume.wait()

            claimed: list[DocumentRecord] = []
            for doc in batch:
                if self.guard.try_acquire(doc.path):
                    claimed.append(doc)
                else:
                    result.skipped_count += 1
                    logger.debug(f"Skipping '{doc.path}': already in flight")

            outcomes = await asyncio.gather(*(self._run_one(doc) for doc in claimed))

            for doc, outcome in zip(claimed, outcomes):
                result.processed_count += 1
                if isinstance(outcome, BaseException):
                    result.error_count += 1
                    result.errors[doc.path] = str(outcome)
                elif outcome is not None and outcome.changed:
                    result.links_created += outcome.link_count
                    result.changed_count += 1

            result.batch_count += 1
            await self._emit(
                BatchProgress(
                    batch_index=index,
                    batch_count=batch_count,
                    done=result.processed_count + result.skipped_count,
                    total=len(docs),
                    links_created=result.links_created,
                    errors=result.error_count,
                )
            )
            await asyncio.sleep(0)

        logger.info(
            f"Batch run finished: {result.processed_count} processed, "
            f"{result.links_created} links, {result.error_count} errors, "
            f"{result.skipped_count} skipped"
        )
        return result

    async def _run_one(self, doc: DocumentRecord) -> SynthesisResult | None | Exception:
        try:
            return await self.process(doc)
        except Exception as e:
            logger.error(f"Linking failed for '{doc.path}': {e}")
            return e
        finally:
            self.guard.release(doc.path)

    async def _emit(self, progress: BatchProgress) -> None:
        if self.progress is None:
            return
        outcome = self.progress(progress)
        if inspect.isawaitable(outcome):
            await outcome
