"""Services that run the engine over a vault: batching and statistics."""

from .batch_runner import (
    DEFAULT_BATCH_SIZE,
    MAX_BATCH_SIZE,
    BatchRunner,
    InFlightGuard,
    chunks,
    clamp_batch_size,
    with_retry,
)
from .link_stats import MAX_HISTORY, LinkStatistics

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "MAX_BATCH_SIZE",
    "MAX_HISTORY",
    "BatchRunner",
    "InFlightGuard",
    "LinkStatistics",
    "chunks",
    "clamp_batch_size",
    "with_retry",
]
