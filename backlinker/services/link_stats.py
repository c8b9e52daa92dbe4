"""Link statistics service.

Tracks cumulative link counts, a bounded event history and per-session
counters. Persisting the snapshot is left to the host.
"""

import logging
from collections import deque
from datetime import UTC, datetime

from ..models.stats import LinkEvent, SessionStats, StatsSnapshot

logger = logging.getLogger(__name__)

# Oldest events are dropped once the history grows past this
MAX_HISTORY = 1000


class LinkStatistics:
    """Cumulative link-creation statistics."""

    def __init__(self, max_history: int = MAX_HISTORY):
        self.total_links_created = 0
        self.links_per_note: dict[str, int] = {}
        self.history: deque[LinkEvent] = deque(maxlen=max_history)
        self.session = SessionStats()

    def record(self, note: str, links_added: int, targets: list[str] | None = None) -> None:
        """Record one processed note.

        Notes that received no links still count towards the session's
        processed notes but add nothing to the history.
        """
        self.session.notes_processed += 1
        if links_added > 0:
            self.total_links_created += links_added
            self.links_per_note[note] = self.links_per_note.get(note, 0) + links_added
            self.session.links_created += links_added
            self.history.append(
                LinkEvent(
                    timestamp=datetime.now(UTC),
                    note=note,
                    links_added=links_added,
                    link_targets=list(targets or []),
                )
            )
        self.session.average_links_per_note = (
            self.session.links_created / self.session.notes_processed
        )

    def record_session_time(self, seconds: float) -> None:
        self.session.time_spent += max(0.0, seconds)

    def reset_session(self) -> None:
        self.session = SessionStats()

    def most_linked_notes(self, limit: int = 10) -> list[str]:
        """Notes with the most links created, highest first."""
        ranked = sorted(self.links_per_note.items(), key=lambda kv: (-kv[1], kv[0]))
        return [note for note, _ in ranked[:limit]]

    def snapshot(self) -> StatsSnapshot:
        return StatsSnapshot(
            total_links_created=self.total_links_created,
            links_per_note=dict(self.links_per_note),
            most_linked_notes=self.most_linked_notes(),
            history=list(self.history),
            session=self.session.model_copy(),
        )

    def load(self, snapshot: StatsSnapshot) -> None:
        """Restore persisted statistics (the session starts fresh)."""
        self.total_links_created = snapshot.total_links_created
        self.links_per_note = dict(snapshot.links_per_note)
        self.history.clear()
        self.history.extend(snapshot.history)
        self.reset_session()
        logger.debug(f"Loaded link statistics: {self.total_links_created} links")
