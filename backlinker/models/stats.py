"""Link statistics models."""

from datetime import datetime

from pydantic import BaseModel, Field


class LinkEvent(BaseModel):
    """One link-creation event in the history."""

    timestamp: datetime = Field(..., description="When the links were written")
    note: str = Field(..., description="Document path")
    links_added: int = Field(..., ge=0, description="Links created in the document")
    link_targets: list[str] = Field(default_factory=list, description="Titles linked")


class SessionStats(BaseModel):
    """Counters for the current session."""

    notes_processed: int = Field(default=0, ge=0)
    links_created: int = Field(default=0, ge=0)
    time_spent: float = Field(default=0.0, ge=0.0, description="Seconds spent in runs")
    average_links_per_note: float = Field(default=0.0, ge=0.0)


class StatsSnapshot(BaseModel):
    """Read-only copy of the cumulative statistics."""

    total_links_created: int = Field(default=0, ge=0)
    links_per_note: dict[str, int] = Field(default_factory=dict)
    most_linked_notes: list[str] = Field(default_factory=list)
    history: list[LinkEvent] = Field(default_factory=list)
    session: SessionStats = Field(default_factory=SessionStats)
