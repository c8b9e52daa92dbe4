"""Link synthesis and batch run models."""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ChangeKind

# ============ SYNTHESIS MODELS ============


class LinkSuggestion(BaseModel):
    """One candidate rewrite found while synthesizing a document."""

    original: str = Field(..., description="Matched text, suffix excluded")
    target: str = Field(..., description="Title the link points to")
    position: int = Field(..., ge=0, description="Offset of the match in the original text")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Match quality score")
    context: str = Field(default="", description="Text surrounding the match")
    approved: bool = Field(default=False, description="Whether the rewrite is applied")

    @property
    def key(self) -> tuple[str, int]:
        """Stable identity used to carry approvals into a second pass."""
        return (self.target, self.position)


class SynthesisResult(BaseModel):
    """Result of linking one document's text."""

    content: str = Field(..., description="Rewritten text (equal to input when unchanged)")
    changed: bool = Field(default=False, description="True if at least one link was created")
    link_count: int = Field(default=0, ge=0, description="Links created in this pass")
    suggestions: list[LinkSuggestion] = Field(
        default_factory=list, description="All scored matches, approved or not"
    )
    targets: list[str] = Field(default_factory=list, description="Distinct titles linked")


# ============ BATCH MODELS ============


class BatchProgress(BaseModel):
    """Progress notification emitted after each batch."""

    batch_index: int = Field(..., ge=1, description="1-based index of the finished batch")
    batch_count: int = Field(..., ge=0, description="Total batches in this run")
    done: int = Field(..., ge=0, description="Documents handled so far")
    total: int = Field(..., ge=0, description="Documents in this run")
    links_created: int = Field(default=0, ge=0, description="Links created so far")
    errors: int = Field(default=0, ge=0, description="Errors so far")


class BatchResult(BaseModel):
    """Summary of a batch run."""

    processed_count: int = Field(default=0, ge=0, description="Documents synthesized or failed")
    links_created: int = Field(default=0, ge=0, description="Links created across the run")
    error_count: int = Field(default=0, ge=0, description="Documents that failed")
    skipped_count: int = Field(default=0, ge=0, description="Documents already in flight")
    changed_count: int = Field(default=0, ge=0, description="Documents written back")
    batch_count: int = Field(default=0, ge=0, description="Batches executed")
    errors: dict[str, str] = Field(default_factory=dict, description="Error message per path")


# ============ STORE NOTIFICATIONS ============


class ChangeEvent(BaseModel):
    """A change notification from the document store."""

    kind: ChangeKind = Field(..., description="What happened")
    path: str = Field(..., description="Document path after the change")
    old_path: str | None = Field(default=None, description="Previous path for renames")
    at: datetime | None = Field(default=None, description="When the change happened")
