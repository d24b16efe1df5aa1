"""Progress models - canonical estimator input and derived outputs."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from tasketa.models.enums import RefreshState


class ProgressInput(BaseModel):
    """Progress counters reduced from one task-status document.

    Built once per pasted document and re-evaluated against fresh time
    samples without re-parsing.
    """

    model_config = ConfigDict(frozen=True)

    total: int
    processed: int
    # math.inf when the document held no tasks
    start_time_in_millis: float
    running_time_in_nanos: int
    task_id: str = ""
    description: str = ""
    slices: tuple[Optional[dict[str, Any]], ...] = ()


class ProgressEstimate(BaseModel):
    """Linear-rate forecast for one time sample."""

    model_config = ConfigDict(frozen=True)

    estimated_processed: float
    progress: float
    rate: float  # documents per millisecond
    remaining_docs: float
    estimated_remaining_time_millis: float
    current_time: int

    @property
    def estimated_end_time_millis(self) -> float:
        return self.current_time + self.estimated_remaining_time_millis


class ProgressReport(BaseModel):
    """Human-readable rendering of an estimate."""

    model_config = ConfigDict(frozen=True)

    remaining_time: str
    end_time: str
    actual_progress: str
    estimated_progress: str
    display_progress: float
    display_label: str
    title: str
    finished: bool = False

    @property
    def text(self) -> str:
        return "\n".join(
            [self.remaining_time, self.end_time, self.actual_progress, self.estimated_progress]
        )


class RefreshUpdate(BaseModel):
    """What the display collaborator receives on every refresh tick."""

    state: RefreshState
    report: Optional[ProgressReport] = None
    message: Optional[str] = None
    display_progress: float = -1

    @property
    def text(self) -> str:
        """Text for the result region: the report, a notice, or the error message."""
        if self.report is None:
            return self.message or ""
        if self.message:
            return f"{self.report.text}\n{self.message}"
        return self.report.text
