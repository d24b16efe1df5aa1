"""Task-status document models - the shapes a task-status API returns."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class RawTaskStatus(BaseModel):
    """Counters reported for one task (or one slice of it)."""

    total: int = Field(..., ge=0)
    updated: int = Field(default=0, ge=0)
    created: int = Field(default=0, ge=0)
    deleted: int = Field(default=0, ge=0)
    version_conflicts: int = Field(default=0, ge=0)

    slice_id: Optional[int] = None
    # Per-slice statuses; null entries mean the slice was not sampled.
    slices: Optional[list[Optional[dict[str, Any]]]] = None

    @property
    def processed(self) -> int:
        """Documents handled so far, whatever happened to them."""
        return self.created + self.updated + self.deleted + self.version_conflicts


class RawTask(BaseModel):
    """One task envelope."""

    node: str
    id: int
    action: str = ""
    status: RawTaskStatus
    description: str = ""
    start_time_in_millis: int
    running_time_in_nanos: int = Field(..., ge=0)
    parent_task_id: Optional[str] = None

    @property
    def composite_id(self) -> str:
        return f"{self.node}:{self.id}"


class SingleTaskDocument(BaseModel):
    """Response of GET /_tasks/<task_id>."""

    completed: bool
    task: RawTask


class NodeTasks(BaseModel):
    """Tasks running on one node."""

    tasks: dict[str, RawTask] = Field(default_factory=dict)


class SlicedTaskDocument(BaseModel):
    """Response of GET /_tasks?detailed, grouped by node."""

    nodes: dict[str, NodeTasks]

    def iter_tasks(self):
        """Yield tasks in node order, then task order, as they appear in the source."""
        for node in self.nodes.values():
            yield from node.tasks.values()


TaskDocument = Union[SingleTaskDocument, SlicedTaskDocument]
