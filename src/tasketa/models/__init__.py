"""TaskETA data models."""

from tasketa.models.enums import DocumentShape, IconState, RefreshState
from tasketa.models.task import (
    NodeTasks,
    RawTask,
    RawTaskStatus,
    SingleTaskDocument,
    SlicedTaskDocument,
    TaskDocument,
)
from tasketa.models.progress import (
    ProgressEstimate,
    ProgressInput,
    ProgressReport,
    RefreshUpdate,
)

__all__ = [
    "DocumentShape",
    "IconState",
    "NodeTasks",
    "ProgressEstimate",
    "ProgressInput",
    "ProgressReport",
    "RawTask",
    "RawTaskStatus",
    "RefreshState",
    "RefreshUpdate",
    "SingleTaskDocument",
    "SlicedTaskDocument",
    "TaskDocument",
]
