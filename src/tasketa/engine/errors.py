"""TaskETA engine errors."""

FILTER_PATH = (
    "**.node",
    "**.id",
    "**.action",
    "**.total",
    "**.updated",
    "**.created",
    "**.deleted",
    "**.version_conflicts",
    "**.slice_id",
    "**.description",
    "**.start_time_in_millis",
    "**.running_time_in_nanos",
    "**.parent_task_id",
)


class TaskEtaError(Exception):
    """Base error for TaskETA operations."""

    def __init__(self, message: str, code: str = "TASKETA_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InputSyntaxError(TaskEtaError):
    """Input is not valid JSON, even after normalization."""

    def __init__(self, detail: str, lineno: int = 0, colno: int = 0):
        super().__init__("Invalid JSON input. Please check your format.", "INVALID_JSON")
        self.detail = detail
        self.lineno = lineno
        self.colno = colno


class DomainError(TaskEtaError):
    """Input parsed, but cannot be turned into a progress estimate."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        super().__init__(message, code)


class InvalidTaskDocument(DomainError):
    """Decoded value is not a task-status document."""

    def __init__(self, reason: str):
        super().__init__(
            f"Input is not a task status document: {reason}",
            "INVALID_TASK_DOCUMENT",
        )
        self.reason = reason


class TaskAlreadyCompleted(DomainError):
    """Single-task document reports completed = true."""

    def __init__(self):
        super().__init__("Task is already completed.", "TASK_ALREADY_COMPLETED")


class MissingSliceData(DomainError):
    """Task is sliced, but every slice entry is null."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        self.query = f"parent_task_id={task_id}&filter_path={','.join(FILTER_PATH)}"
        super().__init__(
            "Task is sliced but no slice data is available.\n"
            "Please paste the response of this request:\n\n"
            f"GET /_tasks?detailed&{self.query}",
            "SLICE_DATA_MISSING",
        )


class InsufficientData(DomainError):
    """Not enough progress to derive a processing rate."""

    def __init__(self):
        super().__init__(
            "Insufficient data to calculate remaining time.", "INSUFFICIENT_DATA"
        )
