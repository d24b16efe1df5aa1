"""TaskETA enumerations."""

from enum import Enum


class DocumentShape(str, Enum):
    """Shape of a decoded task-status document."""

    SINGLE = "single"
    SLICED = "sliced"


class RefreshState(str, Enum):
    """Refresh controller lifecycle state."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    STOPPED = "stopped"

    @classmethod
    def terminal_states(cls) -> set["RefreshState"]:
        """Return terminal states."""
        return {cls.COMPLETED, cls.FAILED, cls.STOPPED}

    def is_terminal(self) -> bool:
        """Check if state is terminal."""
        return self in self.terminal_states()


class IconState(str, Enum):
    """What the progress icon collaborator should draw."""

    WAITING = "waiting"
    PROGRESS = "progress"
    FINISHED = "finished"
