"""TaskETA background tasks."""

from tasketa.tasks.refresh import RefreshController, RefreshHandle, stop_all_refreshes

__all__ = ["RefreshController", "RefreshHandle", "stop_all_refreshes"]
