"""TaskETA - remaining-time estimates for long-running search cluster tasks."""

__version__ = "0.1.0"
