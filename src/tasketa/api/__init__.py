"""TaskETA HTTP API."""

from tasketa.api.router import router

__all__ = ["router"]
