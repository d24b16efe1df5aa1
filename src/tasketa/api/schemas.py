"""API request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from tasketa.config import settings


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class NormalizeRequest(BaseModel):
    """Normalize request."""

    text: str = Field(..., max_length=settings.max_input_chars, description="Pasted status text")


class NormalizeResponse(BaseModel):
    """Normalize response."""

    normalized: str


class EstimateRequest(BaseModel):
    """Estimate request."""

    text: str = Field(..., max_length=settings.max_input_chars, description="Pasted status text")
    current_time_millis: Optional[int] = Field(
        None, ge=0, description="Time sample (epoch ms); defaults to server time"
    )


class EstimateResponse(BaseModel):
    """One-shot estimate with its rendered report."""

    task_id: str
    description: str
    total: int
    processed: int

    estimated_processed: float
    progress: float
    rate: float
    estimated_remaining_time_millis: float
    current_time: int

    remaining_time: str
    end_time: str
    actual_progress: str
    estimated_progress: str
    display_progress: float
    display_label: str
    icon_state: str
    title: str
    complete: bool
    text: str


class ErrorDetail(BaseModel):
    """Error detail body."""

    code: str
    message: str
    detail: Optional[str] = Field(None, description="Underlying parser message")
    query: Optional[str] = Field(None, description="Follow-up task query for sliced tasks")


class WatchMessage(BaseModel):
    """One refresh update streamed over the watch socket."""

    state: str
    text: str
    display_progress: float
    icon_state: str
    title: Optional[str] = None
    report: Optional[dict] = None
