"""REST and WebSocket API router."""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from tasketa import __version__
from tasketa.api.schemas import (
    ErrorDetail,
    EstimateRequest,
    EstimateResponse,
    HealthResponse,
    NormalizeRequest,
    NormalizeResponse,
    WatchMessage,
)
from tasketa.config import settings
from tasketa.engine import (
    COMPLETION_NOTICE,
    InputSyntaxError,
    MissingSliceData,
    TaskEtaError,
    build_progress_input,
    evaluate,
    normalize,
)
from tasketa.engine.report import icon_state
from tasketa.models import RefreshUpdate
from tasketa.tasks import RefreshController
from tasketa.utils.time import now_millis

logger = logging.getLogger("tasketa.api")

router = APIRouter(prefix="/v1")


def _error_response(e: TaskEtaError) -> HTTPException:
    """Map engine errors: syntax problems are 400, unusable documents 422."""
    detail = ErrorDetail(code=e.code, message=e.message)
    if isinstance(e, InputSyntaxError):
        detail.detail = f"{e.detail} (line {e.lineno}, column {e.colno})"
        return HTTPException(status_code=400, detail=detail.model_dump())
    if isinstance(e, MissingSliceData):
        detail.query = e.query
    return HTTPException(status_code=422, detail=detail.model_dump())


def _watch_message(update: RefreshUpdate) -> dict:
    report = update.report
    return WatchMessage(
        state=update.state.value,
        text=update.text,
        display_progress=update.display_progress,
        icon_state=icon_state(update.display_progress).value,
        title=report.title if report else None,
        report=report.model_dump() if report else None,
    ).model_dump()


# ============================================================================
# Health
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


# ============================================================================
# Estimates
# ============================================================================


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize_text(request: NormalizeRequest):
    """Rewrite pasted status text into strict JSON."""
    return NormalizeResponse(normalized=normalize(request.text))


@router.post("/estimate", response_model=EstimateResponse)
async def estimate_once(request: EstimateRequest):
    """Estimate remaining time for one pasted status at one time sample."""
    current_time: Optional[int] = request.current_time_millis
    if current_time is None:
        current_time = now_millis()

    try:
        data = build_progress_input(request.text)
        result, report, complete = evaluate(data, current_time)
    except TaskEtaError as e:
        logger.info(f"Estimate rejected: {e.code}")
        raise _error_response(e)

    text = report.text
    if complete:
        text = f"{text}\n{COMPLETION_NOTICE}"

    return EstimateResponse(
        task_id=data.task_id,
        description=data.description,
        total=data.total,
        processed=data.processed,
        estimated_processed=result.estimated_processed,
        progress=result.progress,
        rate=result.rate,
        estimated_remaining_time_millis=result.estimated_remaining_time_millis,
        current_time=result.current_time,
        remaining_time=report.remaining_time,
        end_time=report.end_time,
        actual_progress=report.actual_progress,
        estimated_progress=report.estimated_progress,
        display_progress=report.display_progress,
        display_label=report.display_label,
        icon_state=icon_state(report.display_progress).value,
        title=report.title,
        complete=complete,
        text=text,
    )


@router.websocket("/watch")
async def watch(websocket: WebSocket):
    """
    Stream refreshed estimates for one pasted status.

    The client sends the status text as the first message. One update is
    sent per refresh tick; the socket closes after completion or failure.
    Disconnecting stops the refresh chain.
    """
    await websocket.accept()
    updates: asyncio.Queue[RefreshUpdate] = asyncio.Queue()
    controller = RefreshController(updates.put_nowait)

    try:
        text = await websocket.receive_text()
        if len(text) > settings.max_input_chars:
            await websocket.close(code=1009, reason="Input too large")
            return

        await controller.start(text)
        while True:
            update = await updates.get()
            await websocket.send_json(_watch_message(update))
            if update.state.is_terminal():
                break
        await websocket.close()
    except WebSocketDisconnect:
        logger.info("Watch client disconnected")
    finally:
        await controller.stop()
