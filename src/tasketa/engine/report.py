"""Report rendering for progress estimates."""

import math
from datetime import datetime
from typing import Optional

from tasketa.config import settings
from tasketa.models import IconState, ProgressEstimate, ProgressInput, ProgressReport

COMPLETION_NOTICE = "Task is estimated to be complete."
WAITING_PROGRESS = -1


def format_remaining_time(remaining_time_millis: float) -> str:
    """Render remaining time as ``Xd Yh Zm Ws``, dropping leading zero tiers."""
    prefix = "Estimated remaining time: "
    if remaining_time_millis <= 0:
        return f"{prefix}0s"

    remaining_seconds = math.floor(remaining_time_millis / 1000)
    days = remaining_seconds // 86400
    hours = (remaining_seconds % 86400) // 3600
    minutes = (remaining_seconds % 3600) // 60
    seconds = remaining_seconds % 60

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0 or days > 0:
        parts.append(f"{hours}h")
    if minutes > 0 or hours > 0 or days > 0:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds}s")
    return prefix + " ".join(parts)


def format_end_time(end_time_millis: float, fmt: Optional[str] = None) -> str:
    """Render an epoch-ms instant as local date-time."""
    try:
        end_time = datetime.fromtimestamp(end_time_millis / 1000)
    except (OverflowError, OSError, ValueError):
        # Outside the platform's datetime range
        return "Estimated end time: unknown"
    return f"Estimated end time: {end_time.strftime(fmt or settings.end_time_format)}"


def estimated_percentage(result: ProgressEstimate, data: ProgressInput) -> float:
    """Estimated completion percentage, capped at 100 for display."""
    return min(result.estimated_processed / data.total * 100, 100.0)


def truncate_progress(percentage: float) -> tuple[float, str]:
    """Compact display value: one truncated decimal below 10%, whole numbers above."""
    if percentage < 10:
        value = math.trunc(percentage * 10) / 10
        return value, f"{value:.1f}"
    whole = math.trunc(percentage)
    return float(whole), str(whole)


def icon_state(display_progress: float) -> IconState:
    if display_progress == WAITING_PROGRESS:
        return IconState.WAITING
    if display_progress >= 100:
        return IconState.FINISHED
    return IconState.PROGRESS


def render_report(
    result: ProgressEstimate,
    data: ProgressInput,
    end_time_format: Optional[str] = None,
) -> ProgressReport:
    """Render an estimate and its input into display strings."""
    percentage = estimated_percentage(result, data)
    display_progress, display_label = truncate_progress(percentage)
    actual_percentage = data.processed / data.total * 100
    estimated_count = math.floor(min(result.estimated_processed, data.total))

    return ProgressReport(
        remaining_time=format_remaining_time(result.estimated_remaining_time_millis),
        end_time=format_end_time(result.estimated_end_time_millis, end_time_format),
        actual_progress=(
            f"Actual progress: {data.processed} / {data.total} ({actual_percentage:.2f}%)"
        ),
        estimated_progress=(
            f"Estimated progress: {estimated_count} / {data.total} ({percentage:.2f}%)"
        ),
        display_progress=display_progress,
        display_label=display_label,
        title=f"{display_label}% {data.description or data.task_id}",
        finished=result.estimated_processed >= data.total,
    )
