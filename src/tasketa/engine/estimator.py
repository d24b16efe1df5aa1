"""Linear-rate completion estimator.

The rate is the average throughput since task start
(``processed / running_time``). It is projected from the task start to the
current wall-clock sample, not from the moment the status was captured, so
re-evaluating the same input against a later time moves the forecast
forward without a fresh paste.
"""

import math

from tasketa.engine.errors import InsufficientData, MissingSliceData
from tasketa.models import ProgressEstimate, ProgressInput

NANOS_PER_MILLI = 1_000_000


def check_estimable(data: ProgressInput) -> None:
    """Raise the DomainError that prevents estimating ``data``, if any."""
    if data.slices and all(entry is None for entry in data.slices):
        raise MissingSliceData(data.task_id)

    if data.total == 0 or data.processed == 0:
        raise InsufficientData()

    # Empty documents carry an infinite start; zero running time has no rate.
    if not math.isfinite(data.start_time_in_millis) or data.running_time_in_nanos == 0:
        raise InsufficientData()


def estimate(data: ProgressInput, current_time: int) -> ProgressEstimate:
    """Project progress and remaining time at ``current_time`` (epoch ms)."""
    check_estimable(data)

    running_time_millis = data.running_time_in_nanos / NANOS_PER_MILLI
    rate = data.processed / running_time_millis

    elapsed_since_start = current_time - data.start_time_in_millis
    estimated_processed = rate * elapsed_since_start
    remaining_docs = data.total - estimated_processed
    estimated_remaining_time_millis = remaining_docs / rate

    return ProgressEstimate(
        estimated_processed=estimated_processed,
        progress=estimated_processed / data.total,
        rate=rate,
        remaining_docs=remaining_docs,
        estimated_remaining_time_millis=estimated_remaining_time_millis,
        current_time=current_time,
    )


def is_complete(result: ProgressEstimate, data: ProgressInput) -> bool:
    """True once the projection reaches the task total."""
    return result.estimated_processed >= data.total
