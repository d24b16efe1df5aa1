"""Shape resolution and reduction of task-status documents."""

import math
from typing import Any

from pydantic import ValidationError

from tasketa.engine.errors import InvalidTaskDocument, TaskAlreadyCompleted
from tasketa.models import (
    DocumentShape,
    ProgressInput,
    SingleTaskDocument,
    SlicedTaskDocument,
    TaskDocument,
)


def document_shape(value: Any) -> DocumentShape:
    """Classify a decoded value by the presence of a root ``completed`` field."""
    if not isinstance(value, dict):
        raise InvalidTaskDocument(f"expected a JSON object, got {type(value).__name__}")
    if "completed" in value:
        return DocumentShape.SINGLE
    return DocumentShape.SLICED


def resolve_document(value: Any) -> TaskDocument:
    """Validate a decoded value into one of the two document shapes."""
    shape = document_shape(value)
    model = SingleTaskDocument if shape is DocumentShape.SINGLE else SlicedTaskDocument
    try:
        return model.model_validate(value)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise InvalidTaskDocument(f"{location}: {first['msg']}") from e


def extract_single(doc: SingleTaskDocument) -> ProgressInput:
    """Reduce a single-task document."""
    if doc.completed:
        raise TaskAlreadyCompleted()

    task = doc.task
    return ProgressInput(
        total=task.status.total,
        processed=task.status.processed,
        start_time_in_millis=task.start_time_in_millis,
        running_time_in_nanos=task.running_time_in_nanos,
        task_id=task.composite_id,
        description=task.description,
        slices=tuple(task.status.slices or ()),
    )


def extract_sliced(doc: SlicedTaskDocument) -> ProgressInput:
    """Reduce a multi-node document by summing its tasks.

    The fallback task id is the first task's ``node:id``, so it depends on
    the order tasks appear in the pasted document.
    """
    total = 0
    processed = 0
    start_time_in_millis = math.inf
    running_time_in_nanos = 0
    parent_task_id = ""
    first_task_id = ""
    description = ""
    slices: list = []

    for task in doc.iter_tasks():
        total += task.status.total
        processed += task.status.processed
        start_time_in_millis = min(start_time_in_millis, task.start_time_in_millis)
        running_time_in_nanos = max(running_time_in_nanos, task.running_time_in_nanos)
        parent_task_id = parent_task_id or task.parent_task_id or ""
        first_task_id = first_task_id or task.composite_id
        description = description or task.description
        slices.extend(task.status.slices or ())

    return ProgressInput(
        total=total,
        processed=processed,
        start_time_in_millis=start_time_in_millis,
        running_time_in_nanos=running_time_in_nanos,
        task_id=parent_task_id or first_task_id,
        description=description,
        slices=tuple(slices),
    )


def extract(doc: TaskDocument) -> ProgressInput:
    """Reduce either document shape into one ProgressInput."""
    if isinstance(doc, SingleTaskDocument):
        return extract_single(doc)
    if isinstance(doc, SlicedTaskDocument):
        return extract_sliced(doc)
    raise TypeError(f"Unsupported task document: {type(doc).__name__}")
