"""TaskETA engine - normalize, decode, extract, estimate, render."""

from tasketa.engine.decoder import decode
from tasketa.engine.errors import (
    DomainError,
    InputSyntaxError,
    InsufficientData,
    InvalidTaskDocument,
    MissingSliceData,
    TaskAlreadyCompleted,
    TaskEtaError,
)
from tasketa.engine.estimator import estimate, is_complete
from tasketa.engine.extractor import extract, resolve_document
from tasketa.engine.normalizer import normalize
from tasketa.engine.pipeline import build_progress_input, evaluate
from tasketa.engine.report import COMPLETION_NOTICE, render_report

__all__ = [
    "COMPLETION_NOTICE",
    "DomainError",
    "InputSyntaxError",
    "InsufficientData",
    "InvalidTaskDocument",
    "MissingSliceData",
    "TaskAlreadyCompleted",
    "TaskEtaError",
    "build_progress_input",
    "decode",
    "estimate",
    "evaluate",
    "extract",
    "is_complete",
    "normalize",
    "render_report",
    "resolve_document",
]
