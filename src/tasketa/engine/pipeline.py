"""End-to-end helpers chaining normalize, decode and extract."""

from tasketa.engine.decoder import decode
from tasketa.engine.estimator import estimate, is_complete
from tasketa.engine.extractor import extract, resolve_document
from tasketa.engine.normalizer import normalize
from tasketa.engine.report import render_report
from tasketa.models import ProgressEstimate, ProgressInput, ProgressReport


def build_progress_input(text: str) -> ProgressInput:
    """Parse pasted status text into the estimator's input record."""
    return extract(resolve_document(decode(normalize(text))))


def evaluate(
    data: ProgressInput, current_time: int
) -> tuple[ProgressEstimate, ProgressReport, bool]:
    """Estimate and render one time sample; the flag reports completion."""
    result = estimate(data, current_time)
    return result, render_report(result, data), is_complete(result, data)
