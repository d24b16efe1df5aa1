"""Strict JSON decoding of normalized input."""

import json
import logging
from typing import Any

from tasketa.engine.errors import InputSyntaxError

logger = logging.getLogger(__name__)


def decode(text: str) -> Any:
    """Parse strict JSON text, raising InputSyntaxError on malformed input."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse error: {e.msg} (line {e.lineno}, column {e.colno})")
        raise InputSyntaxError(e.msg, lineno=e.lineno, colno=e.colno) from e
