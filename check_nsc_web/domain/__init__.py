"""Decode, normalize and render core.

Pure functions over in-memory data: no I/O, no process-wide state.
"""

from .decoder import decode_response
from .models import CanonicalResult, Metric, ResultLine, Severity
from .normalize import NormalizedMetric, format_number, normalize_metric
from .render import PluginOutput, render

__all__ = [
    "CanonicalResult",
    "Metric",
    "NormalizedMetric",
    "PluginOutput",
    "ResultLine",
    "Severity",
    "decode_response",
    "format_number",
    "normalize_metric",
    "render",
]
