"""Plugin line renderer.

Builds the single status line the monitoring system reads from stdout::

    <message>[ <extra text>][|'label'=value[UOM];warn;crit;min;max ...]

and the exit code matching the result's severity.
"""

from __future__ import annotations

from typing import List, NamedTuple

from ..config.models import CheckConfig
from .models import CanonicalResult
from .normalize import NormalizedMetric, normalize_metric


class PluginOutput(NamedTuple):
    """Rendered status line and process exit code."""

    line: str
    exit_code: int


def quote_label(label: str) -> str:
    """Quote a perfdata label, doubling any embedded single quote."""
    return "'" + label.replace("'", "''") + "'"


def perfdata_fragment(label: str, metric: NormalizedMetric) -> str:
    """Format one ``'label'=value[UOM];warn;crit;min;max`` fragment.

    All five fields are always written, empty ones included.
    """
    return (
        f"{quote_label(label)}={metric.value}{metric.unit};"
        f"{metric.warning};{metric.critical};{metric.minimum};{metric.maximum}"
    )


def render_message(result: CanonicalResult, separator: str = ", ") -> str:
    """Join the trimmed, non-empty messages of all lines in order."""
    messages = [line.message.strip() for line in result.lines]
    return separator.join(m for m in messages if m)


def render(result: CanonicalResult, config: CheckConfig) -> PluginOutput:
    """Render a canonical result as a plugin status line.

    Parameters
    ----------
    result: CanonicalResult
        Decoded agent result.
    config: CheckConfig
        Rounding, extra text and message separator.

    Returns
    -------
    PluginOutput
        The status line (without newline) and the exit code.
    """
    message = render_message(result, config.message_separator)
    text = " ".join(part for part in (message, config.extra_text) if part)

    fragments: List[str] = []
    for line in result.lines:
        for label, metric in line.metrics.items():
            normalized = normalize_metric(metric, config.float_round)
            if normalized is None:
                continue
            fragments.append(perfdata_fragment(label, normalized))

    if fragments:
        text = f"{text}|{' '.join(fragments)}"
    return PluginOutput(line=text, exit_code=int(result.severity))
