"""
Metric normalization for Nagios performance data.

Turns a canonical ``Metric`` into the string fields of a perfdata fragment:
every number is written in fixed-point notation with a caller-supplied number
of decimals, absent thresholds become empty fields, and a metric without a
value is omitted entirely.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .models import Metric

FULL_PRECISION = -1

# Plugin guidelines use "U" for a value that could not be determined
UNDETERMINED = "U"


@dataclass(frozen=True)
class NormalizedMetric:
    """
    Formatted perfdata fields of one metric.

    Attributes
    ----------
    value : str
        Formatted value, always non-empty
    unit : str
        Unit of measure, empty when the agent sent none
    warning, critical, minimum, maximum : str
        Formatted thresholds, empty when absent
    """

    value: str
    unit: str = ""
    warning: str = ""
    critical: str = ""
    minimum: str = ""
    maximum: str = ""


def format_number(value: float, float_round: int = FULL_PRECISION) -> str:
    """
    Format a number in fixed-point notation.

    Parameters
    ----------
    value : float
        Number to format
    float_round : int
        Digits after the decimal point. ``-1`` writes the shortest
        representation that reads back as the same float, without exponent
        and without a trailing ``.0``.

    Returns
    -------
    str
        Formatted number, or ``"U"`` for NaN and infinities

    Examples
    --------
    >>> format_number(0.8, 2)
    '0.80'
    >>> format_number(5.0)
    '5'
    >>> format_number(1e-05)
    '0.00001'
    """
    if float_round < FULL_PRECISION:
        raise ValueError(f"float_round must be >= -1, got {float_round}")
    if not math.isfinite(value):
        return UNDETERMINED
    if float_round >= 0:
        return f"{value:.{float_round}f}"

    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _optional(value: Optional[float], float_round: int) -> str:
    if value is None:
        return ""
    return format_number(value, float_round)


def normalize_metric(
    metric: Metric, float_round: int = FULL_PRECISION
) -> Optional[NormalizedMetric]:
    """
    Format every field of a metric, or return ``None`` to omit it.

    Parameters
    ----------
    metric : Metric
        Canonical metric
    float_round : int
        Digits after the decimal point, ``-1`` for full precision

    Returns
    -------
    NormalizedMetric or None
        ``None`` when the metric has no value; its thresholds are then
        dropped as well
    """
    if metric.value is None:
        return None
    return NormalizedMetric(
        value=format_number(metric.value, float_round),
        unit=metric.unit or "",
        warning=_optional(metric.warning, float_round),
        critical=_optional(metric.critical, float_round),
        minimum=_optional(metric.minimum, float_round),
        maximum=_optional(metric.maximum, float_round),
    )
