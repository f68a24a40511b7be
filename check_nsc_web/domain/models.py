"""Canonical check result model.

These models are the version-independent form of an NSClient++ query result.
The decoder builds one ``CanonicalResult`` per invocation and the renderer
consumes it; nothing mutates it in between, so every model is frozen.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Severity(IntEnum):
    """Plugin state, valued as the exit code the monitoring system expects."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @classmethod
    def from_ordinal(cls, value: Optional[int]) -> Optional["Severity"]:
        """Return the member for ``value`` or ``None`` when out of range."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class Metric(BaseModel):
    """One performance datum.

    Attributes
    ----------
    value: Optional[float]
        Measured value. A metric without a value is never rendered.
    unit: Optional[str]
        Unit of measure appended directly after the value (e.g. "%", "B").
    warning, critical, minimum, maximum: Optional[float]
        Optional thresholds and bounds.
    """

    model_config = ConfigDict(frozen=True)

    value: Optional[float] = None
    unit: Optional[str] = None
    warning: Optional[float] = None
    critical: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None


class ResultLine(BaseModel):
    """A message plus its metrics, keyed by label in wire order."""

    model_config = ConfigDict(frozen=True)

    message: str = ""
    metrics: Dict[str, Metric] = Field(default_factory=dict)


class CanonicalResult(BaseModel):
    """Normalized result of one executed agent query.

    Attributes
    ----------
    command: str
        Name of the command the agent executed.
    severity: Severity
        Overall state of the check.
    lines: List[ResultLine]
        Output lines in the order the agent returned them.
    """

    model_config = ConfigDict(frozen=True)

    command: str = ""
    severity: Severity = Severity.UNKNOWN
    lines: List[ResultLine] = Field(default_factory=list)
