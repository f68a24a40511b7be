"""
NSClient++ REST API response schemas

Pydantic models for the two response generations of the NSClient++ query
endpoint. Each generation gets its own explicit model; the caller picks one
from the configured API version and never infers it from the body shape.

- Legacy (``/query/<command>``): a ``payload`` list whose first element holds
  a string severity and per-line ``perf`` lists where every entry carries
  either an ``int_value`` or a ``float_value`` block.
- v1 (``/api/v1/queries/<command>/commands/execute``): a single result with
  an integer severity and ``perf`` objects keyed by metric name.

Fields are optional wherever the agent is known to omit them. Unknown fields
are ignored so newer agents keep working.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PerfValue(BaseModel):
    """Performance value block shared by both API generations.

    Integer wire values are coerced to ``float`` here, so the int/float
    distinction of the legacy API disappears at the boundary.
    """

    model_config = ConfigDict(extra="ignore")

    value: Optional[float] = None
    unit: Optional[str] = None
    warning: Optional[float] = None
    critical: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None


# v1 API


class V1ResultLine(BaseModel):
    """One output line of a v1 query result"""

    message: Optional[str] = None
    perf: Optional[Dict[str, Optional[PerfValue]]] = Field(
        None,
        description="Metric name to performance value, in wire order; null "
        "values are dropped by the decoder",
    )


class V1QueryResponse(BaseModel):
    """Response of ``/api/v1/queries/<command>/commands/execute``"""

    command: Optional[str] = None
    result: Optional[int] = Field(
        None, description="Severity ordinal; only 0-3 are meaningful"
    )
    lines: Optional[List[V1ResultLine]] = None


# Legacy API


class LegacyPerfEntry(BaseModel):
    """One legacy perf entry; exactly one of the value blocks is expected."""

    alias: Optional[str] = None
    int_value: Optional[PerfValue] = None
    float_value: Optional[PerfValue] = None

    def metric(self) -> Optional[PerfValue]:
        """Return the populated value block, preferring ``float_value``.

        Returns ``None`` when the agent sent neither block.
        """
        if self.float_value is not None:
            return self.float_value
        return self.int_value


class LegacyResultLine(BaseModel):
    """One output line of a legacy payload"""

    message: Optional[str] = None
    perf: Optional[List[LegacyPerfEntry]] = None


class LegacyPayload(BaseModel):
    """One executed command inside the legacy ``payload`` list"""

    command: Optional[str] = None
    result: Optional[str] = Field(
        None, description="Severity name, e.g. 'OK' or 'CRITICAL'"
    )
    lines: Optional[List[LegacyResultLine]] = None


class LegacyHeader(BaseModel):
    """Legacy response header"""

    source_id: Optional[str] = None


class LegacyQueryResponse(BaseModel):
    """Response of ``/query/<command>``"""

    header: Optional[LegacyHeader] = None
    payload: Optional[List[LegacyPayload]] = None
