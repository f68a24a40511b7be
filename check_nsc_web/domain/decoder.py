"""Response decoder for both NSClient++ API generations.

The body is validated against the schema of the configured API version and
then mapped into a ``CanonicalResult`` by one explicit conversion function per
version. Missing fields degrade to empty values; only a body that is not JSON
or has fields of the wrong type is rejected as malformed.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..config.models import ApiVersion
from ..errors import EmptyPayload, MalformedResponse, summarize_validation_error
from ..schemas.nsclient_api import (
    LegacyQueryResponse,
    PerfValue,
    V1QueryResponse,
)
from .models import CanonicalResult, Metric, ResultLine, Severity

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Severity names used by the legacy API
LEGACY_SEVERITY_MAP: Dict[str, Severity] = {
    "OK": Severity.OK,
    "WARNING": Severity.WARNING,
    "CRITICAL": Severity.CRITICAL,
    "UNKNOWN": Severity.UNKNOWN,
}


def decode_response(body: bytes, api_version: ApiVersion) -> CanonicalResult:
    """Decode a raw response body into the canonical result.

    Parameters
    ----------
    body: bytes
        Response body as read from the agent.
    api_version: ApiVersion
        Schema variant the query was sent to.

    Returns
    -------
    CanonicalResult
        Version-independent result.

    Raises
    ------
    MalformedResponse
        If the body is not JSON or does not fit the variant's schema.
    EmptyPayload
        If a legacy response carries no payload.
    """
    if api_version == ApiVersion.V1:
        return from_v1(_parse(V1QueryResponse, body))
    return from_legacy(_parse(LegacyQueryResponse, body))


def from_v1(raw: V1QueryResponse) -> CanonicalResult:
    """Map a v1 response; out-of-range severities become UNKNOWN.

    Metrics whose perf value is ``null`` are dropped.
    """
    severity = Severity.from_ordinal(raw.result)
    if severity is None:
        logger.warning(
            "decoder.v1.severity_out_of_range",
            extra={"result": raw.result, "command": raw.command},
        )
        severity = Severity.UNKNOWN

    lines = []
    for line in raw.lines or []:
        metrics: Dict[str, Metric] = {}
        for name, perf in (line.perf or {}).items():
            if perf is None:
                logger.debug("decoder.v1.perf_dropped", extra={"alias": name})
                continue
            metrics[name] = _to_metric(perf)
        lines.append(ResultLine(message=line.message or "", metrics=metrics))

    return CanonicalResult(
        command=raw.command or "", severity=severity, lines=lines
    )


def from_legacy(raw: LegacyQueryResponse) -> CanonicalResult:
    """Map a legacy response using only its first payload element.

    Later payload elements are ignored. Perf entries without any value block
    or without an alias are dropped.
    """
    if not raw.payload:
        raise EmptyPayload()
    if len(raw.payload) > 1:
        logger.debug(
            "decoder.legacy.extra_payload_ignored",
            extra={"ignored": len(raw.payload) - 1},
        )

    first = raw.payload[0]
    severity = _legacy_severity(first.result)

    lines = []
    for line in first.lines or []:
        metrics: Dict[str, Metric] = {}
        for entry in line.perf or []:
            perf = entry.metric()
            if perf is None or not entry.alias:
                logger.debug(
                    "decoder.legacy.perf_dropped",
                    extra={"alias": entry.alias, "has_value": perf is not None},
                )
                continue
            metrics[entry.alias] = _to_metric(perf)
        lines.append(ResultLine(message=line.message or "", metrics=metrics))

    return CanonicalResult(
        command=first.command or "", severity=severity, lines=lines
    )


def _legacy_severity(name: Optional[str]) -> Severity:
    severity = LEGACY_SEVERITY_MAP.get(name) if name is not None else None
    if severity is None:
        # The agent reported a state we cannot interpret; never report OK
        logger.warning("decoder.legacy.unmapped_severity", extra={"result": name})
        return Severity.UNKNOWN
    return severity


def _to_metric(perf: PerfValue) -> Metric:
    return Metric(
        value=perf.value,
        unit=perf.unit,
        warning=perf.warning,
        critical=perf.critical,
        minimum=perf.minimum,
        maximum=perf.maximum,
    )


def _parse(schema: Type[SchemaT], body: bytes) -> SchemaT:
    try:
        return schema.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedResponse(summarize_validation_error(exc)) from exc
