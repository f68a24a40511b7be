"""Exceptions surfaced at the plugin boundary.

Every exception here aborts the check. The CLI prints ``status_line()`` as the
single output line and exits with ``exit_code`` (always UNKNOWN). Nothing is
retried locally; retry is the scheduler's job.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError


class CheckError(RuntimeError):
    """Base class for failures that end the check with UNKNOWN (3)."""

    exit_code = 3
    prefix = "UNKNOWN: "

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def status_line(self) -> str:
        """Return the single diagnostic line printed on stdout."""
        return f"{self.prefix}{self.message}"


class TransportError(CheckError):
    """Connection, TLS handshake or timeout failure."""


class HTTPStatusError(CheckError):
    """The agent answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: Optional[str] = None) -> None:
        self.status_code = status_code
        self.reason = reason or ""
        status = f"{status_code} {self.reason}".strip()
        super().__init__(f"HTTP request failed: {status}")

    def status_line(self) -> str:
        # 403 usually means we are not in the agent's allowed hosts
        if self.status_code == 403:
            return "HTTP 403: Forbidden."
        return super().status_line()


class EmptyPayload(CheckError):
    """The legacy API executed the query but returned no payload."""

    def __init__(self) -> None:
        super().__init__("The resultpayload size is 0")


class MalformedResponse(CheckError):
    """The response body does not match the requested schema variant."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Malformed response: {detail}")


class ConfigurationError(CheckError):
    """Invalid or missing settings detected before any request is made."""


def summarize_validation_error(exc: ValidationError) -> str:
    """Condense a pydantic error to one line: first problem plus a count."""
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "body"
    msg = " ".join(str(first.get("msg", "invalid")).split())
    summary = f"{loc}: {msg}"
    if len(errors) > 1:
        summary += f" (+{len(errors) - 1} more)"
    return summary
