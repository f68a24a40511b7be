"""NSClient++ REST adapter.

This adapter encapsulates transport concerns (base URL, query path per API
version, authentication headers, TLS verification, timeouts) and returns raw
response bodies for the decoder. Transport failures and non-2xx statuses are
translated into the plugin's error taxonomy; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence
from urllib.parse import quote, quote_plus

import httpx

from .. import __version__
from ..config.models import ApiVersion, ConnectionConfig
from ..errors import HTTPStatusError, TransportError

logger = logging.getLogger(__name__)

_BODY_PREVIEW_LIMIT = 2000


def build_query_string(args: Sequence[str]) -> str:
    """Encode ``key=value`` / ``key`` arguments as a raw query string.

    Each argument is split on its first ``=``. Bare keys are written without
    ``=`` because some agent checks treat ``key`` and ``key=`` differently.
    """
    params = []
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep:
            params.append(f"{quote_plus(key)}={quote_plus(value)}")
        else:
            params.append(quote_plus(key))
    return "&".join(params)


class NSClientAdapter:
    """Adapter for the NSClient++ webserver.

    Parameters
    ----------
    config: ConnectionConfig
        Base URL, credentials, API version, timeout and TLS settings.
    transport: Optional[httpx.BaseTransport]
        Custom transport for the underlying client (tests use
        ``httpx.MockTransport``).

    Attributes
    ----------
    _client: httpx.Client
        Client configured with timeout, TLS verification and auth headers.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(
            timeout=httpx.Timeout(config.timeout_seconds),
            verify=not config.insecure,
            headers=self._headers(config),
            auth=self._auth(config),
            follow_redirects=True,
            transport=transport,
        )
        logger.debug(
            "nsclient.adapter.init",
            extra={
                "endpoint": config.url,
                "api_version": config.api_version.value,
                "timeout_seconds": config.timeout_seconds,
                "insecure": config.insecure,
            },
        )

    def close(self) -> None:
        """Close the connection pool."""
        self._client.close()

    def __enter__(self) -> "NSClientAdapter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def query_url(self, command: str, args: Sequence[str] = ()) -> str:
        """Return the URL that executes ``command`` with ``args``.

        Parameters
        ----------
        command: str
            Agent command name, e.g. ``check_cpu``.
        args: Sequence[str]
            Command arguments as ``key=value`` or bare ``key`` strings.
        """
        name = quote(command, safe="")
        if self._config.api_version == ApiVersion.V1:
            url = f"{self._config.url}/api/v1/queries/{name}/commands/execute"
        else:
            url = f"{self._config.url}/query/{name}"
        query = build_query_string(args)
        if query:
            url = f"{url}?{query}"
        return url

    def query(self, command: str, args: Sequence[str] = ()) -> bytes:
        """Execute a command on the agent and return the raw response body.

        Raises
        ------
        TransportError
            On connection, TLS or timeout failures.
        HTTPStatusError
            On non-2xx responses.
        """
        return self._get(self.query_url(command, args))

    def ping(self) -> bytes:
        """Fetch the webserver root to check that the API is reachable."""
        return self._get(f"{self._config.url}/")

    def _get(self, url: str) -> bytes:
        logger.debug("nsclient.http.request GET %s", url, extra={"url": url})
        try:
            resp = self._client.get(url)
        except httpx.TimeoutException as exc:
            logger.debug("nsclient.http.timeout", exc_info=True)
            raise TransportError(
                f"request to {url} timed out after "
                f"{self._config.timeout_seconds:g}s ({type(exc).__name__})"
            ) from exc
        except httpx.TransportError as exc:
            logger.debug("nsclient.http.transport_error", exc_info=True)
            raise TransportError(str(exc) or type(exc).__name__) from exc

        body = resp.content
        logger.debug(
            "nsclient.http.response %s %s\n%s\n%s",
            resp.status_code,
            resp.reason_phrase,
            _format_headers(resp.headers),
            _preview(body),
            extra={"url": url, "status_code": resp.status_code},
        )
        if not resp.is_success:
            logger.info(
                "nsclient.http.status_error",
                extra={"url": url, "status_code": resp.status_code},
            )
            raise HTTPStatusError(resp.status_code, resp.reason_phrase)
        return body

    @staticmethod
    def _headers(config: ConnectionConfig) -> Dict[str, str]:
        """Build default headers.

        The legacy API and v1 without a login authenticate with a
        ``password`` header.
        """
        headers = {"User-Agent": f"check_nsc_web/{__version__}"}
        if NSClientAdapter._auth(config) is None:
            headers["password"] = config.password
        return headers

    @staticmethod
    def _auth(config: ConnectionConfig) -> Optional[httpx.BasicAuth]:
        """HTTP Basic auth for the v1 API when a login is configured."""
        if config.api_version == ApiVersion.V1 and config.login:
            return httpx.BasicAuth(config.login, config.password)
        return None


def _format_headers(headers: httpx.Headers) -> str:
    return "\n".join(f"{key}: {value}" for key, value in headers.items())


def _preview(body: bytes) -> str:
    text = body.decode("utf-8", errors="replace")
    if len(text) > _BODY_PREVIEW_LIMIT:
        return text[:_BODY_PREVIEW_LIMIT] + "..."
    return text
