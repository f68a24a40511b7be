"""Config models and loaders.

This module defines the pydantic models the plugin is configured with:

- ``CheckConfig``: options of the decode/render core, passed explicitly.
- ``ConnectionConfig``: options of the NSClient++ transport adapter.
- ``FileConfig``: options read from the file given with ``-config``, either
  JSON or ``flag value`` lines.
- ``EnvSettings``: option defaults from ``NSC_WEB_*`` environment variables
  and ``.env``.

The CLI merges these layers (command line > file > environment > default)
and never stores the result in module-level state.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiVersion(str, Enum):
    """NSClient++ REST API generation"""

    LEGACY = "legacy"
    V1 = "1"


class CheckConfig(BaseModel):
    """Options of the decode/normalize/render core.

    Attributes
    ----------
    api_version: ApiVersion
        Which response schema the body is decoded with.
    float_round: int
        Digits after the decimal point for every performance number; -1 keeps
        full precision.
    extra_text: str
        Text appended to the message, separated by a space.
    message_separator: str
        Separator between the messages of multi-line results.
    """

    model_config = ConfigDict(frozen=True)

    api_version: ApiVersion = ApiVersion.LEGACY
    float_round: int = Field(-1, ge=-1)
    extra_text: str = ""
    message_separator: str = ", "


class ConnectionConfig(BaseModel):
    """Connection settings for one NSClient++ agent.

    Attributes
    ----------
    url: str
        Base URL of the agent webserver, e.g. ``https://10.1.2.3:8443``.
        A trailing slash is stripped.
    login: str
        Login used for HTTP Basic auth against the v1 API.
    password: str
        Webserver password.
    api_version: ApiVersion
        Selects the query path and authentication scheme.
    timeout_seconds: float
        Budget for connect, TLS handshake and response wait.
    insecure: bool
        Skip TLS certificate verification.
    """

    url: str = Field(..., min_length=1)
    login: str = "admin"
    password: str
    api_version: ApiVersion = ApiVersion.LEGACY
    timeout_seconds: float = Field(10, gt=0)
    insecure: bool = False

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"invalid NSClient++ URL: {value!r}")
        return value.rstrip("/")


class FileConfig(BaseModel):
    """Option values loaded from a config file.

    Every field is optional; absent fields fall through to the environment
    and built-in defaults. ``query`` holds a space separated command line
    (command followed by its arguments) that is appended to the positional
    arguments.
    """

    url: Optional[str] = None
    login: Optional[str] = None
    password: Optional[str] = None
    api_version: Optional[ApiVersion] = None
    timeout: Optional[float] = None
    float_round: Optional[int] = None
    extra_text: Optional[str] = None
    insecure: Optional[bool] = None
    verbose: Optional[bool] = None
    query: Optional[str] = None

    @staticmethod
    def load(path: Path) -> "FileConfig":
        """Load and validate a config file.

        A file whose first non-blank character is ``{`` is read as JSON. Any
        other file is read as one ``flag value`` (or ``flag=value``) pair per
        line, with ``#`` comments and bare boolean flags::

            u https://10.1.2.3:8443
            p secret
            k
            query check_cpu time=5m
        """
        text = path.read_text(encoding="utf-8")
        if text.lstrip().startswith("{"):
            return FileConfig.model_validate_json(text)
        return FileConfig.model_validate(parse_flag_lines(text))


# Flag names accepted in line-based config files
FILE_FLAG_FIELDS: Dict[str, str] = {
    "u": "url",
    "l": "login",
    "p": "password",
    "a": "api_version",
    "t": "timeout",
    "f": "float_round",
    "x": "extra_text",
    "k": "insecure",
    "v": "verbose",
    "query": "query",
}

_BOOL_FIELDS = ("insecure", "verbose")


def parse_flag_lines(text: str) -> Dict[str, str]:
    """Map ``flag value`` lines to ``FileConfig`` field values.

    Raises
    ------
    ValueError
        On a flag that is not a known option.
    """
    values: Dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        match = re.match(r"(-{0,2}[\w-]+)\s*(?:[=\s]\s*(.*))?$", line)
        name = match.group(1).lstrip("-") if match else line
        field = FILE_FLAG_FIELDS.get(name)
        if field is None:
            raise ValueError(f"line {lineno}: unknown flag {name!r}")
        value = match.group(2) or ""
        if field in _BOOL_FIELDS and not value:
            value = "true"
        values[field] = value
    return values


class EnvSettings(BaseSettings):
    """Environment-driven option defaults and .env support.

    Attributes
    ----------
    url, login, password: Optional[str]
        Connection defaults (``NSC_WEB_URL``, ``NSC_WEB_LOGIN``,
        ``NSC_WEB_PASSWORD``).
    api_version: Optional[ApiVersion]
        ``NSC_WEB_API_VERSION``, "legacy" or "1".
    timeout: Optional[float]
        ``NSC_WEB_TIMEOUT`` in seconds.
    float_round: Optional[int]
        ``NSC_WEB_FLOAT_ROUND``.
    extra_text: Optional[str]
        ``NSC_WEB_EXTRA_TEXT``.
    insecure: Optional[bool]
        ``NSC_WEB_INSECURE``.
    log_level: str
        Logging level name. Defaults to "WARNING" so that only the plugin
        line reaches the monitoring system.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="NSC_WEB_", extra="ignore"
    )

    url: Optional[str] = None
    login: Optional[str] = None
    password: Optional[str] = None
    api_version: Optional[ApiVersion] = None
    timeout: Optional[float] = None
    float_round: Optional[int] = None
    extra_text: Optional[str] = None
    insecure: Optional[bool] = None
    log_level: str = Field("WARNING")
