"""Command-line interface of the check_nsc_web monitoring plugin.

Queries an NSClient++ webserver over HTTPS, prints one Nagios plugin status
line on stdout and exits with the check's state (0 OK, 1 WARNING,
2 CRITICAL, 3 UNKNOWN). Every failure exits with 3.

Usage
-----
    check_nsc_web -u https://10.1.2.3:8443 -p secret check_cpu
    check_nsc_web -u https://10.1.2.3:8443 -p secret -a 1 check_drivesize \
        drive=c: "warn=used > 80%"
    python -m check_nsc_web.cli -config check.json
    check_nsc_web -config nsc.cfg   # "u https://...", "p secret", "query ..."
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, TypeVar

from pydantic import ValidationError

from . import __version__
from .adapters.nsclient import NSClientAdapter
from .config.models import (
    ApiVersion,
    CheckConfig,
    ConnectionConfig,
    EnvSettings,
    FileConfig,
)
from .domain.decoder import decode_response
from .domain.render import render
from .errors import CheckError, ConfigurationError, summarize_validation_error
from .observability import setup_logging

logger = logging.getLogger(__name__)

UNKNOWN = 3

T = TypeVar("T")

DESCRIPTION = """\
check_nsc_web is a REST client for the NSClient++ webserver for querying
and receiving check information over HTTPS.

Positional arguments are the NSClient++ command followed by its arguments
as key=value or key. Without a command the plugin only checks that the API
is reachable.
"""


def _first(*values: Optional[T]) -> Optional[T]:
    """Return the first value that is not ``None``."""
    for value in values:
        if value is not None:
            return value
    return None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Defaults are ``None`` so that unset options fall through to the config
    file and the environment.
    """
    parser = argparse.ArgumentParser(
        prog="check_nsc_web",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-u", dest="url", help="NSClient++ URL, for example https://10.1.2.3:8443"
    )
    parser.add_argument(
        "-l", dest="login", help="NSClient++ webserver login (default: admin)"
    )
    parser.add_argument("-p", dest="password", help="NSClient++ webserver password")
    parser.add_argument(
        "-a",
        dest="api_version",
        choices=[v.value for v in ApiVersion],
        help="API version of NSClient++ (default: legacy)",
    )
    parser.add_argument(
        "-t",
        dest="timeout",
        type=float,
        help="Connection timeout in seconds (default: 10)",
    )
    parser.add_argument(
        "-f",
        dest="float_round",
        type=int,
        help="Round performance data float values to this number of digits "
        "(default: -1, full precision)",
    )
    parser.add_argument(
        "-x", dest="extra_text", help="Extra text appended to the output message"
    )
    parser.add_argument(
        "-k",
        dest="insecure",
        action="store_true",
        default=None,
        help="Insecure mode - skip TLS verification",
    )
    parser.add_argument(
        "-v",
        dest="verbose",
        action="store_true",
        default=None,
        help="Enable verbose output (request/response dumps on stderr)",
    )
    parser.add_argument(
        "-j", dest="json", action="store_true", help="Print out JSON response body"
    )
    parser.add_argument(
        "-V", dest="version", action="store_true", help="Print program version"
    )
    parser.add_argument(
        "-config",
        dest="config",
        help="Path to config file: JSON, or 'flag value' lines such as 'u URL'",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "query",
        nargs=argparse.REMAINDER,
        help="NSClient++ command and its arguments",
    )
    return parser


def resolve_settings(
    args: argparse.Namespace, file_cfg: FileConfig, env: EnvSettings
) -> Tuple[ConnectionConfig, CheckConfig]:
    """Merge command line, config file and environment into config objects.

    Raises
    ------
    ConfigurationError
        If the merged values fail validation.
    """
    api_version = _first(args.api_version, file_cfg.api_version, env.api_version)
    try:
        connection = ConnectionConfig(
            url=_first(args.url, file_cfg.url, env.url),
            login=_first(args.login, file_cfg.login, env.login, "admin"),
            password=_first(args.password, file_cfg.password, env.password),
            api_version=_first(api_version, ApiVersion.LEGACY),
            timeout_seconds=_first(args.timeout, file_cfg.timeout, env.timeout, 10),
            insecure=_first(args.insecure, file_cfg.insecure, env.insecure, False),
        )
        check = CheckConfig(
            api_version=connection.api_version,
            float_round=_first(
                args.float_round, file_cfg.float_round, env.float_round, -1
            ),
            extra_text=_first(
                args.extra_text, file_cfg.extra_text, env.extra_text, ""
            ),
        )
    except ValidationError as exc:
        raise ConfigurationError(summarize_validation_error(exc)) from exc
    return connection, check


def _load_file_config(path: Optional[str]) -> FileConfig:
    if not path:
        return FileConfig()
    try:
        return FileConfig.load(Path(path))
    except OSError as exc:
        raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigurationError(
            f"invalid config file {path}: {summarize_validation_error(exc)}"
        ) from exc
    except ValueError as exc:
        raise ConfigurationError(f"invalid config file {path}: {exc}") from exc


def _query_args(args: argparse.Namespace, file_cfg: FileConfig) -> List[str]:
    query = list(args.query or [])
    if file_cfg.query:
        query.extend(file_cfg.query.split())
    return query


def _missing_required(
    args: argparse.Namespace, file_cfg: FileConfig, env: EnvSettings
) -> Optional[str]:
    required = (
        ("u", _first(args.url, file_cfg.url, env.url)),
        ("p", _first(args.password, file_cfg.password, env.password)),
    )
    for flag, value in required:
        if value is None:
            return flag
    return None


def execute(
    connection: ConnectionConfig,
    check: CheckConfig,
    query: Sequence[str],
    *,
    as_json: bool = False,
) -> Tuple[str, int]:
    """Run one check and return the stdout line and exit code.

    Parameters
    ----------
    connection: ConnectionConfig
        Agent URL, credentials and transport settings.
    check: CheckConfig
        Decode and render options.
    query: Sequence[str]
        Command followed by its arguments; empty for a reachability probe.
    as_json: bool
        Return the canonical result as JSON instead of the plugin line.

    Raises
    ------
    CheckError
        On transport, HTTP status or decode failures.
    """
    with NSClientAdapter(connection) as client:
        if not query:
            client.ping()
            return f"OK: NSClient API reachable on {connection.url}", 0
        body = client.query(query[0], query[1:])

    result = decode_response(body, check.api_version)
    logger.debug(
        "check.decoded",
        extra={"command": result.command, "severity": result.severity.name},
    )
    if as_json:
        return result.model_dump_json(), 0
    output = render(result, check)
    return output.line, output.exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, run the check, print the status line.

    Returns
    -------
    int
        Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"check_nsc_web v{__version__}", file=sys.stderr)
        return UNKNOWN

    try:
        env = EnvSettings()
        file_cfg = _load_file_config(args.config)
    except CheckError as exc:
        print(exc.status_line())
        return exc.exit_code
    except ValidationError as exc:
        print(f"UNKNOWN: {summarize_validation_error(exc)}")
        return UNKNOWN

    verbose = bool(_first(args.verbose, file_cfg.verbose, False))
    setup_logging(args.log_level or ("DEBUG" if verbose else env.log_level))

    missing = _missing_required(args, file_cfg, env)
    if missing:
        print(f"UNKNOWN: Missing required -{missing} argument", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return UNKNOWN

    try:
        connection, check = resolve_settings(args, file_cfg, env)
        line, exit_code = execute(
            connection, check, _query_args(args, file_cfg), as_json=args.json
        )
    except CheckError as exc:
        logger.debug("check.failed", exc_info=True)
        print(exc.status_line())
        return exc.exit_code
    except Exception as exc:  # exit status must stay within 0-3
        logger.debug("check.unexpected_error", exc_info=True)
        print(f"UNKNOWN: {type(exc).__name__}: {exc}")
        return UNKNOWN

    print(line)
    return exit_code


def run() -> None:
    """Console script entrypoint."""
    sys.exit(main())


if __name__ == "__main__":
    run()
