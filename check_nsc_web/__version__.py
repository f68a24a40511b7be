"""Version of the installed check-nsc-web distribution."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("check-nsc-web")
except PackageNotFoundError:
    # Source checkout without installation
    __version__ = "0.0.0-dev"
