"""
check_nsc_web package.

A monitoring plugin that queries the NSClient++ REST API, normalizes the
legacy and v1 response schemas into one canonical result, and renders it as
a Nagios plugin status line with performance data.
"""

from .__version__ import __version__

__all__ = ["__version__"]
