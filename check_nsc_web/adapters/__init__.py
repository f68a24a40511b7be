"""Transport adapters for monitoring agents."""

from .nsclient import NSClientAdapter, build_query_string

__all__ = ["NSClientAdapter", "build_query_string"]
