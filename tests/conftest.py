"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import check_nsc_web`` resolve correctly regardless of the working directory
pytest chooses, and isolates tests from ``NSC_WEB_*`` settings of the host.
"""

from __future__ import annotations

import copy
import os
import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Clear NSC_WEB_* variables and run from an empty directory (no .env)."""
    for key in list(os.environ):
        if key.startswith("NSC_WEB_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


LEGACY_CPU_BODY = {
    "header": {"source_id": ""},
    "payload": [
        {
            "command": "check_cpu",
            "result": "OK",
            "lines": [
                {
                    "message": "CPU load ok",
                    "perf": [
                        {
                            "alias": "load",
                            "float_value": {
                                "value": 0.42,
                                "unit": "%",
                                "warning": 0.8,
                                "critical": 0.95,
                            },
                        }
                    ],
                }
            ],
        }
    ],
}


V1_DRIVE_BODY = {
    "command": "check_drivesize",
    "result": 2,
    "lines": [
        {
            "message": "C:\\: 45GB/50GB used",
            "perf": {
                "C:\\ used": {
                    "value": 45,
                    "unit": "GB",
                    "warning": 40,
                    "critical": 45,
                    "minimum": 0,
                    "maximum": 50,
                },
                "C:\\ used %": {"value": 90, "unit": "%", "warning": 80},
            },
        }
    ],
}


@pytest.fixture
def legacy_cpu_body():
    """Legacy response of a healthy check_cpu query."""
    return copy.deepcopy(LEGACY_CPU_BODY)


@pytest.fixture
def v1_drive_body():
    """v1 response of a critical check_drivesize query."""
    return copy.deepcopy(V1_DRIVE_BODY)
