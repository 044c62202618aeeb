"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ARCHIVE_ENV_VARS = (
    "OMARCHIVE_STORE_NAME",
    "OMARCHIVE_KEEP_VERSION_HISTORY",
    "OMARCHIVE_S3_REGION",
    "OMARCHIVE_S3_PROFILE",
)


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _isolate_archive_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host OMARCHIVE_* settings out of every test."""
    for env_var in ARCHIVE_ENV_VARS:
        monkeypatch.delenv(env_var, raising=False)
