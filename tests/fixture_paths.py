"""Shared fixture path helpers for tests."""

from __future__ import annotations

from pathlib import Path


def fixture_path(relative_path: str) -> Path:
    """Resolve a fixture path relative to tests/fixtures.

    Args:
        relative_path: Path under fixtures root, e.g. ``archives/sample_archive.json``.

    Returns:
        Absolute fixture path, independent of the working directory.
    """
    return Path(__file__).resolve().parent / "fixtures" / relative_path
