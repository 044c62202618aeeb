"""Diagnostic sink for archive I/O failures.

Stores report every recoverable read or write failure here before
returning an empty or failed result. Reporting never alters control flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from core.logging_config import get_logger


class DiagnosticSink(Protocol):
    """Receiver for recoverable archive I/O failures."""

    def log_failure(self, action: str, path: str, error_kind: str, message: str) -> None:
        """Record one failure."""


class StructlogDiagnosticSink:
    """Diagnostic sink that emits structured warnings through structlog."""

    def __init__(self, logger_name: str = "omarchive.diagnostics") -> None:
        self._logger = get_logger(logger_name)

    def log_failure(self, action: str, path: str, error_kind: str, message: str) -> None:
        """Emit one ``archive_io_failure`` warning event."""
        self._logger.warning(
            "archive_io_failure",
            action=action,
            path=path,
            error_kind=error_kind,
            message=message,
        )


@dataclass(frozen=True)
class DiagnosticRecord:
    """One captured failure report."""

    action: str
    path: str
    error_kind: str
    message: str


@dataclass
class RecordingDiagnosticSink:
    """Diagnostic sink that keeps reports in memory for inspection."""

    records: list[DiagnosticRecord] = field(default_factory=list)

    def log_failure(self, action: str, path: str, error_kind: str, message: str) -> None:
        """Append one failure report."""
        self.records.append(DiagnosticRecord(action, path, error_kind, message))
