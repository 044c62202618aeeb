"""Unit tests for diagnostic sinks."""

from __future__ import annotations

from core.diagnostics import DiagnosticRecord, RecordingDiagnosticSink, StructlogDiagnosticSink


def test_recording_sink_keeps_reports() -> None:
    """Recording sink should keep every reported failure in order."""
    sink = RecordingDiagnosticSink()

    sink.log_failure("read", "/tmp/a.json", "OSError", "denied")

    assert sink.records == [DiagnosticRecord("read", "/tmp/a.json", "OSError", "denied")]


def test_structlog_sink_emits_failure_event(capsys) -> None:
    """Structlog sink should emit an archive_io_failure event on stderr."""
    sink = StructlogDiagnosticSink()

    sink.log_failure("decode", "/tmp/b.json", "ArchiveCodecError", "bad json")
    captured = capsys.readouterr()

    assert "archive_io_failure" in captured.err and "/tmp/b.json" in captured.err
