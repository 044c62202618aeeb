"""Unit tests for archive header persistence."""

from __future__ import annotations

from core.diagnostics import RecordingDiagnosticSink
from element_factories import build_header
from store.archive_properties import ArchivePropertiesStore
from store.element_codec import ElementCodec


def test_write_then_read_returns_header(tmp_path) -> None:
    """A written header should be read back unchanged."""
    properties_store = ArchivePropertiesStore(tmp_path, ElementCodec(), RecordingDiagnosticSink())
    properties_store.write(build_header())

    assert properties_store.read() == build_header()


def test_read_missing_header_returns_none(tmp_path) -> None:
    """A missing properties file should read as None without diagnostics."""
    sink = RecordingDiagnosticSink()
    properties_store = ArchivePropertiesStore(tmp_path, ElementCodec(), sink)

    assert properties_store.read() is None and sink.records == []


def test_read_corrupt_header_returns_none_and_is_diagnosed(tmp_path) -> None:
    """A malformed properties file should read as None and be reported."""
    sink = RecordingDiagnosticSink()
    properties_store = ArchivePropertiesStore(tmp_path, ElementCodec(), sink)
    properties_store.path.write_text('{"archiveName": "no guid"}', encoding="utf-8")

    header = properties_store.read()

    assert header is None and sink.records[0].action == "decode"


def test_read_invalid_utf8_header_returns_none_and_is_diagnosed(tmp_path) -> None:
    """A properties file that is not UTF-8 text should read as None and be reported."""
    sink = RecordingDiagnosticSink()
    properties_store = ArchivePropertiesStore(tmp_path, ElementCodec(), sink)
    properties_store.path.write_bytes(b"\xff\xfe{bad")

    header = properties_store.read()

    assert header is None and sink.records[0].action == "decode"


def test_write_uses_archive_properties_file_name(tmp_path) -> None:
    """Headers should be stored in archiveProperties.json at the archive root."""
    properties_store = ArchivePropertiesStore(tmp_path, ElementCodec(), RecordingDiagnosticSink())

    properties_store.write(build_header())

    assert (tmp_path / "archiveProperties.json").is_file()
