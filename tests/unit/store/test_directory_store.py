"""Unit tests for directory-backed element persistence."""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from core.diagnostics import RecordingDiagnosticSink
from core.errors import ArchiveStoreError
from element_factories import build_entity
from store.addressing import address_of
from store.directory_store import DirectoryStore

ENTITY_PATH = address_of(build_entity()).relative_path


def test_write_without_history_creates_single_file(tmp_path) -> None:
    """Without history an element should be stored as <key>.json."""
    store = DirectoryStore(tmp_path)

    store.write(ENTITY_PATH, 1, build_entity())

    assert (tmp_path / "instanceStore" / "entities" / "entity-1.json").is_file()


def test_write_without_history_overwrites_previous_version(tmp_path) -> None:
    """Without history the last write wins."""
    store = DirectoryStore(tmp_path)
    store.write(ENTITY_PATH, 1, build_entity(version=1))

    store.write(ENTITY_PATH, 2, build_entity(version=2))

    assert store.read_element(ENTITY_PATH) == build_entity(version=2)


def test_write_with_history_keeps_version_and_alias(tmp_path) -> None:
    """With history both <version>.json and the 0.json alias should exist."""
    store = DirectoryStore(tmp_path, keep_version_history=True)

    store.write(ENTITY_PATH, 3, build_entity(version=3))
    entity_dir = tmp_path / ENTITY_PATH

    assert (entity_dir / "3.json").is_file() and (entity_dir / "0.json").is_file()


def test_read_with_history_returns_requested_version(tmp_path) -> None:
    """Historical versions should remain readable after newer writes."""
    store = DirectoryStore(tmp_path, keep_version_history=True)
    store.write(ENTITY_PATH, 1, build_entity(version=1))
    store.write(ENTITY_PATH, 2, build_entity(version=2))

    result = store.read(ENTITY_PATH, 1)

    assert result.element == build_entity(version=1)


def test_list_versions_excludes_latest_alias(tmp_path) -> None:
    """Version listing should report written versions only."""
    store = DirectoryStore(tmp_path, keep_version_history=True)
    store.write(ENTITY_PATH, 2, build_entity(version=2))
    store.write(ENTITY_PATH, 1, build_entity(version=1))

    assert store.list_versions(ENTITY_PATH) == (1, 2)


def test_read_missing_element_reports_missing(tmp_path) -> None:
    """Absent identities should read as missing without diagnostics."""
    sink = RecordingDiagnosticSink()
    store = DirectoryStore(tmp_path, diagnostics=sink)

    result = store.read(ENTITY_PATH)

    assert result.status == "missing" and sink.records == []


def test_read_corrupt_element_reports_failed(tmp_path) -> None:
    """Malformed files should read as failed and be diagnosed."""
    sink = RecordingDiagnosticSink()
    store = DirectoryStore(tmp_path, diagnostics=sink)
    corrupt_file = store.element_file(ENTITY_PATH)
    corrupt_file.parent.mkdir(parents=True)
    corrupt_file.write_text("{broken", encoding="utf-8")

    result = store.read(ENTITY_PATH)

    assert result.status == "failed" and sink.records[0].action == "decode"


def test_read_invalid_utf8_element_reports_failed(tmp_path) -> None:
    """Files that are not UTF-8 text should read as failed and be diagnosed."""
    sink = RecordingDiagnosticSink()
    store = DirectoryStore(tmp_path, diagnostics=sink)
    undecodable_file = store.element_file(ENTITY_PATH)
    undecodable_file.parent.mkdir(parents=True)
    undecodable_file.write_bytes(b"\xff\xfe{bad")

    result = store.read(ENTITY_PATH)

    assert result.status == "failed" and sink.records[0].action == "decode"


def test_write_failure_returns_false_and_is_diagnosed(tmp_path) -> None:
    """I/O failures during write should be reported, not raised."""
    blocking_file = tmp_path / "blocked"
    blocking_file.write_text("not a directory", encoding="utf-8")
    sink = RecordingDiagnosticSink()
    store = DirectoryStore(blocking_file, diagnostics=sink)

    written = store.write(ENTITY_PATH, 1, build_entity())

    assert written is False and sink.records[0].action == "write"


def test_initialize_is_idempotent(tmp_path) -> None:
    """Initializing twice should keep existing element files."""
    store = DirectoryStore(tmp_path / "archive")
    store.initialize()
    store.write(ENTITY_PATH, 1, build_entity())

    store.initialize()

    assert store.read(ENTITY_PATH).found


def test_initialize_raises_when_root_is_a_file(tmp_path) -> None:
    """Directory creation failures should be fatal store errors."""
    blocking_file = tmp_path / "blocked"
    blocking_file.write_text("not a directory", encoding="utf-8")

    with pytest.raises(ArchiveStoreError):
        DirectoryStore(blocking_file / "archive").initialize()


def test_remove_deletes_archive_tree(tmp_path) -> None:
    """Remove should delete the archive root recursively."""
    store = DirectoryStore(tmp_path / "archive")
    store.initialize()
    store.write(ENTITY_PATH, 1, build_entity())

    store.remove()

    assert not (tmp_path / "archive").exists()


def test_remove_missing_archive_is_noop(tmp_path) -> None:
    """Removing an absent archive should not raise."""
    store = DirectoryStore(tmp_path / "never-created")

    store.remove()

    assert not (tmp_path / "never-created").exists()


def test_count_entries_ignores_non_json_files(tmp_path) -> None:
    """Stray files should not be counted as element identities."""
    store = DirectoryStore(tmp_path)
    store.write(ENTITY_PATH, 1, build_entity())
    (tmp_path / ENTITY_PATH.parent / "notes.txt").write_text("stray", encoding="utf-8")

    assert store.count_entries(PurePosixPath("instanceStore/entities")) == 1
