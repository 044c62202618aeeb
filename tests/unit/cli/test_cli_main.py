"""Unit tests for CLI command handling."""

from __future__ import annotations

import json

import pytest

from cli.main import main
from fixture_paths import fixture_path


def _run(store_root, *args: str) -> int:
    return main(["--store", str(store_root), *args])


def test_cli_init_writes_archive_header(tmp_path, capsys) -> None:
    """CLI init should create the archive and report its root."""
    exit_code = _run(tmp_path / "archive", "init", "--guid", "cli-archive", "--name", "CliArchive")
    output = capsys.readouterr().out

    assert exit_code == 0 and (tmp_path / "archive" / "archiveProperties.json").is_file() and (
        "archive_root=" in output
    )


def test_cli_load_reports_added_count(tmp_path, capsys) -> None:
    """CLI load should replay a document and print counts."""
    document = fixture_path("archives/sample_archive.json")

    exit_code = _run(tmp_path / "archive", "load", str(document))
    output = capsys.readouterr().out

    assert exit_code == 0 and "added_count=6" in output


def test_cli_stats_prints_category_counts(tmp_path, capsys) -> None:
    """CLI stats should print a count per element category."""
    _run(tmp_path / "archive", "load", str(fixture_path("archives/sample_archive.json")))
    capsys.readouterr()

    _run(tmp_path / "archive", "stats")
    output_lines = capsys.readouterr().out.splitlines()

    assert "Entity=2" in output_lines and "archive_guid=fixture-archive" in output_lines


def test_cli_show_prints_element_json(tmp_path, capsys) -> None:
    """CLI show should print the stored element payload."""
    _run(tmp_path / "archive", "load", str(fixture_path("archives/sample_archive.json")))
    capsys.readouterr()

    exit_code = _run(tmp_path / "archive", "show", "Entity", "entity-a")
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0 and payload["guid"] == "entity-a"


def test_cli_show_resolves_classification_key(tmp_path, capsys) -> None:
    """CLI show should split composite classification keys."""
    _run(tmp_path / "archive", "load", str(fixture_path("archives/sample_archive.json")))
    capsys.readouterr()

    _run(tmp_path / "archive", "show", "Classification", "entity-a:Confidentiality")
    payload = json.loads(capsys.readouterr().out)

    assert payload["classification"]["name"] == "Confidentiality"


def test_cli_show_unknown_key_exits_with_error(tmp_path, capsys) -> None:
    """CLI show should exit 1 for an unknown key."""
    _run(tmp_path / "archive", "init", "--guid", "cli-archive", "--name", "CliArchive")
    capsys.readouterr()

    exit_code = _run(tmp_path / "archive", "show", "Entity", "missing")

    assert exit_code == 1 and "error=" in capsys.readouterr().out


def test_cli_export_writes_document(tmp_path, capsys) -> None:
    """CLI export should stream the archive into a JSON document."""
    _run(tmp_path / "archive", "load", str(fixture_path("archives/sample_archive.json")))
    output_path = tmp_path / "export.json"

    exit_code = _run(tmp_path / "archive", "export", str(output_path))

    assert exit_code == 0 and "element_count=6" in capsys.readouterr().out


def test_cli_export_s3_uploads_tree(tmp_path, capsys, monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI export-s3 should print the uploaded file count."""
    uploads: list[str] = []

    class _FakeS3Client:
        def upload_file(self, filename: str, bucket: str, key: str) -> None:
            uploads.append(key)

    monkeypatch.setattr("store.archive_store.create_s3_client", lambda config: _FakeS3Client())
    _run(tmp_path / "archive", "init", "--guid", "cli-archive", "--name", "CliArchive")
    capsys.readouterr()

    exit_code = _run(tmp_path / "archive", "export-s3", "s3://bucket/prefix")

    assert exit_code == 0 and uploads == ["prefix/archiveProperties.json"]


def test_cli_remove_deletes_archive(tmp_path, capsys) -> None:
    """CLI remove should delete the archive tree."""
    _run(tmp_path / "archive", "init", "--guid", "cli-archive", "--name", "CliArchive")

    exit_code = _run(tmp_path / "archive", "remove")

    assert exit_code == 0 and not (tmp_path / "archive").exists()


def test_cli_requires_command() -> None:
    """CLI should exit with usage error when no command is given."""
    with pytest.raises(SystemExit):
        main([])
