"""Unit tests for S3 URI parsing and archive upload."""

from __future__ import annotations

import pytest

from core.errors import ArchiveStoreError
from core.s3_uri import parse_s3_uri
from store.s3_export import upload_directory


class _RecordingS3Client:
    def __init__(self) -> None:
        self.uploaded_keys: list[str] = []

    def upload_file(self, filename: str, bucket: str, key: str) -> None:
        self.uploaded_keys.append(f"{bucket}/{key}")


class _FailingS3Client:
    def upload_file(self, filename: str, bucket: str, key: str) -> None:
        raise RuntimeError("access denied")


def test_parse_s3_uri_splits_bucket_and_prefix() -> None:
    """Valid URIs should split into bucket and prefix."""
    location = parse_s3_uri("s3://archives/exports/daily/")

    assert (location.bucket, location.prefix) == ("archives", "exports/daily")


@pytest.mark.parametrize("uri", ["s3://bucket-only", "s3:///prefix", "https://bucket/prefix"])
def test_parse_s3_uri_rejects_invalid_uri(uri: str) -> None:
    """URIs without scheme, bucket, or prefix should be rejected."""
    with pytest.raises(ArchiveStoreError):
        parse_s3_uri(uri)


def test_upload_directory_uploads_nested_files(tmp_path) -> None:
    """Every nested file should be uploaded under the prefix."""
    (tmp_path / "instanceStore" / "entities").mkdir(parents=True)
    (tmp_path / "instanceStore" / "entities" / "entity-1.json").write_text("{}", encoding="utf-8")
    client = _RecordingS3Client()

    upload_directory(client, tmp_path, "bucket", "archive")

    assert client.uploaded_keys == ["bucket/archive/instanceStore/entities/entity-1.json"]


def test_upload_directory_wraps_client_failures(tmp_path) -> None:
    """Upload failures should raise a store error."""
    (tmp_path / "archiveProperties.json").write_text("{}", encoding="utf-8")

    with pytest.raises(ArchiveStoreError):
        upload_directory(_FailingS3Client(), tmp_path, "bucket", "archive")


def test_upload_directory_rejects_missing_archive(tmp_path) -> None:
    """Exporting a missing archive directory should raise a store error."""
    with pytest.raises(ArchiveStoreError):
        upload_directory(_RecordingS3Client(), tmp_path / "missing", "bucket", "archive")
