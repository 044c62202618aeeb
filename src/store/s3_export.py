"""S3 export helpers for archive directory trees.

This module encapsulates boto3 client creation and directory upload.
boto3 is optional and imported only when an export runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.config import ArchiveStoreConfig
from core.errors import ArchiveDependencyError, ArchiveStoreError


def create_s3_client(config: ArchiveStoreConfig) -> Any:
    """Create boto3 S3 client for exports.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.

    Raises:
        ArchiveDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise ArchiveDependencyError(
            "S3 export requires boto3, but it is not installed. "
            "Install the omarchive[s3] extra to export archives to s3:// destinations."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def upload_directory(s3_client: Any, archive_dir: Path, bucket: str, prefix: str) -> int:
    """Upload all archive files to S3.

    Args:
        s3_client: Boto3 S3 client.
        archive_dir: Local archive root.
        bucket: Destination bucket.
        prefix: Destination key prefix.

    Returns:
        Number of uploaded files.

    Raises:
        ArchiveStoreError: If the directory is missing or an upload fails.
    """
    if not archive_dir.is_dir():
        raise ArchiveStoreError(
            f"Cannot export archive directory {archive_dir}: it does not exist. "
            "Initialize or load the archive before exporting."
        )
    uploaded_count = 0
    for local_file in sorted(archive_dir.rglob("*")):
        if not local_file.is_file():
            continue
        relative_path = local_file.relative_to(archive_dir)
        object_key = f"{prefix.rstrip('/')}/{relative_path.as_posix()}"
        try:
            s3_client.upload_file(str(local_file), bucket, object_key)
        except Exception as error:
            raise ArchiveStoreError(
                f"Failed to export archive file {local_file} to s3://{bucket}/{object_key}: {error}. "
                "Check AWS credentials and retry export."
            ) from error
        uploaded_count += 1
    return uploaded_count
