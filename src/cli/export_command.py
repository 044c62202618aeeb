"""Export command wiring for omarchive CLI."""

from __future__ import annotations

import argparse
from typing import Any

from store.archive_document import write_archive_document
from store.archive_store import DirectoryArchiveStore


def add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser(
        "export",
        help="Stream archive contents into one JSON archive document",
    )
    parser.add_argument("document", help="Output JSON document path")


def add_export_s3_command(subparsers: Any) -> None:
    """Register export-s3 subcommand."""
    parser = subparsers.add_parser(
        "export-s3",
        help="Upload the archive directory tree to S3",
    )
    parser.add_argument("output_uri", help="Destination s3://bucket/prefix")


def run_export_command(store: DirectoryArchiveStore, args: argparse.Namespace) -> int:
    """Write the archive document and print its element count."""
    element_count = write_archive_document(store.get_archive_contents(), args.document)
    print(f"element_count={element_count}")
    print(f"document_path={args.document}")
    return 0


def run_export_s3_command(store: DirectoryArchiveStore, args: argparse.Namespace) -> int:
    """Upload the archive tree and print the uploaded file count."""
    file_count = store.export_to_s3(args.output_uri)
    print(f"file_count={file_count}")
    print(f"output_uri={args.output_uri}")
    return 0
