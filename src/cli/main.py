"""omarchive CLI entry points.
This module exposes archive authoring, loading, and inspection commands.
It maps argparse commands onto archive store calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any, Sequence

from cli.export_command import (
    add_export_command,
    add_export_s3_command,
    run_export_command,
    run_export_s3_command,
)
from core.config import ArchiveStoreConfig
from core.constants import COMPOSITE_KEY_SEPARATOR, DEFAULT_ARCHIVE_TYPE, SUPPORTED_ARCHIVE_TYPES
from core.errors import ArchiveUnknownKeyError
from core.types import ArchiveHeader
from store.addressing import ElementCategory
from store.archive_document import load_archive_document
from store.archive_store import DirectoryArchiveStore
from store.element_codec import ElementCodec


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="omarchive",
        description="Directory-backed open metadata archive store",
    )
    parser.add_argument("--store", help="Override OMARCHIVE_STORE_NAME for this command")
    parser.add_argument(
        "--keep-version-history",
        action="store_true",
        help="Keep one file per element version plus a latest alias",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_init_command(subparsers)
    _add_load_command(subparsers)
    add_export_command(subparsers)
    add_export_s3_command(subparsers)
    _add_stats_command(subparsers)
    _add_show_command(subparsers)
    subparsers.add_parser("remove", help="Delete the archive directory tree")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the omarchive CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    store = _build_store(args.store, args.keep_version_history)
    if args.command == "init":
        return _run_init_command(store, args)
    if args.command == "load":
        return _run_load_command(store, args)
    if args.command == "export":
        return run_export_command(store, args)
    if args.command == "export-s3":
        return run_export_s3_command(store, args)
    if args.command == "stats":
        return _run_stats_command(store)
    if args.command == "show":
        return _run_show_command(store, args)
    if args.command == "remove":
        return _run_remove_command(store)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_store(store_name: str | None, keep_version_history: bool) -> DirectoryArchiveStore:
    """Build an archive store with optional CLI overrides.

    Args:
        store_name: Optional archive directory override.
        keep_version_history: Force version history on.

    Returns:
        Configured archive store.
    """
    config = ArchiveStoreConfig.from_env()
    if store_name:
        config = replace(config, store_root=Path(store_name).expanduser().resolve())
    if keep_version_history:
        config = replace(config, keep_version_history=True)
    return DirectoryArchiveStore(config)


def _run_init_command(store: DirectoryArchiveStore, args: argparse.Namespace) -> int:
    """Handle init command.

    Args:
        store: Archive store.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    header = ArchiveHeader(
        guid=args.guid,
        name=args.name,
        description=args.description,
        archive_type=args.archive_type,
        version=args.archive_version,
        originator_name=args.originator_name,
        originator_license=args.originator_license,
        creation_date=datetime.now(timezone.utc),
    )
    store.set_archive_properties(header)
    print(f"archive_root={store.root}")
    return 0


def _run_load_command(store: DirectoryArchiveStore, args: argparse.Namespace) -> int:
    """Handle load command.

    Args:
        store: Archive store.
        args: Parsed CLI args.

    Returns:
        Exit code; non-zero when any element was rejected.
    """
    archive = load_archive_document(args.document)
    summary = store.set_archive_contents(archive)
    print(f"added_count={summary.added_count}")
    print(f"failed_count={summary.failed_count}")
    return 0 if summary.failed_count == 0 else 1


def _run_stats_command(store: DirectoryArchiveStore) -> int:
    """Print the archive header identity and per-category counts."""
    header = store.get_archive_properties()
    print(f"archive_guid={header.guid if header else '-'}")
    print(f"archive_name={header.name if header else '-'}")
    for category in ElementCategory:
        print(f"{category.value}={len(store.view(category))}")
    return 0


def _run_show_command(store: DirectoryArchiveStore, args: argparse.Namespace) -> int:
    """Print one stored element as JSON.

    Args:
        store: Archive store.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 when the key is unknown.
    """
    category = ElementCategory(args.category)
    try:
        element = store.get_element(category, *_key_components(category, args.key))
    except ArchiveUnknownKeyError as error:
        print(f"error={error}")
        return 1
    print(json.dumps(ElementCodec().to_payload(element), indent=2))
    return 0


def _run_remove_command(store: DirectoryArchiveStore) -> int:
    store.remove()
    print(f"removed={store.root}")
    return 0


def _key_components(category: ElementCategory, key: str) -> tuple[object, ...]:
    """Split a CLI key into the components its category addresses by."""
    if category not in (ElementCategory.TYPE_DEF_PATCH, ElementCategory.CLASSIFICATION):
        return (key,)
    head, separator, tail = key.rpartition(COMPOSITE_KEY_SEPARATOR)
    if not separator:
        return (key,)
    if category is ElementCategory.TYPE_DEF_PATCH and tail.isdigit():
        return (head, int(tail))
    return (head, tail)


def _add_init_command(subparsers: Any) -> None:
    """Register init subcommand."""
    parser = subparsers.add_parser("init", help="Create an archive with a new header")
    parser.add_argument("--guid", required=True, help="Archive GUID")
    parser.add_argument("--name", required=True, help="Archive name")
    parser.add_argument("--description", help="Archive description")
    parser.add_argument(
        "--archive-type",
        default=DEFAULT_ARCHIVE_TYPE,
        choices=SUPPORTED_ARCHIVE_TYPES,
        help="Kind of archive content",
    )
    parser.add_argument("--archive-version", help="Archive version string")
    parser.add_argument("--originator-name", help="Organization or person producing the archive")
    parser.add_argument("--originator-license", help="Default license for archive content")


def _add_load_command(subparsers: Any) -> None:
    """Register load subcommand."""
    parser = subparsers.add_parser(
        "load",
        help="Replace archive contents from a JSON or YAML archive document",
    )
    parser.add_argument("document", help="Archive document path (.json, .yaml, .yml)")


def _add_stats_command(subparsers: Any) -> None:
    """Register stats subcommand."""
    subparsers.add_parser("stats", help="Print per-category element counts")


def _add_show_command(subparsers: Any) -> None:
    """Register show subcommand."""
    parser = subparsers.add_parser("show", help="Print one stored element as JSON")
    parser.add_argument(
        "category",
        choices=[category.value for category in ElementCategory],
        help="Element category",
    )
    parser.add_argument(
        "key",
        help="Element GUID, typeGUID:applyToVersion, or entityGUID:classificationName",
    )
