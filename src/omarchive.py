"""Public SDK surface for omarchive.

This module provides a stable import path for archive store users.
It re-exports the store facade, its configuration, and the archive models.
"""

from __future__ import annotations

from builder.archive_builder import ArchiveBuilder, ArchiveCache
from core.config import ArchiveStoreConfig
from core.diagnostics import DiagnosticSink, RecordingDiagnosticSink, StructlogDiagnosticSink
from core.errors import (
    ArchiveCorruptElementError,
    ArchiveError,
    ArchiveLogicError,
    ArchiveUnknownKeyError,
    ArchiveUnsupportedOperationError,
)
from core.types import (
    ArchiveHeader,
    ArchiveInstanceStore,
    ArchiveTypeStore,
    OpenMetadataArchive,
    ReplaySummary,
)
from store.addressing import ElementCategory, address_of
from store.archive_document import load_archive_document, write_archive_document
from store.archive_store import DirectoryArchiveStore
from store.element_codec import ElementCodec

__all__ = [
    "ArchiveBuilder",
    "ArchiveCache",
    "ArchiveCorruptElementError",
    "ArchiveError",
    "ArchiveHeader",
    "ArchiveInstanceStore",
    "ArchiveLogicError",
    "ArchiveStoreConfig",
    "ArchiveTypeStore",
    "ArchiveUnknownKeyError",
    "ArchiveUnsupportedOperationError",
    "DiagnosticSink",
    "DirectoryArchiveStore",
    "ElementCategory",
    "ElementCodec",
    "OpenMetadataArchive",
    "RecordingDiagnosticSink",
    "ReplaySummary",
    "StructlogDiagnosticSink",
    "address_of",
    "load_archive_document",
    "write_archive_document",
]
