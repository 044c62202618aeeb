"""Archive store exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class ArchiveError(Exception):
    """Base exception for all archive store failures."""


class ArchiveConfigError(ArchiveError):
    """Raised for invalid runtime configuration."""


class ArchiveStoreError(ArchiveError):
    """Raised when the archive directory tree cannot be created or removed."""


class ArchiveCodecError(ArchiveError):
    """Raised when an element cannot be encoded or decoded."""


class ArchiveKeyError(ArchiveError):
    """Raised when a storage address cannot be derived from an element."""


class ArchiveLogicError(ArchiveError):
    """Raised when archive content fails consistency validation."""


class ArchiveUnknownKeyError(ArchiveError):
    """Raised by strict lookups when no element exists for a key.

    Attributes:
        category: Element category that was searched.
        key: Key that was not found.
    """

    def __init__(self, category: str, key: str, message: str | None = None) -> None:
        self.category = category
        self.key = key
        super().__init__(
            message
            or f"Unknown {category} '{key}' in archive. "
            "Add the element before retrieving it or use the query variant."
        )


class ArchiveCorruptElementError(ArchiveUnknownKeyError):
    """Raised by strict lookups when the element file exists but cannot be read."""


class ArchiveUnsupportedOperationError(ArchiveError):
    """Raised when a read-only collection view is asked to mutate."""


class ArchiveDocumentError(ArchiveError):
    """Raised for invalid whole-archive import documents."""


class ArchiveDependencyError(ArchiveError):
    """Raised when an optional runtime dependency is missing."""
