"""Shared typed models.

This module defines the archive header, the archive element union, and
the archive container models used by the store, builder, and CLI layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Collection, Literal, Union

from core.instances import (
    ArchiveInstance,
    ClassificationEntityExtension,
    EntityDetail,
    Relationship,
)
from core.type_defs import ArchiveTypeElement, AttributeTypeDef, TypeDef, TypeDefPatch

ArchiveType = Literal["CONTENT_PACK", "METADATA_EXPORT", "REPOSITORY_BACKUP"]
ArchiveElement = Union[ArchiveTypeElement, ArchiveInstance]


@dataclass(frozen=True)
class ArchiveHeader:
    """Archive-level metadata persisted in ``archiveProperties.json``.

    Attributes:
        guid: Unique identifier of the archive.
        name: Archive name.
        description: Optional description.
        archive_type: Kind of archive content.
        version: Archive version string.
        originator_name: Organization or person that produced the archive.
        originator_license: Default license for the archive content.
        creation_date: Optional creation timestamp.
        depends_on_archives: GUIDs of archives whose types this archive uses.
    """

    guid: str
    name: str
    description: str | None = None
    archive_type: ArchiveType = "CONTENT_PACK"
    version: str | None = None
    originator_name: str | None = None
    originator_license: str | None = None
    creation_date: datetime | None = None
    depends_on_archives: tuple[str, ...] = ()


@dataclass(frozen=True)
class ArchiveTypeStore:
    """Type definitions carried by an archive."""

    attribute_type_defs: Collection[AttributeTypeDef] = ()
    type_defs: Collection[TypeDef] = ()
    type_def_patches: Collection[TypeDefPatch] = ()


@dataclass(frozen=True)
class ArchiveInstanceStore:
    """Instance records carried by an archive."""

    entities: Collection[EntityDetail] = ()
    relationships: Collection[Relationship] = ()
    classifications: Collection[ClassificationEntityExtension] = ()


@dataclass(frozen=True)
class OpenMetadataArchive:
    """Complete archive: header plus type store and instance store.

    Members are tuples when the archive is built in memory and lazy
    collection views when it is read back from a directory store.
    """

    header: ArchiveHeader | None
    type_store: ArchiveTypeStore = field(default_factory=ArchiveTypeStore)
    instance_store: ArchiveInstanceStore = field(default_factory=ArchiveInstanceStore)


@dataclass(frozen=True)
class ReplaySummary:
    """Outcome of replaying a whole archive into a store.

    Attributes:
        added_count: Elements registered and written.
        failed_count: Elements rejected during replay.
    """

    added_count: int
    failed_count: int
