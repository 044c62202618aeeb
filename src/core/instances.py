"""Typed models for archive instance data.

This module defines the entity, relationship, and classification
extension records an archive carries alongside its type definitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Union

InstanceStatus = Literal["ACTIVE", "DRAFT", "PROPOSED", "APPROVED", "DELETED"]
InstanceTypeCategory = Literal["ENTITY_DEF", "RELATIONSHIP_DEF", "CLASSIFICATION_DEF"]


@dataclass(frozen=True)
class InstanceType:
    """Reference from an instance to the type definition it conforms to."""

    type_def_guid: str
    type_def_name: str
    type_def_version: int = 1
    type_def_category: InstanceTypeCategory = "ENTITY_DEF"


@dataclass(frozen=True)
class Classification:
    """Classification values attached to one entity.

    Attributes:
        name: Classification type name.
        version: Instance version number.
        type: Optional classification type reference.
        properties: Classification property values.
        status: Instance status.
        created_by: Optional author of the classification.
    """

    name: str
    version: int = 1
    type: InstanceType | None = None
    properties: Mapping[str, object] = field(default_factory=dict, hash=False)
    status: InstanceStatus = "ACTIVE"
    created_by: str | None = None


@dataclass(frozen=True)
class EntityDetail:
    """Entity instance record.

    Attributes:
        guid: Unique identifier of the entity.
        version: Instance version number.
        type: Entity type reference.
        properties: Entity property values.
        classifications: Classifications embedded in the entity record.
        status: Instance status.
        metadata_collection_id: Home metadata collection identifier.
        created_by: Optional author of the entity.
        create_time: Optional ISO-8601 creation timestamp.
    """

    guid: str
    version: int
    type: InstanceType
    properties: Mapping[str, object] = field(default_factory=dict, hash=False)
    classifications: tuple[Classification, ...] = ()
    status: InstanceStatus = "ACTIVE"
    metadata_collection_id: str | None = None
    created_by: str | None = None
    create_time: str | None = None


@dataclass(frozen=True)
class Relationship:
    """Relationship instance record linking two entities.

    Attributes:
        guid: Unique identifier of the relationship.
        version: Instance version number.
        type: Relationship type reference.
        end1_guid: GUID of the entity at end 1.
        end2_guid: GUID of the entity at end 2.
        properties: Relationship property values.
        status: Instance status.
        metadata_collection_id: Home metadata collection identifier.
        created_by: Optional author of the relationship.
    """

    guid: str
    version: int
    type: InstanceType
    end1_guid: str
    end2_guid: str
    properties: Mapping[str, object] = field(default_factory=dict, hash=False)
    status: InstanceStatus = "ACTIVE"
    metadata_collection_id: str | None = None
    created_by: str | None = None


@dataclass(frozen=True)
class ClassificationEntityExtension:
    """Classification attached to an entity stored outside the entity record.

    The record has no GUID of its own; its identity is the classified
    entity GUID together with the classification name.
    """

    classified_entity_guid: str
    classification: Classification

    @property
    def classification_name(self) -> str:
        """Return the name of the attached classification."""
        return self.classification.name

    @property
    def version(self) -> int:
        """Return the version of the attached classification."""
        return self.classification.version


ArchiveInstance = Union[EntityDetail, Relationship, ClassificationEntityExtension]

INSTANCE_CLASSES = (EntityDetail, Relationship, ClassificationEntityExtension)
