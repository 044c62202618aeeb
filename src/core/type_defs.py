"""Typed models for archive type definitions.

This module defines the immutable schema elements an archive carries:
attribute type definitions, entity/relationship/classification type
definitions, and the patches that evolve them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Union

TypeDefStatus = Literal["ACTIVE_TYPEDEF", "RENAMED_TYPEDEF", "DEPRECATED_TYPEDEF"]
Cardinality = Literal[
    "AT_MOST_ONE",
    "EXACTLY_ONE",
    "AT_LEAST_ONE",
    "ANY_NUMBER",
    "ONE_ORDERED",
    "ANY_NUMBER_ORDERED",
]


@dataclass(frozen=True)
class PrimitiveDef:
    """Attribute type for a primitive value such as a string or integer.

    Attributes:
        guid: Unique identifier of the type.
        name: Unique type name.
        version: Type version number.
        version_name: Display version string.
        description: Optional description.
        primitive_def_category: Primitive category identifier.
    """

    guid: str
    name: str
    version: int = 1
    version_name: str = "1.0"
    description: str | None = None
    primitive_def_category: str = "OM_PRIMITIVE_TYPE_STRING"


@dataclass(frozen=True)
class CollectionDef:
    """Attribute type for a map or array of other attribute types.

    Attributes:
        guid: Unique identifier of the type.
        name: Unique type name.
        version: Type version number.
        version_name: Display version string.
        description: Optional description.
        collection_def_category: Collection category identifier.
        argument_count: Number of type arguments.
        argument_type_names: Names of the argument primitive types.
    """

    guid: str
    name: str
    version: int = 1
    version_name: str = "1.0"
    description: str | None = None
    collection_def_category: str = "OM_COLLECTION_MAP"
    argument_count: int = 0
    argument_type_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class EnumElementDef:
    """One valid value of an enum attribute type."""

    ordinal: int
    value: str
    description: str | None = None


@dataclass(frozen=True)
class EnumDef:
    """Attribute type restricted to a fixed list of values.

    Attributes:
        guid: Unique identifier of the type.
        name: Unique type name.
        version: Type version number.
        version_name: Display version string.
        description: Optional description.
        element_defs: Valid values in ordinal order.
        default_value: Optional default value.
    """

    guid: str
    name: str
    version: int = 1
    version_name: str = "1.0"
    description: str | None = None
    element_defs: tuple[EnumElementDef, ...] = ()
    default_value: EnumElementDef | None = None


@dataclass(frozen=True)
class TypeDefAttribute:
    """One attribute declared by a type definition."""

    attribute_name: str
    attribute_type_name: str
    description: str | None = None
    cardinality: Cardinality = "AT_MOST_ONE"
    unique: bool = False
    indexable: bool = True


@dataclass(frozen=True)
class EntityDef:
    """Schema for an entity type.

    Attributes:
        guid: Unique identifier of the type.
        name: Unique type name.
        version: Type version number.
        version_name: Display version string.
        description: Optional description.
        super_type_name: Optional name of the parent entity type.
        attributes: Attributes declared by this type.
        status: Lifecycle status of the type.
    """

    guid: str
    name: str
    version: int = 1
    version_name: str = "1.0"
    description: str | None = None
    super_type_name: str | None = None
    attributes: tuple[TypeDefAttribute, ...] = ()
    status: TypeDefStatus = "ACTIVE_TYPEDEF"


@dataclass(frozen=True)
class RelationshipEndDef:
    """One end of a relationship type."""

    entity_type_name: str
    attribute_name: str
    attribute_description: str | None = None
    cardinality: Cardinality = "ANY_NUMBER"


@dataclass(frozen=True)
class RelationshipDef:
    """Schema for a relationship type linking two entity types.

    Attributes:
        guid: Unique identifier of the type.
        name: Unique type name.
        version: Type version number.
        version_name: Display version string.
        description: Optional description.
        end_def1: First end of the relationship.
        end_def2: Second end of the relationship.
        attributes: Attributes declared by this type.
        propagation_rule: Classification propagation rule.
        multi_link: Whether several instances may link the same pair of entities.
        status: Lifecycle status of the type.
    """

    guid: str
    name: str
    version: int = 1
    version_name: str = "1.0"
    description: str | None = None
    end_def1: RelationshipEndDef | None = None
    end_def2: RelationshipEndDef | None = None
    attributes: tuple[TypeDefAttribute, ...] = ()
    propagation_rule: str = "NONE"
    multi_link: bool = False
    status: TypeDefStatus = "ACTIVE_TYPEDEF"


@dataclass(frozen=True)
class ClassificationDef:
    """Schema for a classification type attached to entities.

    Attributes:
        guid: Unique identifier of the type.
        name: Unique type name.
        version: Type version number.
        version_name: Display version string.
        description: Optional description.
        super_type_name: Optional name of the parent classification type.
        valid_entity_def_names: Entity types this classification may attach to.
        attributes: Attributes declared by this type.
        propagatable: Whether the classification propagates over relationships.
        status: Lifecycle status of the type.
    """

    guid: str
    name: str
    version: int = 1
    version_name: str = "1.0"
    description: str | None = None
    super_type_name: str | None = None
    valid_entity_def_names: tuple[str, ...] = ()
    attributes: tuple[TypeDefAttribute, ...] = ()
    propagatable: bool = False
    status: TypeDefStatus = "ACTIVE_TYPEDEF"


@dataclass(frozen=True)
class TypeDefPatch:
    """Versioned delta applied to an existing type definition.

    Attributes:
        type_def_guid: GUID of the patched type.
        type_def_name: Name of the patched type.
        apply_to_version: Type version the patch applies to.
        update_to_version: Type version after the patch.
        new_version_name: Display version string after the patch.
        description: Optional replacement description.
        property_definitions: Attributes added by the patch.
        type_def_options: Option overrides added by the patch.
    """

    type_def_guid: str
    type_def_name: str
    apply_to_version: int
    update_to_version: int
    new_version_name: str | None = None
    description: str | None = None
    property_definitions: tuple[TypeDefAttribute, ...] = ()
    type_def_options: Mapping[str, str] = field(default_factory=dict, hash=False)


AttributeTypeDef = Union[PrimitiveDef, CollectionDef, EnumDef]
TypeDef = Union[EntityDef, RelationshipDef, ClassificationDef]
ArchiveTypeElement = Union[AttributeTypeDef, TypeDef, TypeDefPatch]

ATTRIBUTE_TYPE_DEF_CLASSES = (PrimitiveDef, CollectionDef, EnumDef)
TYPE_DEF_CLASSES = (EntityDef, RelationshipDef, ClassificationDef)
TYPE_ELEMENT_CLASSES = ATTRIBUTE_TYPE_DEF_CLASSES + TYPE_DEF_CLASSES + (TypeDefPatch,)
