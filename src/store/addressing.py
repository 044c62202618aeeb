"""Deterministic storage addresses for archive elements.

This module maps an element category and its identifying fields to a
relative path inside the archive tree. Addressing is a pure function: the
same identity always resolves to the same path, and key components are
percent-quoted so a ``:`` or ``/`` inside a GUID or name cannot alias
another identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from urllib.parse import quote

from core.constants import (
    ATTRIBUTE_TYPE_DEFS_DIR_NAME,
    CLASSIFICATION_DEFS_DIR_NAME,
    CLASSIFICATIONS_DIR_NAME,
    COLLECTION_DEFS_DIR_NAME,
    COMPOSITE_KEY_SEPARATOR,
    ENTITIES_DIR_NAME,
    ENTITY_DEFS_DIR_NAME,
    ENUM_DEFS_DIR_NAME,
    INSTANCE_STORE_DIR_NAME,
    PRIMITIVE_DEFS_DIR_NAME,
    RELATIONSHIP_DEFS_DIR_NAME,
    RELATIONSHIPS_DIR_NAME,
    TYPE_DEF_PATCHES_DIR_NAME,
    TYPE_DEFS_DIR_NAME,
    TYPE_STORE_DIR_NAME,
)
from core.errors import ArchiveKeyError
from core.instances import ClassificationEntityExtension, EntityDetail, Relationship
from core.type_defs import (
    ClassificationDef,
    CollectionDef,
    EntityDef,
    EnumDef,
    PrimitiveDef,
    RelationshipDef,
    TypeDefPatch,
)
from core.types import ArchiveElement


class ElementCategory(str, Enum):
    """Storage category of an archive element."""

    PRIMITIVE_DEF = "PrimitiveDef"
    COLLECTION_DEF = "CollectionDef"
    ENUM_DEF = "EnumDef"
    ENTITY_DEF = "EntityDef"
    RELATIONSHIP_DEF = "RelationshipDef"
    CLASSIFICATION_DEF = "ClassificationDef"
    TYPE_DEF_PATCH = "TypeDefPatch"
    ENTITY = "Entity"
    RELATIONSHIP = "Relationship"
    CLASSIFICATION = "Classification"


_TYPE_STORE = PurePosixPath(TYPE_STORE_DIR_NAME)
_INSTANCE_STORE = PurePosixPath(INSTANCE_STORE_DIR_NAME)

CATEGORY_DIRECTORIES: dict[ElementCategory, PurePosixPath] = {
    ElementCategory.PRIMITIVE_DEF: _TYPE_STORE / ATTRIBUTE_TYPE_DEFS_DIR_NAME / PRIMITIVE_DEFS_DIR_NAME,
    ElementCategory.COLLECTION_DEF: _TYPE_STORE
    / ATTRIBUTE_TYPE_DEFS_DIR_NAME
    / COLLECTION_DEFS_DIR_NAME,
    ElementCategory.ENUM_DEF: _TYPE_STORE / ATTRIBUTE_TYPE_DEFS_DIR_NAME / ENUM_DEFS_DIR_NAME,
    ElementCategory.ENTITY_DEF: _TYPE_STORE / TYPE_DEFS_DIR_NAME / ENTITY_DEFS_DIR_NAME,
    ElementCategory.RELATIONSHIP_DEF: _TYPE_STORE / TYPE_DEFS_DIR_NAME / RELATIONSHIP_DEFS_DIR_NAME,
    ElementCategory.CLASSIFICATION_DEF: _TYPE_STORE
    / TYPE_DEFS_DIR_NAME
    / CLASSIFICATION_DEFS_DIR_NAME,
    ElementCategory.TYPE_DEF_PATCH: _TYPE_STORE / TYPE_DEF_PATCHES_DIR_NAME,
    ElementCategory.ENTITY: _INSTANCE_STORE / ENTITIES_DIR_NAME,
    ElementCategory.RELATIONSHIP: _INSTANCE_STORE / RELATIONSHIPS_DIR_NAME,
    ElementCategory.CLASSIFICATION: _INSTANCE_STORE / CLASSIFICATIONS_DIR_NAME,
}

CATEGORY_ELEMENT_TYPES: dict[ElementCategory, type] = {
    ElementCategory.PRIMITIVE_DEF: PrimitiveDef,
    ElementCategory.COLLECTION_DEF: CollectionDef,
    ElementCategory.ENUM_DEF: EnumDef,
    ElementCategory.ENTITY_DEF: EntityDef,
    ElementCategory.RELATIONSHIP_DEF: RelationshipDef,
    ElementCategory.CLASSIFICATION_DEF: ClassificationDef,
    ElementCategory.TYPE_DEF_PATCH: TypeDefPatch,
    ElementCategory.ENTITY: EntityDetail,
    ElementCategory.RELATIONSHIP: Relationship,
    ElementCategory.CLASSIFICATION: ClassificationEntityExtension,
}
_CATEGORIES_BY_TYPE = {
    element_type: category for category, element_type in CATEGORY_ELEMENT_TYPES.items()
}


@dataclass(frozen=True)
class ElementAddress:
    """Resolved storage address of one element identity.

    Attributes:
        category: Storage category.
        key: Unquoted identity key.
        relative_path: Path relative to the archive root, without suffix.
    """

    category: ElementCategory
    key: str
    relative_path: PurePosixPath

    @property
    def directory(self) -> PurePosixPath:
        """Return the category directory holding this element."""
        return self.relative_path.parent


def category_of(element: object) -> ElementCategory:
    """Return the storage category of an element.

    Raises:
        ArchiveKeyError: If the object is not an archive element.
    """
    category = _CATEGORIES_BY_TYPE.get(type(element))
    if category is None:
        raise ArchiveKeyError(
            f"Cannot address {type(element).__name__}: not an archive element type."
        )
    return category


def storage_key(element: ArchiveElement) -> str:
    """Derive the identity key of an element from its category fields.

    Args:
        element: Archive element.

    Returns:
        Guid for most categories, or the composite key for patches and
        classification extensions.

    Raises:
        ArchiveKeyError: If the element lacks the fields its key needs.
    """
    category = category_of(element)
    components = _key_components(element)
    for component in components:
        _require_component(component, "key", category)
    return COMPOSITE_KEY_SEPARATOR.join(str(component) for component in components)


def type_def_patch_key(type_def_guid: str, apply_to_version: int) -> str:
    """Build the composite key of a type definition patch."""
    _require_component(type_def_guid, "type_def_guid", ElementCategory.TYPE_DEF_PATCH)
    return f"{type_def_guid}{COMPOSITE_KEY_SEPARATOR}{apply_to_version}"


def classification_key(entity_guid: str, classification_name: str) -> str:
    """Build the composite key of a classification extension."""
    _require_component(entity_guid, "classified_entity_guid", ElementCategory.CLASSIFICATION)
    _require_component(classification_name, "classification_name", ElementCategory.CLASSIFICATION)
    return f"{entity_guid}{COMPOSITE_KEY_SEPARATOR}{classification_name}"


def element_path(category: ElementCategory, *key_components: object) -> PurePosixPath:
    """Resolve the relative path for an identity given its key components.

    Args:
        category: Storage category.
        key_components: Guid, or the two composite key parts.

    Returns:
        Path relative to the archive root, without file suffix.

    Raises:
        ArchiveKeyError: If components are missing or empty.
    """
    if not key_components:
        raise ArchiveKeyError(f"Cannot address {category.value}: no key components supplied.")
    for component in key_components:
        _require_component(component, "key", category)
    file_stem = COMPOSITE_KEY_SEPARATOR.join(_quote_component(str(c)) for c in key_components)
    return CATEGORY_DIRECTORIES[category] / file_stem


def address_of(element: ArchiveElement) -> ElementAddress:
    """Resolve the full storage address of an element.

    Raises:
        ArchiveKeyError: If the element is not addressable.
    """
    category = category_of(element)
    return ElementAddress(
        category=category,
        key=storage_key(element),
        relative_path=element_path(category, *_key_components(element)),
    )


def _key_components(element: object) -> tuple[object, ...]:
    if isinstance(element, TypeDefPatch):
        return (element.type_def_guid, element.apply_to_version)
    if isinstance(element, ClassificationEntityExtension):
        return (element.classified_entity_guid, element.classification_name)
    return (getattr(element, "guid", None),)


def _quote_component(component: str) -> str:
    quoted = quote(component, safe="")
    if quoted in (".", ".."):
        return quoted.replace(".", "%2E")
    return quoted


def _require_component(value: object, field_name: str, category: ElementCategory) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ArchiveKeyError(
            f"Cannot address {category.value}: {field_name} is empty. "
            "Populate identifying fields before storing the element."
        )
