"""Archive builder: consistency cache for archive content.

The directory store registers every element here before writing it.
Registration rejects duplicates, while re-registering an identity with
identical content is a no-op and re-registering it with a higher version
is treated as an update. Type definitions of dependent archives are
preloaded so new content can reference them.
"""

from __future__ import annotations

from typing import Iterable, Protocol, TypeVar, Union

from core.constants import COMPOSITE_KEY_SEPARATOR
from core.errors import ArchiveLogicError, ArchiveUnknownKeyError
from core.instances import (
    INSTANCE_CLASSES,
    ArchiveInstance,
    ClassificationEntityExtension,
)
from core.logging_config import get_logger
from core.type_defs import (
    ATTRIBUTE_TYPE_DEF_CLASSES,
    TYPE_DEF_CLASSES,
    ArchiveTypeElement,
    AttributeTypeDef,
    ClassificationDef,
    CollectionDef,
    EntityDef,
    EnumDef,
    PrimitiveDef,
    RelationshipDef,
    TypeDef,
    TypeDefPatch,
)
from core.types import ArchiveHeader, OpenMetadataArchive

_LOGGER = get_logger(__name__)

NamedType = Union[AttributeTypeDef, TypeDef]
NamedTypeT = TypeVar("NamedTypeT")


class ArchiveCache(Protocol):
    """Consistency cache consulted by the archive store."""

    def register_type(self, type_element: ArchiveTypeElement) -> None:
        """Validate and remember a type definition or patch."""

    def register_instance(self, instance: ArchiveInstance) -> None:
        """Validate and remember an instance record."""

    def lookup_type(self, name_or_guid: str) -> NamedType | None:
        """Return a registered type definition by name or GUID."""


class ArchiveBuilder:
    """In-memory consistency cache for one archive."""

    def __init__(
        self,
        header: ArchiveHeader | None = None,
        depends_on: Iterable[OpenMetadataArchive] = (),
    ) -> None:
        """Create an empty cache.

        Args:
            header: Header of the archive being built.
            depends_on: Archives whose types new content may reference.
        """
        self._header = header
        self._types_by_category: dict[type, dict[str, NamedType]] = {
            type_class: {} for type_class in ATTRIBUTE_TYPE_DEF_CLASSES + TYPE_DEF_CLASSES
        }
        self._instances_by_category: dict[type, dict[str, ArchiveInstance]] = {
            instance_class: {} for instance_class in INSTANCE_CLASSES
        }
        self._patches: dict[str, TypeDefPatch] = {}
        self._guid_map: dict[str, object] = {}
        self._name_map: dict[str, NamedType] = {}
        self._dependency_guids: list[str] = []
        for archive in depends_on:
            self._load_dependency(archive)

    @property
    def header(self) -> ArchiveHeader | None:
        return self._header

    @property
    def dependency_guids(self) -> tuple[str, ...]:
        """Return GUIDs of the archives preloaded as dependencies."""
        return tuple(self._dependency_guids)

    def register_type(self, type_element: ArchiveTypeElement) -> None:
        """Validate and remember a type definition or patch.

        Raises:
            ArchiveLogicError: If the element duplicates existing content.
        """
        if isinstance(type_element, TypeDefPatch):
            self._register_patch(type_element)
            return
        _check_for_blanks(type_element.name)
        category_map = self._types_by_category[type(type_element)]
        category_label = type(type_element).__name__
        _check_replaceable(
            category_map.get(type_element.name),
            type_element,
            f"Duplicate {category_label} named '{type_element.name}' in archive.",
        )
        _check_replaceable(
            self._guid_map.get(type_element.guid),
            type_element,
            f"Duplicate GUID '{type_element.guid}' in archive for {category_label} "
            f"'{type_element.name}'.",
        )
        _check_replaceable(
            self._name_map.get(type_element.name),
            type_element,
            f"Type name '{type_element.name}' is already used by another type in archive.",
        )
        self._add_type_to_maps(type_element)
        _LOGGER.debug("archive_type_registered", category=category_label, name=type_element.name)

    def register_instance(self, instance: ArchiveInstance) -> None:
        """Validate and remember an instance record.

        Raises:
            ArchiveLogicError: If the instance duplicates existing content.
        """
        instance_key = _instance_key(instance)
        category_map = self._instances_by_category[type(instance)]
        category_label = type(instance).__name__
        _check_replaceable(
            category_map.get(instance_key),
            instance,
            f"Duplicate {category_label} '{instance_key}' in archive.",
        )
        if not isinstance(instance, ClassificationEntityExtension):
            _check_replaceable(
                self._guid_map.get(instance.guid),
                instance,
                f"Duplicate GUID '{instance.guid}' in archive for {category_label}.",
            )
            self._guid_map[instance.guid] = instance
        category_map[instance_key] = instance

    def lookup_type(self, name_or_guid: str) -> NamedType | None:
        """Return a registered type definition by name or GUID."""
        named = self._name_map.get(name_or_guid)
        if named is not None:
            return named
        owner = self._guid_map.get(name_or_guid)
        if isinstance(owner, ATTRIBUTE_TYPE_DEF_CLASSES + TYPE_DEF_CLASSES):
            return owner  # type: ignore[return-value]
        return None

    def get_primitive_def(self, name: str) -> PrimitiveDef:
        return self._typed_lookup(name, PrimitiveDef)

    def get_collection_def(self, name: str) -> CollectionDef:
        return self._typed_lookup(name, CollectionDef)

    def get_enum_def(self, name: str) -> EnumDef:
        return self._typed_lookup(name, EnumDef)

    def get_entity_def(self, name: str) -> EntityDef:
        return self._typed_lookup(name, EntityDef)

    def get_relationship_def(self, name: str) -> RelationshipDef:
        return self._typed_lookup(name, RelationshipDef)

    def get_classification_def(self, name: str) -> ClassificationDef:
        return self._typed_lookup(name, ClassificationDef)

    def get_type_def_by_name(self, name: str) -> TypeDef:
        """Return an entity, relationship, or classification type by name.

        Raises:
            ArchiveUnknownKeyError: If no such type is registered.
        """
        named = self._name_map.get(name)
        if isinstance(named, TYPE_DEF_CLASSES):
            return named  # type: ignore[return-value]
        raise ArchiveUnknownKeyError("TypeDef", name)

    def get_patch_for_type(self, type_name: str) -> TypeDefPatch:
        """Create a skeleton patch for the latest known version of a type.

        Args:
            type_name: Name of a registered type definition.

        Returns:
            Patch applying to the latest version and updating to the next.

        Raises:
            ArchiveUnknownKeyError: If the type is not registered.
        """
        type_def = self.get_type_def_by_name(type_name)
        latest_version = type_def.version
        latest_version_name = type_def.version_name
        for patch in self._patches.values():
            if patch.type_def_name == type_name and patch.update_to_version > latest_version:
                latest_version = patch.update_to_version
                latest_version_name = patch.new_version_name or latest_version_name
        return TypeDefPatch(
            type_def_guid=type_def.guid,
            type_def_name=type_def.name,
            apply_to_version=latest_version,
            update_to_version=latest_version + 1,
            new_version_name=latest_version_name,
        )

    def _typed_lookup(self, name: str, type_class: type[NamedTypeT]) -> NamedTypeT:
        named = self._types_by_category[type_class].get(name)
        if named is None:
            raise ArchiveUnknownKeyError(type_class.__name__, name)
        return named  # type: ignore[return-value]

    def _register_patch(self, patch: TypeDefPatch) -> None:
        _check_for_blanks(patch.type_def_name)
        patch_key = f"{patch.type_def_guid}{COMPOSITE_KEY_SEPARATOR}{patch.apply_to_version}"
        existing = self._patches.get(patch_key)
        if existing is not None and existing != patch:
            raise ArchiveLogicError(
                f"Conflicting TypeDefPatch for '{patch.type_def_name}' applying to version "
                f"{patch.apply_to_version}. Merge the changes into one patch."
            )
        self._patches[patch_key] = patch

    def _add_type_to_maps(self, type_element: NamedType) -> None:
        self._types_by_category[type(type_element)][type_element.name] = type_element
        self._guid_map[type_element.guid] = type_element
        self._name_map[type_element.name] = type_element

    def _load_dependency(self, archive: OpenMetadataArchive) -> None:
        if archive.header is not None:
            self._dependency_guids.append(archive.header.guid)
        type_store = archive.type_store
        for attribute_type_def in type_store.attribute_type_defs:
            self._add_type_to_maps(attribute_type_def)
        for type_def in type_store.type_defs:
            self._add_type_to_maps(type_def)
        for patch in type_store.type_def_patches:
            self._patches[f"{patch.type_def_guid}{COMPOSITE_KEY_SEPARATOR}{patch.apply_to_version}"] = patch
        _LOGGER.info(
            "archive_dependency_loaded",
            archive_guid=archive.header.guid if archive.header else None,
            type_count=len(self._name_map),
        )


def _check_for_blanks(type_name: str) -> None:
    if " " in type_name:
        raise ArchiveLogicError(
            f"Type name '{type_name}' contains blanks. Use CamelCase type names."
        )


def _check_replaceable(existing: object, candidate: object, message: str) -> None:
    """Reject a registration that collides with different existing content.

    Args:
        existing: Currently registered element under the same key, if any.
        candidate: Element being registered.
        message: Error message on collision.

    Raises:
        ArchiveLogicError: If the candidate is neither identical to nor a
            newer version of the same identity.
    """
    if existing is None or existing is candidate:
        return
    if type(existing) is type(candidate) and _identity(existing) == _identity(candidate):
        if existing == candidate or _version(candidate) > _version(existing):
            return
        message = (
            f"{message} Version {_version(candidate)} does not supersede "
            f"registered version {_version(existing)}."
        )
    raise ArchiveLogicError(message)


def _identity(element: object) -> tuple[object, ...]:
    if isinstance(element, ClassificationEntityExtension):
        return (element.classified_entity_guid, element.classification_name)
    if isinstance(element, INSTANCE_CLASSES):
        return (element.guid,)  # type: ignore[union-attr]
    return (getattr(element, "guid", None), getattr(element, "name", None))


def _version(element: object) -> int:
    return int(getattr(element, "version", 0))


def _instance_key(instance: ArchiveInstance) -> str:
    if isinstance(instance, ClassificationEntityExtension):
        return (
            f"{instance.classified_entity_guid}{COMPOSITE_KEY_SEPARATOR}"
            f"{instance.classification_name}"
        )
    return instance.guid
