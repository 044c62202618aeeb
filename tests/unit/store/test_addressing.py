"""Unit tests for deterministic element addressing."""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from core.errors import ArchiveKeyError
from element_factories import (
    build_classification,
    build_entity,
    build_primitive_def,
    build_relationship_def,
    build_type_def_patch,
)
from store.addressing import (
    ElementCategory,
    address_of,
    category_of,
    classification_key,
    element_path,
    type_def_patch_key,
)


def test_entity_address_uses_guid_under_entities() -> None:
    """Entities should live under instanceStore/entities by GUID."""
    address = address_of(build_entity(guid="entity-9"))

    assert address.relative_path == PurePosixPath("instanceStore/entities/entity-9")


def test_primitive_def_address_uses_attribute_type_directory() -> None:
    """Primitive definitions should live under attributeTypeDefs/primitiveDefs."""
    address = address_of(build_primitive_def(guid="p-1"))

    assert address.relative_path == PurePosixPath(
        "typeStore/attributeTypeDefs/primitiveDefs/p-1"
    )


def test_relationship_def_address_uses_type_def_directory() -> None:
    """Relationship definitions should live under typeDefs/relationshipDefs."""
    address = address_of(build_relationship_def(guid="r-1"))

    assert address.directory == PurePosixPath("typeStore/typeDefs/relationshipDefs")


def test_patch_address_uses_composite_key() -> None:
    """Patches should be keyed by type GUID and the version they apply to."""
    address = address_of(build_type_def_patch(type_def_guid="t-1", apply_to_version=2))

    assert address.relative_path == PurePosixPath("typeStore/typeDefPatches/t-1:2")


def test_classification_address_uses_entity_and_name() -> None:
    """Classification extensions should be keyed by entity GUID and name."""
    address = address_of(build_classification(entity_guid="X", name="Confidentiality"))

    assert address.relative_path == PurePosixPath("instanceStore/classifications/X:Confidentiality")


def test_composite_keys_with_separator_do_not_collide() -> None:
    """Separators inside key components should not alias another identity."""
    first = element_path(ElementCategory.CLASSIFICATION, "a:b", "c")
    second = element_path(ElementCategory.CLASSIFICATION, "a", "b:c")

    assert first != second


def test_slash_in_guid_stays_inside_category_directory() -> None:
    """A slash inside a GUID should be quoted rather than create subdirectories."""
    address = address_of(build_entity(guid="a/b"))

    assert address.directory == PurePosixPath("instanceStore/entities")


def test_dot_guid_is_quoted() -> None:
    """Relative-path GUIDs should never resolve to the category directory itself."""
    path = element_path(ElementCategory.ENTITY, "..")

    assert path.name == "%2E%2E"


def test_blank_guid_raises_key_error() -> None:
    """Elements with an empty GUID cannot be addressed."""
    with pytest.raises(ArchiveKeyError):
        address_of(build_entity(guid="  "))


def test_category_of_rejects_non_elements() -> None:
    """Arbitrary objects have no storage category."""
    with pytest.raises(ArchiveKeyError):
        category_of(object())


def test_address_key_matches_composite_key_helpers() -> None:
    """Address keys should agree with the public composite key helpers."""
    address = address_of(build_type_def_patch(type_def_guid="t-1", apply_to_version=4))

    assert address.key == type_def_patch_key("t-1", 4)


def test_classification_key_joins_components() -> None:
    """Classification keys should join entity GUID and classification name."""
    assert classification_key("entity-1", "Confidentiality") == "entity-1:Confidentiality"
