"""Unit tests for the archive consistency cache."""

from __future__ import annotations

from dataclasses import replace

import pytest

from builder.archive_builder import ArchiveBuilder
from core.errors import ArchiveLogicError, ArchiveUnknownKeyError
from core.types import ArchiveTypeStore, OpenMetadataArchive
from element_factories import (
    build_classification,
    build_classification_def,
    build_entity,
    build_entity_def,
    build_header,
    build_primitive_def,
    build_type_def_patch,
)


def test_register_type_rejects_blank_type_names() -> None:
    """Type names containing blanks should be rejected."""
    builder = ArchiveBuilder()

    with pytest.raises(ArchiveLogicError):
        builder.register_type(build_entity_def(name="Data Asset"))


def test_register_type_rejects_duplicate_name_with_new_guid() -> None:
    """A second type with the same name and a different GUID is a duplicate."""
    builder = ArchiveBuilder()
    builder.register_type(build_entity_def(guid="g-1", name="Asset"))

    with pytest.raises(ArchiveLogicError):
        builder.register_type(build_entity_def(guid="g-2", name="Asset"))


def test_register_type_rejects_reused_guid_across_categories() -> None:
    """A GUID already owned by another type should be rejected."""
    builder = ArchiveBuilder()
    builder.register_type(build_entity_def(guid="shared-guid", name="Asset"))

    with pytest.raises(ArchiveLogicError):
        builder.register_type(build_classification_def(guid="shared-guid", name="Tag"))


def test_register_type_rejects_name_used_by_other_category() -> None:
    """Type names are unique across categories."""
    builder = ArchiveBuilder()
    builder.register_type(build_primitive_def(guid="p-1", name="Asset"))

    with pytest.raises(ArchiveLogicError):
        builder.register_type(build_entity_def(guid="e-1", name="Asset"))


def test_register_type_accepts_identical_reregistration() -> None:
    """Registering identical content twice should be a no-op."""
    builder = ArchiveBuilder()
    builder.register_type(build_entity_def())

    builder.register_type(build_entity_def())

    assert builder.get_entity_def("Asset") == build_entity_def()


def test_register_type_accepts_higher_version_as_update() -> None:
    """A strictly higher version of the same identity should replace the cached type."""
    builder = ArchiveBuilder()
    builder.register_type(build_entity_def(version=1))

    builder.register_type(build_entity_def(version=2))

    assert builder.get_entity_def("Asset").version == 2


def test_register_type_rejects_same_version_with_new_content() -> None:
    """Changed content at an unchanged version should be rejected."""
    builder = ArchiveBuilder()
    builder.register_type(build_entity_def())

    with pytest.raises(ArchiveLogicError):
        builder.register_type(replace(build_entity_def(), description="changed"))


def test_register_instance_rejects_duplicate_entity_guid() -> None:
    """Different entity content under one GUID and version is a duplicate."""
    builder = ArchiveBuilder()
    builder.register_instance(build_entity(name="first"))

    with pytest.raises(ArchiveLogicError):
        builder.register_instance(build_entity(name="second"))


def test_register_instance_replaces_classification_on_update() -> None:
    """A newer classification version should replace the cached one."""
    builder = ArchiveBuilder()
    builder.register_instance(build_classification(version=1))
    builder.register_instance(build_classification(version=2))

    with pytest.raises(ArchiveLogicError):
        builder.register_instance(build_classification(version=1))


def test_register_instance_rejects_lower_classification_version() -> None:
    """An older version of a registered classification should be rejected."""
    builder = ArchiveBuilder()
    builder.register_instance(build_classification(version=3))

    with pytest.raises(ArchiveLogicError):
        builder.register_instance(build_classification(version=2))


def test_lookup_type_finds_by_guid() -> None:
    """Type lookup should accept a GUID as well as a name."""
    builder = ArchiveBuilder()
    builder.register_type(build_entity_def(guid="entity-def-asset"))

    found = builder.lookup_type("entity-def-asset")

    assert found == build_entity_def(guid="entity-def-asset")


def test_typed_getter_raises_for_unknown_name() -> None:
    """Typed getters should raise the unknown-key error for missing names."""
    builder = ArchiveBuilder()

    with pytest.raises(ArchiveUnknownKeyError):
        builder.get_primitive_def("string")


def test_get_type_def_by_name_ignores_attribute_types() -> None:
    """Attribute type definitions are not returned as type definitions."""
    builder = ArchiveBuilder()
    builder.register_type(build_primitive_def(name="string"))

    with pytest.raises(ArchiveUnknownKeyError):
        builder.get_type_def_by_name("string")


def test_get_patch_for_type_starts_from_current_version() -> None:
    """Patch skeletons should apply to the latest registered version."""
    builder = ArchiveBuilder()
    builder.register_type(build_entity_def(version=3))

    patch = builder.get_patch_for_type("Asset")

    assert (patch.apply_to_version, patch.update_to_version) == (3, 4)


def test_get_patch_for_type_follows_registered_patches() -> None:
    """Patch skeletons should build on the newest registered patch."""
    builder = ArchiveBuilder()
    builder.register_type(build_entity_def(version=1))
    builder.register_type(build_type_def_patch(apply_to_version=1))

    patch = builder.get_patch_for_type("Asset")

    assert (patch.apply_to_version, patch.new_version_name) == (2, "2.0")


def test_register_type_rejects_conflicting_patch() -> None:
    """Two different patches for the same type version should conflict."""
    builder = ArchiveBuilder()
    builder.register_type(build_type_def_patch())

    with pytest.raises(ArchiveLogicError):
        builder.register_type(replace(build_type_def_patch(), description="other"))


def test_dependency_types_are_preloaded() -> None:
    """Types from dependent archives should be available for lookup."""
    dependency = OpenMetadataArchive(
        header=build_header(guid="base-archive"),
        type_store=ArchiveTypeStore(type_defs=(build_entity_def(name="Referenceable"),)),
    )

    builder = ArchiveBuilder(build_header(), depends_on=(dependency,))

    assert builder.get_type_def_by_name("Referenceable").name == "Referenceable"


def test_dependency_guids_are_recorded() -> None:
    """Builder should remember the GUIDs of dependent archives."""
    dependency = OpenMetadataArchive(header=build_header(guid="base-archive"))

    builder = ArchiveBuilder(build_header(), depends_on=(dependency,))

    assert builder.dependency_guids == ("base-archive",)
