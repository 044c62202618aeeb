"""Directory-backed open metadata archive store.

This module is the public facade over the addressing scheme, the
directory store, the header store, and the consistency cache. Whole-archive
reads return lazy views; whole-archive writes rebuild the tree and replay
every element through the incremental add path.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable, Iterator, Sequence

from builder.archive_builder import ArchiveBuilder, ArchiveCache
from core.config import ArchiveStoreConfig
from core.constants import COMPOSITE_KEY_SEPARATOR, LATEST_VERSION_ALIAS
from core.diagnostics import DiagnosticSink, StructlogDiagnosticSink
from core.errors import (
    ArchiveCorruptElementError,
    ArchiveError,
    ArchiveKeyError,
    ArchiveLogicError,
    ArchiveUnknownKeyError,
)
from core.instances import (
    INSTANCE_CLASSES,
    ClassificationEntityExtension,
    EntityDetail,
    Relationship,
)
from core.logging_config import get_logger
from core.s3_uri import parse_s3_uri
from core.type_defs import (
    ClassificationDef,
    CollectionDef,
    EntityDef,
    EnumDef,
    PrimitiveDef,
    RelationshipDef,
    TypeDef,
    TypeDefPatch,
)
from core.types import (
    ArchiveElement,
    ArchiveHeader,
    ArchiveInstanceStore,
    ArchiveTypeStore,
    OpenMetadataArchive,
    ReplaySummary,
)
from store.addressing import (
    CATEGORY_DIRECTORIES,
    CATEGORY_ELEMENT_TYPES,
    ElementCategory,
    address_of,
    element_path,
)
from store.archive_properties import ArchivePropertiesStore
from store.collection_view import ArchiveCollectionView
from store.directory_store import DirectoryStore
from store.element_codec import ElementCodec
from store.read_result import ReadResult
from store.s3_export import create_s3_client, upload_directory

_LOGGER = get_logger(__name__)

CacheFactory = Callable[[ArchiveHeader | None, Sequence[OpenMetadataArchive]], ArchiveCache]

ATTRIBUTE_TYPE_DEF_CATEGORIES = (
    ElementCategory.PRIMITIVE_DEF,
    ElementCategory.COLLECTION_DEF,
    ElementCategory.ENUM_DEF,
)
TYPE_DEF_CATEGORIES = (
    ElementCategory.ENTITY_DEF,
    ElementCategory.RELATIONSHIP_DEF,
    ElementCategory.CLASSIFICATION_DEF,
)


class DirectoryArchiveStore:
    """Archive store persisting one JSON file per element under a directory tree."""

    def __init__(
        self,
        config: ArchiveStoreConfig,
        diagnostics: DiagnosticSink | None = None,
        codec: ElementCodec | None = None,
        cache_factory: CacheFactory = ArchiveBuilder,
    ) -> None:
        """Open an archive store, loading an existing header when present.

        Args:
            config: Store location and history settings.
            diagnostics: Failure sink; structlog-backed when omitted.
            codec: Element codec; a new stateless codec when omitted.
            cache_factory: Builds the consistency cache from a header and
                the archives it depends on.
        """
        self._config = config
        self._diagnostics = diagnostics or StructlogDiagnosticSink()
        self._codec = codec or ElementCodec()
        self._cache_factory = cache_factory
        self._directory_store = DirectoryStore(
            config.store_root,
            keep_version_history=config.keep_version_history,
            codec=self._codec,
            diagnostics=self._diagnostics,
        )
        self._properties_store = ArchivePropertiesStore(
            config.store_root, self._codec, self._diagnostics
        )
        self._cache = cache_factory(self._properties_store.read(), ())

    @property
    def root(self) -> Path:
        return self._config.store_root

    @property
    def config(self) -> ArchiveStoreConfig:
        return self._config

    @property
    def cache(self) -> ArchiveCache:
        """Return the consistency cache validating new content."""
        return self._cache

    def initialize(self) -> None:
        """Create the archive directory taxonomy; existing content is kept."""
        self._directory_store.initialize()

    def remove(self) -> None:
        """Delete the whole archive directory tree."""
        self._directory_store.remove()

    def get_archive_contents(self) -> OpenMetadataArchive:
        """Return the archive as a header plus lazy per-category views.

        Nothing is materialized: each view reads element files on demand.
        """
        return OpenMetadataArchive(
            header=self.get_archive_properties(),
            type_store=ArchiveTypeStore(
                attribute_type_defs=self.attribute_type_defs(),
                type_defs=self.type_defs(),
                type_def_patches=self.type_def_patches(),
            ),
            instance_store=ArchiveInstanceStore(
                entities=self.entities(),
                relationships=self.relationships(),
                classifications=self.classifications(),
            ),
        )

    def set_archive_contents(self, archive: OpenMetadataArchive) -> ReplaySummary:
        """Replace the stored archive with the supplied one.

        The tree is removed and recreated, the header is written, and every
        element is replayed through ``add_element``. An element that fails
        validation or persistence is reported and skipped.

        Args:
            archive: Archive to persist. It must not be a view over this
                store's own tree, which is deleted first.

        Returns:
            Counts of added and failed elements.

        Raises:
            ArchiveStoreError: If the tree cannot be removed or recreated.
        """
        self.remove()
        self.initialize()
        self._cache = self._cache_factory(archive.header, ())
        if archive.header is not None:
            self._properties_store.write(archive.header)
        added_count = 0
        failed_count = 0
        for element in iter_archive_elements(archive):
            if element is None:
                continue
            try:
                written = self.add_element(element)
            except ArchiveError as error:
                self._diagnostics.log_failure(
                    "replay", str(self.root), type(error).__name__, str(error)
                )
                written = False
            if written:
                added_count += 1
            else:
                failed_count += 1
        _LOGGER.info(
            "archive_contents_replaced",
            root=str(self.root),
            added_count=added_count,
            failed_count=failed_count,
        )
        return ReplaySummary(added_count=added_count, failed_count=failed_count)

    def set_archive_properties(
        self,
        header: ArchiveHeader,
        depends_on_archives: Iterable[OpenMetadataArchive] = (),
    ) -> None:
        """Start a new archive with a header and optional dependencies.

        The consistency cache is recreated and preloaded with the types of
        the dependent archives, whose GUIDs are merged into the header.

        Args:
            header: Archive header to persist.
            depends_on_archives: Archives whose types new content may use.

        Raises:
            ArchiveStoreError: If the directory tree cannot be created.
        """
        dependencies = tuple(depends_on_archives)
        dependency_guids = tuple(
            archive.header.guid for archive in dependencies if archive.header is not None
        )
        merged_guids = tuple(dict.fromkeys(header.depends_on_archives + dependency_guids))
        if merged_guids != header.depends_on_archives:
            header = replace(header, depends_on_archives=merged_guids)
        self._cache = self._cache_factory(header, dependencies)
        self.initialize()
        self._properties_store.write(header)
        _LOGGER.info(
            "archive_properties_set",
            archive_guid=header.guid,
            archive_name=header.name,
            dependency_count=len(dependencies),
        )

    def get_archive_properties(self) -> ArchiveHeader | None:
        """Return the persisted header, or ``None`` when absent or unreadable."""
        return self._properties_store.read()

    def add_element(self, element: ArchiveElement | None) -> bool:
        """Validate and persist any archive element.

        Args:
            element: Element to add; ``None`` is skipped.

        Returns:
            ``True`` when the element was written.

        Raises:
            ArchiveKeyError: If the element has no derivable address.
            ArchiveLogicError: If the consistency cache rejects the element.
        """
        if element is None:
            return False
        address = address_of(element)
        if isinstance(element, INSTANCE_CLASSES):
            self._cache.register_instance(element)  # type: ignore[arg-type]
        else:
            self._cache.register_type(element)  # type: ignore[arg-type]
        version = LATEST_VERSION_ALIAS if isinstance(element, TypeDefPatch) else element.version
        return self._directory_store.write(address.relative_path, version, element)

    def add_primitive_def(self, primitive_def: PrimitiveDef | None) -> bool:
        return self._add_typed(primitive_def, PrimitiveDef)

    def add_collection_def(self, collection_def: CollectionDef | None) -> bool:
        return self._add_typed(collection_def, CollectionDef)

    def add_enum_def(self, enum_def: EnumDef | None) -> bool:
        return self._add_typed(enum_def, EnumDef)

    def add_entity_def(self, entity_def: EntityDef | None) -> bool:
        return self._add_typed(entity_def, EntityDef)

    def add_relationship_def(self, relationship_def: RelationshipDef | None) -> bool:
        return self._add_typed(relationship_def, RelationshipDef)

    def add_classification_def(self, classification_def: ClassificationDef | None) -> bool:
        return self._add_typed(classification_def, ClassificationDef)

    def add_type_def_patch(self, patch: TypeDefPatch | None) -> bool:
        """Persist a patch under ``typeGUID:applyToVersion`` at version 0."""
        return self._add_typed(patch, TypeDefPatch)

    def add_entity(self, entity: EntityDetail | None) -> bool:
        return self._add_typed(entity, EntityDetail)

    def add_relationship(self, relationship: Relationship | None) -> bool:
        return self._add_typed(relationship, Relationship)

    def add_classification(self, classification: ClassificationEntityExtension | None) -> bool:
        return self._add_typed(classification, ClassificationEntityExtension)

    def get_entity(self, guid: str) -> EntityDetail:
        """Return an entity by GUID.

        Raises:
            ArchiveUnknownKeyError: If no entity is stored under the GUID.
            ArchiveCorruptElementError: If the stored file cannot be read.
        """
        return self._strict_read(ElementCategory.ENTITY, guid)

    def get_relationship(self, guid: str) -> Relationship:
        """Return a relationship by GUID.

        Raises:
            ArchiveUnknownKeyError: If no relationship is stored under the GUID.
            ArchiveCorruptElementError: If the stored file cannot be read.
        """
        return self._strict_read(ElementCategory.RELATIONSHIP, guid)

    def get_classification(
        self,
        entity_guid: str,
        classification_name: str,
    ) -> ClassificationEntityExtension:
        """Return the classification attached to an entity.

        Raises:
            ArchiveUnknownKeyError: If the entity has no such classification.
            ArchiveCorruptElementError: If the stored file cannot be read.
        """
        return self._strict_read(ElementCategory.CLASSIFICATION, entity_guid, classification_name)

    def query_entity(self, guid: str) -> EntityDetail | None:
        return self._tolerant_read(ElementCategory.ENTITY, guid)

    def query_relationship(self, guid: str) -> Relationship | None:
        return self._tolerant_read(ElementCategory.RELATIONSHIP, guid)

    def query_classification(
        self,
        entity_guid: str,
        classification_name: str,
    ) -> ClassificationEntityExtension | None:
        return self._tolerant_read(
            ElementCategory.CLASSIFICATION, entity_guid, classification_name
        )

    def get_primitive_def(self, name_or_guid: str) -> PrimitiveDef:
        return self._get_type(ElementCategory.PRIMITIVE_DEF, name_or_guid)

    def get_collection_def(self, name_or_guid: str) -> CollectionDef:
        return self._get_type(ElementCategory.COLLECTION_DEF, name_or_guid)

    def get_enum_def(self, name_or_guid: str) -> EnumDef:
        return self._get_type(ElementCategory.ENUM_DEF, name_or_guid)

    def get_entity_def(self, name_or_guid: str) -> EntityDef:
        return self._get_type(ElementCategory.ENTITY_DEF, name_or_guid)

    def get_relationship_def(self, name_or_guid: str) -> RelationshipDef:
        return self._get_type(ElementCategory.RELATIONSHIP_DEF, name_or_guid)

    def get_classification_def(self, name_or_guid: str) -> ClassificationDef:
        return self._get_type(ElementCategory.CLASSIFICATION_DEF, name_or_guid)

    def get_type_def_by_name(self, name_or_guid: str) -> TypeDef:
        """Return an entity, relationship, or classification type definition.

        The consistency cache is consulted by name or GUID first; stored
        type definitions are then read by GUID.

        Raises:
            ArchiveUnknownKeyError: If no such type definition exists.
            ArchiveCorruptElementError: If a matching file cannot be read.
        """
        cached = self._cache.lookup_type(name_or_guid)
        if isinstance(cached, (EntityDef, RelationshipDef, ClassificationDef)):
            return cached
        corrupt = False
        for category in TYPE_DEF_CATEGORIES:
            result = self._point_read(category, name_or_guid)
            if result.found and isinstance(result.element, CATEGORY_ELEMENT_TYPES[category]):
                return result.element  # type: ignore[return-value]
            corrupt = corrupt or result.status == "failed"
        if corrupt:
            raise ArchiveCorruptElementError(
                "TypeDef", name_or_guid, _corrupt_message("TypeDef", name_or_guid)
            )
        raise ArchiveUnknownKeyError("TypeDef", name_or_guid)

    def get_element(self, category: ElementCategory, *key_components: object) -> ArchiveElement:
        """Return any stored element by category and key components.

        Args:
            category: Storage category.
            key_components: GUID, or the two parts of a composite key.

        Raises:
            ArchiveUnknownKeyError: If nothing is stored under the key.
            ArchiveCorruptElementError: If the stored file cannot be read.
        """
        return self._strict_read(category, *key_components)

    def view(self, category: ElementCategory) -> ArchiveCollectionView:
        """Return a lazy read-only view over one element category."""
        return ArchiveCollectionView(
            self._directory_store,
            (CATEGORY_DIRECTORIES[category],),
            (CATEGORY_ELEMENT_TYPES[category],),
            category.value,
        )

    def attribute_type_defs(self) -> ArchiveCollectionView:
        return self._combined_view(ATTRIBUTE_TYPE_DEF_CATEGORIES, "attributeTypeDefs")

    def type_defs(self) -> ArchiveCollectionView:
        return self._combined_view(TYPE_DEF_CATEGORIES, "typeDefs")

    def type_def_patches(self) -> ArchiveCollectionView:
        return self.view(ElementCategory.TYPE_DEF_PATCH)

    def entities(self) -> ArchiveCollectionView:
        return self.view(ElementCategory.ENTITY)

    def relationships(self) -> ArchiveCollectionView:
        return self.view(ElementCategory.RELATIONSHIP)

    def classifications(self) -> ArchiveCollectionView:
        return self.view(ElementCategory.CLASSIFICATION)

    def export_to_s3(self, output_uri: str) -> int:
        """Upload the archive directory tree to an S3 prefix.

        Args:
            output_uri: Destination in ``s3://bucket/prefix`` form.

        Returns:
            Number of files uploaded.

        Raises:
            ArchiveStoreError: If the URI is invalid or an upload fails.
            ArchiveDependencyError: If boto3 is not installed.
        """
        location = parse_s3_uri(output_uri)
        s3_client = create_s3_client(self._config)
        uploaded_count = upload_directory(s3_client, self.root, location.bucket, location.prefix)
        _LOGGER.info(
            "archive_exported_s3",
            root=str(self.root),
            output_uri=output_uri,
            file_count=uploaded_count,
        )
        return uploaded_count

    def _add_typed(self, element: ArchiveElement | None, expected_type: type) -> bool:
        if element is not None and not isinstance(element, expected_type):
            raise ArchiveLogicError(
                f"Expected {expected_type.__name__}, got {type(element).__name__}. "
                "Use add_element to dispatch by element type."
            )
        return self.add_element(element)

    def _get_type(self, category: ElementCategory, name_or_guid: str):
        cached = self._cache.lookup_type(name_or_guid)
        if isinstance(cached, CATEGORY_ELEMENT_TYPES[category]):
            return cached
        return self._strict_read(category, name_or_guid)

    def _point_read(self, category: ElementCategory, *key_components: object) -> ReadResult:
        try:
            relative_path = element_path(category, *key_components)
        except ArchiveKeyError:
            return ReadResult.missing()
        return self._directory_store.read(relative_path)

    def _strict_read(self, category: ElementCategory, *key_components: object):
        key = COMPOSITE_KEY_SEPARATOR.join(str(component) for component in key_components)
        result = self._point_read(category, *key_components)
        if result.status == "failed":
            raise ArchiveCorruptElementError(
                category.value, key, _corrupt_message(category.value, key)
            )
        if not isinstance(result.element, CATEGORY_ELEMENT_TYPES[category]):
            raise ArchiveUnknownKeyError(category.value, key)
        return result.element

    def _tolerant_read(self, category: ElementCategory, *key_components: object):
        element = self._point_read(category, *key_components).element
        if isinstance(element, CATEGORY_ELEMENT_TYPES[category]):
            return element
        return None

    def _combined_view(
        self,
        categories: tuple[ElementCategory, ...],
        label: str,
    ) -> ArchiveCollectionView:
        return ArchiveCollectionView(
            self._directory_store,
            tuple(CATEGORY_DIRECTORIES[category] for category in categories),
            tuple(CATEGORY_ELEMENT_TYPES[category] for category in categories),
            label,
        )


def iter_archive_elements(archive: OpenMetadataArchive) -> Iterator[ArchiveElement]:
    """Yield every element of an archive in replay order.

    Attribute type definitions come first, then type definitions, patches,
    entities, relationships, and classifications.
    """
    type_store = archive.type_store
    instance_store = archive.instance_store
    for members in (
        type_store.attribute_type_defs,
        type_store.type_defs,
        type_store.type_def_patches,
        instance_store.entities,
        instance_store.relationships,
        instance_store.classifications,
    ):
        yield from members


def _corrupt_message(category: str, key: str) -> str:
    return (
        f"Stored {category} '{key}' exists but cannot be read. "
        "Inspect the diagnostic log and rewrite or remove the element file."
    )
