"""Core constants used across archive store modules.

This module centralizes directory names, file names, and property keys.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_ARCHIVE_STORE_NAME = Path("open-metadata-archive")
ARCHIVE_STORE_NAME_ENV = "OMARCHIVE_STORE_NAME"
KEEP_VERSION_HISTORY_ENV = "OMARCHIVE_KEEP_VERSION_HISTORY"
S3_REGION_ENV = "OMARCHIVE_S3_REGION"
S3_PROFILE_ENV = "OMARCHIVE_S3_PROFILE"
ARCHIVE_STORE_NAME_PROPERTY = "archiveStoreName"
KEEP_VERSION_HISTORY_PROPERTY = "keepVersionHistory"

ARCHIVE_PROPERTIES_FILE_NAME = "archiveProperties.json"
TYPE_STORE_DIR_NAME = "typeStore"
INSTANCE_STORE_DIR_NAME = "instanceStore"
TYPE_DEFS_DIR_NAME = "typeDefs"
ATTRIBUTE_TYPE_DEFS_DIR_NAME = "attributeTypeDefs"
TYPE_DEF_PATCHES_DIR_NAME = "typeDefPatches"
PRIMITIVE_DEFS_DIR_NAME = "primitiveDefs"
COLLECTION_DEFS_DIR_NAME = "collectionDefs"
ENUM_DEFS_DIR_NAME = "enumDefs"
ENTITY_DEFS_DIR_NAME = "entityDefs"
RELATIONSHIP_DEFS_DIR_NAME = "relationshipDefs"
CLASSIFICATION_DEFS_DIR_NAME = "classificationDefs"
ENTITIES_DIR_NAME = "entities"
RELATIONSHIPS_DIR_NAME = "relationships"
CLASSIFICATIONS_DIR_NAME = "classifications"

JSON_FILE_SUFFIX = ".json"
LATEST_VERSION_ALIAS = 0
COMPOSITE_KEY_SEPARATOR = ":"
ELEMENT_CLASS_FIELD = "class"
ARCHIVE_DOCUMENT_CLASS = "OpenMetadataArchive"
ARCHIVE_PROPERTIES_CLASS = "OpenMetadataArchiveProperties"
SUPPORTED_ARCHIVE_TYPES = ("CONTENT_PACK", "METADATA_EXPORT", "REPOSITORY_BACKUP")
DEFAULT_ARCHIVE_TYPE = "CONTENT_PACK"
FALSE_FLAG_VALUES = ("", "0", "false", "no", "off")
TRUE_FLAG_VALUES = ("1", "true", "yes", "on")
