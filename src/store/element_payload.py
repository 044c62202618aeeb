"""JSON payload mapping for archive elements.

This module converts each archive model to and from a JSON-safe
dictionary with camelCase keys. It carries no discriminator handling;
``element_codec`` adds and dispatches on the ``class`` field.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from core.instances import (
    Classification,
    ClassificationEntityExtension,
    EntityDetail,
    InstanceType,
    Relationship,
)
from core.type_defs import (
    ClassificationDef,
    CollectionDef,
    EntityDef,
    EnumDef,
    EnumElementDef,
    PrimitiveDef,
    RelationshipDef,
    RelationshipEndDef,
    TypeDefAttribute,
    TypeDefPatch,
)
from core.types import ArchiveHeader


def header_to_payload(header: ArchiveHeader) -> dict[str, object]:
    """Serialize an archive header into a JSON-safe payload.

    Args:
        header: Archive header.

    Returns:
        Dictionary payload for JSON encoding.
    """
    return {
        "archiveGUID": header.guid,
        "archiveName": header.name,
        "archiveDescription": header.description,
        "archiveType": header.archive_type,
        "archiveVersion": header.version,
        "originatorName": header.originator_name,
        "originatorLicense": header.originator_license,
        "creationDate": header.creation_date.isoformat() if header.creation_date else None,
        "dependsOnArchives": list(header.depends_on_archives),
    }


def header_from_payload(payload: Mapping[str, Any]) -> ArchiveHeader:
    """Deserialize an archive header payload.

    Args:
        payload: Serialized header payload.

    Returns:
        Parsed archive header.
    """
    creation_date = payload.get("creationDate")
    return ArchiveHeader(
        guid=str(payload["archiveGUID"]),
        name=str(payload["archiveName"]),
        description=_optional_str(payload.get("archiveDescription")),
        archive_type=str(payload.get("archiveType") or "CONTENT_PACK"),  # type: ignore[arg-type]
        version=_optional_str(payload.get("archiveVersion")),
        originator_name=_optional_str(payload.get("originatorName")),
        originator_license=_optional_str(payload.get("originatorLicense")),
        creation_date=datetime.fromisoformat(str(creation_date)) if creation_date else None,
        depends_on_archives=_str_tuple(payload.get("dependsOnArchives")),
    )


def primitive_def_to_payload(type_def: PrimitiveDef) -> dict[str, object]:
    return {
        **_type_header_payload(type_def),
        "primitiveDefCategory": type_def.primitive_def_category,
    }


def primitive_def_from_payload(payload: Mapping[str, Any]) -> PrimitiveDef:
    return PrimitiveDef(
        **_type_header_fields(payload),
        primitive_def_category=str(
            payload.get("primitiveDefCategory", "OM_PRIMITIVE_TYPE_STRING")
        ),
    )


def collection_def_to_payload(type_def: CollectionDef) -> dict[str, object]:
    return {
        **_type_header_payload(type_def),
        "collectionDefCategory": type_def.collection_def_category,
        "argumentCount": type_def.argument_count,
        "argumentTypes": list(type_def.argument_type_names),
    }


def collection_def_from_payload(payload: Mapping[str, Any]) -> CollectionDef:
    return CollectionDef(
        **_type_header_fields(payload),
        collection_def_category=str(payload.get("collectionDefCategory", "OM_COLLECTION_MAP")),
        argument_count=int(payload.get("argumentCount", 0)),
        argument_type_names=_str_tuple(payload.get("argumentTypes")),
    )


def enum_def_to_payload(type_def: EnumDef) -> dict[str, object]:
    default_value = type_def.default_value
    return {
        **_type_header_payload(type_def),
        "elementDefs": [_enum_element_to_payload(element) for element in type_def.element_defs],
        "defaultValue": _enum_element_to_payload(default_value) if default_value else None,
    }


def enum_def_from_payload(payload: Mapping[str, Any]) -> EnumDef:
    default_payload = payload.get("defaultValue")
    return EnumDef(
        **_type_header_fields(payload),
        element_defs=tuple(
            _enum_element_from_payload(item) for item in payload.get("elementDefs") or ()
        ),
        default_value=_enum_element_from_payload(default_payload) if default_payload else None,
    )


def entity_def_to_payload(type_def: EntityDef) -> dict[str, object]:
    return {
        **_type_header_payload(type_def),
        "superType": type_def.super_type_name,
        "propertiesDefinition": _attributes_to_payload(type_def.attributes),
        "status": type_def.status,
    }


def entity_def_from_payload(payload: Mapping[str, Any]) -> EntityDef:
    return EntityDef(
        **_type_header_fields(payload),
        super_type_name=_optional_str(payload.get("superType")),
        attributes=_attributes_from_payload(payload.get("propertiesDefinition")),
        status=str(payload.get("status", "ACTIVE_TYPEDEF")),  # type: ignore[arg-type]
    )


def relationship_def_to_payload(type_def: RelationshipDef) -> dict[str, object]:
    return {
        **_type_header_payload(type_def),
        "endDef1": _end_def_to_payload(type_def.end_def1),
        "endDef2": _end_def_to_payload(type_def.end_def2),
        "propertiesDefinition": _attributes_to_payload(type_def.attributes),
        "propagationRule": type_def.propagation_rule,
        "multiLink": type_def.multi_link,
        "status": type_def.status,
    }


def relationship_def_from_payload(payload: Mapping[str, Any]) -> RelationshipDef:
    return RelationshipDef(
        **_type_header_fields(payload),
        end_def1=_end_def_from_payload(payload.get("endDef1")),
        end_def2=_end_def_from_payload(payload.get("endDef2")),
        attributes=_attributes_from_payload(payload.get("propertiesDefinition")),
        propagation_rule=str(payload.get("propagationRule", "NONE")),
        multi_link=bool(payload.get("multiLink", False)),
        status=str(payload.get("status", "ACTIVE_TYPEDEF")),  # type: ignore[arg-type]
    )


def classification_def_to_payload(type_def: ClassificationDef) -> dict[str, object]:
    return {
        **_type_header_payload(type_def),
        "superType": type_def.super_type_name,
        "validEntityDefs": list(type_def.valid_entity_def_names),
        "propertiesDefinition": _attributes_to_payload(type_def.attributes),
        "propagatable": type_def.propagatable,
        "status": type_def.status,
    }


def classification_def_from_payload(payload: Mapping[str, Any]) -> ClassificationDef:
    return ClassificationDef(
        **_type_header_fields(payload),
        super_type_name=_optional_str(payload.get("superType")),
        valid_entity_def_names=_str_tuple(payload.get("validEntityDefs")),
        attributes=_attributes_from_payload(payload.get("propertiesDefinition")),
        propagatable=bool(payload.get("propagatable", False)),
        status=str(payload.get("status", "ACTIVE_TYPEDEF")),  # type: ignore[arg-type]
    )


def type_def_patch_to_payload(patch: TypeDefPatch) -> dict[str, object]:
    return {
        "typeDefGUID": patch.type_def_guid,
        "typeDefName": patch.type_def_name,
        "applyToVersion": patch.apply_to_version,
        "updateToVersion": patch.update_to_version,
        "newVersionName": patch.new_version_name,
        "description": patch.description,
        "propertyDefinitions": _attributes_to_payload(patch.property_definitions),
        "typeDefOptions": dict(patch.type_def_options),
    }


def type_def_patch_from_payload(payload: Mapping[str, Any]) -> TypeDefPatch:
    options = payload.get("typeDefOptions") or {}
    return TypeDefPatch(
        type_def_guid=str(payload["typeDefGUID"]),
        type_def_name=str(payload["typeDefName"]),
        apply_to_version=int(payload["applyToVersion"]),
        update_to_version=int(payload["updateToVersion"]),
        new_version_name=_optional_str(payload.get("newVersionName")),
        description=_optional_str(payload.get("description")),
        property_definitions=_attributes_from_payload(payload.get("propertyDefinitions")),
        type_def_options={str(key): str(value) for key, value in dict(options).items()},
    )


def entity_to_payload(entity: EntityDetail) -> dict[str, object]:
    return {
        "guid": entity.guid,
        "version": entity.version,
        "type": _instance_type_to_payload(entity.type),
        "properties": dict(entity.properties),
        "classifications": [_classification_to_payload(item) for item in entity.classifications],
        "status": entity.status,
        "metadataCollectionId": entity.metadata_collection_id,
        "createdBy": entity.created_by,
        "createTime": entity.create_time,
    }


def entity_from_payload(payload: Mapping[str, Any]) -> EntityDetail:
    return EntityDetail(
        guid=str(payload["guid"]),
        version=int(payload.get("version", 0)),
        type=_instance_type_from_payload(payload["type"]),
        properties=dict(payload.get("properties") or {}),
        classifications=tuple(
            _classification_from_payload(item) for item in payload.get("classifications") or ()
        ),
        status=str(payload.get("status", "ACTIVE")),  # type: ignore[arg-type]
        metadata_collection_id=_optional_str(payload.get("metadataCollectionId")),
        created_by=_optional_str(payload.get("createdBy")),
        create_time=_optional_str(payload.get("createTime")),
    )


def relationship_to_payload(relationship: Relationship) -> dict[str, object]:
    return {
        "guid": relationship.guid,
        "version": relationship.version,
        "type": _instance_type_to_payload(relationship.type),
        "entityOneGUID": relationship.end1_guid,
        "entityTwoGUID": relationship.end2_guid,
        "properties": dict(relationship.properties),
        "status": relationship.status,
        "metadataCollectionId": relationship.metadata_collection_id,
        "createdBy": relationship.created_by,
    }


def relationship_from_payload(payload: Mapping[str, Any]) -> Relationship:
    return Relationship(
        guid=str(payload["guid"]),
        version=int(payload.get("version", 0)),
        type=_instance_type_from_payload(payload["type"]),
        end1_guid=str(payload["entityOneGUID"]),
        end2_guid=str(payload["entityTwoGUID"]),
        properties=dict(payload.get("properties") or {}),
        status=str(payload.get("status", "ACTIVE")),  # type: ignore[arg-type]
        metadata_collection_id=_optional_str(payload.get("metadataCollectionId")),
        created_by=_optional_str(payload.get("createdBy")),
    )


def classification_extension_to_payload(
    extension: ClassificationEntityExtension,
) -> dict[str, object]:
    return {
        "entityToClassifyGUID": extension.classified_entity_guid,
        "classification": _classification_to_payload(extension.classification),
    }


def classification_extension_from_payload(
    payload: Mapping[str, Any],
) -> ClassificationEntityExtension:
    return ClassificationEntityExtension(
        classified_entity_guid=str(payload["entityToClassifyGUID"]),
        classification=_classification_from_payload(payload["classification"]),
    )


def _type_header_payload(
    type_def: PrimitiveDef | CollectionDef | EnumDef | EntityDef | RelationshipDef | ClassificationDef,
) -> dict[str, object]:
    return {
        "guid": type_def.guid,
        "name": type_def.name,
        "version": type_def.version,
        "versionName": type_def.version_name,
        "description": type_def.description,
    }


def _type_header_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "guid": str(payload["guid"]),
        "name": str(payload["name"]),
        "version": int(payload.get("version", 1)),
        "version_name": str(payload.get("versionName", "1.0")),
        "description": _optional_str(payload.get("description")),
    }


def _enum_element_to_payload(element: EnumElementDef) -> dict[str, object]:
    return {
        "ordinal": element.ordinal,
        "value": element.value,
        "description": element.description,
    }


def _enum_element_from_payload(payload: Mapping[str, Any]) -> EnumElementDef:
    _require_object(payload, "elementDefs")
    return EnumElementDef(
        ordinal=int(payload["ordinal"]),
        value=str(payload["value"]),
        description=_optional_str(payload.get("description")),
    )


def _attributes_to_payload(attributes: tuple[TypeDefAttribute, ...]) -> list[dict[str, object]]:
    return [
        {
            "attributeName": attribute.attribute_name,
            "attributeType": attribute.attribute_type_name,
            "attributeDescription": attribute.description,
            "attributeCardinality": attribute.cardinality,
            "unique": attribute.unique,
            "isIndexable": attribute.indexable,
        }
        for attribute in attributes
    ]


def _attributes_from_payload(raw_attributes: object) -> tuple[TypeDefAttribute, ...]:
    if not raw_attributes:
        return ()
    items = tuple(
        _require_object(item, "propertiesDefinition")
        for item in raw_attributes  # type: ignore[attr-defined]
    )
    return tuple(
        TypeDefAttribute(
            attribute_name=str(item["attributeName"]),
            attribute_type_name=str(item["attributeType"]),
            description=_optional_str(item.get("attributeDescription")),
            cardinality=str(item.get("attributeCardinality", "AT_MOST_ONE")),  # type: ignore[arg-type]
            unique=bool(item.get("unique", False)),
            indexable=bool(item.get("isIndexable", True)),
        )
        for item in items
    )


def _end_def_to_payload(end_def: RelationshipEndDef | None) -> dict[str, object] | None:
    if end_def is None:
        return None
    return {
        "entityType": end_def.entity_type_name,
        "attributeName": end_def.attribute_name,
        "attributeDescription": end_def.attribute_description,
        "attributeCardinality": end_def.cardinality,
    }


def _end_def_from_payload(payload: Mapping[str, Any] | None) -> RelationshipEndDef | None:
    if not payload:
        return None
    _require_object(payload, "endDef")
    return RelationshipEndDef(
        entity_type_name=str(payload["entityType"]),
        attribute_name=str(payload["attributeName"]),
        attribute_description=_optional_str(payload.get("attributeDescription")),
        cardinality=str(payload.get("attributeCardinality", "ANY_NUMBER")),  # type: ignore[arg-type]
    )


def _instance_type_to_payload(instance_type: InstanceType) -> dict[str, object]:
    return {
        "typeDefGUID": instance_type.type_def_guid,
        "typeDefName": instance_type.type_def_name,
        "typeDefVersion": instance_type.type_def_version,
        "typeDefCategory": instance_type.type_def_category,
    }


def _instance_type_from_payload(payload: Mapping[str, Any]) -> InstanceType:
    _require_object(payload, "type")
    return InstanceType(
        type_def_guid=str(payload["typeDefGUID"]),
        type_def_name=str(payload["typeDefName"]),
        type_def_version=int(payload.get("typeDefVersion", 1)),
        type_def_category=str(payload.get("typeDefCategory", "ENTITY_DEF")),  # type: ignore[arg-type]
    )


def _classification_to_payload(classification: Classification) -> dict[str, object]:
    return {
        "name": classification.name,
        "version": classification.version,
        "type": _instance_type_to_payload(classification.type) if classification.type else None,
        "properties": dict(classification.properties),
        "status": classification.status,
        "createdBy": classification.created_by,
    }


def _classification_from_payload(payload: Mapping[str, Any]) -> Classification:
    _require_object(payload, "classification")
    type_payload = payload.get("type")
    return Classification(
        name=str(payload["name"]),
        version=int(payload.get("version", 0)),
        type=_instance_type_from_payload(type_payload) if type_payload else None,
        properties=dict(payload.get("properties") or {}),
        status=str(payload.get("status", "ACTIVE")),  # type: ignore[arg-type]
        created_by=_optional_str(payload.get("createdBy")),
    )


def _require_object(raw_value: object, section: str) -> Mapping[str, Any]:
    if not isinstance(raw_value, Mapping):
        raise TypeError(f"{section} entry must be a JSON object, got {type(raw_value).__name__}")
    return raw_value


def _optional_str(raw_value: object) -> str | None:
    if raw_value is None:
        return None
    return str(raw_value)


def _str_tuple(raw_values: object) -> tuple[str, ...]:
    if not raw_values:
        return ()
    return tuple(str(value) for value in raw_values)  # type: ignore[attr-defined]
