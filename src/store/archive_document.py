"""Whole-archive document import and export.

An archive document is one JSON or YAML object holding the header, the
type store, and the instance store. Import builds an in-memory archive;
export streams any archive, including lazy store views, one element at a
time.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, TextIO, cast

from core.constants import ARCHIVE_DOCUMENT_CLASS, ELEMENT_CLASS_FIELD
from core.errors import ArchiveCodecError, ArchiveDependencyError, ArchiveDocumentError
from core.instances import ClassificationEntityExtension, EntityDetail, Relationship
from core.logging_config import get_logger
from core.type_defs import ATTRIBUTE_TYPE_DEF_CLASSES, TYPE_DEF_CLASSES, TypeDefPatch
from core.types import (
    ArchiveElement,
    ArchiveInstanceStore,
    ArchiveTypeStore,
    OpenMetadataArchive,
)
from store.element_codec import ElementCodec

_LOGGER = get_logger(__name__)

ARCHIVE_PROPERTIES_KEY = "archiveProperties"
ARCHIVE_TYPE_STORE_KEY = "archiveTypeStore"
ARCHIVE_INSTANCE_STORE_KEY = "archiveInstanceStore"
YAML_SUFFIXES = (".yaml", ".yml")


def load_archive_document(
    document_path: str | Path,
    codec: ElementCodec | None = None,
) -> OpenMetadataArchive:
    """Load a whole archive from a JSON or YAML document.

    Args:
        document_path: Path to a ``.json``, ``.yaml``, or ``.yml`` file.
        codec: Element codec; a new stateless codec when omitted.

    Returns:
        In-memory archive with tuple members.

    Raises:
        ArchiveDependencyError: If a YAML document is given without PyYAML.
        ArchiveDocumentError: If the file is unreadable or structurally invalid.
    """
    codec = codec or ElementCodec()
    resolved_path = Path(document_path).expanduser().resolve()
    root = _expect_mapping(_read_document_payload(resolved_path), "document root", resolved_path)
    document_class = root.get(ELEMENT_CLASS_FIELD, ARCHIVE_DOCUMENT_CLASS)
    if document_class != ARCHIVE_DOCUMENT_CLASS:
        raise ArchiveDocumentError(
            f"Invalid archive document at {resolved_path}: expected class "
            f"'{ARCHIVE_DOCUMENT_CLASS}', got '{document_class}'."
        )
    header = None
    if root.get(ARCHIVE_PROPERTIES_KEY) is not None:
        try:
            header = codec.header_from_payload(root[ARCHIVE_PROPERTIES_KEY])
        except ArchiveCodecError as error:
            raise ArchiveDocumentError(
                f"Invalid {ARCHIVE_PROPERTIES_KEY} in {resolved_path}: {error}"
            ) from error
    type_section = _expect_mapping(
        root.get(ARCHIVE_TYPE_STORE_KEY) or {}, ARCHIVE_TYPE_STORE_KEY, resolved_path
    )
    instance_section = _expect_mapping(
        root.get(ARCHIVE_INSTANCE_STORE_KEY) or {}, ARCHIVE_INSTANCE_STORE_KEY, resolved_path
    )
    archive = OpenMetadataArchive(
        header=header,
        type_store=ArchiveTypeStore(
            attribute_type_defs=_decode_members(
                codec, type_section, "attributeTypeDefs", ATTRIBUTE_TYPE_DEF_CLASSES, resolved_path
            ),
            type_defs=_decode_members(
                codec, type_section, "newTypeDefs", TYPE_DEF_CLASSES, resolved_path
            ),
            type_def_patches=_decode_members(
                codec, type_section, "typeDefPatches", (TypeDefPatch,), resolved_path
            ),
        ),
        instance_store=ArchiveInstanceStore(
            entities=_decode_members(
                codec, instance_section, "entities", (EntityDetail,), resolved_path
            ),
            relationships=_decode_members(
                codec, instance_section, "relationships", (Relationship,), resolved_path
            ),
            classifications=_decode_members(
                codec,
                instance_section,
                "classifications",
                (ClassificationEntityExtension,),
                resolved_path,
            ),
        ),
    )
    _LOGGER.info("archive_document_loaded", path=str(resolved_path))
    return archive


def write_archive_document(
    archive: OpenMetadataArchive,
    output_path: str | Path,
    codec: ElementCodec | None = None,
) -> int:
    """Stream a whole archive into one JSON document.

    Members are encoded one element at a time, so lazy views are never
    materialized.

    Args:
        archive: Archive to export.
        output_path: Destination JSON file.
        codec: Element codec; a new stateless codec when omitted.

    Returns:
        Number of exported elements.

    Raises:
        ArchiveDocumentError: If the destination cannot be written.
    """
    codec = codec or ElementCodec()
    resolved_path = Path(output_path).expanduser().resolve()
    header_payload = codec.header_to_payload(archive.header) if archive.header else None
    type_store = archive.type_store
    instance_store = archive.instance_store
    try:
        resolved_path.parent.mkdir(parents=True, exist_ok=True)
        with resolved_path.open("w", encoding="utf-8") as handle:
            handle.write("{\n")
            handle.write(f'  "{ELEMENT_CLASS_FIELD}": {json.dumps(ARCHIVE_DOCUMENT_CLASS)},\n')
            handle.write(f'  "{ARCHIVE_PROPERTIES_KEY}": {json.dumps(header_payload)},\n')
            handle.write(f'  "{ARCHIVE_TYPE_STORE_KEY}": {{\n')
            element_count = _write_members(
                handle, codec, "attributeTypeDefs", type_store.attribute_type_defs, last=False
            )
            element_count += _write_members(
                handle, codec, "newTypeDefs", type_store.type_defs, last=False
            )
            element_count += _write_members(
                handle, codec, "typeDefPatches", type_store.type_def_patches, last=True
            )
            handle.write("  },\n")
            handle.write(f'  "{ARCHIVE_INSTANCE_STORE_KEY}": {{\n')
            element_count += _write_members(
                handle, codec, "entities", instance_store.entities, last=False
            )
            element_count += _write_members(
                handle, codec, "relationships", instance_store.relationships, last=False
            )
            element_count += _write_members(
                handle, codec, "classifications", instance_store.classifications, last=True
            )
            handle.write("  }\n")
            handle.write("}\n")
    except OSError as error:
        raise ArchiveDocumentError(
            f"Failed to write archive document {resolved_path}: {error}. "
            "Check the output directory permissions and retry."
        ) from error
    _LOGGER.info("archive_document_written", path=str(resolved_path), element_count=element_count)
    return element_count


def _read_document_payload(document_path: Path) -> object:
    if not document_path.is_file():
        raise ArchiveDocumentError(
            f"Archive document does not exist at {document_path}. "
            "Provide a valid JSON or YAML file path."
        )
    try:
        text = document_path.read_text(encoding="utf-8")
    except OSError as error:
        raise ArchiveDocumentError(
            f"Failed to read archive document {document_path}: {error}. "
            "Check file permissions and retry."
        ) from error
    if document_path.suffix.lower() in YAML_SUFFIXES:
        return _parse_yaml(text, document_path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise ArchiveDocumentError(
            f"Failed to parse JSON archive document {document_path}: {error}. "
            "Fix JSON syntax and retry."
        ) from error


def _parse_yaml(text: str, document_path: Path) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise ArchiveDependencyError(
            "YAML archive documents require PyYAML. Install with 'pip install pyyaml'."
        ) from error
    try:
        payload = cast(object, yaml.safe_load(text))
    except yaml.YAMLError as error:
        raise ArchiveDocumentError(
            f"Failed to parse YAML archive document {document_path}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise ArchiveDocumentError(
            f"Archive document at {document_path} is empty. Define at least archiveProperties."
        )
    return payload


def _expect_mapping(value: object, context: str, document_path: Path) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ArchiveDocumentError(
            f"Invalid {context} in {document_path}: expected mapping, "
            f"got {type(value).__name__}."
        )
    return value


def _decode_members(
    codec: ElementCodec,
    section: Mapping[str, Any],
    member_name: str,
    accepted_types: tuple[type, ...],
    document_path: Path,
) -> tuple[Any, ...]:
    raw_members = section.get(member_name) or []
    if not isinstance(raw_members, list):
        raise ArchiveDocumentError(
            f"Invalid {member_name} in {document_path}: expected list, "
            f"got {type(raw_members).__name__}."
        )
    members = []
    for index, raw_member in enumerate(raw_members):
        try:
            element = codec.from_payload(raw_member)
        except ArchiveCodecError as error:
            raise ArchiveDocumentError(
                f"Invalid {member_name}[{index}] in {document_path}: {error}"
            ) from error
        if not isinstance(element, accepted_types):
            raise ArchiveDocumentError(
                f"Invalid {member_name}[{index}] in {document_path}: "
                f"{type(element).__name__} does not belong in {member_name}."
            )
        members.append(element)
    return tuple(members)


def _write_members(
    handle: TextIO,
    codec: ElementCodec,
    member_name: str,
    elements: Iterable[ArchiveElement],
    last: bool,
) -> int:
    handle.write(f'    "{member_name}": [')
    written_count = 0
    for element in elements:
        separator = "," if written_count else ""
        handle.write(f"{separator}\n      {json.dumps(codec.to_payload(element))}")
        written_count += 1
    handle.write("\n    ]" if written_count else "]")
    handle.write("\n" if last else ",\n")
    return written_count
