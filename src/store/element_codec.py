"""Structured JSON codec for archive elements.

This module owns the ``class`` discriminator that lets one decoder turn any
element file back into the right model. The codec is stateless; stores
receive an instance instead of sharing a module-level singleton.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

from core.constants import ARCHIVE_PROPERTIES_CLASS, ELEMENT_CLASS_FIELD
from core.errors import ArchiveCodecError
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
from core.types import ArchiveElement, ArchiveHeader
from store import element_payload

PayloadEncoder = Callable[[Any], dict[str, object]]
PayloadDecoder = Callable[[Mapping[str, Any]], Any]

_ENCODERS: dict[type, tuple[str, PayloadEncoder]] = {
    PrimitiveDef: ("PrimitiveDef", element_payload.primitive_def_to_payload),
    CollectionDef: ("CollectionDef", element_payload.collection_def_to_payload),
    EnumDef: ("EnumDef", element_payload.enum_def_to_payload),
    EntityDef: ("EntityDef", element_payload.entity_def_to_payload),
    RelationshipDef: ("RelationshipDef", element_payload.relationship_def_to_payload),
    ClassificationDef: ("ClassificationDef", element_payload.classification_def_to_payload),
    TypeDefPatch: ("TypeDefPatch", element_payload.type_def_patch_to_payload),
    EntityDetail: ("EntityDetail", element_payload.entity_to_payload),
    Relationship: ("Relationship", element_payload.relationship_to_payload),
    ClassificationEntityExtension: (
        "ClassificationEntityExtension",
        element_payload.classification_extension_to_payload,
    ),
}
_DECODERS: dict[str, PayloadDecoder] = {
    "PrimitiveDef": element_payload.primitive_def_from_payload,
    "CollectionDef": element_payload.collection_def_from_payload,
    "EnumDef": element_payload.enum_def_from_payload,
    "EntityDef": element_payload.entity_def_from_payload,
    "RelationshipDef": element_payload.relationship_def_from_payload,
    "ClassificationDef": element_payload.classification_def_from_payload,
    "TypeDefPatch": element_payload.type_def_patch_from_payload,
    "EntityDetail": element_payload.entity_from_payload,
    "Relationship": element_payload.relationship_from_payload,
    "ClassificationEntityExtension": element_payload.classification_extension_from_payload,
}


class ElementCodec:
    """Encode and decode archive elements as discriminated JSON objects."""

    def to_payload(self, element: ArchiveElement) -> dict[str, object]:
        """Serialize an element into a payload carrying its discriminator.

        Args:
            element: Archive element.

        Returns:
            JSON-safe dictionary with the ``class`` field first.

        Raises:
            ArchiveCodecError: If the element type is not an archive element.
        """
        registration = _ENCODERS.get(type(element))
        if registration is None:
            raise ArchiveCodecError(
                f"Cannot encode {type(element).__name__}: not an archive element type. "
                "Pass a type definition, patch, or instance model."
            )
        class_name, encoder = registration
        return {ELEMENT_CLASS_FIELD: class_name, **encoder(element)}

    def from_payload(self, payload: object) -> ArchiveElement:
        """Deserialize a discriminated payload into its element model.

        Args:
            payload: Parsed JSON object.

        Returns:
            Typed archive element.

        Raises:
            ArchiveCodecError: If the payload is not a known element object.
        """
        if not isinstance(payload, Mapping):
            raise ArchiveCodecError(
                f"Invalid element payload: expected JSON object, got {type(payload).__name__}."
            )
        class_name = payload.get(ELEMENT_CLASS_FIELD)
        decoder = _DECODERS.get(str(class_name))
        if decoder is None:
            raise ArchiveCodecError(
                f"Invalid element payload: unknown {ELEMENT_CLASS_FIELD!r} value {class_name!r}. "
                f"Expected one of {', '.join(sorted(_DECODERS))}."
            )
        try:
            return decoder(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as error:
            raise ArchiveCodecError(
                f"Invalid {class_name} payload: {type(error).__name__}: {error}."
            ) from error

    def encode(self, element: ArchiveElement) -> str:
        """Encode one element as indented JSON text."""
        return json.dumps(self.to_payload(element), indent=2) + "\n"

    def decode(self, text: str) -> ArchiveElement:
        """Decode JSON text into one element.

        Raises:
            ArchiveCodecError: If text is not valid element JSON.
        """
        return self.from_payload(_parse_json(text))

    def header_to_payload(self, header: ArchiveHeader) -> dict[str, object]:
        """Serialize an archive header with its discriminator."""
        return {
            ELEMENT_CLASS_FIELD: ARCHIVE_PROPERTIES_CLASS,
            **element_payload.header_to_payload(header),
        }

    def header_from_payload(self, payload: object) -> ArchiveHeader:
        """Deserialize an archive header payload.

        Raises:
            ArchiveCodecError: If payload is not a valid header object.
        """
        if not isinstance(payload, Mapping):
            raise ArchiveCodecError(
                f"Invalid archive properties: expected JSON object, got {type(payload).__name__}."
            )
        try:
            return element_payload.header_from_payload(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as error:
            raise ArchiveCodecError(
                f"Invalid archive properties payload: {type(error).__name__}: {error}."
            ) from error

    def encode_header(self, header: ArchiveHeader) -> str:
        """Encode an archive header as indented JSON text."""
        return json.dumps(self.header_to_payload(header), indent=2) + "\n"

    def decode_header(self, text: str) -> ArchiveHeader:
        """Decode JSON text into an archive header."""
        return self.header_from_payload(_parse_json(text))


def _parse_json(text: str) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise ArchiveCodecError(
            f"Invalid JSON at line {error.lineno} column {error.colno}: {error.msg}."
        ) from error
