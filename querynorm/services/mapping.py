"""Loads a :class:`.FieldMapping` from an Elasticsearch mapping document."""

import json
from typing import Any, Dict, Mapping, Optional, Union

import jsonschema

from querynorm.domain import FieldMapping
from querynorm.exceptions import MappingError
from querynorm.logging import getLogger

logger = getLogger(__name__)

PROPERTY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"type": "string"},
        "fields": {
            "type": "object",
            "additionalProperties": {"$ref": "#/definitions/property"},
        },
        "properties": {"$ref": "#/definitions/properties"},
    },
}

SCHEMA: Dict[str, Any] = {
    "definitions": {
        "property": PROPERTY_SCHEMA,
        "properties": {
            "type": "object",
            "additionalProperties": {"$ref": "#/definitions/property"},
        },
    },
    "type": "object",
    "required": ["properties"],
    "properties": {"properties": {"$ref": "#/definitions/properties"}},
}
"""Schema for the (typeless) body of a mapping: ``{"properties": {...}}``."""


def _find_body(document: Mapping[str, Any],
               doc_type: Optional[str]) -> Mapping[str, Any]:
    """Locate the ``{"properties": ...}`` body within a mapping document."""
    if "properties" in document:
        return document
    mappings = document.get("mappings")
    if not isinstance(mappings, Mapping):
        raise MappingError("Mapping document has no properties")
    if "properties" in mappings:
        return mappings
    # Legacy documents are keyed by document type.
    if doc_type is None:
        if len(mappings) != 1:
            raise MappingError(
                "Mapping declares several types; a document type is required"
            )
        doc_type = next(iter(mappings))
    try:
        body: Mapping[str, Any] = mappings[doc_type]
    except KeyError as ex:
        raise MappingError(f"No such document type: {doc_type}") from ex
    return body


def load_mapping(source: Union[str, Mapping[str, Any]],
                 doc_type: Optional[str] = None) -> FieldMapping:
    """
    Load and validate a field mapping.

    Parameters
    ----------
    source : str or dict
        Path to a JSON mapping document, or the parsed document itself.
        Accepts ``{"properties": ...}``, ``{"mappings": {"properties": ...}}``
        and ``{"mappings": {<type>: {"properties": ...}}}``.
    doc_type : str
        Document type to read from a legacy typed mapping.

    Returns
    -------
    :class:`.FieldMapping`

    Raises
    ------
    :class:`.MappingError`
        Raised if the document cannot be read or is not a valid mapping.

    """
    if isinstance(source, str):
        logger.debug("Loading mapping from %s", source)
        try:
            with open(source) as f:
                document = json.load(f)
        except (OSError, ValueError) as ex:
            raise MappingError(f"Could not read mapping: {source}") from ex
    else:
        document = source

    if not isinstance(document, Mapping):
        raise MappingError("Mapping document must be an object")
    body = _find_body(document, doc_type)
    try:
        jsonschema.validate(dict(body), SCHEMA)
    except jsonschema.ValidationError as ex:
        raise MappingError(f"Invalid mapping: {ex.message}") from ex
    return FieldMapping.from_properties(body["properties"])
