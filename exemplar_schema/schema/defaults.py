"""Default data values derived from a schema type tree.

The defaults form the data a document starts from before any user-supplied
values are merged over it. Fresh nodes are built on every call so the result
never aliases the schema document.
"""

from __future__ import annotations

from typing import Any

from ..utils.source_location import SourceLocation
from ..yamlmeta.nodes import Array, Document, Map, MapItem
from .types import ArrayType, DocumentType, MapItemType, MapType, ScalarType, Type


def default_value_for(type_: Type, exemplar: Any = None) -> Any:
    if isinstance(type_, MapType):
        m = Map(position=type_.position)
        for item_type in type_.items:
            m.items.append(_default_item(item_type))
        return m

    if isinstance(type_, ArrayType):
        return Array(position=type_.position)

    if isinstance(type_, ScalarType):
        return exemplar

    raise TypeError(f"Unknown schema type: {type(type_).__name__}")


def _default_item(item_type: MapItemType) -> MapItem:
    if item_type.is_nullable:
        value = None
    else:
        value = default_value_for(item_type.value_type, item_type.default_value)
    return MapItem(position=item_type.position, key=item_type.key, value=value)


def default_document(doc_type: DocumentType) -> Document:
    source = doc_type.source
    position = source.position if source is not None else SourceLocation.unknown()
    if doc_type.value_type is None:
        return Document(position=position, value=source.value if source is not None else None)

    exemplar = source.value if source is not None else None
    return Document(position=position, value=default_value_for(doc_type.value_type, exemplar))
