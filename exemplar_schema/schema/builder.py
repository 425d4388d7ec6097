# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Schema builder: derives a type tree from an exemplar schema document.

Every value in a schema document is an exemplar. Its kind becomes the type:

  Exemplar value            -> Type
  -----------------------------------------------
  map                       -> MapType, one MapItemType per entry
  array with one item       -> ArrayType of that item's type
  string / integer / bool   -> ScalarType

Building is fail-fast: the first malformed exemplar aborts the whole build and
no partial type tree is returned.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..config import schema_config
from ..exceptions import MalformedArrayExemplarError, NullableArrayItemError, UnknownValueKindError
from ..utils.source_location import SourceLocation
from ..yamlmeta.annotations import AnnotationName, schema_annotations
from ..yamlmeta.nodes import Array, ArrayItem, Document, Map, MapItem, ValueKind, describe_value
from .document_schema import DocumentSchema
from .types import ArrayItemType, ArrayType, DocumentType, MapItemType, MapType, ScalarKind, ScalarType, Type

logger = logging.getLogger(__name__)


def build_document_schema(doc: Document, name: Optional[str] = None) -> DocumentSchema:
    """Build the root schema for a schema document.

    Args:
        doc: Schema document whose value is the exemplar tree
        name: Logical schema name; defaults to the configured schema name

    Returns:
        DocumentSchema wrapping the derived DocumentType

    Raises:
        SchemaBuildError: If any nested exemplar is malformed
    """
    value_type: Optional[Type] = None
    kind = ValueKind.of(doc.value)
    if kind is ValueKind.MAP:
        value_type = build_map_type(doc.value)
    elif kind is ValueKind.ARRAY:
        value_type = build_array_type(doc.value)
    elif kind in _SCALAR_KINDS:
        value_type = ScalarType(kind=_SCALAR_KINDS[kind], position=doc.position)
    # null (or unrecognized) top-level values leave the document untyped

    schema_name = name if name is not None else schema_config.schema_name
    logger.debug(
        f"Built document schema '{schema_name}' from {doc.position.as_compact_string()} "
        f"(value type: {value_type.describe() if value_type is not None else 'any'})"
    )
    return DocumentSchema(
        name=schema_name,
        source=doc,
        allowed=DocumentType(source=doc, value_type=value_type),
    )


new_document_schema = build_document_schema


def build_map_type(m: Map) -> MapType:
    items = tuple(build_map_item_type(item) for item in m.items)

    annotations = schema_annotations(m)
    if AnnotationName.SCHEMA_NULLABLE in annotations:
        # A nullable map defers its whole field set to runtime data
        items = ()

    return MapType(items=items, position=m.position, annotations=annotations)


def build_map_item_type(item: MapItem) -> MapItemType:
    value_type = value_type_from_exemplar(item.value, item.position)

    default_value: Any = item.value
    if isinstance(item.value, Array):
        # The exemplar array describes the element type, it is not data
        default_value = Array(position=item.value.position)

    annotations = schema_annotations(item)
    if AnnotationName.SCHEMA_NULLABLE in annotations:
        default_value = None

    return MapItemType(
        key=item.key,
        value_type=value_type,
        default_value=default_value,
        position=item.position,
        annotations=annotations,
    )


def build_array_type(a: Array) -> ArrayType:
    # Empty and multi-item exemplars get separate messages
    if len(a.items) == 0:
        raise MalformedArrayExemplarError(
            f"Expected one item in array (describing the type of its elements) at {a.position.as_compact_string()}",
            a.position,
        )
    if len(a.items) > 1:
        raise MalformedArrayExemplarError(
            f"Expected one item (found {len(a.items)}) in array (describing the type of its elements) "
            f"at {a.position.as_compact_string()}",
            a.position,
        )

    items_type = build_array_item_type(a.items[0])
    return ArrayType(items_type=items_type, position=a.position, annotations=schema_annotations(a))


def build_array_item_type(item: ArrayItem) -> ArrayItemType:
    if AnnotationName.SCHEMA_NULLABLE in schema_annotations(item):
        raise NullableArrayItemError(
            f"Array items cannot be annotated with #@{AnnotationName.SCHEMA_NULLABLE.value} "
            f"({item.position.as_compact_string()}). If this behaviour would be valuable, "
            "please submit an issue on https://github.com/vmware-tanzu/carvel-ytt",
            item.position,
        )

    value_type = value_type_from_exemplar(item.value, item.position)
    return ArrayItemType(value_type=value_type, position=item.position)


_SCALAR_KINDS = {
    ValueKind.STRING: ScalarKind.STRING,
    ValueKind.INTEGER: ScalarKind.INTEGER,
    ValueKind.BOOLEAN: ScalarKind.BOOLEAN,
}


def value_type_from_exemplar(value: Any, position: Optional[SourceLocation] = None) -> Type:
    """Derive the type described by an exemplar value.

    Args:
        value: Exemplar value (Map, Array or scalar)
        position: Position of the enclosing item, used for scalars and errors

    Returns:
        MapType, ArrayType or ScalarType

    Raises:
        UnknownValueKindError: If the value is null or of an unsupported kind
    """
    position = position or SourceLocation.unknown()
    kind = ValueKind.of(value)

    if kind is ValueKind.MAP:
        return build_map_type(value)
    if kind is ValueKind.ARRAY:
        return build_array_type(value)
    if kind in _SCALAR_KINDS:
        return ScalarType(kind=_SCALAR_KINDS[kind], position=position)

    raise UnknownValueKindError(
        f"Collection item type did not match any known types (found {describe_value(value)}) "
        f"at {position.as_compact_string()}",
        position,
    )
