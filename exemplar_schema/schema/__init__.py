"""Schema derivation and type checking over data-tree nodes."""

from .types import (
    ArrayItemType,
    ArrayType,
    DocumentType,
    MapItemType,
    MapType,
    ScalarKind,
    ScalarType,
    Type,
)
from .check import TypeAssignment, TypeCheck, Violation, check_document, check_value
from .document_schema import AnySchema, DocumentSchema, Schema
from .builder import (
    build_array_item_type,
    build_array_type,
    build_document_schema,
    build_map_item_type,
    build_map_type,
    new_document_schema,
    value_type_from_exemplar,
)
from .defaults import default_value_for
