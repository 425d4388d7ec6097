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

"""Type checking of data trees against a schema type tree.

Checking never stops at the first mismatch: every violation found during one
walk is collected into a ``TypeCheck``. The data tree is left untouched; the
type resolved for each container node is recorded in a side table instead.

  Mismatch                      -> Violation
  -----------------------------------------------
  value of the wrong kind       -> "Expected <kind> but found <kind>"
  key not declared in schema    -> "Map item '<key>' is not defined in schema"
  required key absent           -> "Map item '<key>' is required but missing"
  null where not nullable       -> "Expected <kind> but found null"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from ..exceptions import SchemaCheckError
from ..utils.source_location import JsonPointer, SourceLocation, join_path
from ..yamlmeta.nodes import Array, Document, DocumentSet, Map, Node, describe_value
from .types import ArrayItemType, ArrayType, DocumentType, MapItemType, MapType, ScalarType, Type

logger = logging.getLogger(__name__)


AssignedType = Union[Type, MapItemType, ArrayItemType, DocumentType]


@dataclass(frozen=True)
class Violation:
    message: str
    position: SourceLocation = field(default_factory=SourceLocation.unknown)
    yaml_path: JsonPointer = ""

    def __str__(self) -> str:
        text = f"{self.message} at {self.position.as_compact_string()}"
        if self.yaml_path:
            text += f" (yaml_path={self.yaml_path})"
        return text


class TypeAssignment:
    """Side table from checked data-tree nodes to their resolved types."""

    def __init__(self) -> None:
        self._types: Dict[Node, AssignedType] = {}

    def assign(self, node: Node, type_: AssignedType) -> None:
        self._types[node] = type_

    def type_of(self, node: Node) -> Optional[AssignedType]:
        return self._types.get(node)

    def __contains__(self, node: object) -> bool:
        return node in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._types)

    def items(self) -> List[Tuple[Node, AssignedType]]:
        return list(self._types.items())


@dataclass
class TypeCheck:
    """Result of checking one data node against a schema."""

    violations: List[Violation] = field(default_factory=list)
    assignments: TypeAssignment = field(default_factory=TypeAssignment)

    @property
    def passed(self) -> bool:
        return not self.violations

    def has_violations(self) -> bool:
        return bool(self.violations)

    def error(self) -> Optional[SchemaCheckError]:
        """Return an exception describing every violation, or None if the check passed."""
        if self.passed:
            return None
        return SchemaCheckError(self.violations)


class _Checker:
    def __init__(self) -> None:
        self.result = TypeCheck()

    def violation(self, message: str, position: SourceLocation, path: JsonPointer) -> None:
        self.result.violations.append(Violation(message=message, position=position, yaml_path=path))

    def check_document(self, doc: Document, doc_type: DocumentType) -> None:
        self.result.assignments.assign(doc, doc_type)
        if doc_type.value_type is None:
            return
        self.check_value(doc.value, doc_type.value_type, position=doc.position, path="", nullable=False)

    def check_value(
        self,
        value: Any,
        type_: Type,
        *,
        position: SourceLocation,
        path: JsonPointer,
        nullable: bool,
    ) -> None:
        if value is None and (nullable or (isinstance(type_, MapType) and type_.is_nullable)):
            return

        if isinstance(type_, MapType):
            if not isinstance(value, Map):
                self.mismatch(type_, value, position, path)
                return
            self.check_map(value, type_, path)
            return

        if isinstance(type_, ArrayType):
            if not isinstance(value, Array):
                self.mismatch(type_, value, position, path)
                return
            self.check_array(value, type_, path)
            return

        if isinstance(type_, ScalarType):
            if not type_.kind.matches(value):
                self.mismatch(type_, value, position, path)
            return

        self.violation(f"Internal error: unknown schema type {type(type_).__name__}", position, path)

    def mismatch(self, type_: Type, value: Any, position: SourceLocation, path: JsonPointer) -> None:
        if isinstance(value, Node):
            position = value.position
        self.violation(f"Expected {type_.describe()} but found {describe_value(value)}", position, path)

    def check_map(self, m: Map, map_type: MapType, path: JsonPointer) -> None:
        self.result.assignments.assign(m, map_type)

        # Field list discarded at build time; the shape is left to runtime data
        if map_type.is_nullable and not map_type.items:
            return

        for item in m.items:
            item_path = join_path(path, item.key)
            item_type = map_type.item_for(item.key)
            if item_type is None:
                self.violation(f"Map item '{item.key}' is not defined in schema", item.position, item_path)
                continue
            self.result.assignments.assign(item, item_type)
            self.check_value(
                item.value,
                item_type.value_type,
                position=item.position,
                path=item_path,
                nullable=item_type.is_nullable,
            )

        present = set(m.keys())
        for item_type in map_type.items:
            if item_type.key in present or not item_type.is_required:
                continue
            self.violation(
                f"Map item '{item_type.key}' is required but missing",
                m.position,
                join_path(path, item_type.key),
            )

    def check_array(self, a: Array, array_type: ArrayType, path: JsonPointer) -> None:
        self.result.assignments.assign(a, array_type)
        items_type = array_type.items_type
        for idx, item in enumerate(a.items):
            self.result.assignments.assign(item, items_type)
            self.check_value(
                item.value,
                items_type.value_type,
                position=item.position,
                path=join_path(path, idx),
                nullable=False,
            )


def check_document(node: Any, doc_type: DocumentType) -> TypeCheck:
    """Check a data node against a document type, collecting every violation.

    A ``Document`` is checked as a whole and every document of a
    ``DocumentSet`` is checked in turn. Any other node, plain scalars
    included, is checked as the document's value.
    """
    position = node.position if isinstance(node, Node) else SourceLocation.unknown()
    checker = _Checker()
    if isinstance(node, DocumentSet):
        for doc in node.items:
            checker.check_document(doc, doc_type)
    elif isinstance(node, Document):
        checker.check_document(node, doc_type)
    elif doc_type.value_type is not None:
        checker.check_value(node, doc_type.value_type, position=position, path="", nullable=False)

    logger.debug(
        f"Type check at {position.as_compact_string()} found "
        f"{len(checker.result.violations)} violation(s)"
    )
    return checker.result


def check_value(value: Any, type_: Type, position: Optional[SourceLocation] = None) -> TypeCheck:
    """Check a bare value against a single type."""
    checker = _Checker()
    checker.check_value(value, type_, position=position or SourceLocation.unknown(), path="", nullable=False)
    return checker.result
