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

"""Data-tree node model.

Documents are trees of ``Map``/``Array`` containers whose leaves are plain
Python scalars (``str``, ``int``, ``bool``, ``None``, ...). Every node carries
its source position and an open bag of annotations. Nodes compare by identity
so that they can key side tables built during type checking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from ..utils.source_location import SourceLocation

if TYPE_CHECKING:
    from .annotations import Annotation


class ValueKind(Enum):
    """Closed set of value kinds a data-tree value can take."""

    MAP = "map"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"

    @classmethod
    def of(cls, value: Any) -> Optional["ValueKind"]:
        """Classify ``value``; returns None for anything outside the closed set."""
        if isinstance(value, Map):
            return cls.MAP
        if isinstance(value, Array):
            return cls.ARRAY
        if value is None:
            return cls.NULL
        # bool is a subclass of int, so it must be tested first
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, str):
            return cls.STRING
        return None


def describe_value(value: Any) -> str:
    """Human-readable kind of ``value`` for error messages."""
    kind = ValueKind.of(value)
    if kind is not None:
        return kind.value
    if isinstance(value, Document):
        return "document"
    return type(value).__name__


@dataclass(eq=False)
class Node:
    position: SourceLocation = field(default_factory=SourceLocation.unknown)
    annotations: Dict[str, "Annotation"] = field(default_factory=dict)

    def annotate(self, annotation: "Annotation") -> "Node":
        self.annotations[annotation.name] = annotation
        return self


@dataclass(eq=False)
class MapItem(Node):
    key: Any = None
    value: Any = None


@dataclass(eq=False)
class Map(Node):
    items: List[MapItem] = field(default_factory=list)

    def keys(self) -> List[Any]:
        return [item.key for item in self.items]

    def find(self, key: Any) -> Optional[MapItem]:
        for item in self.items:
            if item.key == key:
                return item
        return None

    def __iter__(self) -> Iterator[MapItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(eq=False)
class ArrayItem(Node):
    value: Any = None


@dataclass(eq=False)
class Array(Node):
    items: List[ArrayItem] = field(default_factory=list)

    def __iter__(self) -> Iterator[ArrayItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(eq=False)
class Document(Node):
    value: Any = None


@dataclass(eq=False)
class DocumentSet(Node):
    items: List[Document] = field(default_factory=list)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def to_python(value: Any) -> Any:
    """Strip positions and annotations, returning plain dicts/lists/scalars."""
    if isinstance(value, Document):
        return to_python(value.value)
    if isinstance(value, Map):
        return {item.key: to_python(item.value) for item in value.items}
    if isinstance(value, Array):
        return [to_python(item.value) for item in value.items]
    return value
