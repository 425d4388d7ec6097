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

"""Schema type tree.

Types are built once from a schema document and shared read-only by every
check run against that schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union

from ..utils.source_location import SourceLocation
from ..yamlmeta.annotations import TypeAnnotations
from ..yamlmeta.nodes import Document, ValueKind


class ScalarKind(Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"

    @property
    def value_kind(self) -> ValueKind:
        return ValueKind(self.value)

    def matches(self, value: Any) -> bool:
        return ValueKind.of(value) is self.value_kind


@dataclass(frozen=True)
class ScalarType:
    kind: ScalarKind
    position: SourceLocation = field(default_factory=SourceLocation.unknown, compare=False)

    def describe(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class MapItemType:
    key: Any
    value_type: "Type"
    default_value: Any = None
    position: SourceLocation = field(default_factory=SourceLocation.unknown, compare=False)
    annotations: TypeAnnotations = field(default_factory=TypeAnnotations, compare=False)

    @property
    def is_nullable(self) -> bool:
        return self.annotations.is_nullable

    @property
    def is_required(self) -> bool:
        """True when the key must be present in data."""
        return not self.is_nullable and self.default_value is None


@dataclass(frozen=True)
class MapType:
    items: Tuple[MapItemType, ...] = ()
    position: SourceLocation = field(default_factory=SourceLocation.unknown, compare=False)
    annotations: TypeAnnotations = field(default_factory=TypeAnnotations, compare=False)

    @property
    def is_nullable(self) -> bool:
        return self.annotations.is_nullable

    def item_for(self, key: Any) -> Optional[MapItemType]:
        for item in self.items:
            if item.key == key:
                return item
        return None

    def keys(self) -> Tuple[Any, ...]:
        return tuple(item.key for item in self.items)

    def describe(self) -> str:
        return ValueKind.MAP.value


@dataclass(frozen=True)
class ArrayItemType:
    value_type: "Type"
    position: SourceLocation = field(default_factory=SourceLocation.unknown, compare=False)


@dataclass(frozen=True)
class ArrayType:
    items_type: ArrayItemType
    position: SourceLocation = field(default_factory=SourceLocation.unknown, compare=False)
    annotations: TypeAnnotations = field(default_factory=TypeAnnotations, compare=False)

    def describe(self) -> str:
        return ValueKind.ARRAY.value


Type = Union[ScalarType, MapType, ArrayType]


@dataclass(frozen=True)
class DocumentType:
    source: Optional[Document] = field(default=None, compare=False)
    value_type: Optional[Type] = None
