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

"""Node annotations and the subset recognized by the schema builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from ..utils.source_location import SourceLocation
from .nodes import Node


@dataclass(frozen=True)
class Annotation:
    name: str
    position: SourceLocation = field(default_factory=SourceLocation.unknown)
    args: Tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict, compare=False)


class AnnotationName(str, Enum):
    """Annotation names meaningful to schema construction."""

    SCHEMA_NULLABLE = "schema/nullable"


AnnotationKey = Union[AnnotationName, str]


class TypeAnnotations(Mapping[AnnotationName, Annotation]):
    """Read-only view of the schema annotations attached to a single node.

    Lookups accept an ``AnnotationName`` or its string value. A string that is
    not a recognized name raises ``ValueError`` rather than reporting absence.
    """

    def __init__(self, annotations: Optional[Mapping[AnnotationName, Annotation]] = None):
        self._annotations: Mapping[AnnotationName, Annotation] = MappingProxyType(dict(annotations or {}))

    def __getitem__(self, name: AnnotationKey) -> Annotation:
        return self._annotations[AnnotationName(name)]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return AnnotationName(name) in self._annotations

    def __iter__(self) -> Iterator[AnnotationName]:
        return iter(self._annotations)

    def __len__(self) -> int:
        return len(self._annotations)

    def get(self, name: AnnotationKey, default: Optional[Annotation] = None) -> Optional[Annotation]:
        return self._annotations.get(AnnotationName(name), default)

    @property
    def is_nullable(self) -> bool:
        return AnnotationName.SCHEMA_NULLABLE in self._annotations

    def __repr__(self) -> str:
        names = ", ".join(name.value for name in self._annotations)
        return f"TypeAnnotations({names})"


def schema_annotations(node: Node) -> TypeAnnotations:
    """Filter a node's annotations down to the names the schema builder knows."""
    recognized: Dict[AnnotationName, Annotation] = {}
    for name, annotation in node.annotations.items():
        try:
            recognized_name = AnnotationName(name)
        except ValueError:
            continue
        recognized[recognized_name] = annotation
    return TypeAnnotations(recognized)


def nullable(position: Optional[SourceLocation] = None) -> Annotation:
    """Build a ``schema/nullable`` annotation."""
    return Annotation(
        name=AnnotationName.SCHEMA_NULLABLE.value,
        position=position or SourceLocation.unknown(),
    )
