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

"""Conversion of PyYAML node graphs into data-tree nodes.

PyYAML does the text parsing (``yaml.compose`` / ``yaml.compose_all``); this
module only walks the composed node graph so that every data-tree node keeps
the line/column it came from.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

import yaml

from ..exceptions import DuplicateKeyError, InvalidKeyError
from ..utils.source_location import SourceLocation, source_from_mark
from .annotations import Annotation
from .nodes import Array, ArrayItem, Document, DocumentSet, Map, MapItem, Node

logger = logging.getLogger(__name__)


AnnotationsByLine = Mapping[int, Iterable[Union[str, Annotation]]]


class _NodeConverter:
    """Walks one PyYAML node graph, converting nodes to data-tree nodes."""

    def __init__(self, file_path: Optional[str], annotations_by_line: Optional[AnnotationsByLine]):
        self.file_path = file_path
        self.annotations_by_line = annotations_by_line or {}
        # A throwaway loader gives access to the safe scalar constructors
        self._constructor = yaml.SafeLoader("")

    def position(self, node: yaml.Node) -> SourceLocation:
        return source_from_mark(getattr(node, "start_mark", None), self.file_path)

    def annotate(self, target: Node) -> None:
        if target.position.line is None:
            return
        for entry in self.annotations_by_line.get(target.position.line, ()):
            if isinstance(entry, Annotation):
                target.annotate(entry)
            else:
                target.annotate(Annotation(name=str(entry), position=target.position))

    def convert(self, node: yaml.Node) -> Any:
        if isinstance(node, yaml.MappingNode):
            return self.convert_mapping(node)
        if isinstance(node, yaml.SequenceNode):
            return self.convert_sequence(node)
        return self._constructor.construct_object(node, deep=True)

    def convert_mapping(self, node: yaml.MappingNode) -> Map:
        result = Map(position=self.position(node))
        seen = set()
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                position = self.position(key_node)
                raise InvalidKeyError(
                    f"Map keys must be scalars (found {key_node.id}) at {position.as_compact_string()}",
                    position,
                )
            key = self._constructor.construct_object(key_node, deep=True)
            item = MapItem(position=self.position(key_node), key=key)
            if key in seen:
                raise DuplicateKeyError(
                    f"Duplicate map key '{key}' at {item.position.as_compact_string()}",
                    item.position,
                )
            seen.add(key)
            item.value = self.convert(value_node)
            self.annotate(item)
            result.items.append(item)
        return result

    def convert_sequence(self, node: yaml.SequenceNode) -> Array:
        result = Array(position=self.position(node))
        for value_node in node.value:
            item = ArrayItem(position=self.position(value_node))
            item.value = self.convert(value_node)
            self.annotate(item)
            result.items.append(item)
        return result


def document_from_yaml_node(
    node: Optional[yaml.Node],
    file_path: Optional[str] = None,
    annotations_by_line: Optional[AnnotationsByLine] = None,
) -> Document:
    """Convert a composed PyYAML node into a Document.

    Args:
        node: Root node as returned by ``yaml.compose`` (None for an empty document)
        file_path: File name recorded in positions; defaults to the mark's name
        annotations_by_line: 1-based line -> annotations for the map/array item
            starting on that line

    Returns:
        Document wrapping the converted value

    Raises:
        DuplicateKeyError: If a mapping repeats a key
        InvalidKeyError: If a mapping uses a map or array as a key
    """
    converter = _NodeConverter(file_path, annotations_by_line)
    if node is None:
        return Document(position=SourceLocation(file_path=file_path, line=1, column=1))

    document = Document(position=converter.position(node), value=converter.convert(node))
    logger.debug(f"Converted YAML document at {document.position.as_compact_string()}")
    return document


def document_set_from_yaml_nodes(
    nodes: Iterable[Optional[yaml.Node]],
    file_path: Optional[str] = None,
) -> DocumentSet:
    """Convert the nodes of ``yaml.compose_all`` into a DocumentSet."""
    documents = [document_from_yaml_node(node, file_path) for node in nodes]
    position = documents[0].position if documents else SourceLocation(file_path=file_path)
    return DocumentSet(position=position, items=documents)
