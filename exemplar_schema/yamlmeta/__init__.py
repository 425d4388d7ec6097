"""Data-tree model consumed by the schema builder and checker.

Nodes are produced by a YAML front end (see ``yaml_nodes``) and are only read
by this package, never rewritten.
"""

from .nodes import (
    Array,
    ArrayItem,
    Document,
    DocumentSet,
    Map,
    MapItem,
    Node,
    ValueKind,
    describe_value,
    to_python,
)
from .annotations import (
    Annotation,
    AnnotationName,
    TypeAnnotations,
    nullable,
    schema_annotations,
)
from .yaml_nodes import document_from_yaml_node, document_set_from_yaml_nodes
