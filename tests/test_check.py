"""Tests for exemplar_schema.schema.check -- checking data against schema types."""

import logging

import pytest
import yaml

from exemplar_schema.exceptions import SchemaCheckError
from exemplar_schema.schema import build_document_schema
from exemplar_schema.schema.check import TypeCheck, Violation, check_value
from exemplar_schema.schema.types import (
    ArrayItemType,
    ArrayType,
    DocumentType,
    MapItemType,
    MapType,
    ScalarKind,
    ScalarType,
)
from exemplar_schema.utils.source_location import SourceLocation
from exemplar_schema.yamlmeta import Annotation, DocumentSet, Map, MapItem, document_set_from_yaml_nodes, nullable
from exemplar_schema.yamlmeta.annotations import TypeAnnotations, AnnotationName

NULLABLE = "schema/nullable"


@pytest.fixture
def schema_ab(load_schema):
    return build_document_schema(load_schema("""\
        a: x
        b: 1
        """))


def _messages(check: TypeCheck) -> list[str]:
    return [v.message for v in check.violations]


# --- Maps ---


class TestMapChecks:
    def test_conforming_document(self, schema_ab, load):
        check = schema_ab.assign_type(load("""\
            a: hello
            b: 5
            """))
        assert check.passed is True
        assert check.violations == []
        assert check.error() is None

    def test_unknown_key(self, schema_ab, load):
        check = schema_ab.assign_type(load("""\
            a: hello
            c: 5
            """))

        # "b" is defaulted by its exemplar, so only the unknown key is reported
        assert len(check.violations) == 1
        violation = check.violations[0]
        assert violation.message == "Map item 'c' is not defined in schema"
        assert violation.yaml_path == "/c"
        assert violation.position == SourceLocation("values.yml", 2, 1)
        assert str(violation) == "Map item 'c' is not defined in schema at values.yml:2:1 (yaml_path=/c)"

    def test_missing_defaulted_key_is_allowed(self, schema_ab, load):
        assert schema_ab.assign_type(load("a: hello\n")).passed

    def test_missing_required_key(self):
        map_type = MapType(items=(
            MapItemType(key="name", value_type=ScalarType(ScalarKind.STRING), default_value=None),
        ))
        check = check_value(Map(), map_type)

        assert _messages(check) == ["Map item 'name' is required but missing"]
        assert check.violations[0].yaml_path == "/name"

    def test_missing_nullable_key_is_allowed(self):
        map_type = MapType(items=(
            MapItemType(
                key="name",
                value_type=ScalarType(ScalarKind.STRING),
                default_value=None,
                annotations=TypeAnnotations({AnnotationName.SCHEMA_NULLABLE: nullable()}),
            ),
        ))
        assert check_value(Map(), map_type).passed

    def test_kind_mismatches_are_all_reported(self, schema_ab, load):
        check = schema_ab.assign_type(load("""\
            a: 1
            b: x
            """))
        assert _messages(check) == [
            "Expected string but found integer",
            "Expected integer but found string",
        ]
        assert [v.yaml_path for v in check.violations] == ["/a", "/b"]

    def test_boolean_is_not_integer(self, schema_ab, load):
        check = schema_ab.assign_type(load("""\
            a: x
            b: true
            """))
        assert _messages(check) == ["Expected integer but found boolean"]

    def test_map_expected(self, load_schema, load):
        schema = build_document_schema(load_schema("""\
            db:
              host: localhost
            """))
        check = schema.assign_type(load("""\
            db:
            - x
            """))
        assert _messages(check) == ["Expected map but found array"]
        assert check.violations[0].position.line == 2

    def test_nested_violations_keep_going(self, load_schema, load):
        schema = build_document_schema(load_schema("""\
            db:
              host: localhost
              port: 5432
            name: app
            """))
        check = schema.assign_type(load("""\
            db:
              host: 1
              user: root
            name: 2
            extra: true
            """))
        assert [(v.yaml_path, v.message) for v in check.violations] == [
            ("/db/host", "Expected string but found integer"),
            ("/db/user", "Map item 'user' is not defined in schema"),
            ("/name", "Expected string but found integer"),
            ("/extra", "Map item 'extra' is not defined in schema"),
        ]

    def test_top_level_kind_mismatch(self, schema_ab, load):
        check = schema_ab.assign_type(load("- 1\n"))
        assert _messages(check) == ["Expected map but found array"]
        assert check.violations[0].yaml_path == ""


# --- Arrays ---


class TestArrayChecks:
    @pytest.fixture
    def schema(self, load_schema):
        return build_document_schema(load_schema("""\
            ports:
            - 80
            """))

    def test_any_length_is_allowed(self, schema, load):
        assert schema.assign_type(load("ports: []\n")).passed
        assert schema.assign_type(load("ports: [1, 2, 3, 4]\n")).passed

    def test_every_element_is_checked(self, schema, load):
        check = schema.assign_type(load("""\
            ports:
            - 1
            - x
            - 3
            -
            """))
        assert [(v.yaml_path, v.message) for v in check.violations] == [
            ("/ports/1", "Expected integer but found string"),
            ("/ports/3", "Expected integer but found null"),
        ]
        assert check.violations[0].position.line == 3

    def test_array_expected(self, schema, load):
        check = schema.assign_type(load("ports: 80\n"))
        assert _messages(check) == ["Expected array but found integer"]

    def test_array_of_maps(self, load_schema, load):
        schema = build_document_schema(load_schema("""\
            servers:
            - name: x
              port: 1
            """))
        check = schema.assign_type(load("""\
            servers:
            - name: a
            - name: b
              port: x
              tls: true
            """))
        assert [(v.yaml_path, v.message) for v in check.violations] == [
            ("/servers/1/port", "Expected integer but found string"),
            ("/servers/1/tls", "Map item 'tls' is not defined in schema"),
        ]


# --- Nullability ---


class TestNullableChecks:
    def test_nullable_item_accepts_null(self, load_schema, load):
        schema = build_document_schema(
            load_schema("""\
                a: x
                b: 1
                """, annotations_by_line={2: [NULLABLE]}),
        )
        assert schema.assign_type(load("b: null\n")).passed
        assert schema.assign_type(load("b: 7\n")).passed

    def test_nullable_item_still_checks_kind(self, load_schema, load):
        schema = build_document_schema(load_schema("b: 1\n", annotations_by_line={1: [NULLABLE]}))
        check = schema.assign_type(load("b: x\n"))
        assert _messages(check) == ["Expected integer but found string"]

    def test_non_nullable_item_rejects_null(self, schema_ab, load):
        check = schema_ab.assign_type(load("b: ~\n"))
        assert _messages(check) == ["Expected integer but found null"]

    def test_nullable_map_accepts_null_and_any_shape(self, load_schema, load):
        doc = load_schema("""\
            db:
              host: localhost
            """)
        doc.value.find("db").value.annotate(nullable())
        schema = build_document_schema(doc)

        assert schema.assign_type(load("db: null\n")).passed
        assert schema.assign_type(load("""\
            db:
              anything: 1
            """)).passed

    def test_nullable_map_still_checks_kind(self, load_schema, load):
        doc = load_schema("""\
            db:
              host: localhost
            """)
        doc.value.find("db").value.annotate(nullable())
        schema = build_document_schema(doc)

        assert _messages(schema.assign_type(load("db: 1\n"))) == ["Expected map but found integer"]


# --- Type assignment side table ---


class TestTypeAssignment:
    def test_resolved_types(self, load_schema, load):
        schema = build_document_schema(load_schema("""\
            name: app
            tags:
            - x
            """))
        doc = load("""\
            name: web
            tags:
            - a
            """)
        check = schema.assign_type(doc)
        map_type = schema.allowed.value_type

        assert check.assignments.type_of(doc) is schema.allowed
        assert check.assignments.type_of(doc.value) is map_type
        name_item, tags_item = doc.value.items
        assert check.assignments.type_of(name_item) is map_type.item_for("name")
        tags_type = map_type.item_for("tags").value_type
        assert check.assignments.type_of(tags_item.value) is tags_type
        assert check.assignments.type_of(tags_item.value.items[0]) is tags_type.items_type
        assert len(check.assignments) == 6

    def test_unknown_items_get_no_type(self, schema_ab, load):
        doc = load("c: 1\n")
        check = schema_ab.assign_type(doc)
        assert doc.value.items[0] not in check.assignments

    def test_data_tree_is_not_mutated(self, schema_ab, load):
        doc = load("""\
            a: hello
            b: 5
            """)
        schema_ab.assign_type(doc)
        assert doc.annotations == {}
        assert all(item.annotations == {} for item in doc.value.items)

    def test_idempotent(self, schema_ab, load):
        doc = load("""\
            a: 1
            c: 2
            """)
        first = schema_ab.assign_type(doc)
        second = schema_ab.assign_type(doc)
        assert first.violations == second.violations
        assert len(first.violations) == 2

    def test_same_data_against_two_schemas(self, schema_ab, load_schema, load):
        other = build_document_schema(load_schema("a: 1\n"))
        doc = load("a: x\n")

        assert schema_ab.assign_type(doc).passed
        assert _messages(other.assign_type(doc)) == ["Expected integer but found string"]
        assert schema_ab.assign_type(doc).passed


# --- Untyped and scalar documents ---


class TestDocumentLevelChecks:
    def test_untyped_document_accepts_anything(self, load_schema, load):
        schema = build_document_schema(load_schema(""))
        assert schema.assign_type(load("a: [1, {b: 2}]\n")).passed
        assert schema.assign_type(load("42\n")).passed

    def test_scalar_document(self, load_schema, load):
        schema = build_document_schema(load_schema("hello\n"))
        assert schema.assign_type(load("world\n")).passed
        assert _messages(schema.assign_type(load("5\n"))) == ["Expected string but found integer"]

    def test_check_bare_node(self, schema_ab, load):
        doc = load("a: 1\n")
        check = schema_ab.assign_type(doc.value)
        assert _messages(check) == ["Expected string but found integer"]

    def test_logs_check(self, schema_ab, load, caplog):
        caplog.set_level(logging.DEBUG, logger="exemplar_schema")
        schema_ab.assign_type(load("c: 1\n"))
        assert "found 1 violation(s)" in caplog.text

    def test_scalar_node_against_typed_schema(self, schema_ab):
        check = schema_ab.assign_type("hello")
        assert _messages(check) == ["Expected map but found string"]
        assert check.violations[0].position == SourceLocation.unknown()

    def test_scalar_node_against_scalar_schema(self, load_schema):
        schema = build_document_schema(load_schema("hello\n"))
        assert schema.assign_type("world").passed
        assert _messages(schema.assign_type(5)) == ["Expected string but found integer"]

    def test_scalar_node_against_untyped_schema(self, load_schema, caplog):
        caplog.set_level(logging.DEBUG, logger="exemplar_schema")
        schema = build_document_schema(load_schema("~\n"))
        assert schema.assign_type(5).passed
        assert "Type check at ?:? found 0 violation(s)" in caplog.text

    def test_document_set_checks_every_document(self, schema_ab):
        docs = document_set_from_yaml_nodes(
            yaml.compose_all("a: y\n---\na: z\nb: 2\n", Loader=yaml.SafeLoader),
            file_path="values.yml",
        )
        check = schema_ab.assign_type(docs)
        assert check.passed
        assert all(doc in check.assignments for doc in docs)

    def test_document_set_collects_violations_across_documents(self, schema_ab):
        docs = document_set_from_yaml_nodes(
            yaml.compose_all("a: 1\n---\na: z\nc: 2\n", Loader=yaml.SafeLoader),
            file_path="values.yml",
        )
        check = schema_ab.assign_type(docs)
        assert [(v.message, v.position.line) for v in check.violations] == [
            ("Expected string but found integer", 1),
            ("Map item 'c' is not defined in schema", 4),
        ]

    def test_empty_document_set(self, schema_ab):
        assert schema_ab.assign_type(DocumentSet()).passed


# --- TypeCheck results ---


class TestTypeCheck:
    def test_error_lists_every_violation(self, schema_ab, load):
        check = schema_ab.assign_type(load("""\
            a: 1
            c: 2
            """))
        error = check.error()

        assert isinstance(error, SchemaCheckError)
        assert error.violations == tuple(check.violations)
        text = str(error)
        assert text.startswith("Typechecking violations found: [2]")
        assert "Expected string but found integer at values.yml:1:1 (yaml_path=/a)" in text
        assert "Map item 'c' is not defined in schema at values.yml:2:1 (yaml_path=/c)" in text

    def test_has_violations(self):
        check = TypeCheck(violations=[Violation(message="boom")])
        assert check.has_violations() is True
        assert check.passed is False

    def test_violation_without_path(self):
        assert str(Violation(message="boom")) == "boom at ?:?"

    def test_hand_built_types(self):
        array_type = ArrayType(items_type=ArrayItemType(value_type=ScalarType(ScalarKind.BOOLEAN)))
        doc_type = DocumentType(value_type=MapType(items=(
            MapItemType(key="flags", value_type=array_type, default_value=None),
        )))
        m = Map(items=[MapItem(key="other", value=1)])
        check = check_value(m, doc_type.value_type)
        assert _messages(check) == [
            "Map item 'other' is not defined in schema",
            "Map item 'flags' is required but missing",
        ]

    def test_annotation_objects_are_accepted(self):
        annotations = TypeAnnotations({AnnotationName.SCHEMA_NULLABLE: Annotation(name=NULLABLE)})
        item_type = MapItemType(key="a", value_type=ScalarType(ScalarKind.STRING), annotations=annotations)
        assert item_type.is_nullable is True
        assert item_type.is_required is False
