"""Shared fixtures: YAML text composed by PyYAML and converted to data-tree nodes."""

import logging
import textwrap

import pytest
import yaml

from exemplar_schema.yamlmeta import document_from_yaml_node


def _load_document(text, file_path="values.yml", annotations_by_line=None):
    node = yaml.compose(textwrap.dedent(text), Loader=yaml.SafeLoader)
    return document_from_yaml_node(node, file_path=file_path, annotations_by_line=annotations_by_line)


@pytest.fixture
def load():
    """Load a data document (positions report ``values.yml``)."""
    return _load_document


@pytest.fixture
def load_schema():
    """Load a schema document (positions report ``schema.yml``)."""

    def _load(text, annotations_by_line=None):
        return _load_document(text, file_path="schema.yml", annotations_by_line=annotations_by_line)

    return _load


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger("exemplar_schema")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
