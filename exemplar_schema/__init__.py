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

"""Schema derivation from exemplar YAML documents and structural type checking."""

__version__ = "0.1.0"

from .exceptions import (
    DuplicateKeyError,
    InvalidKeyError,
    MalformedArrayExemplarError,
    NullableArrayItemError,
    SchemaBuildError,
    SchemaCheckError,
    SchemaError,
    UnknownValueKindError,
)
from .schema import (
    AnySchema,
    DocumentSchema,
    Schema,
    TypeCheck,
    Violation,
    build_document_schema,
    new_document_schema,
)

__all__ = [
    "AnySchema",
    "DocumentSchema",
    "DuplicateKeyError",
    "InvalidKeyError",
    "MalformedArrayExemplarError",
    "NullableArrayItemError",
    "Schema",
    "SchemaBuildError",
    "SchemaCheckError",
    "SchemaError",
    "TypeCheck",
    "UnknownValueKindError",
    "Violation",
    "build_document_schema",
    "new_document_schema",
]
