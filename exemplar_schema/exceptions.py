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

"""Custom exceptions for schema construction and type checking."""

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .schema.check import Violation
    from .utils.source_location import SourceLocation


class SchemaError(Exception):
    """Base exception for schema related errors."""
    pass


class SchemaBuildError(SchemaError):
    """Exception raised when a schema document cannot be turned into types."""

    def __init__(self, message: str, position: Optional["SourceLocation"] = None):
        super().__init__(message)
        self.position = position


class MalformedArrayExemplarError(SchemaBuildError):
    """Exception raised when an array exemplar does not hold exactly one item."""
    pass


class NullableArrayItemError(SchemaBuildError):
    """Exception raised when an array item carries the nullable annotation."""
    pass


class UnknownValueKindError(SchemaBuildError):
    """Exception raised when an exemplar value cannot describe a type."""
    pass


class DuplicateKeyError(SchemaError):
    """Exception raised when a map holds the same key twice."""

    def __init__(self, message: str, position: Optional["SourceLocation"] = None):
        super().__init__(message)
        self.position = position


class InvalidKeyError(SchemaError):
    """Exception raised when a map key is a map or array instead of a scalar."""

    def __init__(self, message: str, position: Optional["SourceLocation"] = None):
        super().__init__(message)
        self.position = position


class SchemaCheckError(SchemaError):
    """Exception summarizing the violations of a failed type check."""

    def __init__(self, violations: Sequence["Violation"]):
        self.violations = tuple(violations)
        lines = [f"Typechecking violations found: [{len(self.violations)}]"]
        lines.extend(f"  - {violation}" for violation in self.violations)
        super().__init__("\n".join(lines))
