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

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..yamlmeta.nodes import Document
from .check import TypeCheck, check_document
from .defaults import default_document
from .types import DocumentType


class Schema(ABC):
    """Abstract schema a data node can be checked against."""

    @abstractmethod
    def assign_type(self, node: Any) -> TypeCheck:
        """Check ``node`` and resolve the type of each of its container nodes."""


class AnySchema(Schema):
    """Schema used when none was declared; every node conforms."""

    def assign_type(self, node: Any) -> TypeCheck:
        return TypeCheck()


@dataclass(frozen=True)
class DocumentSchema(Schema):
    name: str
    source: Optional[Document]
    allowed: DocumentType

    def assign_type(self, node: Any) -> TypeCheck:
        return check_document(node, self.allowed)

    def default_data_values(self) -> Document:
        """Build a fresh document holding the schema's default values."""
        return default_document(self.allowed)
