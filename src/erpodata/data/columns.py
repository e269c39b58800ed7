# Copyright 2026 Firefly Software Solutions Inc.
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
"""Static column whitelists.

A :class:`ColumnRegistry` maps the external column names a caller may use in
``$filter`` to the storage column and the semantic type driving literal
coercion. Registries are built once at import time and are read-only, so the
compiler can share them across concurrent requests without locking.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class SemanticType(Enum):
    """Logical type of a column, independent of its storage representation."""

    STRING = "Edm.String"
    INTEGER = "Edm.Int32"
    DECIMAL = "Edm.Decimal"
    TIMESTAMP = "Edm.DateTimeOffset"
    IDENTIFIER = "Edm.Guid"
    BOOLEAN = "Edm.Boolean"

    @property
    def edm_type(self) -> str:
        return self.value


@dataclass(frozen=True)
class ColumnDescriptor:
    """One whitelisted column.

    ``nullable`` and ``max_length`` only feed the ``$metadata`` document.
    """

    external_name: str
    internal_name: str
    semantic_type: SemanticType
    nullable: bool = True
    max_length: int | None = None


class ColumnRegistry:
    """Immutable, case-insensitive whitelist for one entity set."""

    __slots__ = ("_entity", "_key", "_columns")

    def __init__(self, entity: str, key: str, columns: Iterable[ColumnDescriptor]) -> None:
        by_name: dict[str, ColumnDescriptor] = {}
        for column in columns:
            folded = column.external_name.casefold()
            if folded in by_name:
                raise ValueError(f"Duplicate column '{column.external_name}' in {entity}")
            by_name[folded] = column
        if key.casefold() not in by_name:
            raise ValueError(f"Key column '{key}' is not declared in {entity}")
        self._entity = entity
        self._key = by_name[key.casefold()]
        self._columns = MappingProxyType(by_name)

    @property
    def entity(self) -> str:
        return self._entity

    @property
    def key(self) -> ColumnDescriptor:
        return self._key

    def lookup(self, name: str) -> ColumnDescriptor | None:
        """Resolve an external column name, ignoring case."""
        return self._columns.get(name.casefold())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._columns

    def __iter__(self) -> Iterator[ColumnDescriptor]:
        return iter(self._columns.values())

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"ColumnRegistry({self._entity!r}, columns={len(self)})"


def string(name: str, *, nullable: bool = True, max_length: int | None = None) -> ColumnDescriptor:
    return ColumnDescriptor(name, name, SemanticType.STRING, nullable, max_length)


def integer(name: str, *, nullable: bool = True) -> ColumnDescriptor:
    return ColumnDescriptor(name, name, SemanticType.INTEGER, nullable)


def decimal(name: str, *, nullable: bool = True) -> ColumnDescriptor:
    return ColumnDescriptor(name, name, SemanticType.DECIMAL, nullable)


def timestamp(name: str, *, nullable: bool = True) -> ColumnDescriptor:
    return ColumnDescriptor(name, name, SemanticType.TIMESTAMP, nullable)


def identifier(name: str) -> ColumnDescriptor:
    return ColumnDescriptor(name, name, SemanticType.IDENTIFIER, nullable=False)


def boolean(name: str, *, nullable: bool = True) -> ColumnDescriptor:
    return ColumnDescriptor(name, name, SemanticType.BOOLEAN, nullable)
