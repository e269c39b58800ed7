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
"""Parameterized SQL emitter for the relational backend.

Every literal travels as a named bind parameter (``:p0``, ``:p1``, ...);
the WHERE text only ever contains whitelisted column names, operator
symbols, placeholders and the fixed ``ESCAPE`` character.

Example::

    sql_filter = SqlFilterEmitter().emit(chain)
    sql_filter.where_clause
    # "(vendor_status = :p0 OR vendor_status = :p1) AND credit_limit > :p2"
    stmt = select(vendor_table).where(sql_filter.to_clause())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, TextClause, bindparam, text
from sqlalchemy.types import TypeEngine

from erpodata.data.columns import SemanticType
from erpodata.data.conditions import (
    ComparisonCondition,
    CompiledCondition,
    ConditionChain,
    Connector,
    NullCondition,
    StringMatchCondition,
)

_PLACEHOLDER_PREFIX = "p"

_SQL_TYPES: dict[SemanticType, TypeEngine[Any]] = {
    SemanticType.STRING: String(),
    SemanticType.INTEGER: Integer(),
    SemanticType.DECIMAL: Numeric(18, 2),
    SemanticType.TIMESTAMP: DateTime(timezone=True),
    SemanticType.IDENTIFIER: Integer(),
    SemanticType.BOOLEAN: Boolean(),
}


def sql_type_for(semantic_type: SemanticType) -> TypeEngine[Any]:
    return _SQL_TYPES[semantic_type]


@dataclass(frozen=True)
class SqlParameter:
    name: str
    value: Any
    semantic_type: SemanticType


@dataclass(frozen=True)
class SqlFilter:
    """A WHERE fragment plus its ordered bind parameters.

    An empty filter has an empty ``where_clause`` and is falsy.
    """

    where_clause: str = ""
    parameters: list[SqlParameter] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.where_clause)

    @property
    def values(self) -> dict[str, Any]:
        return {param.name: param.value for param in self.parameters}

    def to_clause(self) -> TextClause:
        """Build a SQLAlchemy text clause with type-aware bind parameters."""
        binds = [
            bindparam(param.name, param.value, type_=sql_type_for(param.semantic_type))
            for param in self.parameters
        ]
        return text(self.where_clause).bindparams(*binds)


class SqlFilterEmitter:
    """Emit a :class:`SqlFilter` from a compiled chain.

    Implements :class:`~erpodata.data.ports.emitter.FilterEmitterPort` for the
    relational backend. Instances hold no state between calls.
    """

    def emit(self, chain: ConditionChain) -> SqlFilter:
        parameters: list[SqlParameter] = []
        where = ""
        previous: Connector | None = None

        for link in chain:
            fragment = self._emit_condition(link.condition, parameters)
            if link.connector is None:
                where = fragment
                continue
            # a OR b AND c -> (a OR b) AND c
            if previous is not None and link.connector is not previous:
                where = f"({where})"
            where = f"{where} {link.connector.value} {fragment}"
            previous = link.connector

        return SqlFilter(where, parameters)

    @staticmethod
    def _add_parameter(parameters: list[SqlParameter], value: Any, semantic_type: SemanticType) -> str:
        name = f"{_PLACEHOLDER_PREFIX}{len(parameters)}"
        parameters.append(SqlParameter(name, value, semantic_type))
        return f":{name}"

    def _emit_condition(self, condition: CompiledCondition, parameters: list[SqlParameter]) -> str:
        if isinstance(condition, NullCondition):
            return f"{condition.column} IS NOT NULL" if condition.negated else f"{condition.column} IS NULL"
        if isinstance(condition, StringMatchCondition):
            placeholder = self._add_parameter(parameters, condition.like_pattern, SemanticType.STRING)
            return f"{condition.column} LIKE {placeholder} ESCAPE '{condition.escape_char}'"
        if isinstance(condition, ComparisonCondition):
            placeholder = self._add_parameter(parameters, condition.value, condition.semantic_type)
            return f"{condition.column} {condition.operator.symbol} {placeholder}"
        raise TypeError(f"Unsupported condition: {condition!r}")
