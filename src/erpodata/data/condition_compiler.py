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
"""Clause grammar, column whitelisting and per-type literal coercion.

Grammar (tried in order)
------------------------
1. ``contains|startswith|endswith(column, 'literal')`` on string columns.
2. ``column eq|ne|gt|ge|lt|le literal``.

Literal coercion by :class:`~erpodata.data.columns.SemanticType`:

============  ==============================================================
STRING        ``'text'`` with ``''`` unescaped to ``'``
INTEGER       ``[+-]digits`` (ASCII only), 32-bit signed range
DECIMAL       ``[+-]digits[.digits]`` with an optional ``M``/``D``/``F`` suffix
TIMESTAMP     ISO-8601, bare or ``datetime'...'``; normalized to UTC
IDENTIFIER    GUID, bare or ``guid'...'``; decoded to the internal integer
BOOLEAN       ``true`` / ``false``
============  ==============================================================

``eq null`` and ``ne null`` bypass coercion and become null checks.

Example::

    compiler = ConditionCompiler(VENDOR_COLUMNS)
    compiler.compile("credit_limit gt 1000.50M")
    # ComparisonCondition("credit_limit", ComparisonOperator.GT, Decimal("1000.50"), DECIMAL)
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from erpodata.data import identifier
from erpodata.data.columns import ColumnDescriptor, ColumnRegistry, SemanticType
from erpodata.data.conditions import (
    ChainLink,
    ComparisonCondition,
    ComparisonOperator,
    CompiledCondition,
    ConditionChain,
    Connector,
    NullCondition,
    StringFunction,
    StringMatchCondition,
)
from erpodata.data.deadline import Deadline
from erpodata.data.filter_parser import Clause
from erpodata.kernel.exceptions import (
    DisallowedOperatorError,
    FunctionOnNonStringColumnError,
    InvalidIdentifierEncodingError,
    MalformedClauseError,
    TypeCoercionError,
    UnknownColumnError,
)

# Both patterns are linear: no nested or overlapping quantifiers.
_FUNCTION_RE = re.compile(
    r"^(?P<function>\w+)\(\s*(?P<column>\w+)\s*,\s*'(?P<literal>(?:[^']|'')*)'\s*\)$",
    re.ASCII,
)
_COMPARISON_RE = re.compile(
    r"^(?P<column>\w+)\s+(?P<operator>\w+)\s+(?P<literal>.+)$",
    re.ASCII | re.DOTALL,
)

_STRING_RE = re.compile(r"^'(?P<body>(?:[^']|'')*)'$", re.DOTALL)
_INTEGER_RE = re.compile(r"^[+-]?[0-9]+$")
_DECIMAL_RE = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)$")
_DATETIME_RE = re.compile(r"^datetime'(?P<body>[^']*)'$", re.IGNORECASE)
_GUID_RE = re.compile(r"^guid'(?P<body>[^']*)'$", re.IGNORECASE)

_DECIMAL_SUFFIXES = frozenset("mMdDfF")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_NULL_LITERAL = "null"
_CONNECTOR_KEYWORDS = frozenset(connector.value.lower() for connector in Connector)


def unquote(literal: str) -> str | None:
    """Strip the quotes of a ``'...'`` literal and unescape ``''``."""
    match = _STRING_RE.match(literal)
    if match is None:
        return None
    return match.group("body").replace("''", "'")


def _fail(column: ColumnDescriptor, expected: str) -> TypeCoercionError:
    return TypeCoercionError(
        f"Column '{column.external_name}' expects {expected}",
        context={"column": column.external_name, "type": column.semantic_type.name, "expected": expected},
    )


def _coerce_string(column: ColumnDescriptor, literal: str) -> str:
    value = unquote(literal)
    if value is None:
        raise _fail(column, "a string value (e.g., 'value')")
    return value


def _coerce_integer(column: ColumnDescriptor, literal: str) -> int:
    if not _INTEGER_RE.match(literal):
        raise _fail(column, "an integer value")
    value = int(literal)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise _fail(column, "an integer value within the 32-bit range")
    return value


def _coerce_decimal(column: ColumnDescriptor, literal: str) -> Decimal:
    text = literal[:-1] if literal and literal[-1] in _DECIMAL_SUFFIXES else literal
    if not _DECIMAL_RE.match(text):
        raise _fail(column, "a decimal value (e.g., 123.45 or 123.45M)")
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise _fail(column, "a decimal value (e.g., 123.45 or 123.45M)") from exc


def _coerce_timestamp(column: ColumnDescriptor, literal: str) -> datetime:
    match = _DATETIME_RE.match(literal)
    text = match.group("body") if match else literal
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise _fail(column, "a date/time value (e.g., 2024-01-15T00:00:00Z)") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _coerce_identifier(column: ColumnDescriptor, literal: str) -> int:
    match = _GUID_RE.match(literal)
    text = match.group("body") if match else literal
    try:
        guid = uuid.UUID(text)
    except ValueError as exc:
        raise _fail(column, "a GUID value (e.g., guid'00000001-0000-0000-0000-000000000000')") from exc
    try:
        return identifier.decode(guid)
    except InvalidIdentifierEncodingError as exc:
        raise InvalidIdentifierEncodingError(
            f"Column '{column.external_name}' received a GUID that does not identify a record",
            context={"column": column.external_name, "identifier": str(guid)},
        ) from exc


def _coerce_boolean(column: ColumnDescriptor, literal: str) -> bool:
    lowered = literal.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise _fail(column, "a boolean value (true or false)")


_COERCERS: dict[SemanticType, Callable[[ColumnDescriptor, str], Any]] = {
    SemanticType.STRING: _coerce_string,
    SemanticType.INTEGER: _coerce_integer,
    SemanticType.DECIMAL: _coerce_decimal,
    SemanticType.TIMESTAMP: _coerce_timestamp,
    SemanticType.IDENTIFIER: _coerce_identifier,
    SemanticType.BOOLEAN: _coerce_boolean,
}


def coerce_literal(column: ColumnDescriptor, literal: str) -> Any:
    """Coerce *literal* to the Python value for *column*'s semantic type."""
    return _COERCERS[column.semantic_type](column, literal)


class ConditionCompiler:
    """Compile clauses against one entity's :class:`ColumnRegistry`.

    Stateless apart from the read-only registry, so a single instance can be
    shared by concurrent requests.
    """

    def __init__(self, registry: ColumnRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ColumnRegistry:
        return self._registry

    def compile_chain(self, clauses: Sequence[Clause], deadline: Deadline | None = None) -> ConditionChain:
        """Compile every clause; the first failure aborts the whole chain."""
        links = [ChainLink(self.compile(clause.text, deadline), clause.connector) for clause in clauses]
        return ConditionChain(tuple(links))

    def compile(self, clause: str, deadline: Deadline | None = None) -> CompiledCondition:
        """Compile a single clause.

        Raises:
            MalformedClauseError: Neither grammar form matches.
            UnknownColumnError: Column is not whitelisted.
            DisallowedOperatorError: Operator is not whitelisted.
            FunctionOnNonStringColumnError: String function on a non-string column.
            TypeCoercionError: Literal does not fit the column type.
            InvalidIdentifierEncodingError: GUID literal is not an encoded identifier.
            CompilationTimeoutError: The deadline expired.
        """
        deadline = deadline or Deadline.unbounded()
        text = clause.strip()

        first = text.split(maxsplit=1)[0].lower() if text else ""
        if first in _CONNECTOR_KEYWORDS:
            raise MalformedClauseError(
                f"Condition cannot start with '{first}'; '{first}' must join two conditions",
                context={"clause": text, "connector": first},
            )

        deadline.check("match")
        function_match = _FUNCTION_RE.match(text)
        deadline.check("match")
        if function_match is not None:
            return self._compile_function(
                function_match.group("function"),
                function_match.group("column"),
                function_match.group("literal"),
            )

        comparison_match = _COMPARISON_RE.match(text)
        deadline.check("match")
        if comparison_match is None:
            raise MalformedClauseError(
                f"Invalid condition format: {text}",
                context={"clause": text},
            )
        return self._compile_comparison(
            comparison_match.group("column"),
            comparison_match.group("operator"),
            comparison_match.group("literal").strip(),
        )

    def _resolve(self, name: str) -> ColumnDescriptor:
        column = self._registry.lookup(name)
        if column is None:
            raise UnknownColumnError(
                f"Column '{name}' is not allowed in filters",
                context={"column": name, "entity": self._registry.entity},
            )
        return column

    def _compile_function(self, function_name: str, column_name: str, body: str) -> StringMatchCondition:
        function = StringFunction.from_name(function_name)
        if function is None:
            raise MalformedClauseError(
                f"Function '{function_name}' is not supported; use contains, startswith or endswith",
                context={"function": function_name},
            )
        column = self._resolve(column_name)
        if column.semantic_type is not SemanticType.STRING:
            raise FunctionOnNonStringColumnError(
                f"Function '{function.value}' can only be used on string columns",
                context={"function": function.value, "column": column.external_name},
            )
        return StringMatchCondition(column.internal_name, function, body.replace("''", "'"))

    def _compile_comparison(self, column_name: str, keyword: str, literal: str) -> CompiledCondition:
        column = self._resolve(column_name)
        operator = ComparisonOperator.from_keyword(keyword)
        if operator is None:
            raise DisallowedOperatorError(
                f"Operator '{keyword.lower()}' is not allowed",
                context={"operator": keyword},
            )

        if literal.lower() == _NULL_LITERAL:
            if operator is ComparisonOperator.EQ:
                return NullCondition(column.internal_name)
            if operator is ComparisonOperator.NE:
                return NullCondition(column.internal_name, negated=True)
            raise DisallowedOperatorError(
                f"Operator '{operator.keyword}' cannot be used with null; use eq or ne",
                context={"operator": operator.keyword, "column": column.external_name},
            )

        value = coerce_literal(column, literal)
        return ComparisonCondition(column.internal_name, operator, value, column.semantic_type)
