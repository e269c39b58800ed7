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
"""Predicate emitter for the in-memory backend.

Accessors and comparison functions are chosen once per condition when the
chain is emitted; evaluating the resulting predicate does no dispatch on
operator names. ``None`` values never satisfy a comparison or string
function, matching SQL three-valued logic; only null checks match them.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any

from erpodata.data.conditions import (
    ComparisonCondition,
    ComparisonOperator,
    CompiledCondition,
    ConditionChain,
    Connector,
    NullCondition,
    StringFunction,
    StringMatchCondition,
)

Predicate = Callable[[Any], bool]

_COMPARATORS: dict[ComparisonOperator, Callable[[Any, Any], bool]] = {
    ComparisonOperator.EQ: operator.eq,
    ComparisonOperator.NE: operator.ne,
    ComparisonOperator.GT: operator.gt,
    ComparisonOperator.GE: operator.ge,
    ComparisonOperator.LT: operator.lt,
    ComparisonOperator.LE: operator.le,
}

_STRING_MATCHERS: dict[StringFunction, Callable[[str, str], bool]] = {
    StringFunction.CONTAINS: operator.contains,
    StringFunction.STARTSWITH: str.startswith,
    StringFunction.ENDSWITH: str.endswith,
}


def match_all(record: Any) -> bool:
    return True


def _null_check(condition: NullCondition) -> Predicate:
    getter = operator.attrgetter(condition.column)
    if condition.negated:
        return lambda record: getter(record) is not None
    return lambda record: getter(record) is None


def _string_match(condition: StringMatchCondition) -> Predicate:
    getter = operator.attrgetter(condition.column)
    matcher = _STRING_MATCHERS[condition.function]
    needle = condition.value

    def predicate(record: Any) -> bool:
        value = getter(record)
        return value is not None and matcher(value, needle)

    return predicate


def _comparison(condition: ComparisonCondition) -> Predicate:
    getter = operator.attrgetter(condition.column)
    compare = _COMPARATORS[condition.operator]
    expected = condition.value

    def predicate(record: Any) -> bool:
        value = getter(record)
        return value is not None and compare(value, expected)

    return predicate


def _combine(left: Predicate, right: Predicate, connector: Connector) -> Predicate:
    if connector is Connector.AND:
        return lambda record: left(record) and right(record)
    return lambda record: left(record) or right(record)


class PredicateEmitter:
    """Emit a record predicate from a compiled chain.

    Implements :class:`~erpodata.data.ports.emitter.FilterEmitterPort` for the
    in-memory backend. An empty chain yields a predicate that matches
    everything.
    """

    def emit(self, chain: ConditionChain) -> Predicate:
        predicate: Predicate = match_all
        for link in chain:
            current = self.emit_condition(link.condition)
            if link.connector is None:
                predicate = current
            else:
                predicate = _combine(predicate, current, link.connector)
        return predicate

    @staticmethod
    def emit_condition(condition: CompiledCondition) -> Predicate:
        if isinstance(condition, NullCondition):
            return _null_check(condition)
        if isinstance(condition, StringMatchCondition):
            return _string_match(condition)
        if isinstance(condition, ComparisonCondition):
            return _comparison(condition)
        raise TypeError(f"Unsupported condition: {condition!r}")
