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
"""Backend-neutral compiled conditions.

The condition compiler produces a :class:`ConditionChain`; both emitters
consume it. Conditions only ever hold coerced values, never raw literals.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from erpodata.data.columns import SemanticType

LIKE_ESCAPE = "\\"


class Connector(Enum):
    AND = "AND"
    OR = "OR"


class ComparisonOperator(Enum):
    """Whitelisted comparison operators and their SQL symbols."""

    EQ = ("eq", "=")
    NE = ("ne", "<>")
    GT = ("gt", ">")
    GE = ("ge", ">=")
    LT = ("lt", "<")
    LE = ("le", "<=")

    def __init__(self, keyword: str, symbol: str) -> None:
        self.keyword = keyword
        self.symbol = symbol

    @classmethod
    def from_keyword(cls, keyword: str) -> ComparisonOperator | None:
        lowered = keyword.lower()
        for op in cls:
            if op.keyword == lowered:
                return op
        return None


class StringFunction(Enum):
    CONTAINS = "contains"
    STARTSWITH = "startswith"
    ENDSWITH = "endswith"

    @classmethod
    def from_name(cls, name: str) -> StringFunction | None:
        try:
            return cls(name.lower())
        except ValueError:
            return None


def escape_like(value: str, escape: str = LIKE_ESCAPE) -> str:
    """Escape the escape character, ``%`` and ``_`` for a LIKE pattern."""
    return value.replace(escape, escape + escape).replace("%", escape + "%").replace("_", escape + "_")


@dataclass(frozen=True)
class ComparisonCondition:
    """``column <op> value`` with *value* already coerced to *semantic_type*."""

    column: str
    operator: ComparisonOperator
    value: Any
    semantic_type: SemanticType


@dataclass(frozen=True)
class NullCondition:
    """``column IS NULL`` (or ``IS NOT NULL`` when *negated*)."""

    column: str
    negated: bool = False


@dataclass(frozen=True)
class StringMatchCondition:
    """``contains`` / ``startswith`` / ``endswith`` on a string column."""

    column: str
    function: StringFunction
    value: str
    escape_char: str = LIKE_ESCAPE

    @property
    def like_pattern(self) -> str:
        escaped = escape_like(self.value, self.escape_char)
        if self.function is StringFunction.STARTSWITH:
            return f"{escaped}%"
        if self.function is StringFunction.ENDSWITH:
            return f"%{escaped}"
        return f"%{escaped}%"


CompiledCondition = Union[ComparisonCondition, NullCondition, StringMatchCondition]


@dataclass(frozen=True)
class ChainLink:
    condition: CompiledCondition
    connector: Connector | None = None


@dataclass(frozen=True)
class ConditionChain:
    """Compiled conditions in source order, folded strictly left to right.

    ``a OR b AND c`` means ``(a OR b) AND c``; there is no precedence.
    """

    links: tuple[ChainLink, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for index, link in enumerate(self.links):
            if index == 0 and link.connector is not None:
                raise ValueError("The first condition cannot have a connector")
            if index > 0 and link.connector is None:
                raise ValueError(f"Condition {index} is missing its connector")

    def __iter__(self) -> Iterator[ChainLink]:
        return iter(self.links)

    def __len__(self) -> int:
        return len(self.links)

    def __bool__(self) -> bool:
        return bool(self.links)

    @property
    def conditions(self) -> list[CompiledCondition]:
        return [link.condition for link in self.links]

    @property
    def connectors(self) -> list[Connector]:
        return [link.connector for link in self.links[1:] if link.connector is not None]
