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
"""Tokenizer and clause splitter for ``$filter`` strings.

Grammar
-------
**Clauses:** ``column operator literal`` or ``function(column, 'literal')``

**Connectors:** ``and``, ``or`` (case-insensitive), evaluated left to right
with no precedence and no parentheses.

**Quoting:** single-quoted literals are atomic; ``''`` inside a literal is an
escaped quote. Whitespace and connector keywords inside quotes never split.

Example::

    tokens = tokenize("company_name eq 'Foo and Bar' or open_po_count gt 3")
    # ["company_name", "eq", "'Foo and Bar'", "or", "open_po_count", "gt", "3"]

    split_clauses(tokens)
    # [Clause("company_name eq 'Foo and Bar'", None),
    #  Clause("open_po_count gt 3", Connector.OR)]
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from erpodata.data.conditions import Connector
from erpodata.data.deadline import Deadline
from erpodata.kernel.exceptions import MalformedClauseError

QUOTE = "'"

# How many characters the tokenizer scans between deadline checks.
_CHECK_INTERVAL = 256

_CONNECTORS = {"and": Connector.AND, "or": Connector.OR}


@dataclass(frozen=True)
class Clause:
    """One comparison or function call and the connector preceding it."""

    text: str
    connector: Connector | None = None


def tokenize(text: str | None, deadline: Deadline | None = None) -> list[str]:
    """Split *text* on whitespace outside single-quoted literals.

    Quoted tokens keep their delimiters and ``''`` escapes. An unterminated
    quote is not an error: the partial token is still emitted.
    """
    if not text:
        return []

    tokens: list[str] = []
    current: list[str] = []
    in_quote = False
    i = 0
    steps = 0
    length = len(text)

    while i < length:
        if deadline is not None and steps % _CHECK_INTERVAL == 0:
            deadline.check("tokenize")
        steps += 1
        char = text[i]
        if char == QUOTE:
            if in_quote and i + 1 < length and text[i + 1] == QUOTE:
                current.append(QUOTE * 2)
                i += 2
                continue
            in_quote = not in_quote
            current.append(char)
        elif char.isspace() and not in_quote:
            if current:
                tokens.append("".join(current))
                current.clear()
        else:
            current.append(char)
        i += 1

    if current:
        tokens.append("".join(current))
    return tokens


def split_clauses(tokens: Sequence[str], deadline: Deadline | None = None) -> list[Clause]:
    """Group tokens into clauses on top-level ``and`` / ``or`` keywords.

    A keyword only acts as a connector once the current clause has at least
    one token, so a leading or doubled keyword becomes part of a clause and
    is rejected later by the grammar.

    Raises:
        MalformedClauseError: If the filter ends with a connector.
    """
    clauses: list[Clause] = []
    current: list[str] = []
    pending: Connector | None = None

    for token in tokens:
        if deadline is not None:
            deadline.check("split")
        connector = _CONNECTORS.get(token.lower())
        if connector is not None and current:
            clauses.append(Clause(" ".join(current), pending))
            pending = connector
            current = []
        else:
            current.append(token)

    if current:
        clauses.append(Clause(" ".join(current), pending))
    elif pending is not None:
        raise MalformedClauseError(
            f"Filter ends with '{pending.value.lower()}' but no condition follows it",
            context={"connector": pending.value.lower()},
        )
    return clauses
