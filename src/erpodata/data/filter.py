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
"""Filter compiler facade.

Runs tokenize, split and compile for one ``$filter`` string under a single
:class:`~erpodata.data.deadline.Deadline` and hands the resulting chain to
the emitter matching the entity's storage backend.

Example::

    compiler = FilterCompiler(FilterProperties(timeout_ms=50))
    sql_filter = compiler.to_sql("vendor_status eq 'Active'", VENDOR_COLUMNS)
    predicate = compiler.to_predicate("debarred eq true", COMPLIANCE_COLUMNS)
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from datetime import timedelta

import structlog

from erpodata.core.properties import FilterProperties
from erpodata.data.columns import ColumnRegistry
from erpodata.data.condition_compiler import ConditionCompiler
from erpodata.data.conditions import ConditionChain
from erpodata.data.deadline import Deadline
from erpodata.data.filter_parser import split_clauses, tokenize
from erpodata.data.memory.predicate_emitter import Predicate, PredicateEmitter
from erpodata.data.relational.sql_emitter import SqlFilter, SqlFilterEmitter
from erpodata.kernel.exceptions import FilterCompilationError, MalformedClauseError, ResourceNotFoundException

logger = structlog.get_logger("erpodata.data")


class FilterCompiler:
    """Compile ``$filter`` strings for any registered entity set.

    Args:
        properties: Timeout and length limits.
        registries: Optional entity-name lookup so callers may pass
            ``"VendorMaster"`` instead of the registry itself.
        clock: Monotonic clock used for deadlines.
    """

    def __init__(
        self,
        properties: FilterProperties | None = None,
        registries: Mapping[str, ColumnRegistry] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._properties = properties or FilterProperties()
        self._registries = {name.casefold(): registry for name, registry in (registries or {}).items()}
        self._clock = clock
        self._sql_emitter = SqlFilterEmitter()
        self._predicate_emitter = PredicateEmitter()

    @property
    def properties(self) -> FilterProperties:
        return self._properties

    def registry(self, entity: str | ColumnRegistry) -> ColumnRegistry:
        if isinstance(entity, ColumnRegistry):
            return entity
        registry = self._registries.get(entity.casefold())
        if registry is None:
            raise ResourceNotFoundException(
                f"Entity set '{entity}' does not exist",
                context={"entity": entity},
            )
        return registry

    def compile(self, filter_text: str | None, entity: str | ColumnRegistry) -> ConditionChain:
        """Compile *filter_text* into a backend-neutral chain.

        ``None`` or a blank string yields an empty chain.

        Raises:
            FilterCompilationError: Any subclass, see the condition compiler.
        """
        registry = self.registry(entity)
        if filter_text is None or not filter_text.strip():
            return ConditionChain()

        max_length = self._properties.max_length
        try:
            if len(filter_text) > max_length:
                raise MalformedClauseError(
                    f"Filter exceeds the maximum length of {max_length} characters",
                    context={"length": len(filter_text), "max_length": max_length},
                )
            deadline = Deadline(timedelta(milliseconds=self._properties.timeout_ms), clock=self._clock)
            tokens = tokenize(filter_text, deadline)
            clauses = split_clauses(tokens, deadline)
            chain = ConditionCompiler(registry).compile_chain(clauses, deadline)
        except FilterCompilationError as exc:
            logger.warning("filter_rejected", entity=registry.entity, code=exc.code, reason=str(exc))
            raise

        logger.debug("filter_compiled", entity=registry.entity, conditions=len(chain))
        return chain

    def to_sql(self, filter_text: str | None, entity: str | ColumnRegistry) -> SqlFilter:
        return self._sql_emitter.emit(self.compile(filter_text, entity))

    def to_predicate(self, filter_text: str | None, entity: str | ColumnRegistry) -> Predicate:
        return self._predicate_emitter.emit(self.compile(filter_text, entity))
