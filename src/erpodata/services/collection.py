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
"""Collection services: filter compilation plus repository access per entity set."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

import structlog

from erpodata.data import identifier
from erpodata.data.columns import ColumnRegistry
from erpodata.data.filter import FilterCompiler
from erpodata.data.memory.predicate_emitter import PredicateEmitter
from erpodata.data.memory.repository import ComplianceRepository
from erpodata.data.page import CollectionPage
from erpodata.data.ports.emitter import FilterEmitterPort
from erpodata.data.ports.repository import CollectionRepository
from erpodata.data.relational.repository import VendorRepository
from erpodata.data.relational.sql_emitter import SqlFilterEmitter
from erpodata.entities import COMPLIANCE_COLUMNS, VENDOR_COLUMNS, ComplianceRecord, VendorRecord
from erpodata.kernel.exceptions import ResourceNotFoundException

logger = structlog.get_logger("erpodata.services")

T = TypeVar("T")


class CollectionService(Generic[T]):
    """Query one entity set through its backend's emitter and repository.

    Usage:
        service = CollectionService(VENDOR_COLUMNS, repo, FilterCompiler(), SqlFilterEmitter())
        page = await service.query("vendor_status eq 'Active'", top=10, count=True)
        vendor = await service.get("00000001-0000-0000-0000-000000000000")
    """

    def __init__(
        self,
        registry: ColumnRegistry,
        repository: CollectionRepository[T, Any],
        compiler: FilterCompiler,
        emitter: FilterEmitterPort[Any],
    ) -> None:
        self._registry = registry
        self._repository = repository
        self._compiler = compiler
        self._emitter = emitter

    @property
    def registry(self) -> ColumnRegistry:
        return self._registry

    @property
    def entity(self) -> str:
        return self._registry.entity

    async def query(
        self,
        filter_text: str | None = None,
        top: int | None = None,
        skip: int = 0,
        count: bool = False,
    ) -> CollectionPage[T]:
        """Return one window of the entity set matching *filter_text*.

        Raises:
            FilterCompilationError: The filter was rejected; nothing was queried.
            DataAccessException: The backing store failed.
        """
        compiled = self._emitter.emit(self._compiler.compile(filter_text, self._registry))
        items = await self._repository.find_all(compiled, top, skip)
        total = await self._repository.count(compiled) if count else None
        logger.debug("collection_queried", entity=self.entity, returned=len(items), count=total)
        return CollectionPage(items=items, count=total, top=top if top is not None else len(items), skip=skip)

    async def get(self, external_id: str) -> T:
        """Fetch one record by its external GUID key.

        Raises:
            InvalidIdentifierEncodingError: *external_id* is not an encoded key.
            ResourceNotFoundException: No record has that key.
        """
        internal_id = identifier.parse(external_id)
        record = await self._repository.find_by_id(internal_id)
        if record is None:
            raise ResourceNotFoundException(
                f"{self.entity}({external_id}) was not found",
                code="NOT_FOUND",
                context={"entity": self.entity, "id": external_id},
            )
        return record


def vendor_service(repository: VendorRepository, compiler: FilterCompiler) -> CollectionService[VendorRecord]:
    return CollectionService(VENDOR_COLUMNS, repository, compiler, SqlFilterEmitter())


def compliance_service(
    repository: ComplianceRepository, compiler: FilterCompiler
) -> CollectionService[ComplianceRecord]:
    return CollectionService(COMPLIANCE_COLUMNS, repository, compiler, PredicateEmitter())
