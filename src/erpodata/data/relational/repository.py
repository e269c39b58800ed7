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
"""Async SQLAlchemy repository for the ``VendorMaster`` entity set."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import Select, Table, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from erpodata.data.columns import SemanticType
from erpodata.data.relational.sql_emitter import SqlFilter
from erpodata.entities.vendor import VENDOR_COLUMNS, VendorRecord, vendor_table
from erpodata.kernel.exceptions import DataAccessException

logger = structlog.get_logger("erpodata.data")

_TIMESTAMP_COLUMNS = frozenset(
    column.internal_name for column in VENDOR_COLUMNS if column.semantic_type is SemanticType.TIMESTAMP
)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_record(row: Mapping[str, Any]) -> VendorRecord:
    values = dict(row)
    for name in _TIMESTAMP_COLUMNS:
        values[name] = _as_utc(values.get(name))
    return VendorRecord(**values)


class VendorRepository:
    """Read access to ``ERP_VendorMaster`` with compiled ``$filter`` fragments.

    Results are always ordered by ``vendor_id`` so ``$skip`` windows are
    stable. Driver failures surface as :class:`DataAccessException`.

    Usage:
        repo = VendorRepository(async_sessionmaker(engine))
        active = await repo.find_all(compiler.to_sql("vendor_status eq 'Active'", VENDOR_COLUMNS), top=10)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], table: Table = vendor_table) -> None:
        self._session_factory = session_factory
        self._table = table

    async def find_all(
        self,
        sql_filter: SqlFilter | None = None,
        top: int | None = None,
        skip: int = 0,
    ) -> list[VendorRecord]:
        """Find vendors matching *sql_filter*, skipping *skip* and returning at most *top*."""
        stmt = self._apply_filter(select(self._table), sql_filter)
        stmt = stmt.order_by(self._table.c.vendor_id)
        if skip:
            stmt = stmt.offset(skip)
        if top is not None:
            stmt = stmt.limit(top)
        async with self._session_factory() as session:
            result = await self._execute(session, stmt)
            return [_to_record(row) for row in result.mappings().all()]

    async def count(self, sql_filter: SqlFilter | None = None) -> int:
        """Count vendors matching *sql_filter*, ignoring any window."""
        stmt = self._apply_filter(select(func.count()).select_from(self._table), sql_filter)
        async with self._session_factory() as session:
            result = await self._execute(session, stmt)
            return result.scalar_one()

    async def find_by_id(self, vendor_id: int) -> VendorRecord | None:
        """Find a vendor by its internal integer key."""
        stmt = select(self._table).where(self._table.c.vendor_id == vendor_id)
        async with self._session_factory() as session:
            result = await self._execute(session, stmt)
            row = result.mappings().first()
        return _to_record(row) if row is not None else None

    async def save_all(self, records: Iterable[VendorRecord]) -> int:
        """Insert *records* in one transaction and return how many were written."""
        rows = [asdict(record) for record in records]
        if not rows:
            return 0
        async with self._session_factory() as session:
            async with session.begin():
                await self._execute(session, insert(self._table), rows)
        logger.info("vendors_saved", table=self._table.name, count=len(rows))
        return len(rows)

    @staticmethod
    def _apply_filter(stmt: Select[Any], sql_filter: SqlFilter | None) -> Select[Any]:
        if sql_filter:
            stmt = stmt.where(sql_filter.to_clause())
        return stmt

    async def _execute(self, session: AsyncSession, stmt: Any, params: Any = None) -> Any:
        try:
            return await session.execute(stmt, params)
        except SQLAlchemyError as exc:
            logger.error("vendor_query_failed", table=self._table.name, error=type(exc).__name__)
            raise DataAccessException(
                f"Query against {self._table.name} failed",
                code="DATA_ACCESS_FAILURE",
                context={"table": self._table.name},
            ) from exc
