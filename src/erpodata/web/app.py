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
"""erpodata web application factory built on Starlette."""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator, Iterable

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from starlette.applications import Starlette
from starlette.middleware import Middleware

from erpodata.core.config import Config
from erpodata.core.properties import DataSourceProperties, FilterProperties, PagingProperties
from erpodata.data.filter import FilterCompiler
from erpodata.data.memory.repository import ComplianceRepository
from erpodata.data.relational.repository import VendorRepository
from erpodata.entities import COMPLIANCE_SEED, REGISTRIES, ComplianceRecord, VendorRecord, metadata
from erpodata.kernel.exceptions import ErpODataException
from erpodata.logging.structlog_adapter import StructlogAdapter
from erpodata.services.collection import compliance_service, vendor_service
from erpodata.web.errors import global_exception_handler
from erpodata.web.request_logger import RequestLoggingMiddleware
from erpodata.web.routes import ODataController

logger = structlog.get_logger("erpodata.web")


def create_engine(properties: DataSourceProperties) -> AsyncEngine:
    """Create the async engine; in-memory SQLite shares one connection."""
    if properties.url.startswith("sqlite") and ":memory:" in properties.url:
        return create_async_engine(
            properties.url,
            echo=properties.echo,
            poolclass=StaticPool,
        )
    return create_async_engine(properties.url, echo=properties.echo)


def create_app(
    config: Config | None = None,
    *,
    engine: AsyncEngine | None = None,
    vendor_seed: Iterable[VendorRecord] | None = None,
    compliance_records: Iterable[ComplianceRecord] | None = None,
    configure_logging: bool = True,
    debug: bool = False,
) -> Starlette:
    """Create the OData service.

    Wires configuration, logging, the SQLAlchemy engine, both repositories and
    the ``/api/odata`` routes. On startup the vendor schema is created when
    ``erpodata.datasource.initialize-schema`` is set and *vendor_seed* rows
    are inserted; on shutdown the engine is disposed.
    """
    config = config or Config.from_sources(".")
    if configure_logging:
        StructlogAdapter().configure(config)

    datasource = config.bind(DataSourceProperties)
    paging = config.bind(PagingProperties)
    compiler = FilterCompiler(config.bind(FilterProperties), registries=REGISTRIES)

    if engine is None:
        engine = create_engine(datasource)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    vendors = VendorRepository(session_factory)
    compliance = ComplianceRepository(COMPLIANCE_SEED if compliance_records is None else compliance_records)
    seed = list(vendor_seed or [])

    controller = ODataController(
        [vendor_service(vendors, compiler), compliance_service(compliance, compiler)],
        paging,
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if datasource.initialize_schema:
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        if seed:
            await vendors.save_all(seed)
        logger.info("odata_service_started", entity_sets=sorted(REGISTRIES), datasource=engine.url.drivername)
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("odata_service_stopped")

    app = Starlette(
        debug=debug,
        middleware=[Middleware(RequestLoggingMiddleware)],
        routes=controller.routes(),
        lifespan=lifespan,
    )
    app.state.erpodata_config = config
    app.state.erpodata_compiler = compiler

    # Register global exception handler
    app.add_exception_handler(ErpODataException, global_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app
