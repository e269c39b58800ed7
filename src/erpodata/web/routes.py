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
"""OData route handlers for the entity sets and the service metadata."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from erpodata.core.properties import PagingProperties
from erpodata.services.collection import CollectionService
from erpodata.web.odata import (
    JSON_MEDIA_TYPE,
    XML_MEDIA_TYPE,
    CollectionQuery,
    collection_payload,
    metadata_document,
    parse_key,
    single_payload,
)

logger = structlog.get_logger("erpodata.web")

ODATA_PREFIX = "/api/odata"

Endpoint = Callable[[Request], Awaitable[Response]]


def service_root(request: Request) -> str:
    return f"{str(request.base_url).rstrip('/')}{ODATA_PREFIX}"


class ODataJSONResponse(JSONResponse):
    media_type = JSON_MEDIA_TYPE


class ODataController:
    """Builds the ``/api/odata`` routes for a set of collection services."""

    def __init__(self, services: Sequence[CollectionService[Any]], paging: PagingProperties | None = None) -> None:
        self._services = list(services)
        self._paging = paging or PagingProperties()
        self._metadata = metadata_document(service.registry for service in self._services)

    async def metadata(self, request: Request) -> Response:
        return Response(self._metadata, media_type=XML_MEDIA_TYPE)

    def _collection_endpoint(self, service: CollectionService[Any]) -> Endpoint:
        async def endpoint(request: Request) -> Response:
            query = CollectionQuery.from_params(request.query_params, self._paging)
            logger.info("collection_requested", entity=service.entity, top=query.top, skip=query.skip)
            page = await service.query(query.filter, query.top, query.skip, query.count)
            return ODataJSONResponse(collection_payload(service.registry, page, service_root(request)))

        return endpoint

    def _entity_endpoint(self, service: CollectionService[Any]) -> Endpoint:
        async def endpoint(request: Request) -> Response:
            key = parse_key(request.path_params["key"])
            record = await service.get(key)
            return ODataJSONResponse(single_payload(service.registry, record, service_root(request)))

        return endpoint

    def routes(self) -> list[Route]:
        routes = [Route(f"{ODATA_PREFIX}/$metadata", self.metadata, methods=["GET"], name="metadata")]
        for service in self._services:
            routes.append(
                Route(
                    f"{ODATA_PREFIX}/{service.entity}",
                    self._collection_endpoint(service),
                    methods=["GET"],
                    name=f"{service.entity}.collection",
                )
            )
            routes.append(
                Route(
                    f"{ODATA_PREFIX}/{service.entity}({{key}})",
                    self._entity_endpoint(service),
                    methods=["GET"],
                    name=f"{service.entity}.entity",
                )
            )
        return routes
