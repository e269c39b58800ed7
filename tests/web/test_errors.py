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
"""Tests for the global exception handler."""

from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from erpodata.kernel.exceptions import (
    DataAccessException,
    ErpODataException,
    InvalidRequestException,
    ResourceNotFoundException,
    UnknownColumnError,
)
from erpodata.web.errors import global_exception_handler


def _raising(exc: Exception):
    async def endpoint(request):
        raise exc

    return endpoint


async def ok(request):
    return JSONResponse({"status": "ok"})


def make_test_app() -> Starlette:
    app = Starlette(
        routes=[
            Route("/filter", _raising(UnknownColumnError("Column 'x' is not allowed in filters", {"column": "x"}))),
            Route("/not-found", _raising(ResourceNotFoundException("Order not found", code="NOT_FOUND"))),
            Route("/bad-option", _raising(InvalidRequestException("Invalid $top value."))),
            Route("/database", _raising(DataAccessException("Query failed", code="DATA_ACCESS_FAILURE"))),
            Route("/bug", _raising(RuntimeError("secret stack detail"))),
            Route("/ok", ok),
        ]
    )
    app.add_exception_handler(ErpODataException, global_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    return app


class TestGlobalExceptionHandler:
    def setup_method(self):
        self.client = TestClient(make_test_app(), raise_server_exceptions=False)

    def test_filter_error_returns_400(self):
        resp = self.client.get("/filter")
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "UNKNOWN_COLUMN"
        assert error["message"] == "Column 'x' is not allowed in filters"
        assert error["context"] == {"column": "x"}
        assert error["path"] == "/filter"

    def test_not_found_returns_404(self):
        resp = self.client.get("/not-found")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"

    def test_code_falls_back_to_class_name(self):
        resp = self.client.get("/bad-option")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "InvalidRequestException"
        assert "context" not in resp.json()["error"]

    def test_infrastructure_returns_502(self):
        resp = self.client.get("/database")
        assert resp.status_code == 502

    def test_unexpected_error_is_generic_500(self):
        resp = self.client.get("/bug")
        assert resp.status_code == 500
        error = resp.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert error["message"] == "Internal server error"
        assert "secret" not in resp.text

    def test_error_body_has_transaction_id_and_timestamp(self):
        error = self.client.get("/not-found").json()["error"]
        assert error["transaction_id"]
        assert error["timestamp"]
        assert error["status"] == 404

    def test_ok_passes_through(self):
        assert self.client.get("/ok").json() == {"status": "ok"}
