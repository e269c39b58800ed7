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
"""Request logging middleware: pure ASGI, one log line per request."""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger("erpodata.web")

TRANSACTION_ID_HEADER = "X-Transaction-Id"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware:
    """Logs every OData request and propagates ``X-Transaction-Id``.

    The transaction id comes from the request header or is generated. It is
    stored on ``request.state`` for the error handler, bound into structlog's
    context variables for the duration of the request (so ``filter_rejected``
    and repository events carry it) and echoed on the response.

    Responses with a 4xx or 5xx status are logged at ``warning``.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        tx_id = request.headers.get(TRANSACTION_ID_HEADER) or str(uuid.uuid4())
        request.state.transaction_id = tx_id
        start = time.perf_counter()
        status_code = 500

        async def send_with_transaction_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[TRANSACTION_ID_HEADER] = tx_id
            await send(message)

        with structlog.contextvars.bound_contextvars(transaction_id=tx_id):
            try:
                await self.app(scope, receive, send_with_transaction_id)
            except Exception as exc:
                logger.error(
                    "http_request_failed",
                    method=request.method,
                    path=request.url.path,
                    duration_ms=_elapsed_ms(start),
                    error_type=type(exc).__name__,
                )
                raise

            event = {
                "method": request.method,
                "path": request.url.path,
                "query": request.url.query,
                "status_code": status_code,
                "duration_ms": _elapsed_ms(start),
            }
            if status_code >= 400:
                logger.warning("http_request", **event)
            else:
                logger.info("http_request", **event)
