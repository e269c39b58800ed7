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
"""Global exception handler: OData error responses as structured JSON.

Every failure is rendered as::

    {"error": {"message", "code", "transaction_id", "timestamp", "status",
               "path", "context"?}}
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse

from erpodata.kernel.exceptions import (
    BusinessException,
    ErpODataException,
    FilterCompilationError,
    InfrastructureException,
    ResourceNotFoundException,
)

logger = structlog.get_logger("erpodata.web")

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"

_STATUS_BY_TYPE: dict[type[ErpODataException], int] = {
    FilterCompilationError: 400,
    ResourceNotFoundException: 404,
    BusinessException: 400,
    InfrastructureException: 502,
}


def status_for(exc: ErpODataException) -> int:
    """Status of the nearest mapped class in *exc*'s MRO; 500 if none."""
    for klass in type(exc).__mro__:
        if klass in _STATUS_BY_TYPE:
            return _STATUS_BY_TYPE[klass]
    return 500


def _error_body(request: Request, status: int, code: str, message: str, context: dict[str, Any]) -> dict[str, Any]:
    error: dict[str, Any] = {
        "message": message,
        "code": code,
        "transaction_id": getattr(request.state, "transaction_id", None) or str(uuid.uuid4()),
        "timestamp": datetime.now(UTC).isoformat(),
        "status": status,
        "path": request.url.path,
    }
    if context:
        error["context"] = context
    return {"error": error}


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render *exc* as a JSON error response.

    Messages of :class:`ErpODataException` subclasses are written to be shown
    to callers. Anything else becomes a generic 500 so internal details never
    leave the service.
    """
    if not isinstance(exc, ErpODataException):
        logger.error("unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
        body = _error_body(request, 500, INTERNAL_ERROR_CODE, "Internal server error", {})
        return JSONResponse(body, status_code=500)

    status = status_for(exc)
    if status >= 500:
        logger.error("request_failed", path=request.url.path, code=exc.code, status=status)
    code = exc.code or type(exc).__name__
    return JSONResponse(_error_body(request, status, code, str(exc), exc.context), status_code=status)
