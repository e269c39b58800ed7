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
"""Unified exception hierarchy for erpodata.

All service exceptions inherit from ErpODataException so the transport layer
can map them to client or server responses in one place.

Categories:
- BusinessException: bad requests, unknown resources
- FilterCompilationError: a ``$filter`` expression was rejected
- InfrastructureException: database and other backend failures
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Base Exception
# =============================================================================


class ErpODataException(Exception):
    """Base exception for all erpodata errors.

    Args:
        message: Human-readable error description, safe to show a caller.
        code: Machine-readable error code (e.g. ``"UNKNOWN_COLUMN"``).
        context: Arbitrary key-value pairs describing the failure.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict[str, Any] = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(ErpODataException):
    """Request rule violations."""


class InvalidRequestException(BusinessException):
    """Request is syntactically valid but semantically incorrect."""


class ResourceNotFoundException(BusinessException):
    """Requested resource does not exist."""


# =============================================================================
# Filter Exceptions
# =============================================================================


class FilterCompilationError(InvalidRequestException):
    """A ``$filter`` expression could not be compiled.

    Raised by the tokenizer, the clause splitter and the condition compiler.
    A failed compilation never yields a partial WHERE clause or predicate.
    """

    default_code = "INVALID_FILTER"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, code=self.default_code, context=context)


class MalformedClauseError(FilterCompilationError):
    """Clause matches neither the function nor the comparison grammar."""

    default_code = "MALFORMED_CLAUSE"


class UnknownColumnError(FilterCompilationError):
    """Column is not part of the entity's whitelist."""

    default_code = "UNKNOWN_COLUMN"


class DisallowedOperatorError(FilterCompilationError):
    """Operator is not whitelisted (or cannot be combined with ``null``)."""

    default_code = "DISALLOWED_OPERATOR"


class TypeCoercionError(FilterCompilationError):
    """Literal cannot be coerced to the column's semantic type."""

    default_code = "TYPE_COERCION_FAILURE"


class FunctionOnNonStringColumnError(FilterCompilationError):
    """String function applied to a column that is not a string column."""

    default_code = "FUNCTION_ON_NON_STRING_COLUMN"


class InvalidIdentifierEncodingError(FilterCompilationError):
    """A GUID does not follow the internal identifier layout."""

    default_code = "INVALID_IDENTIFIER_ENCODING"


class CompilationTimeoutError(FilterCompilationError):
    """Scanning or matching exceeded the configured time bound."""

    default_code = "COMPILATION_TIMEOUT"


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(ErpODataException):
    """Infrastructure failures: database, network."""


class DataAccessException(InfrastructureException):
    """A repository could not read from its backing store."""
