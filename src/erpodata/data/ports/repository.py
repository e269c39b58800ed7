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
"""Outbound repository port shared by the relational and in-memory backends."""

from __future__ import annotations

from typing import Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)
F_contra = TypeVar("F_contra", contravariant=True)


class CollectionRepository(Protocol[T_co, F_contra]):
    """Read-only access to one entity set.

    ``F_contra`` is the backend's compiled filter: a
    :class:`~erpodata.data.relational.sql_emitter.SqlFilter` for SQL, a
    predicate for memory. Results are ordered by the entity key.
    """

    async def find_all(self, filter: F_contra | None = None, top: int | None = None, skip: int = 0) -> list[T_co]: ...

    async def count(self, filter: F_contra | None = None) -> int: ...

    async def find_by_id(self, id: int) -> T_co | None: ...
