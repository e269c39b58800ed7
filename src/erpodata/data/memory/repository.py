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
"""In-memory repository for the ``ComplianceRegistry`` entity set."""

from __future__ import annotations

from collections.abc import Iterable
from operator import attrgetter

from erpodata.data.memory.predicate_emitter import Predicate, match_all
from erpodata.entities.compliance import COMPLIANCE_SEED, ComplianceRecord


class ComplianceRepository:
    """Compliance records held in process memory, ordered by ``registry_id``.

    Mirrors the :class:`~erpodata.data.relational.repository.VendorRepository`
    surface so services treat both backends alike; filters arrive as
    compiled predicates instead of SQL fragments.
    """

    def __init__(self, records: Iterable[ComplianceRecord] = COMPLIANCE_SEED) -> None:
        self._records: tuple[ComplianceRecord, ...] = tuple(sorted(records, key=attrgetter("registry_id")))

    async def find_all(
        self,
        predicate: Predicate | None = None,
        top: int | None = None,
        skip: int = 0,
    ) -> list[ComplianceRecord]:
        matches = [record for record in self._records if (predicate or match_all)(record)]
        end = None if top is None else skip + top
        return matches[skip:end]

    async def count(self, predicate: Predicate | None = None) -> int:
        test = predicate or match_all
        return sum(1 for record in self._records if test(record))

    async def find_by_id(self, registry_id: int) -> ComplianceRecord | None:
        for record in self._records:
            if record.registry_id == registry_id:
                return record
        return None
