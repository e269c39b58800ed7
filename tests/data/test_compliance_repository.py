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
"""Tests for the in-memory ComplianceRepository."""

import pytest

from erpodata.data.filter import FilterCompiler
from erpodata.data.memory.repository import ComplianceRepository
from erpodata.entities import COMPLIANCE_COLUMNS, COMPLIANCE_SEED


@pytest.fixture
def repo() -> ComplianceRepository:
    return ComplianceRepository()


class TestComplianceRepository:
    async def test_seed_has_fourteen_records(self, repo):
        assert await repo.count() == 14
        assert [r.registry_id for r in await repo.find_all()] == list(range(1, 15))

    async def test_window(self, repo):
        records = await repo.find_all(top=3, skip=10)
        assert [r.vendor_number for r in records] == ["V000011", "V000012", "V000013"]

    async def test_skip_past_end(self, repo):
        assert await repo.find_all(skip=20) == []

    async def test_predicate_and_count(self, repo):
        predicate = FilterCompiler().to_predicate("sam_status eq 'Expired'", COMPLIANCE_COLUMNS)
        assert [r.registry_id for r in await repo.find_all(predicate)] == [3, 11]
        assert await repo.count(predicate) == 2

    async def test_find_by_id(self, repo):
        record = await repo.find_by_id(13)
        assert record is not None
        assert record.debarred is True

    async def test_find_by_id_missing(self, repo):
        assert await repo.find_by_id(15) is None

    async def test_records_are_sorted_by_key(self):
        repo = ComplianceRepository(reversed(COMPLIANCE_SEED))
        assert [r.registry_id for r in await repo.find_all(top=2)] == [1, 2]
