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
"""ComplianceRegistry: the in-memory compliance entity set and its seed data."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from erpodata.data import columns as col
from erpodata.data.columns import ColumnRegistry

ENTITY_SET = "ComplianceRegistry"

COMPLIANCE_COLUMNS = ColumnRegistry(
    ENTITY_SET,
    key="registry_id",
    columns=[
        col.identifier("registry_id"),
        col.string("vendor_number", nullable=False, max_length=20),
        col.string("sam_status", max_length=20),
        col.timestamp("sam_expiry"),
        col.integer("osha_violation_count"),
        col.timestamp("osha_last_inspection"),
        col.boolean("debarred"),
    ],
)


@dataclass(frozen=True)
class ComplianceRecord:
    """SAM registration and OSHA history for one vendor."""

    registry_id: int
    vendor_number: str
    sam_status: str | None = None
    sam_expiry: datetime | None = None
    osha_violation_count: int | None = None
    osha_last_inspection: datetime | None = None
    debarred: bool | None = None


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=UTC)


COMPLIANCE_SEED: tuple[ComplianceRecord, ...] = (
    ComplianceRecord(1, "V000001", "Active", _utc(2025, 12, 31), 0, _utc(2024, 6, 15), False),
    ComplianceRecord(2, "V000002", "Active", _utc(2025, 8, 15), 1, _utc(2024, 3, 20), False),
    ComplianceRecord(3, "V000003", "Expired", _utc(2024, 6, 30), 0, _utc(2023, 11, 10), False),
    ComplianceRecord(4, "V000004", "Active", _utc(2026, 3, 1), 2, _utc(2024, 9, 5), False),
    ComplianceRecord(5, "V000005", "Active", _utc(2025, 5, 20), 0, _utc(2024, 1, 12), False),
    ComplianceRecord(6, "V000006", "Inactive", _utc(2023, 12, 31), 3, _utc(2024, 7, 22), False),
    ComplianceRecord(7, "V000007", "Active", _utc(2025, 11, 30), 0, _utc(2024, 4, 8), False),
    ComplianceRecord(8, "V000008", "Pending", _utc(2025, 6, 30), 0, _utc(2024, 3, 15), False),
    ComplianceRecord(9, "V000009", "Active", _utc(2025, 9, 15), 5, _utc(2024, 10, 1), False),
    ComplianceRecord(10, "V000010", "Active", _utc(2026, 1, 31), 0, _utc(2024, 2, 28), False),
    ComplianceRecord(11, "V000011", "Expired", _utc(2024, 3, 15), 1, _utc(2023, 8, 20), False),
    ComplianceRecord(12, "V000012", "Active", _utc(2025, 7, 10), 0, _utc(2024, 5, 15), False),
    ComplianceRecord(13, "V000013", "Active", _utc(2025, 10, 25), 0, _utc(2024, 8, 30), True),
    ComplianceRecord(14, "V000014", "Active", _utc(2026, 2, 28), 0, _utc(2024, 11, 5), False),
)
