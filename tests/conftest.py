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
"""Shared fixtures: a small vendor table that exercises every filter feature."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from erpodata.entities import VendorRecord


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=UTC)


@pytest.fixture
def vendor_records() -> list[VendorRecord]:
    return [
        VendorRecord(
            vendor_id=1,
            vendor_number="V000001",
            company_name="Acme Corp",
            payment_terms="NET30",
            credit_limit=Decimal("50000.00"),
            ytd_purchases=Decimal("120000.50"),
            open_po_count=3,
            open_po_value=Decimal("15000.00"),
            last_payment_date=_utc(2024, 6, 1),
            last_payment_amount=Decimal("4200.00"),
            average_days_to_pay=28,
            vendor_since=_utc(2015, 3, 1),
            vendor_status="Active",
            tax_id="12-3456789",
            primary_contact="Wile E. Coyote",
            contact_email="wile@acme.example",
        ),
        VendorRecord(
            vendor_id=2,
            vendor_number="V000002",
            company_name="Globex 50% Supplies",
            payment_terms="NET45",
            credit_limit=Decimal("500.00"),
            open_po_count=0,
            vendor_status="Active",
        ),
        VendorRecord(
            vendor_id=3,
            vendor_number="V000003",
            company_name="Initech_Parts",
            payment_terms="NET30",
            credit_limit=Decimal("2500.00"),
            open_po_count=1,
            last_payment_date=_utc(2023, 12, 15),
            vendor_status="Pending",
        ),
        VendorRecord(
            vendor_id=4,
            vendor_number="V000004",
            company_name="O'Brien Industrial",
            payment_terms="NET60",
            credit_limit=Decimal("10000.00"),
            open_po_count=5,
            last_payment_date=_utc(2024, 2, 1),
            vendor_status="Inactive",
            currency_code="EUR",
        ),
        VendorRecord(
            vendor_id=5,
            vendor_number="V000005",
            company_name="Umbrella Logistics",
            payment_terms="NET30",
        ),
        VendorRecord(
            vendor_id=6,
            vendor_number="V000006",
            company_name="Stark Components",
            payment_terms="NET15",
            credit_limit=Decimal("75000.00"),
            open_po_count=8,
            last_payment_date=_utc(2024, 9, 30),
            vendor_status="Active",
        ),
    ]


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
