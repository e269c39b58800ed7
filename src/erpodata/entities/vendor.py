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
"""VendorMaster: the SQL-backed vendor entity set."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, Integer, MetaData, Numeric, String, Table

from erpodata.data import columns as col
from erpodata.data.columns import ColumnRegistry

ENTITY_SET = "VendorMaster"
TABLE_NAME = "ERP_VendorMaster"

metadata = MetaData()

VENDOR_COLUMNS = ColumnRegistry(
    ENTITY_SET,
    key="vendor_id",
    columns=[
        col.identifier("vendor_id"),
        col.string("vendor_number", nullable=False, max_length=20),
        col.string("company_name", nullable=False, max_length=200),
        col.string("payment_terms", nullable=False, max_length=20),
        col.decimal("credit_limit"),
        col.decimal("ytd_purchases"),
        col.integer("open_po_count"),
        col.decimal("open_po_value"),
        col.timestamp("last_payment_date"),
        col.decimal("last_payment_amount"),
        col.integer("average_days_to_pay"),
        col.timestamp("vendor_since"),
        col.string("vendor_status", max_length=20),
        col.string("currency_code", nullable=False, max_length=3),
        col.string("tax_id", max_length=20),
        col.string("duns_number", max_length=15),
        col.string("primary_contact", max_length=100),
        col.string("contact_email", max_length=100),
        col.string("contact_phone", max_length=20),
    ],
)

vendor_table = Table(
    TABLE_NAME,
    metadata,
    Column("vendor_id", Integer, primary_key=True, autoincrement=False),
    Column("vendor_number", String(20), nullable=False),
    Column("company_name", String(200), nullable=False),
    Column("payment_terms", String(20), nullable=False),
    Column("credit_limit", Numeric(18, 2)),
    Column("ytd_purchases", Numeric(18, 2)),
    Column("open_po_count", Integer),
    Column("open_po_value", Numeric(18, 2)),
    Column("last_payment_date", DateTime(timezone=True)),
    Column("last_payment_amount", Numeric(18, 2)),
    Column("average_days_to_pay", Integer),
    Column("vendor_since", DateTime(timezone=True)),
    Column("vendor_status", String(20)),
    Column("currency_code", String(3), nullable=False, server_default="USD"),
    Column("tax_id", String(20)),
    Column("duns_number", String(15)),
    Column("primary_contact", String(100)),
    Column("contact_email", String(100)),
    Column("contact_phone", String(20)),
)


@dataclass(frozen=True)
class VendorRecord:
    """One ``ERP_VendorMaster`` row. ``vendor_id`` is the internal integer key."""

    vendor_id: int
    vendor_number: str
    company_name: str
    payment_terms: str
    credit_limit: Decimal | None = None
    ytd_purchases: Decimal | None = None
    open_po_count: int | None = None
    open_po_value: Decimal | None = None
    last_payment_date: datetime | None = None
    last_payment_amount: Decimal | None = None
    average_days_to_pay: int | None = None
    vendor_since: datetime | None = None
    vendor_status: str | None = None
    currency_code: str = "USD"
    tax_id: str | None = None
    duns_number: str | None = None
    primary_contact: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
