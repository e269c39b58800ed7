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
"""Tests for the in-memory predicate emitter."""

from decimal import Decimal

import pytest

from erpodata.data.conditions import ConditionChain
from erpodata.data.filter import FilterCompiler
from erpodata.data.memory.predicate_emitter import PredicateEmitter
from erpodata.entities import COMPLIANCE_COLUMNS, COMPLIANCE_SEED, VENDOR_COLUMNS, VendorRecord


@pytest.fixture
def compiler() -> FilterCompiler:
    return FilterCompiler()


def _vendor(**overrides) -> VendorRecord:
    values = {
        "vendor_id": 1,
        "vendor_number": "V000001",
        "company_name": "Acme Corp",
        "payment_terms": "NET30",
        "credit_limit": Decimal("500"),
        "vendor_status": "Active",
    }
    values.update(overrides)
    return VendorRecord(**values)


def _matching_ids(compiler: FilterCompiler, text: str) -> list[int]:
    predicate = compiler.to_predicate(text, COMPLIANCE_COLUMNS)
    return [record.registry_id for record in COMPLIANCE_SEED if predicate(record)]


class TestLeftFold:
    def test_no_operator_precedence(self, compiler):
        predicate = compiler.to_predicate(
            "vendor_status eq 'Active' or vendor_status eq 'Pending' and credit_limit gt 1000",
            VENDOR_COLUMNS,
        )
        # (Active or Pending) and 500 > 1000
        assert predicate(_vendor()) is False

    def test_or_after_and(self, compiler):
        predicate = compiler.to_predicate(
            "credit_limit gt 1000 and vendor_status eq 'Pending' or vendor_status eq 'Active'",
            VENDOR_COLUMNS,
        )
        assert predicate(_vendor()) is True


class TestNullSemantics:
    def test_comparison_against_none_is_false(self, compiler):
        record = _vendor(vendor_status=None)
        assert compiler.to_predicate("vendor_status ne 'Active'", VENDOR_COLUMNS)(record) is False
        assert compiler.to_predicate("vendor_status eq 'Active'", VENDOR_COLUMNS)(record) is False

    def test_null_checks(self, compiler):
        record = _vendor(last_payment_date=None)
        assert compiler.to_predicate("last_payment_date eq null", VENDOR_COLUMNS)(record) is True
        assert compiler.to_predicate("last_payment_date ne null", VENDOR_COLUMNS)(record) is False

    def test_string_function_on_none_is_false(self, compiler):
        record = _vendor(contact_email=None)
        assert compiler.to_predicate("endswith(contact_email, '.com')", VENDOR_COLUMNS)(record) is False


class TestStringFunctions:
    def test_functions_are_case_sensitive(self, compiler):
        record = _vendor(company_name="Acme Corp")
        assert compiler.to_predicate("contains(company_name, 'me C')", VENDOR_COLUMNS)(record) is True
        assert compiler.to_predicate("contains(company_name, 'acme')", VENDOR_COLUMNS)(record) is False

    def test_wildcards_are_literal(self, compiler):
        record = _vendor(company_name="Acme Corp")
        assert compiler.to_predicate("contains(company_name, '%')", VENDOR_COLUMNS)(record) is False
        assert compiler.to_predicate("startswith(company_name, 'A_me')", VENDOR_COLUMNS)(record) is False

    def test_escaped_quote(self, compiler):
        record = _vendor(company_name="O'Brien Industrial")
        assert compiler.to_predicate("startswith(company_name, 'O''Brien')", VENDOR_COLUMNS)(record) is True


class TestComplianceSeed:
    def test_compound_filter(self, compiler):
        assert _matching_ids(compiler, "sam_status eq 'Active' and osha_violation_count gt 0") == [2, 4, 9]

    def test_boolean(self, compiler):
        assert _matching_ids(compiler, "debarred eq true") == [13]

    def test_timestamp(self, compiler):
        assert _matching_ids(compiler, "sam_expiry lt 2025-01-01T00:00:00Z") == [3, 6, 11]

    def test_identifier(self, compiler):
        assert _matching_ids(compiler, "registry_id eq guid'0000000d-0000-0000-0000-000000000000'") == [13]

    def test_or_chain(self, compiler):
        ids = _matching_ids(compiler, "sam_status eq 'Pending' or sam_status eq 'Inactive'")
        assert ids == [6, 8]


class TestEmptyChain:
    def test_matches_everything(self):
        predicate = PredicateEmitter().emit(ConditionChain())
        assert all(predicate(record) for record in COMPLIANCE_SEED)

    def test_blank_filter(self, compiler):
        assert _matching_ids(compiler, "   ") == list(range(1, 15))
