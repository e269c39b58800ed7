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
"""Tests for the FilterCompiler facade: limits, deadline and entity lookup."""

import pytest

from erpodata.core.properties import FilterProperties
from erpodata.data.conditions import ConditionChain, Connector
from erpodata.data.filter import FilterCompiler
from erpodata.entities import REGISTRIES, VENDOR_COLUMNS
from erpodata.kernel.exceptions import (
    CompilationTimeoutError,
    FilterCompilationError,
    MalformedClauseError,
    ResourceNotFoundException,
    UnknownColumnError,
)


class TestCompile:
    def test_builds_chain_in_source_order(self):
        chain = FilterCompiler().compile("open_po_count gt 1 and tax_id ne null or vendor_status eq 'X'", VENDOR_COLUMNS)
        assert len(chain) == 3
        assert chain.connectors == [Connector.AND, Connector.OR]
        assert chain.links[0].connector is None

    def test_debarred_is_not_a_vendor_column(self):
        with pytest.raises(UnknownColumnError):
            FilterCompiler().compile("debarred eq true", VENDOR_COLUMNS)

    @pytest.mark.parametrize("text", [None, "", "  "])
    def test_blank_filter_is_empty_chain(self, text):
        assert FilterCompiler().compile(text, VENDOR_COLUMNS) == ConditionChain()

    def test_one_bad_clause_rejects_everything(self):
        with pytest.raises(FilterCompilationError):
            FilterCompiler().to_sql("vendor_status eq 'Active' and secret eq 1", VENDOR_COLUMNS)


class TestEntityLookup:
    def test_resolves_entity_by_name_case_insensitively(self):
        compiler = FilterCompiler(registries=REGISTRIES)
        sql = compiler.to_sql("vendor_status eq 'Active'", "vendormaster")
        assert sql.where_clause == "vendor_status = :p0"

    def test_unknown_entity(self):
        with pytest.raises(ResourceNotFoundException):
            FilterCompiler(registries=REGISTRIES).compile("a eq 1", "Invoices")


class TestLimits:
    def test_max_length(self):
        compiler = FilterCompiler(FilterProperties(max_length=20))
        with pytest.raises(MalformedClauseError, match="maximum length of 20"):
            compiler.compile("vendor_status eq 'Active'", VENDOR_COLUMNS)

    def test_expired_deadline(self):
        class SlowClock:
            """Each reading is 50ms later than the previous one."""

            def __init__(self):
                self.calls = 0

            def __call__(self):
                self.calls += 1
                return self.calls * 0.05

        compiler = FilterCompiler(FilterProperties(timeout_ms=100), clock=SlowClock())
        with pytest.raises(CompilationTimeoutError) as exc_info:
            compiler.compile("vendor_status eq 'A' and open_po_count gt 1 and credit_limit lt 5", VENDOR_COLUMNS)
        assert exc_info.value.context["timeout_ms"] == 100

    def test_deadline_not_reached(self, clock):
        compiler = FilterCompiler(FilterProperties(timeout_ms=100), clock=clock)
        assert len(compiler.compile("vendor_status eq 'A'", VENDOR_COLUMNS)) == 1
