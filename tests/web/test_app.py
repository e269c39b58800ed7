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
"""End-to-end tests for the OData service over Starlette's TestClient."""

import xml.etree.ElementTree as ET

import pytest
from starlette.testclient import TestClient

from erpodata.core.config import Config
from erpodata.web.app import create_app
from erpodata.web.request_logger import TRANSACTION_ID_HEADER

VENDORS = "/api/odata/VendorMaster"
COMPLIANCE = "/api/odata/ComplianceRegistry"


def _guid(value: int) -> str:
    return f"{value:08x}-0000-0000-0000-000000000000"


@pytest.fixture
def config() -> Config:
    return Config({})


@pytest.fixture
def client(config, vendor_records):
    app = create_app(config, vendor_seed=vendor_records, configure_logging=False)
    with TestClient(app) as client:
        yield client


class TestVendorCollection:
    def test_lists_all_vendors(self, client):
        resp = client.get(VENDORS)
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json; odata.metadata=minimal"
        body = resp.json()
        assert body["@odata.context"] == "http://testserver/api/odata/$metadata#VendorMaster"
        assert "@odata.count" not in body
        assert [v["vendor_id"] for v in body["value"]] == [_guid(i) for i in range(1, 7)]

    def test_entity_annotations(self, client):
        first = client.get(VENDORS).json()["value"][0]
        assert first["@odata.type"] == "#ContosoErp.VendorMaster"
        assert first["@odata.id"] == f"VendorMaster({_guid(1)})"
        assert first["company_name"] == "Acme Corp"
        assert first["last_payment_date"] == "2024-06-01T00:00:00+00:00"

    def test_filter_and_count(self, client):
        resp = client.get(VENDORS, params={"$filter": "vendor_status eq 'Active'", "$count": "true"})
        body = resp.json()
        assert body["@odata.count"] == 3
        assert [v["vendor_number"] for v in body["value"]] == ["V000001", "V000002", "V000006"]

    def test_left_fold_filter(self, client):
        text = "vendor_status eq 'Active' or vendor_status eq 'Pending' and credit_limit gt 1000"
        body = client.get(VENDORS, params={"$filter": text}).json()
        assert [v["vendor_number"] for v in body["value"]] == ["V000001", "V000003", "V000006"]

    def test_window(self, client):
        body = client.get(VENDORS, params={"$top": "2", "$skip": "1", "$count": "true"}).json()
        assert [v["vendor_id"] for v in body["value"]] == [_guid(2), _guid(3)]
        assert body["@odata.count"] == 6

    def test_guid_filter(self, client):
        body = client.get(VENDORS, params={"$filter": f"vendor_id eq guid'{_guid(4)}'"}).json()
        assert [v["company_name"] for v in body["value"]] == ["O'Brien Industrial"]

    def test_injection_returns_empty(self, client):
        resp = client.get(VENDORS, params={"$filter": "company_name eq 'x'' OR 1=1 --'", "$count": "true"})
        assert resp.status_code == 200
        assert resp.json()["value"] == []
        assert resp.json()["@odata.count"] == 0

    def test_unknown_column_is_400(self, client):
        resp = client.get(VENDORS, params={"$filter": "secret_column eq 1"})
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "UNKNOWN_COLUMN"
        assert error["message"] == "Column 'secret_column' is not allowed in filters"

    @pytest.mark.parametrize(
        ("text", "code"),
        [
            ("vendor_status like 'A'", "DISALLOWED_OPERATOR"),
            ("open_po_count eq many", "TYPE_COERCION_FAILURE"),
            ("contains(credit_limit, '5')", "FUNCTION_ON_NON_STRING_COLUMN"),
            ("vendor_id eq 00000001-0000-0000-0000-000000000001", "INVALID_IDENTIFIER_ENCODING"),
            ("vendor_status eq 'Active' and", "MALFORMED_CLAUSE"),
            ("and vendor_status eq 'Active'", "MALFORMED_CLAUSE"),
            ("vendor_status eq 'Active' and and open_po_count eq 1", "MALFORMED_CLAUSE"),
        ],
    )
    def test_rejected_filters_are_400(self, client, text, code):
        resp = client.get(VENDORS, params={"$filter": text})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == code

    def test_invalid_top(self, client):
        resp = client.get(VENDORS, params={"$top": "-1"})
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Invalid $top value. Must be a non-negative integer."

    def test_invalid_skip(self, client):
        resp = client.get(VENDORS, params={"$skip": "many"})
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Invalid $skip value. Must be a non-negative integer."

    def test_oversized_skip_is_400(self, client):
        resp = client.get(VENDORS, params={"$skip": "9223372036854775808"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_QUERY_OPTION"

    def test_large_skip_returns_empty(self, client):
        body = client.get(VENDORS, params={"$skip": "2147483647"}).json()
        assert body["value"] == []


class TestTopCap:
    @pytest.fixture
    def config(self) -> Config:
        return Config({"erpodata": {"paging": {"max-top": 2}}})

    def test_top_is_capped(self, client):
        body = client.get(VENDORS, params={"$top": "10"}).json()
        assert len(body["value"]) == 2

    def test_default_top_is_capped(self, client):
        assert len(client.get(VENDORS).json()["value"]) == 2


class TestVendorEntity:
    def test_get_by_key(self, client):
        resp = client.get(f"{VENDORS}({_guid(4)})")
        assert resp.status_code == 200
        body = resp.json()
        assert body["@odata.context"] == "http://testserver/api/odata/$metadata#VendorMaster/$entity"
        assert body["company_name"] == "O'Brien Industrial"
        assert body["currency_code"] == "EUR"

    def test_get_by_prefixed_key(self, client):
        resp = client.get(f"{VENDORS}(guid'{_guid(2)}')")
        assert resp.json()["vendor_number"] == "V000002"

    def test_missing_is_404(self, client):
        resp = client.get(f"{VENDORS}({_guid(99)})")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.parametrize("key", ["abc", "00000001-0000-0000-0000-000000000001"])
    def test_malformed_key_is_400(self, client, key):
        resp = client.get(f"{VENDORS}({key})")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_IDENTIFIER_ENCODING"


class TestComplianceRegistry:
    def test_filter(self, client):
        body = client.get(COMPLIANCE, params={"$filter": "debarred eq true"}).json()
        assert body["@odata.context"].endswith("/$metadata#ComplianceRegistry")
        assert [r["vendor_number"] for r in body["value"]] == ["V000013"]
        assert body["value"][0]["registry_id"] == _guid(13)

    def test_count(self, client):
        body = client.get(COMPLIANCE, params={"$count": "true", "$top": "3"}).json()
        assert body["@odata.count"] == 14
        assert len(body["value"]) == 3

    def test_get_by_key(self, client):
        body = client.get(f"{COMPLIANCE}({_guid(6)})").json()
        assert body["sam_status"] == "Inactive"
        assert body["osha_violation_count"] == 3


class TestMetadataEndpoint:
    def test_metadata(self, client):
        resp = client.get("/api/odata/$metadata")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/xml")
        root = ET.fromstring(resp.content)
        names = [e.get("Name") for e in root.iter("{http://docs.oasis-open.org/odata/ns/edm}EntitySet")]
        assert names == ["VendorMaster", "ComplianceRegistry"]


class TestRequestLogging:
    def test_transaction_id_is_echoed(self, client):
        resp = client.get(COMPLIANCE, headers={TRANSACTION_ID_HEADER: "tx-123"})
        assert resp.headers[TRANSACTION_ID_HEADER] == "tx-123"

    def test_transaction_id_is_generated(self, client):
        assert client.get(COMPLIANCE).headers[TRANSACTION_ID_HEADER]

    def test_error_body_uses_transaction_id(self, client):
        resp = client.get(VENDORS, params={"$filter": "nope eq 1"}, headers={TRANSACTION_ID_HEADER: "tx-9"})
        assert resp.json()["error"]["transaction_id"] == "tx-9"
