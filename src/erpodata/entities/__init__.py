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
"""Entity sets exposed over OData, keyed by entity-set name."""

from erpodata.data.columns import ColumnRegistry
from erpodata.entities.compliance import COMPLIANCE_COLUMNS, COMPLIANCE_SEED, ComplianceRecord
from erpodata.entities.vendor import VENDOR_COLUMNS, VendorRecord, metadata, vendor_table

REGISTRIES: dict[str, ColumnRegistry] = {
    VENDOR_COLUMNS.entity: VENDOR_COLUMNS,
    COMPLIANCE_COLUMNS.entity: COMPLIANCE_COLUMNS,
}

__all__ = [
    "COMPLIANCE_COLUMNS",
    "COMPLIANCE_SEED",
    "REGISTRIES",
    "VENDOR_COLUMNS",
    "ComplianceRecord",
    "VendorRecord",
    "metadata",
    "vendor_table",
]
