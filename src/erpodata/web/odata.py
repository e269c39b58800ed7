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
"""OData v4 wire format: query options, JSON payloads and the ``$metadata`` document."""

from __future__ import annotations

import re
import uuid
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from erpodata.core.properties import PagingProperties
from erpodata.data import identifier
from erpodata.data.columns import ColumnDescriptor, ColumnRegistry, SemanticType
from erpodata.data.page import CollectionPage
from erpodata.kernel.exceptions import InvalidRequestException

NAMESPACE = "ContosoErp"
CONTAINER = "Container"
JSON_MEDIA_TYPE = "application/json; odata.metadata=minimal"
XML_MEDIA_TYPE = "application/xml"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

EDMX_NS = "http://docs.oasis-open.org/odata/ns/edmx"
EDM_NS = "http://docs.oasis-open.org/odata/ns/edm"

DECIMAL_PRECISION = 18
DECIMAL_SCALE = 2

_OPTION_INT_RE = re.compile(r"^\s*[+-]?[0-9]+\s*$")
_OPTION_MAX = 2**31 - 1
_KEY_RE = re.compile(r"^(?:guid)?'(?P<quoted>[^']*)'$", re.IGNORECASE)


def _non_negative(params: Mapping[str, str], option: str, default: int) -> int:
    raw = params.get(option)
    if raw is None or raw == "":
        return default
    if not _OPTION_INT_RE.match(raw) or not 0 <= int(raw) <= _OPTION_MAX:
        raise InvalidRequestException(
            f"Invalid {option} value. Must be a non-negative integer.",
            code="INVALID_QUERY_OPTION",
            context={"option": option, "value": raw},
        )
    return int(raw)


@dataclass(frozen=True)
class CollectionQuery:
    """System query options accepted on collection requests.

    ``$top`` defaults to ``PagingProperties.default_top`` and is silently
    capped at ``max_top``. Options other than ``$filter``, ``$top``,
    ``$skip`` and ``$count`` are ignored.
    """

    filter: str | None = None
    top: int = 100
    skip: int = 0
    count: bool = False

    @classmethod
    def from_params(cls, params: Mapping[str, str], paging: PagingProperties | None = None) -> CollectionQuery:
        """Parse query-string options.

        Raises:
            InvalidRequestException: ``$top`` or ``$skip`` is not a
                non-negative 32-bit integer.
        """
        paging = paging or PagingProperties()
        top = min(_non_negative(params, "$top", paging.default_top), paging.max_top)
        skip = _non_negative(params, "$skip", 0)
        count = params.get("$count", "").strip().lower() == "true"
        filter_text = params.get("$filter") or None
        return cls(filter=filter_text, top=top, skip=skip, count=count)


def parse_key(segment: str) -> str:
    """Strip ``guid'...'`` or ``'...'`` wrapping from a ``({id})`` key segment."""
    match = _KEY_RE.match(segment.strip())
    return match.group("quoted") if match else segment.strip()


# ---------------------------------------------------------------------------
# JSON payloads
# ---------------------------------------------------------------------------


def _json_value(column: ColumnDescriptor, value: Any) -> Any:
    if value is None:
        return None
    if column.semantic_type is SemanticType.IDENTIFIER:
        return str(identifier.encode(value))
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


def entity_id(registry: ColumnRegistry, record: Any) -> str:
    key = getattr(record, registry.key.internal_name)
    return f"{registry.entity}({identifier.encode(key)})"


def entity_payload(registry: ColumnRegistry, record: Any) -> dict[str, Any]:
    """Serialize one record; identifier columns become GUIDs."""
    body: dict[str, Any] = {
        "@odata.type": f"#{NAMESPACE}.{registry.entity}",
        "@odata.id": entity_id(registry, record),
    }
    for column in registry:
        body[column.external_name] = _json_value(column, getattr(record, column.internal_name))
    return body


def collection_payload(registry: ColumnRegistry, page: CollectionPage[Any], service_root: str) -> dict[str, Any]:
    body: dict[str, Any] = {"@odata.context": f"{service_root}/$metadata#{registry.entity}"}
    if page.count is not None:
        body["@odata.count"] = page.count
    body["value"] = [entity_payload(registry, record) for record in page.items]
    return body


def single_payload(registry: ColumnRegistry, record: Any, service_root: str) -> dict[str, Any]:
    body: dict[str, Any] = {"@odata.context": f"{service_root}/$metadata#{registry.entity}/$entity"}
    body.update(entity_payload(registry, record))
    return body


# ---------------------------------------------------------------------------
# $metadata
# ---------------------------------------------------------------------------


def _property_element(parent: ET.Element, column: ColumnDescriptor) -> None:
    attrs = {"Name": column.external_name, "Type": column.semantic_type.edm_type}
    if column.max_length is not None:
        attrs["MaxLength"] = str(column.max_length)
    if column.semantic_type is SemanticType.DECIMAL:
        attrs["Precision"] = str(DECIMAL_PRECISION)
        attrs["Scale"] = str(DECIMAL_SCALE)
    attrs["Nullable"] = "true" if column.nullable else "false"
    ET.SubElement(parent, "Property", attrs)


def metadata_document(registries: Iterable[ColumnRegistry]) -> str:
    """Render the EDMX 4.0 service document for *registries*."""
    registries = list(registries)
    edmx = ET.Element("edmx:Edmx", {"Version": "4.0", "xmlns:edmx": EDMX_NS})
    services = ET.SubElement(edmx, "edmx:DataServices")
    schema = ET.SubElement(services, "Schema", {"Namespace": NAMESPACE, "xmlns": EDM_NS})

    for registry in registries:
        entity_type = ET.SubElement(schema, "EntityType", {"Name": registry.entity})
        key = ET.SubElement(entity_type, "Key")
        ET.SubElement(key, "PropertyRef", {"Name": registry.key.external_name})
        for column in registry:
            _property_element(entity_type, column)

    container = ET.SubElement(schema, "EntityContainer", {"Name": CONTAINER})
    for registry in registries:
        ET.SubElement(
            container,
            "EntitySet",
            {"Name": registry.entity, "EntityType": f"{NAMESPACE}.{registry.entity}"},
        )

    ET.indent(edmx)
    return XML_DECLARATION + ET.tostring(edmx, encoding="unicode")
