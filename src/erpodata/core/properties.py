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
"""Typed configuration properties bound from ``erpodata.*`` sections."""

from __future__ import annotations

from pydantic import BaseModel, Field

from erpodata.core.config import config_properties


@config_properties(prefix="erpodata.filter")
class FilterProperties(BaseModel):
    """Bounds applied while compiling ``$filter`` expressions (erpodata.filter.*)."""

    timeout_ms: int = Field(default=100, gt=0)
    max_length: int = Field(default=2048, gt=0)


@config_properties(prefix="erpodata.paging")
class PagingProperties(BaseModel):
    """``$top`` defaults and caps (erpodata.paging.*)."""

    default_top: int = Field(default=100, ge=0)
    max_top: int = Field(default=1000, ge=0)


@config_properties(prefix="erpodata.datasource")
class DataSourceProperties(BaseModel):
    """Relational backend connection (erpodata.datasource.*)."""

    url: str = "sqlite+aiosqlite:///:memory:"
    echo: bool = False
    initialize_schema: bool = True
