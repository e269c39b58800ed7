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
"""Result page for collection queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CollectionPage(Generic[T]):
    """One ``$top`` / ``$skip`` window of a filtered collection.

    Attributes:
        items: Records in this window, in key order.
        count: Total matching records across all windows, or ``None`` when
            ``$count=true`` was not requested.
        top: Maximum window size that was applied.
        skip: Records skipped before this window.
    """

    items: list[T]
    count: int | None = None
    top: int = 0
    skip: int = 0

    @property
    def has_next(self) -> bool:
        """Whether more matching records exist past this window (needs ``count``)."""
        if self.count is None:
            return False
        return self.skip + len(self.items) < self.count
