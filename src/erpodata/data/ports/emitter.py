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
"""Filter emitter port: shared protocol for every storage backend."""

from __future__ import annotations

from typing import Protocol, TypeVar

from erpodata.data.conditions import ConditionChain

R_co = TypeVar("R_co", covariant=True)


class FilterEmitterPort(Protocol[R_co]):
    """Turn a :class:`ConditionChain` into a backend-specific filter.

    The condition compiler is shared; each backend only provides an emitter.
    The relational backend returns a parameterized SQL fragment, the in-memory
    backend returns a record predicate.
    """

    def emit(self, chain: ConditionChain) -> R_co: ...
