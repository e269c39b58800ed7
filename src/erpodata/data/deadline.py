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
"""Time bound shared by every scanning and matching step of one compilation."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import timedelta

from erpodata.kernel.exceptions import CompilationTimeoutError

DEFAULT_TIMEOUT = timedelta(milliseconds=100)


class Deadline:
    """Raises :class:`CompilationTimeoutError` once *timeout* has elapsed.

    ``clock`` is injectable so tests can expire a deadline deterministically.
    """

    __slots__ = ("_timeout", "_clock", "_expires_at")

    def __init__(
        self,
        timeout: timedelta = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._timeout = timeout
        self._clock = clock
        self._expires_at = clock() + timeout.total_seconds()

    @classmethod
    def unbounded(cls) -> Deadline:
        return cls(timedelta(days=1))

    def check(self, stage: str) -> None:
        if self._clock() > self._expires_at:
            timeout_ms = int(self._timeout.total_seconds() * 1000)
            raise CompilationTimeoutError(
                f"Filter compilation exceeded {timeout_ms}ms during {stage}",
                context={"stage": stage, "timeout_ms": timeout_ms},
            )
