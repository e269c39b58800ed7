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
"""StructlogAdapter: LoggingPort implementation backed by structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from erpodata.core.config import Config

FORMATS = ("console", "json")

_SHARED_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
)


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


class StructlogAdapter:
    """Configures structlog from ``erpodata.logging.*``.

    ``erpodata.logging.format`` selects ``console`` (default) or ``json``
    rendering; an unknown value falls back to ``console``.
    ``erpodata.logging.level`` holds ``root`` plus optional per-logger levels
    such as ``erpodata.data: DEBUG`` (useful for ``filter_compiled`` events).
    """

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._format = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        levels = {str(k): str(v).upper() for k, v in config.get_section("erpodata.logging.level").items()}
        self._root_level = levels.pop("root", "INFO")
        self._module_levels = levels
        fmt = str(config.get("erpodata.logging.format", "console")).lower()
        self._format = fmt if fmt in FORMATS else "console"

        json_output = self._format == "json"
        processors = [*_SHARED_PROCESSORS]
        if json_output:
            processors.append(structlog.processors.format_exc_info)
        processors.append(_renderer(self._format))
        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level(self._root_level), force=True)

        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_level(level))
