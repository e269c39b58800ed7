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
"""Layered service configuration: YAML files, env vars, and typed binding.

Sources are merged in this order, later layers winning:

1. Packaged defaults (``erpodata/resources/erpodata-defaults.yaml``)
2. ``config/erpodata.yaml`` then ``erpodata.yaml`` under the base directory
3. ``erpodata-{profile}.yaml`` overlays from the same two locations
4. Environment variables (``erpodata.paging.max-top`` <- ``ERPODATA_PAGING_MAX_TOP``)

String values may reference ``${NAME}`` or ``${NAME:default}``; ``NAME`` is
looked up in the environment, then as a dotted config key.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<default>[^}]*))?\}")

_PREFIX_ATTR = "__erpodata_config_prefix__"

_ENV_PREFIX = "ERPODATA_"

_DEFAULTS_PACKAGE = "erpodata.resources"
_DEFAULTS_FILE = "erpodata-defaults.yaml"

_MISSING = object()

_TRUTHY = frozenset({"true", "1", "yes", "on"})


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass or Pydantic model as bindable to *prefix*.

    YAML keys may use kebab-case (``max-top``); they bind to the matching
    snake_case attribute (``max_top``)::

        @config_properties(prefix="erpodata.paging")
        class PagingProperties(BaseModel):
            default_top: int = Field(default=100, ge=0)
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_name(key: str) -> str:
    """``erpodata.paging.max-top`` -> ``ERPODATA_PAGING_MAX_TOP``."""
    return _ENV_PREFIX + key.removeprefix("erpodata.").upper().replace(".", "_").replace("-", "_")


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open() as f:
        return yaml.safe_load(f) or {}


def _packaged_defaults() -> dict[str, Any]:
    resource = importlib.resources.files(_DEFAULTS_PACKAGE).joinpath(_DEFAULTS_FILE)
    return yaml.safe_load(resource.read_text()) or {}


def _coerce(value: Any, hint: Any) -> Any:
    if not isinstance(value, str):
        return value
    if hint is bool:
        return value.strip().lower() in _TRUTHY
    if hint in (int, float):
        return hint(value)
    return value


class Config:
    """Hierarchical configuration with dot-notation access.

    ``Config({...})`` wraps an in-memory mapping (tests, embedding);
    :meth:`from_sources` and :meth:`from_file` load YAML layers.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Loaded layers, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def _layered(cls, layers: Iterable[tuple[Path, str]], load_defaults: bool) -> Config:
        data: dict[str, Any] = {}
        sources: list[str] = []
        if load_defaults:
            data = _packaged_defaults()
            sources.append(f"{_DEFAULTS_FILE} (packaged defaults)")
        for path, label in layers:
            if path.is_file():
                data = deep_merge(data, _read_yaml(path))
                sources.append(label)
        config = cls(data)
        config._loaded_sources = sources
        return config

    @classmethod
    def from_sources(
        cls,
        base_dir: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load ``erpodata.yaml`` and profile overlays found under *base_dir*."""
        search_dirs = [Path(base_dir) / "config", Path(base_dir)]
        layers = [(d / "erpodata.yaml", str(d / "erpodata.yaml")) for d in search_dirs]
        for profile in active_profiles or []:
            layers += [
                (d / f"erpodata-{profile}.yaml", f"{d / f'erpodata-{profile}.yaml'} (profile: {profile})")
                for d in search_dirs
            ]
        return cls._layered(layers, load_defaults)

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load a single YAML file over the packaged defaults."""
        return cls._layered([(Path(path), str(path))], load_defaults)

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dotted *key*: environment first, then the merged YAML."""
        env_val = os.environ.get(env_name(key))
        if env_val is not None:
            return env_val
        value = _lookup(self._data, key)
        if value is _MISSING or value is None:
            return default
        if isinstance(value, str):
            return self._expand(value, frozenset({key}))
        return value

    def _expand(self, value: str, seen: frozenset[str]) -> str:
        def replace(match: re.Match[str]) -> str:
            name, default = match.group("name"), match.group("default")
            env_val = os.environ.get(name)
            if env_val is not None:
                return env_val
            if name in seen:
                raise ValueError(f"Circular placeholder reference to '{name}'")
            ref = _lookup(self._data, name)
            if ref is not _MISSING and ref is not None:
                return self._expand(str(ref), seen | {name})
            if default is not None:
                return default
            raise ValueError(f"Cannot resolve placeholder '{match.group(0)}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Nested mapping under *prefix*; empty when absent."""
        section = _lookup(self._data, prefix)
        return section if isinstance(section, dict) else {}

    def _values_for(self, prefix: str, fields: Iterable[str]) -> dict[str, Any]:
        values = {raw.replace("-", "_"): self.get(f"{prefix}.{raw}") for raw in self.get_section(prefix)}
        for name in fields:
            env_val = os.environ.get(env_name(f"{prefix}.{name}"))
            if env_val is not None:
                values[name] = env_val
        return {k: v for k, v in values.items() if v is not None}

    def bind(self, config_cls: type[T]) -> T:
        """Build *config_cls* from its ``@config_properties`` section.

        Raises:
            ValueError: The class is not decorated, or a Pydantic model
                rejected the bound values.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        if issubclass(config_cls, BaseModel):
            values = self._values_for(prefix, config_cls.model_fields)
            try:
                return config_cls.model_validate(values)
            except ValidationError as exc:
                raise ValueError(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
                ) from exc

        hints = get_type_hints(config_cls)
        names = [f.name for f in dataclasses.fields(config_cls)]  # type: ignore[arg-type]
        values = self._values_for(prefix, names)
        return config_cls(**{name: _coerce(values[name], hints.get(name)) for name in names if name in values})
