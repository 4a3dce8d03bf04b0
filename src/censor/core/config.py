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
"""Layered configuration for censor: packaged defaults, files, profiles and env vars.

Values are addressed with dot-notation keys (``censor.max_depth``). A key
is looked up in this order, first hit wins:

1. ``CENSOR_*`` environment variables (``censor.max_depth`` -> ``CENSOR_MAX_DEPTH``)
2. Profile overlays, last profile first
3. The configuration file (YAML or TOML)
4. ``censor-defaults.yaml`` shipped in :mod:`censor.resources`
"""

from __future__ import annotations

import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, TypeAdapter, ValidationError

T = TypeVar("T")

PACKAGED_DEFAULTS = "censor-defaults.yaml"

_PREFIX_ATTR = "__censor_config_prefix__"
_ENV_PREFIX = "CENSOR_"
_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Bind a pydantic model or dataclass to the config section at *prefix*.

    Usage::

        @config_properties(prefix="censor")
        class CensorProperties(BaseModel):
            max_depth: int = Field(default=10, ge=0)
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_name(key: str) -> str:
    """Environment variable overriding *key*."""
    return _ENV_PREFIX + key.removeprefix("censor.").upper().replace(".", "_").replace("-", "_")


def read_source(path: Path) -> dict[str, Any]:
    """Parse one YAML or TOML configuration file."""
    if path.suffix == ".toml":
        return tomllib.loads(path.read_text()) or {}
    return yaml.safe_load(path.read_text()) or {}


def merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge *overlay* into a copy of *base*; nested mappings merge key by key."""
    result = dict(base)
    for key, value in overlay.items():
        below = result.get(key)
        result[key] = merge(below, value) if isinstance(below, dict) and isinstance(value, dict) else value
    return result


def _packaged_defaults() -> dict[str, Any]:
    resource = importlib.resources.files("censor.resources").joinpath(PACKAGED_DEFAULTS)
    return yaml.safe_load(resource.read_text()) or {}


class Config:
    """Read-only view over merged configuration data."""

    def __init__(self, data: dict[str, Any] | None = None, sources: Iterable[str] = ()) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources = list(sources)

    def __repr__(self) -> str:
        return f"Config(sources={self._sources!r})"

    @property
    def loaded_sources(self) -> list[str]:
        """Origins of the merged data, lowest priority first."""
        return list(self._sources)

    @classmethod
    def defaults(cls) -> Config:
        return cls(_packaged_defaults(), [f"{PACKAGED_DEFAULTS} (package defaults)"])

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load *path* on top of the packaged defaults.

        For every active profile, ``<stem>-<profile><suffix>`` next to *path*
        is merged on top when it exists. A missing *path* leaves only the
        defaults.
        """
        path = Path(path)
        layers: list[tuple[str, dict[str, Any]]] = []
        if load_defaults:
            layers.append((f"{PACKAGED_DEFAULTS} (package defaults)", _packaged_defaults()))
        if path.exists():
            layers.append((str(path), read_source(path)))
            for profile in active_profiles or ():
                overlay = path.with_name(f"{path.stem}-{profile}{path.suffix}")
                if overlay.exists():
                    layers.append((f"{overlay} (profile: {profile})", read_source(overlay)))

        data: dict[str, Any] = {}
        for _, layer in layers:
            data = merge(data, layer)
        return cls(data, (source for source, _ in layers))

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            node = node.get(part) if isinstance(node, dict) else None
            if node is None:
                break
        return node

    def get(self, key: str, default: Any = None) -> Any:
        """Value at *key*, environment first.

        Strings may embed ``${ENV_VAR}``, ``${other.key}`` or
        ``${name:fallback}`` placeholders, resolved on read.
        """
        from_env = os.environ.get(env_name(key))
        if from_env is not None:
            return from_env
        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str):
            return self._expand(value)
        return value

    def _expand(self, text: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Max recursion depth exceeded expanding {text!r}; check for circular references")

        def substitute(match: re.Match[str]) -> str:
            name, sep, fallback = match.group(1).partition(":")
            if name in os.environ:
                return os.environ[name]
            found = self._lookup(name)
            if found is not None:
                return self._expand(str(found), depth + 1)
            if sep:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{match.group(1)}}}' from environment or config")

        return _PLACEHOLDER.sub(substitute, text)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Mapping stored under *prefix*, or an empty dict."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Validate the section named by ``@config_properties`` into *config_cls*.

        Environment variables override individual fields of the section.

        Raises:
            ValueError: *config_cls* is not decorated, or validation fails.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = dict(self.get_section(prefix))
        if issubclass(config_cls, BaseModel):
            names: Iterable[str] = config_cls.model_fields
        else:
            names = getattr(config_cls, "__dataclass_fields__", {})
        for name in names:
            override = os.environ.get(env_name(f"{prefix}.{name}"))
            if override is not None:
                section[name] = override

        try:
            return cast(T, TypeAdapter(config_cls).validate_python(section))
        except ValidationError as exc:
            raise ValueError(
                f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
            ) from exc
