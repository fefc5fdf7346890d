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
"""Sidecar configuration: YAML/TOML files, env var overrides, and model binding."""

from __future__ import annotations

import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from galera_sidecar.kernel.exceptions import ConfigurationException

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__sidecar_config_prefix__"

_ENV_PREFIX = "SIDECAR_"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Binding validates the section through the Pydantic model:

        @config_properties(prefix="sidecar.node")
        class NodeProperties(BaseModel):
            service_name: str = "mysql"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (SIDECAR_SECTION_KEY format)
    2. Configuration file values
    3. Packaged defaults (sidecar-defaults.yaml)
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """List of config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    @classmethod
    def from_file(cls, path: str | Path | None = None, load_defaults: bool = True) -> Config:
        """Load packaged defaults, then merge *path* over them if given.

        A path that does not exist is a configuration error; the sidecar
        never silently starts against the wrong node settings.
        """
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_defaults()
            sources.append("sidecar-defaults.yaml (packaged defaults)")

        if path is not None:
            path = Path(path)
            if not path.is_file():
                raise ConfigurationException(
                    f"Configuration file not found: {path}",
                    context={"path": str(path)},
                )
            data = cls._deep_merge(data, cls._load_config_data(path))
            sources.append(str(path))

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        """Load config data from a YAML or TOML file."""
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    return tomllib.load(f) or {}
            with open(path) as f:
                return yaml.safe_load(f) or {}
        except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationException(
                f"Cannot parse configuration file {path}: {exc}",
                context={"path": str(path)},
            ) from exc

    @staticmethod
    def _load_defaults() -> dict[str, Any]:
        """Load built-in defaults from galera_sidecar.resources."""
        defaults_file = importlib.resources.files("galera_sidecar.resources").joinpath("sidecar-defaults.yaml")
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    @staticmethod
    def _env_key(key: str) -> str:
        # sidecar.node.service_name -> SIDECAR_NODE_SERVICE_NAME
        base = key.removeprefix("sidecar.")
        return _ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values containing ``${...}`` placeholders are resolved:
        - ``${ENV_VAR}`` — resolved from environment variables
        - ``${config.key}`` — resolved from other config values
        - ``${key:default}`` — uses default if key/env not found
        """
        env_val = os.environ.get(self._env_key(key))
        if env_val is not None:
            return env_val

        current = self._lookup(key)
        if current is None:
            return default

        if isinstance(current, str) and "${" in current:
            return self._resolve_placeholders(current)

        return current

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        """Resolve ``${...}`` placeholders in a string value.

        Guards against circular references with a max recursion depth.
        """
        if _depth > 10:
            raise ConfigurationException(
                f"Max recursion depth exceeded resolving placeholders in '{value}'. Check for circular references."
            )

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)

            if ":" in inner:
                ref_key, default_val = inner.split(":", 1)
            else:
                ref_key, default_val = inner, None

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current = self._lookup(ref_key)
            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if default_val is not None:
                return cast(str, default_val)

            raise ConfigurationException(
                f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config"
            )

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix, with env overrides and placeholders applied to leaves."""
        current = self._lookup(prefix)
        if not isinstance(current, dict):
            current = {}
        section: dict[str, Any] = {}
        for name, value in current.items():
            env_val = os.environ.get(self._env_key(f"{prefix}.{name}"))
            if env_val is not None:
                section[name] = env_val
            elif isinstance(value, str) and "${" in value:
                section[name] = self._resolve_placeholders(value)
            else:
                section[name] = value
        return section

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a @config_properties Pydantic model."""
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ConfigurationException(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)

        if not (isinstance(config_cls, type) and issubclass(config_cls, BaseModel)):
            raise ConfigurationException(
                f"{config_cls.__name__} must be a pydantic BaseModel to bind prefix '{prefix}'"
            )

        # Env vars may name keys absent from the file
        for name in config_cls.model_fields:
            if name not in section:
                env_val = os.environ.get(self._env_key(f"{prefix}.{name}"))
                if env_val is not None:
                    section[name] = env_val
        try:
            return config_cls.model_validate(section)
        except ValidationError as exc:
            raise ConfigurationException(
                f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}",
                context={"prefix": prefix},
            ) from exc
