"""
Config system - Resolver settings from files, the environment and overrides.

Merge precedence (later overrides earlier):
config files > .env file > environment variables > manual overrides

Only the ``resolver`` section is interpreted. Other sections are kept and
stay reachable through ``get``. Every setting remembers the source that
set it last, so validation errors point at the file or variable to fix.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, fields
from glob import glob
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, get_type_hints

import yaml

from .core import DEFAULT_MAX_CHAIN_DEPTH
from .errors import ConfigError


logger = logging.getLogger("faultmap.config")


@dataclass
class ResolverConfig:
    """
    Resolver settings.

    Attributes:
        max_chain_depth: Maximum number of causal chain links inspected
        logger_name: Logger receiving resolution events
    """
    max_chain_depth: int = DEFAULT_MAX_CHAIN_DEPTH
    logger_name: str = "faultmap.resolver"


RESOLVER_SECTION = "resolver"


class ConfigLoader:
    """
    Collects configuration layers and builds a validated ResolverConfig.

    Environment variables use the ``FM_`` prefix and ``__`` between nested
    keys: ``FM_RESOLVER__MAX_CHAIN_DEPTH=16`` sets ``resolver.max_chain_depth``.
    Their values stay strings until ``get_resolver_config`` converts them
    to the declared field type.
    """

    def __init__(self, env_prefix: str = "FM_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}
        self.origins: Dict[str, str] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "FM_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ConfigLoader:
        """
        Load every configuration layer in precedence order.

        Args:
            paths: Config file paths (glob patterns supported, JSON or YAML)
            env_prefix: Prefix for environment variables
            env_file: Path to a .env file (missing file is skipped)
            overrides: Manual overrides (highest precedence)

        Returns:
            Populated ConfigLoader

        Raises:
            ConfigError: A config file is unreadable or not a mapping
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            matches = sorted(glob(pattern))
            if not matches:
                logger.debug(f"No config files match '{pattern}'")
            for match in matches:
                path = Path(match)
                loader.apply(read_config_file(path), origin=str(path))

        if env_file:
            loader.apply_env(read_env_file(env_file), origin=env_file)

        loader.apply_env(os.environ.items(), origin="environment")

        if overrides:
            loader.apply(overrides, origin="overrides")

        return loader

    # ========================================================================
    # Layering
    # ========================================================================

    def apply(self, source: Dict[str, Any], origin: str) -> None:
        """Deep-merge ``source`` over the current data, recording ``origin``."""
        self._merge(self.config_data, source, origin, ())

    def apply_env(self, pairs: Iterable[Tuple[str, str]], origin: str) -> None:
        """Apply prefixed ``KEY=value`` pairs as nested settings."""
        for key, value in pairs:
            if not key.startswith(self.env_prefix):
                continue
            *parents, leaf = key[len(self.env_prefix):].lower().split("__")
            nested: Dict[str, Any] = {leaf: value}
            for part in reversed(parents):
                nested = {part: nested}
            self.apply(nested, origin)

    def _merge(
        self,
        target: Dict[str, Any],
        source: Dict[str, Any],
        origin: str,
        path: Tuple[str, ...],
    ) -> None:
        for key, value in source.items():
            key_path = path + (key,)
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                self._merge(target[key], value, origin, key_path)
            else:
                target[key] = copy.deepcopy(value)
                self.origins[".".join(key_path)] = origin

    def origin_of(self, path: str) -> Optional[str]:
        """Source that last set ``path`` (or the section containing it)."""
        parts = path.split(".")
        while parts:
            origin = self.origins.get(".".join(parts))
            if origin is not None:
                return origin
            parts.pop()
        return None

    # ========================================================================
    # Access
    # ========================================================================

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current: Any = self.config_data
        for part in path.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def get_resolver_config(self) -> ResolverConfig:
        """
        Get validated resolver configuration.

        String values (from the environment) are converted to the field's
        declared type. Unknown keys are rejected.

        Returns:
            ResolverConfig built from the ``resolver`` section

        Raises:
            ConfigError: Unknown key, wrong type or invalid value
        """
        section = self.get(RESOLVER_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigError(
                f"Config section '{RESOLVER_SECTION}' must be a mapping "
                f"(set by {self.origin_of(RESOLVER_SECTION)})",
                metadata={"origin": self.origin_of(RESOLVER_SECTION)},
            )

        hints = get_type_hints(ResolverConfig)
        known = {f.name for f in fields(ResolverConfig)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ConfigError(
                f"Unknown resolver setting(s): {', '.join(unknown)}",
                metadata={"fields": unknown},
            )

        values = {
            name: self._convert(name, value, hints[name])
            for name, value in section.items()
        }
        config = ResolverConfig(**values)

        if config.max_chain_depth < 1:
            raise self._field_error(
                "max_chain_depth",
                f"must be at least 1, got {config.max_chain_depth}",
            )

        logger.debug(
            f"Resolver config: max_chain_depth={config.max_chain_depth}, "
            f"logger_name={config.logger_name}"
        )
        return config

    def _convert(self, name: str, value: Any, expected: type) -> Any:
        if expected is int:
            if isinstance(value, str):
                try:
                    return int(value.strip())
                except ValueError:
                    raise self._field_error(name, f"expected int, got '{value}'") from None
            # bool is an int subclass but never a valid count
            if isinstance(value, bool) or not isinstance(value, int):
                raise self._field_error(name, f"expected int, got {type(value).__name__}")
            return value

        if not isinstance(value, expected):
            raise self._field_error(
                name, f"expected {expected.__name__}, got {type(value).__name__}"
            )
        return value

    def _field_error(self, name: str, problem: str) -> ConfigError:
        origin = self.origin_of(f"{RESOLVER_SECTION}.{name}")
        return ConfigError(
            f"Config field '{name}' {problem} (set by {origin})",
            metadata={"field": name, "origin": origin},
        )

    def to_dict(self) -> dict:
        """Export all config as dictionary."""
        return copy.deepcopy(self.config_data)


# ============================================================================
# Sources
# ============================================================================

def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a JSON or YAML config file.

    Raises:
        ConfigError: Unsupported suffix, parse error, or a non-mapping top level
    """
    if path.suffix not in (".json", ".yaml", ".yml"):
        raise ConfigError(
            f"Unsupported config file type '{path.suffix}': {path}",
            metadata={"path": str(path)},
        )

    text = path.read_text()
    try:
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(
            f"Cannot parse config file {path}: {e}",
            metadata={"path": str(path)},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}",
            metadata={"path": str(path)},
        )
    return data


def read_env_file(path: str) -> list[Tuple[str, str]]:
    """Read ``KEY=value`` pairs from a .env file, skipping comments."""
    env_path = Path(path)
    if not env_path.exists():
        logger.debug(f"No .env file at '{path}'")
        return []

    pairs = []
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        pairs.append((key.strip(), value.strip().strip("\"'")))
    return pairs
