"""Cache configuration loading for lrucache.

The only recognized option is `max_size`. It can come from a plain mapping
(keyword-style construction) or from a TOML file, either a dedicated file with
a `[cache]` table or a `pyproject.toml` with a `[tool.lrucache]` table.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lrucache.errors import LRUCacheConfigError

logger = logging.getLogger("lrucache.config")

DEFAULT_MAX_SIZE = 4

_KNOWN_KEYS = frozenset({"max_size"})


@dataclass(frozen=True)
class CacheConfig:
    max_size: int = DEFAULT_MAX_SIZE

    def __post_init__(self) -> None:
        # Frozen: route through object.__setattr__ so `CacheConfig(max_size=0)`
        # ends up with the default like every other construction path.
        object.__setattr__(self, "max_size", normalize_max_size(self.max_size))


def normalize_max_size(value: Any) -> int:
    """Validate a capacity value, mapping `None` and `0` to the default."""

    if value is None:
        return DEFAULT_MAX_SIZE
    if not isinstance(value, int) or isinstance(value, bool):
        raise LRUCacheConfigError(
            f"Expected max_size to be an integer, got {type(value).__name__}."
        )
    if value == 0:
        return DEFAULT_MAX_SIZE
    if value < 0:
        raise LRUCacheConfigError(f"Invalid config: max_size must be >= 1 (got {value}).")
    return value


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LRUCacheConfigError(f"Expected [{name}] to be a table.")
    return value


def config_from_mapping(data: Mapping[str, Any] | None, *, name: str = "config") -> CacheConfig:
    """Build a `CacheConfig` from a mapping such as `{"max_size": 16}`."""

    if data is None:
        return CacheConfig()
    if not isinstance(data, Mapping):
        raise LRUCacheConfigError(f"Expected {name} to be a mapping.")

    unknown = sorted(str(k) for k in data if k not in _KNOWN_KEYS)
    if unknown:
        raise LRUCacheConfigError(f"Unknown {name} option(s): {', '.join(unknown)}.")

    return CacheConfig(max_size=data.get("max_size", DEFAULT_MAX_SIZE))


def load_config(config_path: Path) -> CacheConfig:
    """Load and validate cache settings from a TOML file.

    A file named `pyproject.toml` is read from `[tool.lrucache]`; any other
    file is read from `[cache]`. A missing table yields the defaults.
    """

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise LRUCacheConfigError(f"Missing config file at: {config_path}") from e
    except OSError as e:
        raise LRUCacheConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise LRUCacheConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise LRUCacheConfigError(f"Invalid TOML in {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        tool_tbl = _as_table(data.get("tool"), name="tool")
        cache_tbl = _as_table(tool_tbl.get("lrucache"), name="tool.lrucache")
        table_name = "tool.lrucache"
    else:
        cache_tbl = _as_table(data.get("cache"), name="cache")
        table_name = "cache"

    cfg = config_from_mapping(cache_tbl, name=f"[{table_name}]")
    logger.debug("Loaded cache config from %s: max_size=%s", config_path, cfg.max_size)
    return cfg
