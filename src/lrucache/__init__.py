from __future__ import annotations

from collections.abc import Mapping
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from lrucache.cache import CacheEntry, CacheStats, LRUCache
from lrucache.config import DEFAULT_MAX_SIZE, CacheConfig, config_from_mapping, load_config
from lrucache.errors import LRUCacheConfigError, LRUCacheError


def create(config: CacheConfig | Mapping[str, Any] | None = None, **overrides: Any) -> LRUCache:
    """Build an `LRUCache` from a config object, a mapping, or keyword options.

    Keyword overrides (currently only `max_size`) take precedence over values
    from `config`.
    """

    if isinstance(config, CacheConfig):
        cfg = config
    else:
        cfg = config_from_mapping(config)

    if overrides:
        merged = {"max_size": cfg.max_size, **overrides}
        cfg = config_from_mapping(merged, name="create()")

    return LRUCache(max_size=cfg.max_size)


def _package_version() -> str:
    try:
        return version("lrucache")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "DEFAULT_MAX_SIZE",
    "CacheConfig",
    "CacheEntry",
    "CacheStats",
    "LRUCache",
    "LRUCacheConfigError",
    "LRUCacheError",
    "__version__",
    "create",
    "load_config",
]
