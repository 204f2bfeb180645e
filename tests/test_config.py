from __future__ import annotations

import logging
from pathlib import Path

import pytest

from lrucache.config import (
    DEFAULT_MAX_SIZE,
    CacheConfig,
    config_from_mapping,
    load_config,
    normalize_max_size,
)
from lrucache.errors import LRUCacheConfigError


def test_defaults() -> None:
    assert DEFAULT_MAX_SIZE == 4
    assert CacheConfig().max_size == 4
    assert config_from_mapping(None).max_size == 4
    assert config_from_mapping({}).max_size == 4


def test_falsy_max_size_falls_back_to_default() -> None:
    assert CacheConfig(max_size=0).max_size == 4
    assert config_from_mapping({"max_size": None}).max_size == 4
    assert config_from_mapping({"max_size": 0}).max_size == 4


def test_mapping_overrides_default() -> None:
    assert config_from_mapping({"max_size": 16}).max_size == 16


@pytest.mark.parametrize("value", [-3, 1.5, "8", False, [1]])
def test_normalize_max_size_rejects_bad_values(value) -> None:
    with pytest.raises(LRUCacheConfigError):
        normalize_max_size(value)


def test_negative_max_size_message() -> None:
    with pytest.raises(LRUCacheConfigError, match="max_size must be >= 1"):
        CacheConfig(max_size=-1)


def test_unknown_option_is_rejected() -> None:
    with pytest.raises(LRUCacheConfigError, match="Unknown config option"):
        config_from_mapping({"maxSize": 3})


def test_non_mapping_is_rejected() -> None:
    with pytest.raises(LRUCacheConfigError, match="Expected config to be a mapping"):
        config_from_mapping([("max_size", 3)])  # type: ignore[arg-type]


def test_config_is_frozen() -> None:
    cfg = CacheConfig(max_size=3)
    with pytest.raises(AttributeError):
        cfg.max_size = 5  # type: ignore[misc]


def test_load_config_from_cache_table(tmp_path: Path) -> None:
    path = tmp_path / "lrucache.toml"
    path.write_text("[cache]\nmax_size = 32\n", encoding="utf-8")
    assert load_config(path).max_size == 32


def test_load_config_without_table_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "lrucache.toml"
    path.write_text("# nothing here\n", encoding="utf-8")
    assert load_config(path) == CacheConfig()


def test_load_config_from_pyproject(tmp_path: Path) -> None:
    path = tmp_path / "pyproject.toml"
    path.write_text(
        "\n".join(
            [
                "[project]",
                'name = "demo"',
                "",
                "[tool.lrucache]",
                "max_size = 9",
                "",
                "[cache]",
                "max_size = 1",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    assert load_config(path).max_size == 9


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(LRUCacheConfigError, match="Missing config file"):
        load_config(tmp_path / "nope.toml")


def test_load_config_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "lrucache.toml"
    path.write_text("[cache\nmax_size = 1\n", encoding="utf-8")
    with pytest.raises(LRUCacheConfigError, match="Invalid TOML") as excinfo:
        load_config(path)
    assert excinfo.value.__cause__ is not None


def test_load_config_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "lrucache.toml"
    path.write_bytes(b"\xff\xfe\x00")
    with pytest.raises(LRUCacheConfigError, match="not valid UTF-8"):
        load_config(path)


def test_load_config_cache_must_be_table(tmp_path: Path) -> None:
    path = tmp_path / "lrucache.toml"
    path.write_text('cache = "big"\n', encoding="utf-8")
    with pytest.raises(LRUCacheConfigError, match=r"Expected \[cache\] to be a table"):
        load_config(path)


def test_load_config_rejects_wrong_type(tmp_path: Path) -> None:
    path = tmp_path / "lrucache.toml"
    path.write_text('[cache]\nmax_size = "10"\n', encoding="utf-8")
    with pytest.raises(LRUCacheConfigError, match="integer"):
        load_config(path)


def test_load_config_rejects_unknown_key(tmp_path: Path) -> None:
    path = tmp_path / "lrucache.toml"
    path.write_text("[cache]\nttl = 60\n", encoding="utf-8")
    with pytest.raises(LRUCacheConfigError, match=r"Unknown \[cache\] option\(s\): ttl"):
        load_config(path)


def test_load_config_logs_result(tmp_path: Path, caplog) -> None:
    path = tmp_path / "lrucache.toml"
    path.write_text("[cache]\nmax_size = 5\n", encoding="utf-8")
    with caplog.at_level(logging.DEBUG, logger="lrucache.config"):
        load_config(path)
    assert "max_size=5" in caplog.text
