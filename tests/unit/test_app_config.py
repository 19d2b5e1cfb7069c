import json

import pytest

from selfswap.app.config import (
    AppConfig,
    EvictionConfig,
    PayloadConfig,
    get_app_config,
    load_app_config,
    reset_app_config_cache,
)


def test_default_config_matches_bundled_resource() -> None:
    reset_app_config_cache()
    config = load_app_config()
    assert isinstance(config, AppConfig)
    assert config.eviction == EvictionConfig(max_attempts=10, delay_seconds=1.0)
    assert config.payload == PayloadConfig(prefix=None)


def test_load_app_config_from_custom_path(tmp_path) -> None:
    custom_config = {
        "eviction": {"max_attempts": 4, "delay_seconds": 0.5},
        "payload": {"prefix": " acme- "},
    }
    config_path = tmp_path / "selfswap.json"
    config_path.write_text(json.dumps(custom_config), encoding="utf-8")

    config = load_app_config(config_path)

    assert config.eviction == EvictionConfig(max_attempts=4, delay_seconds=0.5)
    assert config.payload.prefix == "acme-"


@pytest.mark.parametrize(
    "section",
    [
        {"max_attempts": 0, "delay_seconds": -1},
        {"max_attempts": True, "delay_seconds": "NaN"},
        {"max_attempts": "many", "delay_seconds": None},
        "not a mapping",
    ],
)
def test_invalid_eviction_values_fall_back_to_defaults(tmp_path, section) -> None:
    config_path = tmp_path / "selfswap.json"
    config_path.write_text(json.dumps({"eviction": section}), encoding="utf-8")

    config = load_app_config(config_path)

    assert config.eviction == EvictionConfig(max_attempts=10, delay_seconds=1.0)


def test_numeric_strings_are_accepted(tmp_path) -> None:
    config_path = tmp_path / "selfswap.json"
    config_path.write_text(
        json.dumps({"eviction": {"max_attempts": "3", "delay_seconds": "0.2"}}), encoding="utf-8"
    )

    config = load_app_config(config_path)

    assert config.eviction == EvictionConfig(max_attempts=3, delay_seconds=0.2)


def test_unreadable_or_invalid_json_uses_defaults(tmp_path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    assert load_app_config(broken).eviction.max_attempts == 10
    assert load_app_config(tmp_path / "missing.json").payload.prefix is None


def test_get_app_config_is_cached() -> None:
    reset_app_config_cache()
    assert get_app_config() is get_app_config()
