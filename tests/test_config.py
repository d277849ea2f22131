"""Tests for config.yaml loading and environment overrides."""

import pytest

from integralforme.shared import config as config_module
from integralforme.shared.config import (
    DEFAULT_STORE_HOST,
    DEFAULT_TRANSLATE_URL,
    Config,
    load_config,
    load_settings,
)

ENV_VARS = ("SUPABASE_HOST", "SUPABASE_ANON_KEY", "LIBRETRANSLATE_URL", "LIBRETRANSLATE_API_KEY")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_from_empty_config():
    settings = load_settings(Config({}))
    assert settings.store_host == DEFAULT_STORE_HOST
    assert settings.store_api_key is None
    assert settings.translate_url == DEFAULT_TRANSLATE_URL
    assert settings.translate_api_key is None
    assert (settings.default_source, settings.default_target) == ("en", "pt")
    assert settings.default_day == 108
    assert settings.credentials_file is None


def test_yaml_values_are_used():
    settings = load_settings(
        Config(
            {
                "store": {"host": "yaml.supabase.co", "credentials_file": "/tmp/requests"},
                "translation": {"url": "https://lt.example", "default_target": "es"},
                "upstream": {"timeout_seconds": 3},
                "puzzles": {"default_day": 200},
            }
        )
    )
    assert settings.store_host == "yaml.supabase.co"
    assert str(settings.credentials_file) == "/tmp/requests"
    assert settings.translate_url == "https://lt.example"
    assert settings.default_target == "es"
    assert settings.timeout_seconds == 3
    assert settings.default_day == 200


def test_relative_credentials_file_resolves_from_project_root():
    settings = load_settings(Config({"store": {"credentials_file": "requests"}}))
    assert settings.credentials_file == config_module.BASE_DIR / "requests"


def test_environment_overrides_yaml(monkeypatch):
    monkeypatch.setenv("SUPABASE_HOST", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("LIBRETRANSLATE_URL", "https://env-lt.example/")
    monkeypatch.setenv("LIBRETRANSLATE_API_KEY", "lt-key")

    settings = load_settings(Config({"store": {"host": "yaml.supabase.co"}}))

    assert settings.store_host == "https://env.supabase.co"
    assert settings.store_api_key == "anon"
    assert settings.translate_url == "https://env-lt.example/"
    assert settings.translate_api_key == "lt-key"


def test_blank_environment_values_count_as_unset(monkeypatch):
    monkeypatch.setenv("SUPABASE_ANON_KEY", "   ")
    assert load_settings(Config({})).store_api_key is None


def test_load_config_from_alternate_path(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("puzzles:\n  default_day: 5\n")
    monkeypatch.setenv("INTEGRALFORME_CONFIG", str(path))
    load_config.cache_clear()
    try:
        assert load_config().puzzles == {"default_day": 5}
    finally:
        load_config.cache_clear()


def test_missing_config_file(monkeypatch, tmp_path):
    monkeypatch.setenv("INTEGRALFORME_CONFIG", str(tmp_path / "missing.yaml"))
    load_config.cache_clear()
    try:
        with pytest.raises(FileNotFoundError):
            load_config()
    finally:
        load_config.cache_clear()


def test_missing_project_config_falls_back_to_defaults(monkeypatch, tmp_path, caplog):
    monkeypatch.delenv("INTEGRALFORME_CONFIG", raising=False)
    monkeypatch.setattr(config_module, "CONFIG_PATH", tmp_path / "config.yaml")
    load_config.cache_clear()
    try:
        with caplog.at_level("WARNING", logger="integralforme.shared.config"):
            config = load_config()

        assert config.rate_limit == {}
        assert config.project == {}
        settings = load_settings(config)
        assert settings.store_host == DEFAULT_STORE_HOST
        assert settings.default_day == 108
        assert "built-in defaults" in caplog.text
    finally:
        load_config.cache_clear()


def test_project_config_file_loads():
    config = load_config()
    assert config.puzzles["default_day"] == 108
    assert "/api/translate" in config.rate_limit["protected_paths"]
