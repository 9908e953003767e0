"""Tests for src/core/config.py — YAML loading, defaults, SecretStr."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from src.core.config import (
    ElasticsearchConfig,
    LoggingConfig,
    OutputConfig,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
)


@pytest.fixture(autouse=True)
def _clean_settings() -> None:
    """Reset the global settings cache before each test."""
    reset_settings()


class TestDefaults:
    """Settings should have sensible defaults when no YAML is provided."""

    def test_default_elasticsearch_config(self) -> None:
        cfg = ElasticsearchConfig()
        assert cfg.url == "http://localhost:9200"
        assert cfg.timeout_secs == 10
        assert cfg.username == ""
        assert cfg.password.get_secret_value() == ""

    def test_default_output_config(self) -> None:
        assert OutputConfig().shortname == "ELASTICSEARCH"

    def test_default_logging_config(self) -> None:
        cfg = LoggingConfig()
        assert cfg.level == "WARNING"
        assert cfg.format == "console"

    def test_default_settings(self) -> None:
        s = Settings()
        assert s.elasticsearch.timeout_secs == 10
        assert s.logging.level == "WARNING"


class TestCredentials:
    def test_no_credentials_by_default(self) -> None:
        assert not ElasticsearchConfig().has_credentials

    def test_username_alone_is_not_enough(self) -> None:
        assert not ElasticsearchConfig(username="nagios").has_credentials

    def test_username_and_password(self) -> None:
        cfg = ElasticsearchConfig(username="nagios", password="hunter2")  # type: ignore[arg-type]
        assert cfg.has_credentials


class TestYamlLoading:
    """Settings should load correctly from YAML files."""

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "elasticsearch": {
                "url": "https://es01:9200",
                "timeout_secs": 30,
                "username": "nagios",
                "password": "hunter2",
            },
            "output": {"shortname": "ES"},
            "logging": {"level": "DEBUG", "format": "json"},
        }
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump(config_data))

        settings = load_settings(config_file)

        assert settings.elasticsearch.url == "https://es01:9200"
        assert settings.elasticsearch.timeout_secs == 30
        assert settings.elasticsearch.password.get_secret_value() == "hunter2"
        assert settings.output.shortname == "ES"
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "json"

    def test_load_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.elasticsearch.url == "http://localhost:9200"

    def test_load_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        settings = load_settings(config_file)
        assert settings.elasticsearch.timeout_secs == 10

    def test_partial_yaml_merges_with_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"elasticsearch": {"timeout_secs": 5}}))

        settings = load_settings(config_file)
        assert settings.elasticsearch.timeout_secs == 5
        # Other defaults still intact
        assert settings.elasticsearch.url == "http://localhost:9200"
        assert settings.output.shortname == "ELASTICSEARCH"

    def test_get_settings_caches(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"output": {"shortname": "ES"}}))
        loaded = load_settings(config_file)
        assert get_settings() is loaded


class TestSecretStr:
    def test_password_repr_does_not_leak(self) -> None:
        cfg = ElasticsearchConfig(password="super-secret")  # type: ignore[arg-type]
        repr_str = repr(cfg)
        assert "super-secret" not in repr_str
        assert "**********" in repr_str
