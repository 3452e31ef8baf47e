"""
Unit tests for the config module.
Tests configuration settings, environment variable handling, config files and the .env file.
"""

import json
import os

import pytest
from dotenv import dotenv_values

import sendBeneficiaries.config
from sendBeneficiaries.config import (
    DEMO_BASE_URL,
    PROD_BASE_URL,
    DEFAULT_HEADERS,
    DEFAULT_TIMEOUT,
    CSV_ENCODING,
    ConfigManager,
    get_config,
    get_base_url,
    get_timeout,
    load_env_file,
    get_credentials,
    get_token,
    save_token,
)
from sendBeneficiaries.errors import ConfigurationError


@pytest.fixture
def use_config(monkeypatch):
    """Swap the package-level config manager for one built from a file."""
    def install(path, profile="default"):
        manager = ConfigManager(config_file=path, profile=profile)
        monkeypatch.setattr(sendBeneficiaries.config, "config_manager", manager)
        return manager
    return install


class TestConfigSettings:
    """Tests for the config module settings."""

    def test_base_urls(self):
        assert DEMO_BASE_URL == "https://api-demo.airwallex.com"
        assert PROD_BASE_URL == "https://api.airwallex.com"

    def test_default_headers(self):
        assert DEFAULT_HEADERS["Content-Type"] == "application/json"
        assert DEFAULT_HEADERS["User-Agent"] == "awx-support-bene-upload/1.0"

    def test_defaults(self):
        assert DEFAULT_TIMEOUT == 30.0
        assert CSV_ENCODING == "utf-8-sig"


class TestConfigManager:
    """Tests for the ConfigManager class."""

    def test_initialization(self):
        config = ConfigManager()
        assert config.profile == "default"
        assert config.env_prefix == "AWX_"
        assert config.config_file is None
        assert isinstance(config.config_data, dict)

    def test_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"timeout": 12, "output_dir": "out"}), encoding="utf-8")

        config = ConfigManager(config_file=path)

        assert config.get("timeout") == 12
        assert config.get("output_dir") == "out"
        assert config.get("non_existent_key", "default") == "default"

    def test_yaml_file_with_profiles(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(
            "profiles:\n"
            "  default:\n"
            "    timeout: 30\n"
            "  prod:\n"
            "    timeout: 60\n"
            "    show_progress: false\n",
            encoding="utf-8"
        )

        assert ConfigManager(config_file=path).get("timeout") == 30
        prod = ConfigManager(config_file=path, profile="prod")
        assert prod.get("timeout") == 60
        assert prod.get("show_progress") is False

    def test_unknown_profile_falls_back_to_default(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"profiles": {"default": {"timeout": 5}}}), encoding="utf-8")
        assert ConfigManager(config_file=path, profile="missing").get("timeout") == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigManager(config_file=tmp_path / "nope.yml")

    def test_broken_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigurationError) as excinfo:
            ConfigManager(config_file=path)
        assert any("config file" in s for s in excinfo.value.get_suggestions())

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigManager(config_file=path)

    @pytest.mark.parametrize("content", [
        "profiles:\n  - prod\n  - default\n",
        "profiles: prod\n",
        "profiles:\n  default: demo\n",
    ])
    def test_malformed_profiles(self, tmp_path, content):
        path = tmp_path / "config.yml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigurationError) as excinfo:
            ConfigManager(config_file=path)
        assert "mapping" in excinfo.value.message

    def test_empty_profile(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("profiles:\n  default:\n", encoding="utf-8")
        assert ConfigManager(config_file=path).config_data == {}

    def test_environment_variable_priority(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"timeout": 7, "output_dir": "out"}), encoding="utf-8")
        monkeypatch.setenv("AWX_TIMEOUT", "45")

        config = ConfigManager(config_file=path)

        assert config.get("timeout") == 45
        assert config.get("output_dir") == "out"

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("no", False),
        ("42", 42),
        ("2.5", 2.5),
        ("utf-8", "utf-8"),
    ])
    def test_type_conversion(self, monkeypatch, raw, expected):
        monkeypatch.setenv("AWX_VALUE", raw)
        assert ConfigManager().get("value") == expected


class TestHelpers:
    """Tests for the module-level helpers."""

    def test_base_url_by_environment(self):
        assert get_base_url() == DEMO_BASE_URL
        assert get_base_url(prod=True) == PROD_BASE_URL

    def test_base_url_override(self, tmp_path, use_config):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"base_url": "https://mock.test/"}), encoding="utf-8")
        use_config(path)
        assert get_base_url() == "https://mock.test"
        assert get_config("base_url") == "https://mock.test/"

    def test_prod_flag_beats_configured_base_url(self, tmp_path, use_config, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"base_url": "https://mock.test"}), encoding="utf-8")
        use_config(path)
        assert get_base_url(prod=True) == PROD_BASE_URL

        monkeypatch.setenv("AWX_BASE_URL", DEMO_BASE_URL)
        assert get_base_url(prod=True) == PROD_BASE_URL
        assert get_base_url() == DEMO_BASE_URL

    def test_timeout(self, monkeypatch):
        assert get_timeout() == DEFAULT_TIMEOUT
        monkeypatch.setenv("AWX_TIMEOUT", "5")
        assert get_timeout() == 5.0


class TestEnvFile:
    """Tests for .env handling."""

    def test_load_env_file_overrides_environment(self, tmp_path, monkeypatch):
        env = tmp_path / ".env"
        env.write_text("CLIENT_ID=from-file\nAPI_KEY=key\n", encoding="utf-8")
        monkeypatch.setenv("CLIENT_ID", "from-shell")

        assert load_env_file(env) == env
        assert get_credentials() == ("from-file", "key")

    def test_missing_env_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as excinfo:
            load_env_file(tmp_path / ".env")
        assert "file not found" in excinfo.value.message

    def test_missing_credentials(self):
        with pytest.raises(ConfigurationError) as excinfo:
            get_credentials()
        assert "CLIENT_ID" in excinfo.value.message
        assert any("CLIENT_ID" in s for s in excinfo.value.get_suggestions())

    def test_missing_token(self):
        with pytest.raises(ConfigurationError) as excinfo:
            get_token()
        assert any("token" in s for s in excinfo.value.get_suggestions())

    def test_save_token_appends(self, tmp_path, monkeypatch):
        env = tmp_path / ".env"
        env.write_text("CLIENT_ID=id\nAPI_KEY=key\n", encoding="utf-8")

        save_token("tok-1", env)

        assert dotenv_values(env) == {"CLIENT_ID": "id", "API_KEY": "key", "AIRWALLEX_TOKEN": "tok-1"}
        assert "AIRWALLEX_TOKEN=tok-1" in env.read_text(encoding="utf-8").splitlines()
        assert os.environ["AIRWALLEX_TOKEN"] == "tok-1"
        assert get_token() == "tok-1"

    def test_save_token_replaces(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("AIRWALLEX_TOKEN=old\nCLIENT_ID=id\n", encoding="utf-8")

        save_token("new", env)

        lines = env.read_text(encoding="utf-8").splitlines()
        assert lines == ["AIRWALLEX_TOKEN=new", "CLIENT_ID=id"]
