"""Tests for configuration loading."""

import json
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from src.config.adapter_config import AdapterConfig, AppConfig, HtmlConversionConfig
from src.config.config_loader import ConfigError, ConfigLoader


class TestAppConfig:
    """Test configuration models."""

    def test_defaults(self):
        config = AppConfig()

        assert config.adapter.use_conversation_guid_only is False
        assert config.adapter.html_body_encoding is None
        assert config.html_conversion.body_width == 0
        assert config.storage.get_trash_path() is None

    def test_default_save_path_uses_temp_dir(self):
        path = AdapterConfig().get_default_save_path()

        assert path == Path(tempfile.gettempdir()) / "OriginalMessage.eml"

    def test_unknown_encoding_rejected(self):
        with pytest.raises(ValidationError):
            AdapterConfig(html_body_encoding="no-such-codec")

    def test_save_filename_must_be_bare(self):
        with pytest.raises(ValidationError):
            AdapterConfig(default_save_filename="dir/file.eml")

    def test_negative_body_width_rejected(self):
        with pytest.raises(ValidationError):
            HtmlConversionConfig(body_width=-1)


class TestConfigLoader:
    """Test loading configuration files."""

    def test_load_from_custom_path(self, tmp_path):
        config_path = tmp_path / "app_config.json"
        config_path.write_text(
            json.dumps(
                {
                    "adapter": {"use_conversation_guid_only": True, "html_body_encoding": "cp1252"},
                    "storage": {"outbox_path": str(tmp_path / "outbox")},
                }
            ),
            encoding="utf-8",
        )

        config = ConfigLoader(config_path).load_app_config()

        assert config.adapter.use_conversation_guid_only is True
        assert config.adapter.html_body_encoding == "cp1252"
        assert config.storage.get_outbox_path() == tmp_path / "outbox"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ConfigLoader(tmp_path / "missing.json").load_app_config()

        assert config == AppConfig()

    def test_invalid_json_raises_error(self, tmp_path):
        config_path = tmp_path / "broken.json"
        config_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError):
            ConfigLoader(config_path).load_app_config()

    def test_invalid_values_raise_error(self, tmp_path):
        config_path = tmp_path / "bad.json"
        config_path.write_text(json.dumps({"schema_version": ""}), encoding="utf-8")

        with pytest.raises(ConfigError):
            ConfigLoader(config_path).load_app_config()

    def test_config_is_cached_until_reload(self, tmp_path):
        config_path = tmp_path / "app_config.json"
        config_path.write_text(json.dumps({"adapter": {"use_conversation_guid_only": False}}), encoding="utf-8")
        loader = ConfigLoader(config_path)
        first = loader.load_app_config()

        config_path.write_text(json.dumps({"adapter": {"use_conversation_guid_only": True}}), encoding="utf-8")

        assert loader.load_app_config() is first
        assert loader.reload().adapter.use_conversation_guid_only is True
