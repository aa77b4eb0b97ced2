"""Unit tests for ConfigManager."""

import yaml

from prewarm.models.config import PrebuildConfig
from prewarm.services.config_manager import ConfigManager


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestConfigManager:
    """Tests for loading configuration."""

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing config file yields the built-in defaults."""
        manager = ConfigManager(tmp_path / "missing.yaml", load_env_file=False)

        assert manager.config == PrebuildConfig()

    def test_load_sections(self, tmp_path):
        """Test nested sections override only what they name."""
        path = write_yaml(tmp_path / "prebuild.yaml", {
            "workspace": "/src/project",
            "keep_server_data": True,
            "server": {"port": 20000},
            "polling": {"timeout": 90, "interval": 2},
            "extensions": {"probe_module": "flask"},
        })

        config = ConfigManager(path, load_env_file=False).config

        assert config.workspace == "/src/project"
        assert config.keep_server_data is True
        assert config.server.port == 20000
        assert config.server.host == "127.0.0.1"
        assert config.polling.timeout == 90
        assert config.polling.interval == 2
        assert config.polling.retry_grace == 30.0
        assert config.extensions.probe_module == "flask"

    def test_unknown_keys_ignored(self, tmp_path):
        """Test unrecognised keys do not break loading."""
        path = write_yaml(tmp_path / "prebuild.yaml", {
            "unknown": 1,
            "server": {"port": 20001, "colour": "blue"},
        })

        config = ConfigManager(path, load_env_file=False).config

        assert config.server.port == 20001

    def test_empty_file(self, tmp_path):
        """Test an empty YAML file yields defaults."""
        path = tmp_path / "prebuild.yaml"
        path.write_text("")

        assert ConfigManager(path, load_env_file=False).config == PrebuildConfig()

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test PREBUILD_* variables override the file."""
        path = write_yaml(tmp_path / "prebuild.yaml", {
            "workspace": "/from/file",
            "server": {"port": 20000},
            "polling": {"timeout": 90},
        })
        monkeypatch.setenv("PREBUILD_VSCODE_PORT", "20500")
        monkeypatch.setenv("PREBUILD_TIMEOUT", "45")
        monkeypatch.setenv("PREBUILD_WORKSPACE", "/from/env")

        config = ConfigManager(path, load_env_file=False).config

        assert config.server.port == 20500
        assert config.polling.timeout == 45.0
        assert config.workspace == "/from/env"

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        """Test PREBUILD_CONFIG_PATH selects the file."""
        path = write_yaml(tmp_path / "custom.yaml", {"workspace": "/custom"})
        monkeypatch.setenv("PREBUILD_CONFIG_PATH", str(path))

        manager = ConfigManager(load_env_file=False)

        assert manager.config_path == path
        assert manager.config.workspace == "/custom"
