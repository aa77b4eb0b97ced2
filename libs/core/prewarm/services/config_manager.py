import os
from dataclasses import fields
from pathlib import Path

import yaml
from dotenv import find_dotenv, load_dotenv

from prewarm.models.config import (
    ArtifactConfig,
    ExtensionConfig,
    LoggingConfig,
    PollingConfig,
    PrebuildConfig,
    ServerConfig,
)

DEFAULT_CONFIG_PATH = "config/prebuild.yaml"

_SECTIONS = {
    "server": ServerConfig,
    "polling": PollingConfig,
    "extensions": ExtensionConfig,
    "artifacts": ArtifactConfig,
    "logging": LoggingConfig,
}


def _known(cls, data: dict) -> dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


class ConfigManager:
    """Loads prebuild configuration from YAML, ``.env`` and the environment.

    Precedence, lowest first: dataclass defaults, the YAML file,
    ``PREBUILD_*`` environment variables. CLI options are applied on top by
    the caller.
    """

    def __init__(self, config_path: Path | None = None, load_env_file: bool = True):
        if load_env_file:
            dotenv_path = find_dotenv(usecwd=True)
            if dotenv_path:
                load_dotenv(dotenv_path)

        if config_path is None:
            config_path = Path(os.getenv("PREBUILD_CONFIG_PATH", DEFAULT_CONFIG_PATH))
        self.config_path = Path(config_path)

        self.config = self.load_config()

    def load_config(self) -> PrebuildConfig:
        config_data = {}

        if self.config_path.exists():
            with open(self.config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}

        sections = {}
        for name, cls in _SECTIONS.items():
            section = config_data.get(name)
            if isinstance(section, dict):
                sections[name] = cls(**_known(cls, section))

        top_level = {
            k: v for k, v in _known(PrebuildConfig, config_data).items()
            if k not in _SECTIONS
        }
        config = PrebuildConfig(**top_level, **sections)

        self._apply_env_overrides(config)
        return config

    def _apply_env_overrides(self, config: PrebuildConfig):
        port = os.getenv("PREBUILD_VSCODE_PORT")
        if port:
            config.server.port = int(port)

        timeout = os.getenv("PREBUILD_TIMEOUT")
        if timeout:
            config.polling.timeout = float(timeout)

        workspace = os.getenv("PREBUILD_WORKSPACE")
        if workspace:
            config.workspace = workspace
