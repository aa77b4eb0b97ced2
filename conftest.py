import pytest

from prewarm_logging import logger as logger_module


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    """Send every logger created during a test to a temporary directory."""
    monkeypatch.setattr(logger_module, "_default_log_dir", tmp_path / "logs")
    monkeypatch.setattr(logger_module, "_default_level", "DEBUG")
    monkeypatch.setattr(logger_module, "_loggers", {})
    for name in ("PREBUILD_VSCODE_PORT", "PREBUILD_TIMEOUT", "PREBUILD_WORKSPACE", "PREBUILD_CONFIG_PATH"):
        monkeypatch.delenv(name, raising=False)
