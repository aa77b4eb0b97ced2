"""Unit tests for the editor server controller."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from prewarm.errors import ServerStartError
from prewarm.models.config import ServerConfig
from prewarm.models.process import ProcessResult
from prewarm.process_manager.server_controller import ServerController


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def controller(tmp_path, sleep):
    server = ServerController(
        cli_path=tmp_path / "code",
        server_data_dir=tmp_path / "server",
        config=ServerConfig(port=20001, startup_attempts=3, restart_attempts=2),
        sleep=sleep,
    )
    server._process = MagicMock()
    server._process.start.return_value = ProcessResult(success=True, message="ok", pid=42)
    server._process.stop.return_value = ProcessResult(success=True, message="ok", pid=42)
    server._process.is_running.return_value = True
    return server


class TestServerController:
    """Tests for ServerController."""

    def test_arguments(self, controller, tmp_path):
        """Test the serve-web command line."""
        assert controller.arguments() == [
            "serve-web",
            "--host", "127.0.0.1",
            "--port", "20001",
            "--without-connection-token",
            "--accept-server-license-terms",
            "--server-data-dir", str(tmp_path / "server"),
        ]

    def test_write_settings(self, controller):
        """Test machine settings enable persisted indices."""
        path = controller.write_settings()

        settings = json.loads(path.read_text())
        assert path.name == "settings.json"
        assert path.parent.name == "Machine"
        assert settings["python.analysis.persistAllIndices"] is True
        assert settings["python.analysis.indexing"] is True
        assert settings["python.analysis.userFileIndexingLimit"] == -1

    def test_probe_ok(self, controller):
        """Test a 200 response counts as ready."""
        with patch("prewarm.process_manager.server_controller.requests.get") as mock_get:
            mock_get.return_value.ok = True
            assert controller.probe() is True
            mock_get.assert_called_once_with("http://127.0.0.1:20001/", timeout=5)

    def test_probe_connection_refused(self, controller):
        """Test a refused connection is not ready, not an error."""
        with patch(
            "prewarm.process_manager.server_controller.requests.get",
            side_effect=requests.ConnectionError("refused"),
        ):
            assert controller.probe() is False

    def test_start_waits_for_ready(self, controller, sleep):
        """Test start probes until the server answers."""
        with patch.object(controller, "probe", side_effect=[False, False, True]):
            result = controller.start()

        assert result.pid == 42
        assert sleep.call_count == 2
        controller._process.start.assert_called_once()

    def test_start_spawn_failure(self, controller):
        """Test a spawn failure raises a start error."""
        controller._process.start.return_value = ProcessResult(success=False, message="boom")

        with pytest.raises(ServerStartError, match="boom"):
            controller.start()

    def test_start_process_died(self, controller):
        """Test a dead server aborts the wait with its log tail."""
        controller.log_path.parent.mkdir(parents=True)
        controller.log_path.write_text("line 1\nerror: port in use\n")
        controller._process.is_running.return_value = False

        with patch.object(controller, "probe", return_value=False):
            with pytest.raises(ServerStartError) as excinfo:
                controller.start()

        assert "died" in str(excinfo.value)
        assert "port in use" in excinfo.value.log_tail

    def test_start_timeout(self, controller, sleep):
        """Test a server that never answers raises after all attempts."""
        with patch.object(controller, "probe", return_value=False):
            with pytest.raises(ServerStartError, match="within 6s"):
                controller.start()

        assert sleep.call_count == 3

    def test_restart(self, controller, sleep):
        """Test restart stops, pauses and starts with the restart budget."""
        with patch.object(controller, "probe", return_value=True):
            controller.restart()

        controller._process.stop.assert_called_once()
        sleep.assert_any_call(2.0)
        controller._process.start.assert_called_once()

    def test_log_tail_missing(self, controller):
        """Test a missing server log yields an empty tail."""
        assert controller.log_tail() == ""
