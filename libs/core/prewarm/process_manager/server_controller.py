"""Headless editor web server lifecycle."""

import json
import time
from pathlib import Path
from typing import Callable

import requests

from prewarm_logging import get_logger

from prewarm.errors import ServerStartError
from prewarm.models.config import ServerConfig
from prewarm.models.process import ProcessResult
from prewarm.process_manager.process_controller import ProcessController


class ServerController:
    """Runs ``code serve-web`` against a private server data directory."""

    def __init__(
        self,
        cli_path: Path,
        server_data_dir: Path,
        config: ServerConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the server controller.

        Args:
            cli_path: Editor CLI executable
            server_data_dir: Directory passed as ``--server-data-dir``
            config: Server configuration
            sleep: Blocking sleep in seconds
        """
        self.cli_path = Path(cli_path)
        self.server_data_dir = Path(server_data_dir)
        self.config = config or ServerConfig()
        self._sleep = sleep
        self._process = ProcessController(program_path=str(self.cli_path))
        self.logger = get_logger('process.server')

    @property
    def log_path(self) -> Path:
        return self.server_data_dir / "server.log"

    @property
    def settings_path(self) -> Path:
        return self.server_data_dir / "data" / "Machine" / "settings.json"

    def arguments(self) -> list[str]:
        return [
            "serve-web",
            "--host", self.config.host,
            "--port", str(self.config.port),
            "--without-connection-token",
            "--accept-server-license-terms",
            "--server-data-dir", str(self.server_data_dir),
        ]

    def write_settings(self) -> Path:
        """Write the machine settings the language server reads on startup."""
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        self.settings_path.write_text(
            json.dumps(self.config.machine_settings, indent=4) + "\n"
        )
        return self.settings_path

    def start(self, attempts: int | None = None) -> ProcessResult:
        """Start the server and block until it answers HTTP.

        Args:
            attempts: Readiness probes before giving up

        Returns:
            ProcessResult of the start

        Raises:
            ServerStartError: If the process cannot be spawned, dies, or
                never answers
        """
        self.logger.info("Starting editor server", port=self.config.port)
        result = self._process.start(
            program_arguments=self.arguments(),
            output_path=self.log_path,
        )
        if not result.success:
            raise ServerStartError(result.message)

        self.wait_until_ready(attempts or self.config.startup_attempts)
        return result

    def stop(self) -> ProcessResult:
        result = self._process.stop(timeout=self.config.stop_timeout)
        if not result.success:
            self.logger.warning(result.message)
        elif result.pid is not None:
            self.logger.info("Editor server stopped", pid=result.pid)
        return result

    def restart(self) -> ProcessResult:
        """Restart so that newly installed or patched extensions load."""
        self.logger.info("Restarting editor server")
        self.stop()
        self._sleep(self.config.restart_pause)
        return self.start(attempts=self.config.restart_attempts)

    def is_running(self) -> bool:
        return self._process.is_running()

    def probe(self) -> bool:
        """Return True if the server answers on its base URL."""
        try:
            response = requests.get(self.config.base_url, timeout=5)
        except requests.RequestException:
            return False
        return response.ok

    def wait_until_ready(self, attempts: int):
        """Probe the server until it answers.

        Raises:
            ServerStartError: If the process exits or all probes fail
        """
        for _ in range(attempts):
            if self.probe():
                self.logger.info("Editor server is ready", url=self.config.base_url)
                return
            if not self._process.is_running():
                tail = self.log_tail()
                self.logger.error(
                    "Editor server process died",
                    exit_code=self._process.exit_code(),
                )
                raise ServerStartError("Editor server process died", log_tail=tail)
            self._sleep(self.config.probe_interval)

        if self.probe():
            self.logger.info("Editor server is ready", url=self.config.base_url)
            return

        waited = attempts * self.config.probe_interval
        raise ServerStartError(
            f"Editor server failed to start within {waited:.0f}s",
            log_tail=self.log_tail(),
        )

    def log_tail(self, lines: int = 20) -> str:
        try:
            content = self.log_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return ""
        return "\n".join(content.splitlines()[-lines:])
