"""Makes sure the workspace packages and the headless browser are installed."""

import os
import subprocess
import sys
from pathlib import Path

from prewarm_logging import get_logger

from prewarm.errors import SetupError


def playwright_browsers_dir() -> Path:
    custom = os.environ.get("PLAYWRIGHT_BROWSERS_PATH")
    if custom and custom != "0":
        return Path(custom).expanduser()
    return Path.home() / ".cache" / "ms-playwright"


class DependencyBootstrapper:
    """Installs what the language server and the browser need before a run."""

    def __init__(
        self,
        workspace: Path,
        probe_module: str = "django",
        python: str = sys.executable,
    ):
        """Initialize the bootstrapper.

        Args:
            workspace: Project to install in editable mode
            probe_module: Module whose importability means the project is installed
            python: Interpreter used for pip and playwright
        """
        self.workspace = Path(workspace)
        self.probe_module = probe_module
        self.python = python
        self.logger = get_logger('editor.bootstrap')

    def workspace_installed(self) -> bool:
        result = subprocess.run(
            [self.python, "-c", f"import {self.probe_module}"],
            capture_output=True,
            check=False,
        )
        return result.returncode == 0

    def ensure_workspace_installed(self) -> bool:
        """Install the workspace unless its probe module already imports.

        Returns:
            True if an install ran

        Raises:
            SetupError: If pip fails
        """
        if self.workspace_installed():
            self.logger.info("Python dependencies already installed")
            return False

        self.logger.info("Installing Python dependencies", workspace=str(self.workspace))
        self._run(
            [self.python, "-m", "pip", "install", "-e", str(self.workspace)],
            tail=5,
            failure="pip install failed",
        )
        return True

    def browser_installed(self) -> bool:
        browsers = playwright_browsers_dir()
        return browsers.is_dir() and any(browsers.glob("chromium*"))

    def ensure_browser_installed(self) -> bool:
        """Install headless Chromium for Playwright if it is missing.

        Raises:
            SetupError: If the install fails
        """
        if self.browser_installed():
            return False

        self.logger.info("Installing Chromium for Playwright")
        self._run(
            [self.python, "-m", "playwright", "install", "chromium"],
            tail=3,
            failure="Chromium install failed",
        )
        return True

    def _run(self, cmd: list[str], tail: int, failure: str):
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise SetupError(f"{failure}: {e}") from e

        for line in (result.stdout + result.stderr).splitlines()[-tail:]:
            self.logger.info(line)

        if result.returncode != 0:
            raise SetupError(f"{failure} (exit code {result.returncode})")
