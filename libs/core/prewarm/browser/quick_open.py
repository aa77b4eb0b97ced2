"""Headless browser session that makes the language server start indexing.

The language server defers indexing until a text document is opened, so
connecting a client is not enough: a Python file has to be opened through
the UI.
"""

import os
from pathlib import Path

from playwright.sync_api import Browser, Error as PlaywrightError, Page, Playwright, sync_playwright

from prewarm_logging import get_logger

from prewarm.models.config import PollingConfig, ServerConfig

BROWSER_ARGS = ["--no-sandbox", "--disable-gpu", "--disable-dev-shm-usage"]

_SKIP_DIRS = {"node_modules", ".git", "__pycache__"}


def find_target_file(
    workspace: Path,
    candidates: list[str] | None = None,
    max_depth: int = 3,
) -> str | None:
    """Pick a Python file to open.

    Args:
        workspace: Workspace root
        candidates: Preferred relative paths, checked in order
        max_depth: Directory depth limit for the fallback walk

    Returns:
        Workspace-relative POSIX path, or None if the workspace has no .py file
    """
    workspace = Path(workspace)
    for candidate in candidates or []:
        if (workspace / candidate).exists():
            return candidate

    def walk(directory: Path, depth: int) -> str | None:
        if depth > max_depth:
            return None
        try:
            entries = sorted(os.listdir(directory))
        except OSError:
            return None
        for entry in entries:
            if entry in _SKIP_DIRS:
                continue
            path = directory / entry
            if entry.endswith(".py"):
                return path.relative_to(workspace).as_posix()
            if path.is_dir():
                found = walk(path, depth + 1)
                if found:
                    return found
        return None

    return walk(workspace, 0)


class QuickOpenTrigger:
    """Opens a file through the Quick Open box of a loaded editor page."""

    def __init__(
        self,
        page: Page,
        filename: str,
        open_delay_ms: int = 2000,
        type_delay_ms: int = 30,
        settle_ms: int = 3000,
    ):
        self.page = page
        self.filename = filename
        self.open_delay_ms = open_delay_ms
        self.type_delay_ms = type_delay_ms
        self.settle_ms = settle_ms
        self.logger = get_logger('browser.quick_open')

    def fire(self) -> None:
        """Send the Quick Open keystrokes.

        Safe to repeat: whatever the UI shows, the keystrokes either open
        the file or do nothing. Browser errors are logged, not raised.
        """
        self.logger.info("Opening file via Quick Open", file=self.filename)
        try:
            self.page.keyboard.press("Control+KeyP")
            self.page.wait_for_timeout(self.open_delay_ms)
            self.page.keyboard.type(self.filename, delay=self.type_delay_ms)
            self.page.wait_for_timeout(self.open_delay_ms)
            self.page.keyboard.press("Enter")
            self.page.wait_for_timeout(self.settle_ms)
        except PlaywrightError as e:
            self.logger.warning("Quick Open failed", error=str(e))
            return
        self.logger.info("File open command sent")


class HeadlessEditorSession:
    """Context manager owning a headless Chromium pointed at the editor UI."""

    def __init__(
        self,
        workspace: Path,
        server: ServerConfig | None = None,
        polling: PollingConfig | None = None,
    ):
        self.workspace = Path(workspace)
        self.server = server or ServerConfig()
        self.polling = polling or PollingConfig()
        self.page: Page | None = None
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self.logger = get_logger('browser.session')

    @property
    def url(self) -> str:
        return f"{self.server.base_url}?folder={self.workspace}"

    def __enter__(self) -> "HeadlessEditorSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self) -> Page:
        """Launch the browser and wait for the editor UI to initialize."""
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=True,
                args=list(BROWSER_ARGS),
            )
            self.page = self._browser.new_page()

            self.logger.info("Navigating to editor web UI", url=self.url)
            self.page.goto(
                self.url,
                wait_until="domcontentloaded",
                timeout=self.polling.page_load_timeout * 1000,
            )
            self.logger.info("Page loaded, waiting for the editor to initialize")
            self.page.wait_for_timeout(self.polling.ui_settle * 1000)
        except BaseException:
            self.close()
            raise
        return self.page

    def trigger_for(self, filename: str) -> QuickOpenTrigger:
        if self.page is None:
            raise RuntimeError("Session is not open")
        return QuickOpenTrigger(self.page, filename)

    def close(self):
        if self._browser is not None:
            self.logger.info("Closing browser")
            try:
                self._browser.close()
            except PlaywrightError as e:
                self.logger.warning("Browser did not close cleanly", error=str(e))
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
        self.page = None
