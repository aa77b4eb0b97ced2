"""Extension installation and the web-mode indexing patch."""

import glob
import os
import re
import shutil
import subprocess
import time
from pathlib import Path
from typing import Callable

from prewarm_logging import get_logger

from prewarm.models.actions import ActionResult
from prewarm.models.config import ExtensionConfig

# The extension turns indexing off when the workspace kind is "Default",
# which is what a browser client reports:
#   (!workspace.rootUri || workspace.kinds.includes(WellKnownWorkspaceKinds.Default))
#       && (settings.indexing = false)
# Tied to one minified release; a new release simply stops matching.
WEB_MODE_INDEXING_GUARD = (
    "(!_0x1ddc26[_0x2c1599(0xe8d)]||_0x1ddc26[_0x2c1599(0xcb1)]['includes']"
    "(_0x4b18f1[_0x2c1599(0x1417)]['Default']))&&(_0x42a990[_0x2c1599(0xd6b)]=![])"
)

_REPLACEMENT = "void(0)"

_INSTALL_LINE_RE = re.compile(r"installed|Installing|already")


def neutralize(content: str, pattern: str = WEB_MODE_INDEXING_GUARD) -> str | None:
    """Blank out the first occurrence of ``pattern``, keeping the length.

    Returns:
        Patched content, or None if the pattern is absent
    """
    if pattern not in content:
        return None
    replacement = _REPLACEMENT + " " * (len(pattern) - len(_REPLACEMENT))
    return content.replace(pattern, replacement, 1)


class ExtensionInstaller:
    """Installs extensions through the code-server that serve-web downloads."""

    def __init__(
        self,
        server_data_dir: Path,
        config: ExtensionConfig | None = None,
        probe_interval: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.server_data_dir = Path(server_data_dir)
        self.config = config or ExtensionConfig()
        self.probe_interval = probe_interval
        self._sleep = sleep
        self.logger = get_logger('editor.extensions')

    def find_code_server(self) -> Path | None:
        for pattern in self.config.code_server_globs:
            for match in sorted(glob.glob(os.path.expanduser(pattern))):
                if os.access(match, os.X_OK):
                    return Path(match)
        return None

    def wait_for_code_server(self) -> Path | None:
        """Wait for serve-web to finish downloading its code-server."""
        for attempt in range(self.config.code_server_attempts):
            code_server = self.find_code_server()
            if code_server:
                return code_server
            if attempt == 0:
                self.logger.info("Waiting for serve-web to download code-server")
            self._sleep(self.probe_interval)
        return None

    def install(self) -> ActionResult:
        """Install the configured extensions into the server data directory.

        A missing code-server is reported but not fatal: the extensions may
        already be present from an earlier run.
        """
        code_server = self.wait_for_code_server()
        if code_server is None:
            self.logger.warning("code-server not found, extensions may not be available")
            return ActionResult(success=False, message="code-server not found")

        self.logger.info("Installing extensions", code_server=str(code_server))
        cmd = [
            str(code_server),
            "--accept-server-license-terms",
            "--server-data-dir", str(self.server_data_dir),
        ]
        for extension_id in self.config.extension_ids:
            cmd.extend(["--install-extension", extension_id])

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            self.logger.warning("Extension install failed", error=str(e))
            return ActionResult(success=False, message=f"Extension install failed: {e}")

        for line in (result.stdout + result.stderr).splitlines():
            if _INSTALL_LINE_RE.search(line):
                self.logger.info(line.strip())

        self.logger.info("Extensions installed", exit_code=result.returncode)
        return ActionResult(
            success=result.returncode == 0,
            message=f"code-server exited with {result.returncode}",
            data={"code_server": str(code_server)},
        )


class BundlePatcher:
    """Enables indexing in web mode by patching the extension bundle in place.

    The original bundle is kept next to it as ``.bak`` until ``restore``.
    """

    def __init__(
        self,
        server_data_dir: Path,
        config: ExtensionConfig | None = None,
        pattern: str = WEB_MODE_INDEXING_GUARD,
    ):
        self.server_data_dir = Path(server_data_dir)
        self.config = config or ExtensionConfig()
        self.pattern = pattern
        self.backup_path: Path | None = None
        self.logger = get_logger('editor.patch')

    def search_dirs(self) -> list[Path]:
        dirs = [self.server_data_dir / "extensions"]
        dirs.extend(Path(d).expanduser() for d in self.config.extension_dirs)
        return dirs

    def find_extension(self) -> Path | None:
        for directory in self.search_dirs():
            matches = sorted(directory.glob(f"{self.config.pylance_prefix}*"))
            if matches:
                return matches[0]
        return None

    def find_bundle(self) -> Path | None:
        extension = self.find_extension()
        if extension is None:
            return None
        bundle = extension / self.config.bundle_subpath
        return bundle if bundle.is_file() else None

    def apply(self) -> ActionResult:
        """Back up and patch the bundle.

        Returns:
            ActionResult; unsuccessful when the extension or pattern is missing
        """
        bundle = self.find_bundle()
        if bundle is None:
            self.logger.warning("Extension bundle not found at any known location, skipping patch")
            return ActionResult(success=False, message="Extension bundle not found")

        # An existing backup is the only unpatched copy left; never overwrite it.
        backup = bundle.with_name(bundle.name + ".bak")
        source = backup if backup.is_file() else bundle

        patched = neutralize(
            source.read_text(encoding="utf-8"),
            self.pattern,
        )
        if patched is None:
            self.logger.warning(
                "Patch pattern not found, extension version may have changed",
                bundle=str(bundle),
            )
            return ActionResult(
                success=False,
                message="Patch pattern not found",
                data={"bundle": str(bundle)},
            )

        if source is bundle:
            shutil.copy2(bundle, backup)
        self.backup_path = backup

        bundle.write_text(patched, encoding="utf-8")
        self.logger.info("Disabled web-mode indexing restriction", bundle=str(bundle))
        return ActionResult(
            success=True,
            message="Bundle patched",
            data={"bundle": str(bundle), "backup": str(backup)},
        )

    def restore(self) -> bool:
        """Put the original bundle back. Returns True if something was restored."""
        backup = self.backup_path
        if backup is None:
            bundle = self.find_bundle()
            if bundle is not None:
                backup = bundle.with_name(bundle.name + ".bak")

        if backup is None or not backup.is_file():
            return False

        original = backup.with_name(backup.name[: -len(".bak")])
        shutil.copy2(backup, original)
        backup.unlink()
        self.backup_path = None
        self.logger.info("Restored extension bundle", bundle=str(original))
        return True
