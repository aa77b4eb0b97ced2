"""Finds the editor CLI, downloading the matching build when it is missing."""

import glob
import os
import platform
import re
import tarfile
import tempfile
from pathlib import Path

import requests

from prewarm_logging import get_logger

from prewarm.errors import CliNotFoundError
from prewarm.models.config import ServerConfig

_COMMIT_RE = re.compile(r'"commit"\s*:\s*"([a-f0-9]+)"')

_ARCH_ALIASES = {
    "x86_64": "x64",
    "aarch64": "arm64",
}


def _expand(pattern: str) -> list[Path]:
    return [Path(p) for p in sorted(glob.glob(os.path.expanduser(pattern)))]


def cli_arch(machine: str | None = None) -> str:
    """Map a ``uname -m`` machine name to the download architecture."""
    machine = machine or platform.machine()
    return _ARCH_ALIASES.get(machine, machine)


class EditorCliLocator:
    """Locates an editor CLI able to run ``serve-web``."""

    def __init__(self, config: ServerConfig | None = None):
        self.config = config or ServerConfig()
        self.logger = get_logger('editor.cli')

    def find_installed(self) -> Path | None:
        """Return the first installed CLI binary, if any."""
        for pattern in self.config.cli_globs:
            for candidate in _expand(pattern):
                if candidate.is_file() and os.access(candidate, os.X_OK):
                    return candidate
        return None

    def detect_commit(self) -> str:
        """Find the commit of the editor build already present in the container.

        Returns:
            Commit hash, or "latest" if none can be determined
        """
        shared = Path(self.config.shared_server_bin)
        if shared.is_dir():
            builds = sorted(p.name for p in shared.iterdir())
            if builds:
                return builds[0]

        for pattern in self.config.product_json_globs:
            for product_json in _expand(pattern):
                try:
                    match = _COMMIT_RE.search(product_json.read_text())
                except OSError:
                    continue
                if match:
                    return match.group(1)

        return "latest"

    def download_url(self, commit: str, arch: str | None = None) -> str:
        build = "latest" if commit == "latest" else f"commit:{commit}"
        return self.config.download_url.format(build=build, arch=arch or cli_arch())

    def download(self, commit: str, target_dir: Path | None = None) -> Path:
        """Download and unpack the CLI.

        Raises:
            CliNotFoundError: If the download fails or holds no ``code`` binary
        """
        url = self.download_url(commit)
        target_dir = target_dir or Path(tempfile.mkdtemp(prefix="vscode-cli-"))
        target_dir.mkdir(parents=True, exist_ok=True)

        self.logger.info("Downloading editor CLI", commit=commit, url=url)
        try:
            with requests.get(url, stream=True, timeout=self.config.download_timeout) as response:
                response.raise_for_status()
                with tarfile.open(fileobj=response.raw, mode="r|gz") as archive:
                    archive.extractall(target_dir, filter="data")
        except (requests.RequestException, tarfile.TarError, OSError) as e:
            raise CliNotFoundError(f"Failed to download editor CLI: {e}") from e

        cli = target_dir / "code"
        if not (cli.is_file() and os.access(cli, os.X_OK)):
            raise CliNotFoundError("Failed to download editor CLI: no executable in archive")
        return cli

    def locate(self) -> Path:
        """Return an installed CLI, downloading one if needed.

        Raises:
            CliNotFoundError: If no CLI can be found or downloaded
        """
        cli = self.find_installed()
        if cli:
            self.logger.info("Using editor CLI", path=str(cli))
            return cli

        self.logger.info("Editor CLI not found locally, downloading")
        cli = self.download(self.detect_commit())
        self.logger.info("Using editor CLI", path=str(cli))
        return cli
