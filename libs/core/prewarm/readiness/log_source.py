"""Reads the language server log out of an editor server data directory."""

from pathlib import Path

LOG_FILENAME = "Python Language Server.log"

# Extension hosts log under the id of whichever extension owns the client.
EXTENSION_LOG_DIRS = (
    "ms-python.vscode-pylance",
    "ms-python.python",
)


class LanguageServerLogSource:
    """Signal source over the newest language server log.

    Every server start creates a new timestamped session directory under
    ``data/logs``, so the log is located again on every read.
    """

    def __init__(
        self,
        server_data_dir: Path,
        extension_host: str = "exthost1",
        extension_dirs: tuple[str, ...] = EXTENSION_LOG_DIRS,
    ):
        self.server_data_dir = Path(server_data_dir)
        self.extension_host = extension_host
        self.extension_dirs = extension_dirs

    @property
    def logs_dir(self) -> Path:
        return self.server_data_dir / "data" / "logs"

    def _sessions(self) -> list[Path]:
        try:
            entries = list(self.logs_dir.iterdir())
        except OSError:
            return []
        # Session directories are named by start time, so lexical order is age.
        return sorted(entries, key=lambda p: p.name, reverse=True)

    def locate(self) -> Path | None:
        """Find the language server log of the most recent session.

        Returns:
            Path to the log, or None if no session has produced one yet
        """
        for session in self._sessions():
            for extension_dir in self.extension_dirs:
                candidate = session / self.extension_host / extension_dir / LOG_FILENAME
                if candidate.is_file():
                    return candidate
        return None

    def read(self) -> str:
        """Return the full text of the current log, or "" if there is none."""
        path = self.locate()
        if path is None:
            return ""
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return ""

    def latest_log(self) -> Path | None:
        """Newest language server log anywhere under the logs directory."""
        try:
            logs = sorted(self.logs_dir.rglob(LOG_FILENAME))
        except OSError:
            return None
        return logs[-1] if logs else None
