"""Copies the persisted index out of the throwaway server data directory."""

import shutil
from pathlib import Path

from prewarm_logging import get_logger

from prewarm.models.actions import ActionResult
from prewarm.models.config import ArtifactConfig


class ArtifactCopier:
    """Copies persisted index files to where the developer's session reads them."""

    def __init__(self, server_data_dir: Path, config: ArtifactConfig | None = None):
        self.server_data_dir = Path(server_data_dir)
        self.config = config or ArtifactConfig()
        self.logger = get_logger('editor.artifacts')

    @property
    def source(self) -> Path:
        return self.server_data_dir / self.config.source_subpath

    @property
    def destination(self) -> Path:
        return Path(self.config.destination).expanduser()

    def copy(self) -> ActionResult:
        """Merge the persisted index into the destination, overwriting files.

        Returns:
            ActionResult with the number of files copied
        """
        if not self.config.enabled:
            return ActionResult(success=True, message="Artifact copy disabled")

        if not self.source.is_dir():
            self.logger.warning("No persisted index found", source=str(self.source))
            return ActionResult(success=False, message=f"No persisted index at {self.source}")

        files = [p for p in self.source.rglob("*") if p.is_file()]
        try:
            shutil.copytree(self.source, self.destination, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            self.logger.error("Failed to copy persisted index", error=str(e))
            return ActionResult(success=False, message=f"Failed to copy persisted index: {e}")

        self.logger.info(
            "Copied persisted index",
            files=len(files),
            destination=str(self.destination),
        )
        return ActionResult(
            success=True,
            message=f"Copied {len(files)} files to {self.destination}",
            data={"files": len(files), "destination": str(self.destination)},
        )
