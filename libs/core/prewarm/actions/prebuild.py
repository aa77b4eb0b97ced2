"""Prebuild orchestration: from a cold container to a persisted index."""

import os
import shutil
import subprocess
import tempfile
from pathlib import Path

from prewarm_logging import get_logger

from prewarm.browser import HeadlessEditorSession, find_target_file
from prewarm.editor import (
    ArtifactCopier,
    BundlePatcher,
    DependencyBootstrapper,
    EditorCliLocator,
    ExtensionInstaller,
)
from prewarm.errors import ServerStartError, SetupError
from prewarm.models.actions import ActionResult
from prewarm.models.config import PrebuildConfig
from prewarm.models.status import PollOutcome, Status
from prewarm.process_manager import ServerController
from prewarm.readiness import LanguageServerLogSource, ReadinessPoller


def default_server_data_dir() -> Path:
    return Path(tempfile.gettempdir()) / f"vscode-prebuild-{os.getpid()}"


class PrebuildActions:
    """Encapsulates the prebuild run and the smaller maintenance actions.

    ``run`` owns every resource it creates: the extension bundle is
    restored, the server stopped and its data directory removed no matter
    how the run ends.
    """

    def __init__(
        self,
        config: PrebuildConfig | None = None,
        server_data_dir: Path | None = None,
    ):
        """Initialize prebuild actions.

        Args:
            config: Prebuild configuration
            server_data_dir: Data directory for the throwaway server
        """
        self.config = config or PrebuildConfig()
        self.server_data_dir = Path(server_data_dir or default_server_data_dir())
        self.logger = get_logger('actions.prebuild')

    @property
    def workspace(self) -> Path:
        return Path(self.config.workspace)

    def run(self) -> ActionResult:
        """Run the whole prebuild.

        Returns:
            ActionResult, successful only when the index is ready
        """
        server: ServerController | None = None
        patcher = BundlePatcher(self.server_data_dir, self.config.extensions)

        try:
            bootstrapper = DependencyBootstrapper(
                self.workspace,
                probe_module=self.config.extensions.probe_module,
            )
            bootstrapper.ensure_workspace_installed()
            bootstrapper.ensure_browser_installed()

            cli = EditorCliLocator(self.config.server).locate()

            server = ServerController(cli, self.server_data_dir, self.config.server)
            server.write_settings()
            server.start()

            ExtensionInstaller(
                self.server_data_dir,
                self.config.extensions,
                probe_interval=self.config.server.probe_interval,
            ).install()
            patcher.apply()

            server.restart()

            outcome = self.trigger_and_poll()

            artifacts = None
            if outcome.ready:
                artifacts = ArtifactCopier(self.server_data_dir, self.config.artifacts).copy()

            server_log = self.read_server_log()
            return self._result(outcome, artifacts, server_log)

        except ServerStartError as e:
            self.logger.error(str(e))
            if e.log_tail:
                self.logger.error(f"Server log tail:\n{e.log_tail}")
            return ActionResult(success=False, message=str(e))
        except SetupError as e:
            self.logger.error(str(e))
            return ActionResult(success=False, message=str(e))
        except Exception as e:
            self.logger.exception("Prebuild failed", error=str(e))
            return ActionResult(success=False, message=f"Prebuild failed: {e}")
        finally:
            self.cleanup(server, patcher)

    def trigger_and_poll(self) -> PollOutcome:
        """Open a Python file in a headless editor and wait for the index."""
        polling = self.config.polling
        poller = ReadinessPoller(
            interval=polling.interval,
            retry_grace=polling.retry_grace,
            indexing_extension=polling.indexing_extension,
            background_extension=polling.background_extension,
        )
        source = LanguageServerLogSource(self.server_data_dir)

        with HeadlessEditorSession(self.workspace, self.config.server, polling) as session:
            target = find_target_file(self.workspace, self.config.extensions.target_candidates)

            trigger = None
            if target:
                trigger = session.trigger_for(target)
                trigger.fire()
            else:
                self.logger.warning("No Python file found to open, indexing may not start")

            self.logger.info(
                "Waiting for the language server to index",
                timeout=f"{polling.timeout:.0f}s",
            )
            return poller.poll(source, trigger, polling.timeout)

    def status(self) -> Status:
        """Derive the current status from the server log, without waiting."""
        source = LanguageServerLogSource(self.server_data_dir)
        return ReadinessPoller().status(source)

    def read_server_log(self) -> str:
        log_path = LanguageServerLogSource(self.server_data_dir).latest_log()
        if log_path is None:
            self.logger.warning(
                "Language server log not found",
                logs_dir=str(self.server_data_dir / "data" / "logs"),
            )
            return ""
        try:
            return log_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return ""

    def patch(self) -> ActionResult:
        return BundlePatcher(self.server_data_dir, self.config.extensions).apply()

    def restore(self) -> ActionResult:
        restored = BundlePatcher(self.server_data_dir, self.config.extensions).restore()
        if restored:
            return ActionResult(success=True, message="Extension bundle restored")
        return ActionResult(success=False, message="No bundle backup found")

    def cleanup(self, server: ServerController | None, patcher: BundlePatcher):
        """Release everything ``run`` created."""
        self.logger.info("Cleaning up")
        if server is not None:
            try:
                server.stop()
            except (OSError, subprocess.SubprocessError) as e:
                self.logger.error("Failed to stop editor server", error=str(e))

        try:
            patcher.restore()
        except OSError as e:
            self.logger.error("Failed to restore extension bundle", error=str(e))

        if not self.config.keep_server_data:
            shutil.rmtree(self.server_data_dir, ignore_errors=True)

    def _result(
        self,
        outcome: PollOutcome,
        artifacts: ActionResult | None,
        server_log: str,
    ) -> ActionResult:
        data = {
            "ready": outcome.ready,
            "elapsed": outcome.elapsed,
            "server_log": server_log,
            "artifacts": artifacts.message if artifacts else None,
        }
        if outcome.ready:
            return ActionResult(
                success=True,
                message=f"Language server indexing completed ({outcome.elapsed:.0f}s)",
                data=data,
            )
        return ActionResult(
            success=False,
            message=(
                f"Timeout after {self.config.polling.timeout:.0f}s, "
                "the language server may not have finished indexing"
            ),
            data=data,
        )
