"""Child process controller for long-running helper processes."""

import os
import signal
import subprocess
from pathlib import Path

from prewarm.models.process import ProcessResult


class ProcessController:
    """Starts and stops a single child process.

    The child runs in its own session so that stopping it also takes down
    the helpers it spawns (the editor server forks a code-server).
    """

    def __init__(self, program_path: str | None = None):
        """Initialize the process controller.

        Args:
            program_path: Path to the program executable
        """
        self.program_path = program_path
        self._process: subprocess.Popen | None = None
        self._log_handle = None

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process else None

    def start(
        self,
        program_arguments: list[str] | None = None,
        working_directory: str | None = None,
        output_path: Path | None = None,
        environment_variables: dict[str, str] | None = None,
    ) -> ProcessResult:
        """Start the process.

        Args:
            program_arguments: Arguments for the program
            working_directory: Working directory for the process
            output_path: File receiving combined stdout and stderr
            environment_variables: Extra environment variables

        Returns:
            ProcessResult indicating success or failure
        """
        if not self.program_path:
            return ProcessResult(
                success=False,
                message="Program path not specified",
            )

        if self.is_running():
            return ProcessResult(
                success=False,
                message=f"Process already running (PID {self.pid})",
                pid=self.pid,
            )

        cmd = [self.program_path]
        if program_arguments:
            cmd.extend(program_arguments)

        env = os.environ.copy()
        if environment_variables:
            env.update(environment_variables)

        try:
            output = subprocess.DEVNULL
            if output_path:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                # Truncate: each start gets a fresh log.
                self._log_handle = open(output_path, "w")  # noqa: SIM115
                output = self._log_handle

            self._process = subprocess.Popen(
                cmd,
                stdout=output,
                stderr=subprocess.STDOUT,
                cwd=working_directory,
                env=env,
                start_new_session=True,
            )
        except OSError as e:
            self._close_log()
            return ProcessResult(
                success=False,
                message=f"Failed to start {self.program_path}: {e}",
            )

        return ProcessResult(
            success=True,
            message=f"Started with PID {self._process.pid}",
            pid=self._process.pid,
        )

    def stop(self, timeout: float = 10.0) -> ProcessResult:
        """Stop the process group with SIGTERM, escalating to SIGKILL.

        Args:
            timeout: Seconds to wait for a graceful exit

        Returns:
            ProcessResult indicating success or failure
        """
        if self._process is None:
            return ProcessResult(
                success=True,
                message="Process was not started",
            )

        pid = self._process.pid
        try:
            if self._process.poll() is None:
                self._signal_group(signal.SIGTERM)
                try:
                    self._process.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    self._signal_group(signal.SIGKILL)
                    try:
                        self._process.wait(timeout=timeout)
                    except subprocess.TimeoutExpired:
                        return ProcessResult(
                            success=False,
                            message=f"Process {pid} did not exit after SIGKILL",
                            pid=pid,
                        )
        except PermissionError:
            return ProcessResult(
                success=False,
                message=f"Permission denied to stop process {pid}",
                pid=pid,
            )
        finally:
            self._close_log()

        self._process = None
        return ProcessResult(
            success=True,
            message=f"Process stopped (PID {pid})",
            pid=pid,
        )

    def is_running(self) -> bool:
        """Check if the process is still alive."""
        return self._process is not None and self._process.poll() is None

    def exit_code(self) -> int | None:
        """Exit code if the process has exited, None otherwise."""
        if self._process is None:
            return None
        return self._process.poll()

    def _signal_group(self, sig: int):
        try:
            os.killpg(os.getpgid(self._process.pid), sig)
        except ProcessLookupError:
            pass

    def _close_log(self):
        if self._log_handle is not None:
            self._log_handle.close()
            self._log_handle = None
