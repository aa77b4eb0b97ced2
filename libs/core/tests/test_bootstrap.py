"""Unit tests for dependency bootstrapping."""

import subprocess
from unittest.mock import patch

import pytest

from prewarm.editor.bootstrap import DependencyBootstrapper, playwright_browsers_dir
from prewarm.errors import SetupError


def completed(returncode=0, stdout=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


class TestDependencyBootstrapper:
    """Tests for DependencyBootstrapper."""

    def test_workspace_already_installed(self, tmp_path):
        """Test no install runs when the probe module imports."""
        bootstrapper = DependencyBootstrapper(tmp_path, python="/usr/bin/python3")

        with patch("prewarm.editor.bootstrap.subprocess.run", return_value=completed()) as mock_run:
            assert bootstrapper.ensure_workspace_installed() is False

        mock_run.assert_called_once()
        assert mock_run.call_args.args[0] == ["/usr/bin/python3", "-c", "import django"]

    def test_workspace_install(self, tmp_path):
        """Test an editable install runs when the probe fails."""
        bootstrapper = DependencyBootstrapper(tmp_path, probe_module="flask", python="py")

        with patch(
            "prewarm.editor.bootstrap.subprocess.run",
            side_effect=[completed(1), completed(0, "Successfully installed flask\n")],
        ) as mock_run:
            assert bootstrapper.ensure_workspace_installed() is True

        assert mock_run.call_args.args[0] == ["py", "-m", "pip", "install", "-e", str(tmp_path)]

    def test_workspace_install_failure(self, tmp_path):
        """Test a failed pip install aborts the run."""
        bootstrapper = DependencyBootstrapper(tmp_path, python="py")

        with patch(
            "prewarm.editor.bootstrap.subprocess.run",
            side_effect=[completed(1), completed(2, "ERROR: no setup.py\n")],
        ):
            with pytest.raises(SetupError, match="exit code 2"):
                bootstrapper.ensure_workspace_installed()

    def test_browser_installed(self, tmp_path, monkeypatch):
        """Test an existing Chromium skips the browser install."""
        monkeypatch.setenv("PLAYWRIGHT_BROWSERS_PATH", str(tmp_path))
        (tmp_path / "chromium-1105").mkdir()
        bootstrapper = DependencyBootstrapper(tmp_path, python="py")

        with patch("prewarm.editor.bootstrap.subprocess.run") as mock_run:
            assert bootstrapper.ensure_browser_installed() is False

        mock_run.assert_not_called()

    def test_browser_install(self, tmp_path, monkeypatch):
        """Test Chromium is installed when missing."""
        monkeypatch.setenv("PLAYWRIGHT_BROWSERS_PATH", str(tmp_path / "browsers"))
        bootstrapper = DependencyBootstrapper(tmp_path, python="py")

        with patch("prewarm.editor.bootstrap.subprocess.run", return_value=completed()) as mock_run:
            assert bootstrapper.ensure_browser_installed() is True

        assert mock_run.call_args.args[0] == ["py", "-m", "playwright", "install", "chromium"]

    def test_browser_install_os_error(self, tmp_path, monkeypatch):
        """Test a missing interpreter is a setup error."""
        monkeypatch.setenv("PLAYWRIGHT_BROWSERS_PATH", str(tmp_path / "browsers"))
        bootstrapper = DependencyBootstrapper(tmp_path, python="/missing/python")

        with patch(
            "prewarm.editor.bootstrap.subprocess.run",
            side_effect=FileNotFoundError("/missing/python"),
        ):
            with pytest.raises(SetupError):
                bootstrapper.ensure_browser_installed()

    def test_default_browsers_dir(self, monkeypatch):
        """Test the default Playwright cache location."""
        monkeypatch.delenv("PLAYWRIGHT_BROWSERS_PATH", raising=False)

        assert playwright_browsers_dir().parts[-2:] == (".cache", "ms-playwright")
