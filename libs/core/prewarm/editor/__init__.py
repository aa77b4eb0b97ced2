"""Editor installation, extension patching and index artifacts."""

from prewarm.editor.artifacts import ArtifactCopier
from prewarm.editor.bootstrap import DependencyBootstrapper
from prewarm.editor.cli_locator import EditorCliLocator
from prewarm.editor.extensions import BundlePatcher, ExtensionInstaller

__all__ = [
    "ArtifactCopier",
    "BundlePatcher",
    "DependencyBootstrapper",
    "EditorCliLocator",
    "ExtensionInstaller",
]
