from dataclasses import dataclass, field


def _default_settings() -> dict:
    return {
        "python.analysis.persistAllIndices": True,
        "python.analysis.indexing": True,
        "python.analysis.userFileIndexingLimit": -1,
        "python.analysis.packageIndexDepths": [
            {"name": "django", "depth": 3, "includeAllSymbols": True},
            {"name": "", "depth": 2, "includeAllSymbols": False},
        ],
        "python.defaultInterpreterPath": "/usr/local/bin/python",
    }


@dataclass
class ServerConfig:
    """Headless editor server configuration."""
    host: str = "127.0.0.1"
    port: int = 19876
    startup_attempts: int = 60
    restart_attempts: int = 30
    probe_interval: float = 2.0
    restart_pause: float = 2.0
    stop_timeout: float = 10.0
    cli_globs: list[str] = field(
        default_factory=lambda: ["~/.vscode-server/code-*"]
    )
    shared_server_bin: str = "/usr/local/gitpod/shared/vscode/vscode-server/bin"
    product_json_globs: list[str] = field(
        default_factory=lambda: [
            "~/.vscode-server/cli/serve-web/*/product.json",
            "~/.vscode-browser-server/product.json",
        ]
    )
    download_url: str = "https://update.code.visualstudio.com/{build}/cli-linux-{arch}/stable"
    download_timeout: float = 120.0
    machine_settings: dict = field(default_factory=_default_settings)

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/"


@dataclass
class PollingConfig:
    """Readiness polling configuration, in seconds."""
    timeout: float = 180.0
    interval: float = 5.0
    retry_grace: float = 30.0
    indexing_extension: float = 60.0
    background_extension: float = 30.0
    page_load_timeout: float = 30.0
    ui_settle: float = 15.0


@dataclass
class ExtensionConfig:
    """Extensions to install and patch, and how to trigger activation."""
    extension_ids: list[str] = field(
        default_factory=lambda: ["ms-python.python", "ms-python.vscode-pylance"]
    )
    code_server_globs: list[str] = field(
        default_factory=lambda: [
            "~/.vscode/cli/serve-web/*/bin/code-server",
            "~/.vscode-server/cli/serve-web/*/bin/code-server",
        ]
    )
    code_server_attempts: int = 30
    extension_dirs: list[str] = field(
        default_factory=lambda: [
            "~/.vscode-browser-server/extensions",
            "~/.vscode-server/extensions",
        ]
    )
    pylance_prefix: str = "ms-python.vscode-pylance-"
    bundle_subpath: str = "dist/extension.bundle.js"
    probe_module: str = "django"
    target_candidates: list[str] = field(
        default_factory=lambda: [
            "django/__init__.py",
            "django/__main__.py",
            "setup.py",
            "manage.py",
        ]
    )


@dataclass
class ArtifactConfig:
    """Where persisted index artifacts are copied after a successful run."""
    enabled: bool = True
    source_subpath: str = "data/User/globalStorage/ms-python.vscode-pylance"
    destination: str = "~/.vscode-server/data/User/globalStorage/ms-python.vscode-pylance"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    log_dir: str = "~/.cache/prewarm/logs"
    level: str = "INFO"


@dataclass
class PrebuildConfig:
    """Top-level prebuild configuration."""
    workspace: str = "/workspaces/pylance-prebuild"
    keep_server_data: bool = False
    server: ServerConfig = field(default_factory=ServerConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    extensions: ExtensionConfig = field(default_factory=ExtensionConfig)
    artifacts: ArtifactConfig = field(default_factory=ArtifactConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
