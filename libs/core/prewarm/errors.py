"""Errors that abort a prebuild run."""


class SetupError(Exception):
    """A prebuild step failed and the run cannot continue."""


class CliNotFoundError(SetupError):
    """The editor CLI is neither installed nor downloadable."""


class ServerStartError(SetupError):
    """The editor server exited or never answered on its port."""

    def __init__(self, message: str, log_tail: str = ""):
        super().__init__(message)
        self.log_tail = log_tail
