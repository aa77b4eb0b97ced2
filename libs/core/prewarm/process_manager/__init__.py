"""Process management for the headless editor server."""

from prewarm.process_manager.process_controller import ProcessController
from prewarm.process_manager.server_controller import ServerController

__all__ = [
    "ProcessController",
    "ServerController",
]
