"""Session lifecycle: tmux controller, ssh launcher and orchestrator."""

from .interfaces import MultiplexerController, TransportLauncher
from .launcher import SSHLauncher
from .models import GroupStatus, PaneInfo, SessionState, SessionStatus, StartResult
from .orchestrator import EVEN_LAYOUT, RESTART_DELAY, SESSION_NAME, SessionOrchestrator
from .tmux import TmuxController

__all__ = [
    # Interfaces
    "MultiplexerController",
    "TransportLauncher",
    # Implementations
    "SSHLauncher",
    "TmuxController",
    "SessionOrchestrator",
    # Models
    "GroupStatus",
    "PaneInfo",
    "SessionState",
    "SessionStatus",
    "StartResult",
    # Constants
    "SESSION_NAME",
    "RESTART_DELAY",
    "EVEN_LAYOUT",
]
