"""Host/canvas IPC over a Unix domain socket (newline-delimited JSON)."""

from termcanvas.ipc.client import CanvasIPCClient, CanvasOutcome, ClientState, OutcomeStatus
from termcanvas.ipc.server import CanvasIPCServer, ServerState

__all__ = [
    "CanvasIPCClient",
    "CanvasIPCServer",
    "CanvasOutcome",
    "ClientState",
    "OutcomeStatus",
    "ServerState",
]
