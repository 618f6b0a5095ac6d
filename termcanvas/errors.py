"""Exception types raised by termcanvas."""

from __future__ import annotations


class CanvasError(Exception):
    """Base class for all termcanvas failures surfaced to callers."""


class TmuxRequiredError(CanvasError):
    """No active tmux session; pane operations cannot run."""

    def __init__(self, feature: str = "Canvas") -> None:
        super().__init__(f"{feature} requires tmux. Please run inside a tmux session.")
        self.feature = feature


class SpawnFailure(CanvasError):
    """Both pane reuse and pane creation failed."""

    def __init__(self, method: str, detail: str = "") -> None:
        message = f"Failed to spawn {method} pane"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.method = method
        self.detail = detail


class ScenarioNotFoundError(CanvasError):
    """No scenario registered for the requested (kind, name) pair."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"Unknown scenario '{name}' for canvas kind '{kind}'")
        self.kind = kind
        self.name = name


class CanvasConnectError(CanvasError):
    """Host could not attach to the canvas socket."""

    def __init__(self, socket_path: str, reason: str = "") -> None:
        message = f"Could not connect to canvas at {socket_path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.socket_path = socket_path


class CanvasConfigError(CanvasError):
    """Canvas config payload could not be read or parsed."""
