"""Terminal environment detection."""

from __future__ import annotations

import os
from dataclasses import dataclass

from termcanvas.constants import TMUX_ENV_VAR
from termcanvas.errors import TmuxRequiredError


@dataclass(frozen=True)
class TerminalEnvironment:
    in_tmux: bool
    summary: str


def detect() -> TerminalEnvironment:
    """Report whether this process runs inside a tmux session."""
    in_tmux = bool(os.environ.get(TMUX_ENV_VAR))
    return TerminalEnvironment(in_tmux=in_tmux, summary="tmux" if in_tmux else "no tmux")


def require_tmux(feature: str = "Canvas") -> TerminalEnvironment:
    """Return the environment, or raise TmuxRequiredError outside tmux.

    Absence of a session is not transient, so callers must not retry.
    """
    env = detect()
    if not env.in_tmux:
        raise TmuxRequiredError(feature)
    return env
