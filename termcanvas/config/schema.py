from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from termcanvas.constants import (
    BROWSER_KILL_DELAY_S,
    DEFAULT_CONNECT_POLL_INTERVAL_S,
    DEFAULT_CONNECT_TIMEOUT_S,
    DEFAULT_PANE_FILE,
    DEFAULT_RUNNER,
    DEFAULT_SOCKET_DIR,
    DEFAULT_SPLIT_PERCENT,
    REUSE_SETTLE_DELAY_S,
)


class CanvasSettings(BaseModel):
    """termcanvas.yml contents. Every key is optional."""

    model_config = ConfigDict(extra="allow")

    tmux_binary: str = "tmux"
    runner: str = DEFAULT_RUNNER  # prefix of the spawn command, e.g. "python -m termcanvas"
    socket_dir: str = DEFAULT_SOCKET_DIR
    pane_file: str = DEFAULT_PANE_FILE
    split_percent: int = Field(default=DEFAULT_SPLIT_PERCENT, ge=10, le=90)
    reuse_settle_delay_s: float = Field(default=REUSE_SETTLE_DELAY_S, ge=0.0)
    browser_kill_delay_s: float = Field(default=BROWSER_KILL_DELAY_S, ge=0.0)
    connect_timeout_s: float = Field(default=DEFAULT_CONNECT_TIMEOUT_S, gt=0.0)
    connect_poll_interval_s: float = Field(default=DEFAULT_CONNECT_POLL_INTERVAL_S, gt=0.0)
    outcome_timeout_s: Optional[float] = None  # None waits until the canvas answers

    @field_validator("tmux_binary", "runner", "socket_dir", "pane_file")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("outcome_timeout_s")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError(f"outcome_timeout_s must be positive, got: {v}")
        return v
