"""Wire messages exchanged between host and canvas.

Framing: one JSON object per line (UTF-8, newline terminated), tagged by its
"type" field. Receivers drop lines they cannot parse and types they do not
know; neither is fatal to the session.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class BaseIPCMessage(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


# --- host -> canvas ---


class UpdateMessage(BaseIPCMessage):
    """Replace the canvas's live configuration."""

    type: Literal["update"] = "update"
    config: dict[str, Any] = Field(default_factory=dict)


class PingMessage(BaseIPCMessage):
    type: Literal["ping"] = "ping"


class GetSelectionMessage(BaseIPCMessage):
    type: Literal["getSelection"] = "getSelection"


# --- canvas -> host ---


class ReadyMessage(BaseIPCMessage):
    """Sent by the canvas as soon as a host attaches."""

    type: Literal["ready"] = "ready"
    scenario: str = ""


class SelectedMessage(BaseIPCMessage):
    type: Literal["selected"] = "selected"
    data: dict[str, Any] = Field(default_factory=dict)


class CancelledMessage(BaseIPCMessage):
    type: Literal["cancelled"] = "cancelled"
    reason: str = ""


class PongMessage(BaseIPCMessage):
    type: Literal["pong"] = "pong"


class SelectionMessage(BaseIPCMessage):
    """Reply to getSelection; not an outcome."""

    type: Literal["selection"] = "selection"
    data: dict[str, Any] | None = None


class ErrorMessage(BaseIPCMessage):
    type: Literal["error"] = "error"
    message: str = ""


# --- either direction ---


class CloseMessage(BaseIPCMessage):
    type: Literal["close"] = "close"


IPCMessage = Annotated[
    Union[
        UpdateMessage,
        PingMessage,
        GetSelectionMessage,
        ReadyMessage,
        SelectedMessage,
        CancelledMessage,
        PongMessage,
        SelectionMessage,
        ErrorMessage,
        CloseMessage,
    ],
    Field(discriminator="type"),
]

_ADAPTER: TypeAdapter[IPCMessage] = TypeAdapter(IPCMessage)

KNOWN_TYPES = frozenset(
    {"update", "ping", "getSelection", "ready", "selected", "cancelled", "pong", "selection", "error", "close"}
)
TERMINAL_TYPES = frozenset({"selected", "cancelled", "close"})


def is_terminal(message: BaseIPCMessage) -> bool:
    """Selected, cancelled and close end the session."""
    return getattr(message, "type", "") in TERMINAL_TYPES


def encode(message: BaseIPCMessage) -> bytes:
    return (message.model_dump_json() + "\n").encode("utf-8")


def decode(line: bytes | str) -> IPCMessage | None:
    """Parse one framed line; None for malformed or unknown messages."""
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    line = line.strip()
    if not line:
        return None

    try:
        raw = json.loads(line)
    except json.JSONDecodeError:
        logger.debug("Dropping malformed IPC line: %.120s", line)
        return None

    if not isinstance(raw, dict):
        logger.debug("Dropping non-object IPC message: %.120s", line)
        return None
    if raw.get("type") not in KNOWN_TYPES:
        logger.debug("Ignoring IPC message of unknown type %r", raw.get("type"))
        return None

    try:
        return _ADAPTER.validate_python(raw)
    except ValidationError as e:
        logger.debug("Dropping invalid %s message: %s", raw.get("type"), e)
        return None
