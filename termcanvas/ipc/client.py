"""Host-side IPC endpoint.

The host is the only client of a canvas socket. It attaches (retrying while
the freshly spawned canvas is still starting), pushes config updates
fire-and-forget, and waits for exactly one outcome. Losing the connection
before an outcome arrives is reported as DISCONNECTED, which callers must
treat as a cancellation, never as success.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from termcanvas.constants import (
    DEFAULT_CONNECT_POLL_INTERVAL_S,
    DEFAULT_CONNECT_TIMEOUT_S,
    IPC_CLOSE_GRACE_S,
    IPC_MAX_LINE_BYTES,
)
from termcanvas.errors import CanvasConnectError
from termcanvas.ipc.messages import (
    BaseIPCMessage,
    CancelledMessage,
    CloseMessage,
    ErrorMessage,
    GetSelectionMessage,
    PingMessage,
    PongMessage,
    ReadyMessage,
    SelectedMessage,
    SelectionMessage,
    UpdateMessage,
    decode,
    encode,
)

logger = logging.getLogger(__name__)


class ClientState(str, Enum):
    CONNECTING = "connecting"
    ATTACHED = "attached"
    AWAITING_OUTCOME = "awaiting_outcome"
    RESOLVED = "resolved"
    DISCONNECTED = "disconnected"


class OutcomeStatus(str, Enum):
    SELECTED = "selected"
    CANCELLED = "cancelled"
    DISCONNECTED = "disconnected"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class CanvasOutcome:
    """The single final result of one canvas invocation."""

    status: OutcomeStatus
    data: dict[str, Any] | None = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SELECTED

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status.value}
        if self.data is not None:
            result["data"] = self.data
        if self.reason:
            result["reason"] = self.reason
        return result


class CanvasIPCClient:
    """Connection from the host to one canvas invocation."""

    def __init__(
        self,
        socket_path: Path | str,
        *,
        connect_timeout_s: float = DEFAULT_CONNECT_TIMEOUT_S,
        poll_interval_s: float = DEFAULT_CONNECT_POLL_INTERVAL_S,
    ) -> None:
        self.socket_path = Path(socket_path)
        self.connect_timeout_s = connect_timeout_s
        self.poll_interval_s = poll_interval_s
        self.state = ClientState.CONNECTING
        self.scenario: str | None = None
        self.errors: list[str] = []
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._read_task: asyncio.Task[None] | None = None
        self._outcome: asyncio.Future[CanvasOutcome] | None = None
        self._ready = asyncio.Event()
        self._pongs: asyncio.Queue[None] = asyncio.Queue()
        self._selections: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue()

    @property
    def is_attached(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    async def connect(self) -> None:
        """Attach to the canvas socket, retrying until connect_timeout_s.

        Raises:
            CanvasConnectError: socket never accepted a connection in time.
        """
        deadline = time.monotonic() + self.connect_timeout_s
        last_error = ""
        while True:
            try:
                self._reader, self._writer = await asyncio.open_unix_connection(
                    str(self.socket_path), limit=IPC_MAX_LINE_BYTES
                )
                break
            except OSError as e:
                last_error = str(e)
            if time.monotonic() >= deadline:
                self.state = ClientState.DISCONNECTED
                raise CanvasConnectError(str(self.socket_path), last_error)
            await asyncio.sleep(self.poll_interval_s)

        self._outcome = asyncio.get_running_loop().create_future()
        self._read_task = asyncio.create_task(self._read_loop(), name=f"canvas-ipc-{self.socket_path.name}")
        self.state = ClientState.ATTACHED
        logger.debug("Attached to canvas at %s", self.socket_path)

    async def _read_loop(self) -> None:
        assert self._reader is not None
        try:
            while True:
                try:
                    line = await self._reader.readline()
                except ValueError:
                    logger.warning("Canvas sent an oversized line, dropping connection")
                    break
                if not line:
                    break
                message = decode(line)
                if message is not None:
                    self._handle(message)
        except (ConnectionError, OSError) as e:
            logger.debug("Canvas connection error: %s", e)
        finally:
            self._resolve(CanvasOutcome(status=OutcomeStatus.DISCONNECTED, reason="canvas disconnected"))

    def _handle(self, message: BaseIPCMessage) -> None:
        if isinstance(message, ReadyMessage):
            self.scenario = message.scenario
            self._ready.set()
        elif isinstance(message, PongMessage):
            self._pongs.put_nowait(None)
        elif isinstance(message, SelectionMessage):
            self._selections.put_nowait(message.data)
        elif isinstance(message, ErrorMessage):
            logger.warning("Canvas reported error: %s", message.message)
            self.errors.append(message.message)
        elif isinstance(message, SelectedMessage):
            self._resolve(CanvasOutcome(status=OutcomeStatus.SELECTED, data=message.data))
        elif isinstance(message, CancelledMessage):
            self._resolve(CanvasOutcome(status=OutcomeStatus.CANCELLED, reason=message.reason))
        elif isinstance(message, CloseMessage):
            self._resolve(CanvasOutcome(status=OutcomeStatus.CANCELLED, reason="canvas closed"))
        else:
            logger.debug("Ignoring %s from canvas", message.type)

    def _resolve(self, outcome: CanvasOutcome) -> None:
        """First outcome wins; later ones are dropped."""
        if self._outcome is None or self._outcome.done():
            return
        self._outcome.set_result(outcome)
        self.state = (
            ClientState.DISCONNECTED if outcome.status is OutcomeStatus.DISCONNECTED else ClientState.RESOLVED
        )
        logger.info("Canvas outcome from %s: %s", self.socket_path.name, outcome.status.value)

    async def _send(self, message: BaseIPCMessage) -> bool:
        writer = self._writer
        if writer is None or writer.is_closing():
            return False
        try:
            writer.write(encode(message))
            await writer.drain()
            return True
        except (ConnectionError, OSError) as e:
            logger.debug("Send %s failed: %s", message.type, e)
            return False

    async def send_update(self, config: dict[str, Any]) -> bool:
        """Push a full replacement config. Fire-and-forget: False if not delivered."""
        return await self._send(UpdateMessage(config=config))

    async def wait_ready(self, timeout: float | None = None) -> bool:
        """Wait for the canvas's ready greeting."""
        try:
            await asyncio.wait_for(self._ready.wait(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False

    async def ping(self, timeout: float = 1.0) -> bool:
        if not await self._send(PingMessage()):
            return False
        try:
            await asyncio.wait_for(self._pongs.get(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False

    async def get_selection(self, timeout: float = 1.0) -> dict[str, Any] | None:
        """Ask the canvas for its current (uncommitted) selection."""
        if not await self._send(GetSelectionMessage()):
            return None
        try:
            return await asyncio.wait_for(self._selections.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None

    async def wait_for_outcome(self, timeout: float | None = None) -> CanvasOutcome:
        """Wait for the terminal message.

        On timeout the canvas is told to close and the connection is dropped;
        the returned outcome is TIMEOUT.
        """
        if self._outcome is None:
            return CanvasOutcome(status=OutcomeStatus.DISCONNECTED, reason="not connected")
        if not self._outcome.done():
            self.state = ClientState.AWAITING_OUTCOME
        try:
            return await asyncio.wait_for(asyncio.shield(self._outcome), timeout=timeout)
        except asyncio.TimeoutError:
            logger.info("Canvas at %s timed out after %ss", self.socket_path.name, timeout)
            await self.close()
            return CanvasOutcome(status=OutcomeStatus.TIMEOUT, reason=f"no response within {timeout}s")

    async def close(self, *, notify: bool = True) -> None:
        """Drop the connection; tells a still-running canvas to close first. Idempotent."""
        writer = self._writer
        self._writer = None
        if writer is not None and not writer.is_closing():
            if notify and self._outcome is not None and not self._outcome.done():
                with contextlib.suppress(ConnectionError, OSError):
                    writer.write(encode(CloseMessage()))
                    await writer.drain()
            writer.close()
            with contextlib.suppress(asyncio.TimeoutError, ConnectionError, OSError):
                await asyncio.wait_for(writer.wait_closed(), timeout=IPC_CLOSE_GRACE_S)

        task = self._read_task
        self._read_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def __aenter__(self) -> "CanvasIPCClient":
        await self.connect()
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()
