"""Canvas-side IPC endpoint.

The canvas process listens on its invocation socket and serves exactly one
host connection at a time. Inbound config updates go into a FIFO mailbox that
the render loop drains; outbound, the canvas sends at most one terminal
message (selected or cancelled) for the whole invocation.

States: LISTENING -> CONNECTED -> ACTIVE -> TERMINATED. A host that drops
before the end puts the server back to LISTENING so it can re-attach.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from termcanvas.constants import IPC_CLOSE_GRACE_S, IPC_MAX_LINE_BYTES
from termcanvas.ipc.messages import (
    BaseIPCMessage,
    CancelledMessage,
    CloseMessage,
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

SelectionProvider = Callable[[], "dict[str, Any] | None"]


class ServerState(str, Enum):
    LISTENING = "listening"
    CONNECTED = "connected"
    ACTIVE = "active"
    TERMINATED = "terminated"


class CanvasIPCServer:
    """Single-client Unix socket server owned by the canvas process."""

    def __init__(
        self,
        socket_path: Path | str,
        *,
        scenario: str = "",
        on_close: Callable[[], None] | None = None,
        selection_provider: SelectionProvider | None = None,
    ) -> None:
        self.socket_path = Path(socket_path)
        self.scenario = scenario
        self.on_close = on_close
        self.selection_provider = selection_provider
        self.state = ServerState.LISTENING
        self.updates: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.terminated = asyncio.Event()
        self._server: asyncio.AbstractServer | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._terminal: BaseIPCMessage | None = None
        self._terminal_delivered = False

    @property
    def is_terminated(self) -> bool:
        return self.state is ServerState.TERMINATED

    async def start(self) -> None:
        """Bind the socket (replacing any stale file) and start accepting."""
        if self.socket_path.exists() or self.socket_path.is_symlink():
            self.socket_path.unlink()
        self.socket_path.parent.mkdir(parents=True, exist_ok=True)

        self._server = await asyncio.start_unix_server(
            self._handle_connection,
            path=str(self.socket_path),
            limit=IPC_MAX_LINE_BYTES,
        )
        os.chmod(self.socket_path, 0o600)
        logger.info("Canvas IPC listening on %s", self.socket_path)

    async def _handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        if self._writer is not None:
            logger.warning("Rejecting second IPC client on %s", self.socket_path)
            await _close_writer(writer)
            return
        if self.is_terminated and (self._terminal is None or self._terminal_delivered):
            await _close_writer(writer)
            return

        self._writer = writer
        if not self.is_terminated:
            self.state = ServerState.CONNECTED
        logger.debug("IPC client attached on %s", self.socket_path)

        self._write(ReadyMessage(scenario=self.scenario))
        if self._terminal is not None:
            # Outcome was decided before the host attached.
            self._write(self._terminal)
            self._terminal_delivered = True
            await self._drain()
            await _close_writer(writer)
            self._writer = None
            return
        self.state = ServerState.ACTIVE

        try:
            await self._read_loop(reader)
        finally:
            if self._writer is writer:
                self._writer = None
                if not self.is_terminated:
                    self.state = ServerState.LISTENING
                    logger.info("IPC client detached from %s", self.socket_path)
            await _close_writer(writer)

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        while True:
            try:
                line = await reader.readline()
            except ValueError:
                logger.warning("IPC line exceeded %d bytes, dropping connection", IPC_MAX_LINE_BYTES)
                return
            except (ConnectionError, OSError):
                return
            if not line:
                return

            message = decode(line)
            if message is None:
                continue
            if self.is_terminated:
                logger.debug("Ignoring %s after terminal message", message.type)
                continue
            self._dispatch(message)
            await self._drain()

    def _dispatch(self, message: BaseIPCMessage) -> None:
        if isinstance(message, UpdateMessage):
            self.updates.put_nowait(message.config)
        elif isinstance(message, PingMessage):
            self._write(PongMessage())
        elif isinstance(message, GetSelectionMessage):
            data = self.selection_provider() if self.selection_provider else None
            self._write(SelectionMessage(data=data))
        elif isinstance(message, CloseMessage):
            logger.info("Host requested close")
            self._terminate(None)
            if self.on_close is not None:
                self.on_close()
        else:
            logger.debug("Ignoring %s from host", message.type)

    async def next_update(self) -> dict[str, Any]:
        """Wait for the next config pushed by the host (FIFO)."""
        return await self.updates.get()

    def send_selected(self, data: dict[str, Any]) -> bool:
        """Emit the selection outcome. Only the first terminal message is sent."""
        return self._terminate(SelectedMessage(data=data))

    def send_cancelled(self, reason: str = "user cancelled") -> bool:
        return self._terminate(CancelledMessage(reason=reason))

    def _terminate(self, message: BaseIPCMessage | None) -> bool:
        if self.is_terminated:
            if message is not None:
                logger.warning("Dropping %s: invocation already finished", message.type)
            return False

        self.state = ServerState.TERMINATED
        self.terminated.set()
        if message is None:
            return True

        self._terminal = message
        if self._writer is not None:
            self._write(message)
            self._terminal_delivered = True
        logger.info("Canvas outcome: %s", message.type)
        return True

    def _write(self, message: BaseIPCMessage) -> None:
        writer = self._writer
        if writer is None or writer.is_closing():
            return
        try:
            writer.write(encode(message))
        except (ConnectionError, OSError, RuntimeError) as e:
            logger.debug("IPC write failed: %s", e)

    async def _drain(self) -> None:
        writer = self._writer
        if writer is None or writer.is_closing():
            return
        try:
            await writer.drain()
        except (ConnectionError, OSError) as e:
            logger.debug("IPC drain failed: %s", e)

    async def stop(self) -> None:
        """Flush pending output, drop the client, close and unlink the socket."""
        writer = self._writer
        self._writer = None
        if writer is not None:
            with contextlib.suppress(asyncio.TimeoutError, ConnectionError, OSError):
                await asyncio.wait_for(writer.drain(), timeout=IPC_CLOSE_GRACE_S)
            await _close_writer(writer)

        if self._server is not None:
            self._server.close()
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._server.wait_closed(), timeout=IPC_CLOSE_GRACE_S)
            self._server = None

        with contextlib.suppress(FileNotFoundError):
            self.socket_path.unlink()
        logger.debug("Canvas IPC stopped on %s", self.socket_path)


async def _close_writer(writer: asyncio.StreamWriter) -> None:
    if writer.is_closing():
        return
    writer.close()
    with contextlib.suppress(asyncio.TimeoutError, ConnectionError, OSError):
        await asyncio.wait_for(writer.wait_closed(), timeout=IPC_CLOSE_GRACE_S)
