"""Record of the single canvas pane shared across invocations.

The identity is a raw tmux pane id (e.g. "%12") kept in a PaneStore. An empty
store means "no pane". Liveness is never cached: every lookup re-verifies the
id against tmux, because tmux recycles pane slots after a pane closes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from termcanvas.core.tmux import TmuxRunner

logger = logging.getLogger(__name__)


class PaneStore(Protocol):
    def read(self) -> str: ...

    def write(self, value: str) -> None: ...


class FilePaneStore:
    """Pane id persisted in a single text file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def write(self, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(value, encoding="utf-8")


class MemoryPaneStore:
    """In-process store for tests and embedding."""

    def __init__(self, value: str = "") -> None:
        self.value = value

    def read(self) -> str:
        return self.value

    def write(self, value: str) -> None:
        self.value = value


class PaneRegistry:
    """Load, verify, save and invalidate the canvas pane id."""

    def __init__(self, store: PaneStore, tmux: TmuxRunner) -> None:
        self.store = store
        self.tmux = tmux

    def load(self) -> str | None:
        """Stored pane id, or None if the store is empty or unreadable."""
        try:
            pane_id = self.store.read().strip()
        except (OSError, UnicodeDecodeError):
            return None
        return pane_id or None

    async def verify(self, pane_id: str) -> bool:
        """Check that tmux still knows this exact pane.

        Addresses the pane directly and requires the echoed id to match, so a
        recycled slot answering for a different pane counts as dead.
        """
        result = await self.tmux.run("display-message", "-t", pane_id, "-p", "#{pane_id}")
        return result.ok and result.stdout.strip() == pane_id

    async def current(self) -> str | None:
        """Load and verify in one step; stale ids are invalidated."""
        pane_id = self.load()
        if not pane_id:
            return None
        if await self.verify(pane_id):
            return pane_id
        logger.info("Stored canvas pane %s is gone, clearing", pane_id)
        self.invalidate()
        return None

    def save(self, pane_id: str) -> None:
        self.store.write(pane_id)

    def invalidate(self) -> None:
        """Clear the stored id. Best effort: store errors are logged, not raised."""
        try:
            self.store.write("")
        except OSError as e:
            logger.warning("Could not clear canvas pane record: %s", e)
