"""Run a command in the canvas pane, reusing it when possible.

Reuse before create: a live canvas pane is interrupted and handed the new
command, so repeated invocations do not flicker a fresh split each time.
If the stored pane is gone or rejects the keystrokes, the record is cleared
and a new pane is split off the current one. There is no fallback beyond
that: if the split fails too, the invocation fails.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from termcanvas.constants import DEFAULT_SPLIT_PERCENT, REUSE_SETTLE_DELAY_S
from termcanvas.core.pane_registry import PaneRegistry
from termcanvas.core.tmux import TmuxRunner
from termcanvas.errors import SpawnFailure

logger = logging.getLogger(__name__)

SPAWN_METHOD = "tmux"


@dataclass(frozen=True)
class SpawnResult:
    method: str
    pane_id: str | None
    reused: bool


class PaneLifecycleManager:
    """Owns the reuse/create/invalidate decisions for the canvas pane."""

    def __init__(
        self,
        registry: PaneRegistry,
        tmux: TmuxRunner,
        *,
        split_percent: int = DEFAULT_SPLIT_PERCENT,
        settle_delay_s: float = REUSE_SETTLE_DELAY_S,
    ) -> None:
        self.registry = registry
        self.tmux = tmux
        self.split_percent = split_percent
        # Heuristic wait between C-c and the new command so the old process's
        # last writes do not interleave with ours. Not a correctness guarantee.
        self.settle_delay_s = settle_delay_s

    async def run(self, command: str) -> SpawnResult:
        """Run command in the canvas pane.

        Raises:
            SpawnFailure: reuse (if attempted) and creation both failed.
        """
        pane_id = await self.registry.current()
        if pane_id:
            if await self._reuse(pane_id, command):
                logger.info("Reused canvas pane %s", pane_id)
                return SpawnResult(method=SPAWN_METHOD, pane_id=pane_id, reused=True)
            logger.info("Reuse of canvas pane %s failed, creating a new pane", pane_id)
            self.registry.invalidate()

        created, new_pane_id = await self._create(command)
        if not created:
            raise SpawnFailure(SPAWN_METHOD)
        logger.info("Created canvas pane %s", new_pane_id)
        return SpawnResult(method=SPAWN_METHOD, pane_id=new_pane_id, reused=False)

    async def _reuse(self, pane_id: str, command: str) -> bool:
        interrupt = await self.tmux.run("send-keys", "-t", pane_id, "C-c")
        if not interrupt.ok:
            return False

        await asyncio.sleep(self.settle_delay_s)

        inject = await self.tmux.run("send-keys", "-t", pane_id, f"clear && {command}", "Enter")
        return inject.ok

    async def _create(self, command: str) -> tuple[bool, str | None]:
        # -P -F prints the new pane id; reading it from the split itself avoids
        # racing a follow-up query against other splits.
        result = await self.tmux.run(
            "split-window",
            "-h",
            "-p",
            str(self.split_percent),
            "-P",
            "-F",
            "#{pane_id}",
            command,
        )
        if not result.ok:
            logger.error("tmux split-window failed: %s", result.stderr)
            return False, None

        pane_id = result.stdout.strip()
        if not pane_id:
            # Pane exists but cannot be addressed later; the command still runs.
            logger.warning("split-window succeeded without reporting a pane id")
            return True, None
        try:
            self.registry.save(pane_id)
        except OSError as e:
            logger.warning("Could not persist canvas pane %s: %s", pane_id, e)
        return True, pane_id

    async def set_title(self, pane_id: str, title: str) -> None:
        """Show title in the pane's bottom border."""
        await self.tmux.run("select-pane", "-t", pane_id, "-T", title)
        await self.tmux.run("set-option", "-p", "-t", pane_id, "pane-border-status", "bottom")
        await self.tmux.run("set-option", "-p", "-t", pane_id, "pane-border-format", " #{pane_title} ")
