"""Host-side API: show a canvas in the canvas pane and get its outcome.

    host = CanvasHost()
    outcome = await host.show("table", "select", {"columns": [...], "rows": [...]})
    if outcome.ok:
        row = outcome.data["selectedRows"][0]

For live updates, hold the session open:

    async with host.open("chart", "display", cfg) as session:
        await session.update(new_cfg)
        outcome = await session.wait(timeout=60)

Invocations are sequential: they share the single canvas pane, and starting a
new one interrupts whatever the pane was running.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

from termcanvas import scenarios
from termcanvas.config import CanvasSettings
from termcanvas.config import config as default_settings
from termcanvas.core.pane_lifecycle import PaneLifecycleManager, SpawnResult
from termcanvas.core.spawn import CanvasInvocation, build_invocation, create_lifecycle_manager, spawn_canvas
from termcanvas.ipc.client import CanvasIPCClient, CanvasOutcome
from termcanvas.scenarios.registry import ScenarioRegistry, merge_config
from termcanvas.scenarios.types import CanvasKind, ScenarioDefinition

logger = logging.getLogger(__name__)


@dataclass
class CanvasSession:
    """A running invocation the host is attached to."""

    invocation: CanvasInvocation
    scenario: ScenarioDefinition
    client: CanvasIPCClient
    spawn: SpawnResult

    async def update(self, config: dict[str, Any]) -> bool:
        """Replace the canvas config (scenario defaults re-applied underneath)."""
        merged = merge_config(self.scenario, config)
        self.invocation.config = merged
        return await self.client.send_update(merged)

    async def wait(self, timeout: Optional[float] = None) -> CanvasOutcome:
        return await self.client.wait_for_outcome(timeout)

    async def selection(self) -> dict[str, Any] | None:
        return await self.client.get_selection()


class CanvasHost:
    def __init__(
        self,
        *,
        registry: ScenarioRegistry | None = None,
        manager: PaneLifecycleManager | None = None,
        settings: CanvasSettings | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.registry = registry or scenarios.registry
        self.manager = manager or create_lifecycle_manager(self.settings)

    def prepare(
        self,
        kind: CanvasKind | str,
        scenario: str,
        config: Optional[dict[str, Any]] = None,
        *,
        invocation_id: Optional[str] = None,
    ) -> tuple[ScenarioDefinition, CanvasInvocation]:
        """Resolve the scenario and build the invocation without spawning anything.

        Raises:
            ScenarioNotFoundError: unknown kind or scenario.
        """
        definition = self.registry.require(kind, scenario)
        invocation = build_invocation(
            definition.canvas_kind,
            scenario=definition.name,
            config=merge_config(definition, config),
            invocation_id=invocation_id,
            socket_dir=self.settings.socket_dir,
        )
        return definition, invocation

    @asynccontextmanager
    async def open(
        self,
        kind: CanvasKind | str,
        scenario: str,
        config: Optional[dict[str, Any]] = None,
        *,
        invocation_id: Optional[str] = None,
    ) -> AsyncIterator[CanvasSession]:
        """Spawn the canvas and attach to it for the duration of the block.

        Raises:
            ScenarioNotFoundError, TmuxRequiredError, SpawnFailure,
            CanvasConnectError
        """
        definition, invocation = self.prepare(kind, scenario, config, invocation_id=invocation_id)
        spawned = await spawn_canvas(invocation, manager=self.manager, settings=self.settings)

        client = CanvasIPCClient(
            invocation.socket_path,
            connect_timeout_s=self.settings.connect_timeout_s,
            poll_interval_s=self.settings.connect_poll_interval_s,
        )
        await client.connect()
        try:
            yield CanvasSession(invocation=invocation, scenario=definition, client=client, spawn=spawned)
        finally:
            await client.close()

    async def show(
        self,
        kind: CanvasKind | str,
        scenario: str,
        config: Optional[dict[str, Any]] = None,
        *,
        invocation_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CanvasOutcome:
        """Show a canvas and wait for its single outcome.

        timeout defaults to the outcome_timeout_s setting (None waits forever).
        A timeout or a vanished canvas is reported in the outcome status; only
        status "selected" means the user picked something.
        """
        if timeout is None:
            timeout = self.settings.outcome_timeout_s
        async with self.open(kind, scenario, config, invocation_id=invocation_id) as session:
            outcome = await session.wait(timeout)
        logger.info("Canvas %s finished: %s", session.invocation.id, outcome.status.value)
        return outcome
