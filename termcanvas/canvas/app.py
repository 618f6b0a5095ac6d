"""Textual app that runs one canvas invocation inside the canvas pane.

Launched by the host through `termcanvas show`. Lists the selectable items of
the canvas kind, forwards keys to the InteractionController and serves the
invocation socket. The app exits as soon as the invocation is over: after a
selection, after the user quits, or immediately when the host sends close.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Label, Static

from termcanvas.canvas.interaction import InteractionController, LocalEmitter, OutcomeEmitter
from termcanvas.ipc.server import CanvasIPCServer
from termcanvas.scenarios.types import InteractionMode, ScenarioDefinition

logger = logging.getLogger(__name__)

_HINTS = {
    InteractionMode.VIEW_ONLY: "↑↓ move  PgUp/PgDn page  q/Esc close",
    InteractionMode.SELECTION: "↑↓ move  Enter select  q/Esc cancel",
    InteractionMode.MULTI_SELECT: "↑↓ move  Space toggle  Enter confirm  q/Esc cancel",
}


class CanvasApp(App[None]):
    """Generic item list for every canvas kind.

    Without a socket path the outcome stays in-process (LocalEmitter), which
    is how `termcanvas show` behaves when run by hand.
    """

    BINDINGS = [
        Binding("escape", "quit_canvas", "Cancel", priority=True),
        Binding("ctrl+c", "interrupt", "Cancel", show=False, priority=True),
        Binding("q", "quit_canvas", "Cancel"),
        Binding("up,k", "move(-1)", "Up", show=False),
        Binding("down,j", "move(1)", "Down", show=False),
        Binding("pageup", "page(-1)", "Page up", show=False),
        Binding("pagedown", "page(1)", "Page down", show=False),
        Binding("space", "toggle", "Toggle"),
        Binding("enter", "commit", "Select"),
        Binding("c,ctrl+enter", "confirm", "Confirm"),
    ]

    CSS = """
    #canvas-title {
        height: 1;
        background: $surface;
        color: $text;
        padding: 0 1;
    }
    #canvas-body {
        height: 1fr;
        padding: 0 1;
    }
    #canvas-hints {
        height: 1;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        scenario: ScenarioDefinition,
        config: Mapping[str, Any],
        *,
        socket_path: Path | str | None = None,
        page_size: int = 10,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.scenario = scenario
        self.server: CanvasIPCServer | None = None
        self.local: LocalEmitter | None = None
        emitter: OutcomeEmitter
        if socket_path is not None:
            self.server = CanvasIPCServer(
                socket_path,
                scenario=scenario.name,
                on_close=self._on_host_close,
                selection_provider=self._selection_snapshot,
            )
            emitter = self.server
        else:
            self.local = LocalEmitter()
            emitter = self.local
        self.controller = InteractionController(scenario, config, emitter, page_size=page_size)

    def compose(self) -> ComposeResult:
        yield Label(self._title(), id="canvas-title")
        yield Static(id="canvas-body")
        yield Label(_HINTS[self.scenario.interaction_mode], id="canvas-hints")

    async def on_mount(self) -> None:
        if self.server is not None:
            await self.server.start()
            self.run_worker(self._consume_updates(), name="canvas-updates", group="ipc", exclusive=True)
        self._refresh_view()

    async def on_unmount(self) -> None:
        if self.server is not None:
            await self.server.stop()

    async def _consume_updates(self) -> None:
        assert self.server is not None
        while True:
            config = await self.server.next_update()
            self.controller.apply_update(config)
            self.query_one("#canvas-title", Label).update(self._title())
            self._refresh_view()

    def _selection_snapshot(self) -> dict[str, Any] | None:
        return self.controller.selection_snapshot()

    def _on_host_close(self) -> None:
        """Host said close: leave now, whatever is on screen."""
        self.controller.close()
        self.exit()

    def _title(self) -> str:
        title = self.controller.config.get("title")
        return f" {title or self.scenario.canvas_kind.value} [{self.scenario.name}]"

    def _render_items(self) -> Text:
        controller = self.controller
        if not controller.items:
            return Text(str(controller.config.get("emptyMessage", "Nothing to display")), style="dim")

        text = Text()
        for position, item in enumerate(controller.visible(), start=controller.offset):
            highlighted = position == controller.cursor
            prefix = "▸ " if highlighted else "  "
            if controller.mode is InteractionMode.MULTI_SELECT:
                prefix += "[x] " if position in controller.selected else "[ ] "
            style = "reverse" if highlighted and controller.mode is not InteractionMode.VIEW_ONLY else ""
            text.append(prefix + item.label + "\n", style=style)
        return text

    def _refresh_view(self) -> None:
        self.query_one("#canvas-body", Static).update(self._render_items())

    async def _finish(self) -> None:
        if self.server is not None:
            await self.server.stop()
        self.exit()

    def action_move(self, delta: int) -> None:
        self.controller.move(delta)
        self._refresh_view()

    def action_page(self, delta: int) -> None:
        self.controller.page(delta)
        self._refresh_view()

    def action_toggle(self) -> None:
        self.controller.toggle()
        self._refresh_view()

    async def action_commit(self) -> None:
        if self.controller.commit():
            await self._finish()
        else:
            self._refresh_view()

    async def action_confirm(self) -> None:
        if self.controller.confirm():
            await self._finish()

    async def action_quit_canvas(self) -> None:
        self.controller.quit()
        await self._finish()

    async def action_interrupt(self) -> None:
        """C-c from the pane manager before it reuses the pane."""
        self.controller.quit("interrupted")
        await self._finish()
