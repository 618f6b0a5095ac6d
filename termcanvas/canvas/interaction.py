"""Interaction rules shared by every canvas kind.

The controller owns navigation state (cursor, scroll offset, multi-select
set) and decides when the invocation ends. It emits at most one terminal
outcome through its emitter; once terminated, every operation is a no-op.

    view-only     commit/toggle/confirm ignored; quit cancels
    selection     commit selects the highlighted item and ends
    multi-select  commit/toggle flip the highlighted item; confirm ends
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from termcanvas.canvas.items import CanvasItem, extract_items
from termcanvas.scenarios.types import CanvasKind, InteractionMode, ScenarioDefinition

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class OutcomeEmitter(Protocol):
    def send_selected(self, data: dict[str, Any]) -> bool: ...

    def send_cancelled(self, reason: str = ...) -> bool: ...


class LocalEmitter:
    """Records the outcome in-process when no host is attached."""

    def __init__(self) -> None:
        self.selected: dict[str, Any] | None = None
        self.cancelled: str | None = None

    @property
    def done(self) -> bool:
        return self.selected is not None or self.cancelled is not None

    def send_selected(self, data: dict[str, Any]) -> bool:
        if self.done:
            return False
        self.selected = data
        return True

    def send_cancelled(self, reason: str = "user cancelled") -> bool:
        if self.done:
            return False
        self.cancelled = reason
        return True


class InteractionController:
    """Cursor, selection and termination state for one canvas invocation."""

    def __init__(
        self,
        scenario: ScenarioDefinition,
        config: Mapping[str, Any],
        emitter: OutcomeEmitter,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.scenario = scenario
        self.emitter = emitter
        self.page_size = max(1, page_size)
        self.config: dict[str, Any] = {}
        self.items: list[CanvasItem] = []
        self.cursor = 0
        self.offset = 0
        self.selected: set[int] = set()
        self.terminated = False
        self._reset(config)

    @property
    def mode(self) -> InteractionMode:
        return self.scenario.interaction_mode

    @property
    def kind(self) -> CanvasKind:
        return self.scenario.canvas_kind

    @property
    def current(self) -> CanvasItem | None:
        if not self.items:
            return None
        return self.items[self.cursor]

    def visible(self) -> list[CanvasItem]:
        return self.items[self.offset : self.offset + self.page_size]

    def _reset(self, config: Mapping[str, Any]) -> None:
        self.config = dict(config)
        self.items = extract_items(self.kind, self.config)
        self.cursor = 0
        self.offset = 0
        self.selected = set()
        if self.mode is InteractionMode.MULTI_SELECT:
            preset = self.config.get("selectedRows", self.config.get("selected", []))
            if isinstance(preset, list):
                wanted = {i for i in preset if isinstance(i, int)}
                self.selected = {pos for pos, item in enumerate(self.items) if item.index in wanted}

    def _clamp(self, position: int) -> None:
        if not self.items:
            self.cursor = self.offset = 0
            return
        self.cursor = min(max(position, 0), len(self.items) - 1)
        if self.cursor < self.offset:
            self.offset = self.cursor
        elif self.cursor >= self.offset + self.page_size:
            self.offset = self.cursor - self.page_size + 1

    def move(self, delta: int) -> None:
        if self.terminated:
            return
        self._clamp(self.cursor + delta)

    def page(self, delta: int) -> None:
        if self.terminated:
            return
        self._clamp(self.cursor + delta * self.page_size)

    def toggle(self) -> None:
        if self.terminated or self.mode is not InteractionMode.MULTI_SELECT or not self.items:
            return
        self.selected ^= {self.cursor}

    def commit(self) -> bool:
        """Enter on the highlighted item. True if this ended the invocation."""
        if self.terminated:
            return False
        if self.mode is InteractionMode.MULTI_SELECT:
            return self.confirm()
        if self.mode is InteractionMode.VIEW_ONLY or self.current is None:
            return False
        return self._finish_selected(self._payload([self.current]))

    def confirm(self) -> bool:
        """Submit a multi-select set (sorted). Single selection treats it as commit."""
        if self.terminated:
            return False
        if self.mode is InteractionMode.SELECTION:
            return self.commit()
        if self.mode is not InteractionMode.MULTI_SELECT or not self.items:
            return False
        return self._finish_selected(self._payload([self.items[i] for i in sorted(self.selected)]))

    def quit(self, reason: str = "user cancelled") -> bool:
        if self.terminated:
            return False
        self.terminated = True
        self.emitter.send_cancelled(reason)
        logger.info("Canvas %s:%s cancelled (%s)", self.kind.value, self.scenario.name, reason)
        return True

    def close(self) -> None:
        """Host-initiated end: nothing is emitted."""
        self.terminated = True

    def apply_update(self, config: Mapping[str, Any]) -> None:
        """Replace the live config wholesale and reset navigation."""
        if self.terminated:
            return
        self._reset(config)
        logger.debug("Canvas config replaced, %d items", len(self.items))

    def selection_snapshot(self) -> dict[str, Any] | None:
        """Current uncommitted selection, in the same shape a commit would send."""
        if self.mode is InteractionMode.VIEW_ONLY:
            return None
        if self.mode is InteractionMode.MULTI_SELECT:
            return self._payload([self.items[i] for i in sorted(self.selected)])
        if self.current is None:
            return None
        return self._payload([self.current])

    def _finish_selected(self, payload: dict[str, Any]) -> bool:
        self.terminated = True
        self.emitter.send_selected(payload)
        logger.info("Canvas %s:%s selected", self.kind.value, self.scenario.name)
        return True

    def _payload(self, items: list[CanvasItem]) -> dict[str, Any]:
        if self.kind is CanvasKind.TABLE:
            return {"selectedRows": [{"index": item.index, "data": item.value} for item in items]}
        if not items:
            return {"selected": []}
        if len(items) > 1:
            return {"selected": [item.value for item in items]}

        item = items[0]
        payload = dict(item.value) if isinstance(item.value, dict) else {"value": item.value}
        if self.kind is CanvasKind.KANBAN and self.scenario.name == "manage":
            payload["action"] = "move"
        return payload
