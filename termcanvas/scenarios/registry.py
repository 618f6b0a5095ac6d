"""Scenario registry - central lookup for all scenarios."""

from __future__ import annotations

import copy
import logging
from datetime import date
from typing import Any, Iterable, Mapping

from termcanvas.errors import ScenarioNotFoundError
from termcanvas.scenarios.types import CanvasKind, ScenarioDefinition
from termcanvas.utils import shallow_merge

logger = logging.getLogger(__name__)


class ScenarioRegistry:
    """In-memory table keyed by (canvas kind, scenario name).

    Lookups are exact; there is no default scenario. Registering an existing
    key replaces the previous definition.
    """

    def __init__(self, definitions: Iterable[ScenarioDefinition] = ()) -> None:
        self._scenarios: dict[tuple[CanvasKind, str], ScenarioDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ScenarioDefinition) -> None:
        if definition.key in self._scenarios:
            logger.debug("Replacing scenario %s:%s", definition.canvas_kind.value, definition.name)
        self._scenarios[definition.key] = definition

    def lookup(self, kind: CanvasKind | str, name: str) -> ScenarioDefinition | None:
        try:
            canvas_kind = CanvasKind.parse(kind, name)
        except ScenarioNotFoundError:
            return None
        return self._scenarios.get((canvas_kind, name))

    def require(self, kind: CanvasKind | str, name: str) -> ScenarioDefinition:
        """Like lookup, but an unknown pair raises ScenarioNotFoundError."""
        definition = self.lookup(kind, name)
        if definition is None:
            raise ScenarioNotFoundError(kind.value if isinstance(kind, CanvasKind) else kind, name)
        return definition

    def list(self, kind: CanvasKind | str | None = None) -> list[ScenarioDefinition]:
        if kind is None:
            return list(self._scenarios.values())
        try:
            canvas_kind = CanvasKind.parse(kind)
        except ScenarioNotFoundError:
            return []
        return [d for (k, _), d in self._scenarios.items() if k is canvas_kind]

    def __len__(self) -> int:
        return len(self._scenarios)


def merge_config(definition: ScenarioDefinition, overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Scenario defaults overlaid by the caller's config (caller wins).

    Zmanim without a date shows today, taken at merge time so a long-running
    host does not keep the date it started on.
    """
    merged = shallow_merge(copy.deepcopy(dict(definition.default_config)), overrides)
    if definition.canvas_kind is CanvasKind.ZMANIM and not merged.get("date"):
        merged["date"] = date.today().isoformat()
    return merged
