"""Scenario definition types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from termcanvas.errors import ScenarioNotFoundError


class CanvasKind(str, Enum):
    CHART = "chart"
    JSON = "json"
    KANBAN = "kanban"
    TABLE = "table"
    WEATHER = "weather"
    ZMANIM = "zmanim"

    @classmethod
    def parse(cls, value: "str | CanvasKind", scenario: str = "") -> "CanvasKind":
        """Parse a kind string; unknown kinds are a scenario lookup failure."""
        if isinstance(value, CanvasKind):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ScenarioNotFoundError(value, scenario) from None


class InteractionMode(str, Enum):
    VIEW_ONLY = "view-only"
    SELECTION = "selection"
    MULTI_SELECT = "multi-select"


class CloseOn(str, Enum):
    ESCAPE = "escape"
    SELECTION = "selection"
    COMMAND = "command"  # explicit confirm after a multi-select


def _frozen(config: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(config))


@dataclass(frozen=True)
class ScenarioDefinition:
    """Named interaction contract for one canvas kind."""

    name: str
    canvas_kind: CanvasKind
    description: str
    interaction_mode: InteractionMode
    close_on: CloseOn
    default_config: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_config", _frozen(self.default_config))

    @property
    def key(self) -> tuple[CanvasKind, str]:
        return (self.canvas_kind, self.name)

    @property
    def allows_selection(self) -> bool:
        return self.interaction_mode is not InteractionMode.VIEW_ONLY

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "canvasKind": self.canvas_kind.value,
            "description": self.description,
            "interactionMode": self.interaction_mode.value,
            "closeOn": self.close_on.value,
            "defaultConfig": dict(self.default_config),
        }
