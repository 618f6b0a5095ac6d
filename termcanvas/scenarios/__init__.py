"""Scenario registry populated once with the built-in scenarios.

    from termcanvas.scenarios import get_scenario
    get_scenario("table", "multi-select")
"""

from __future__ import annotations

from termcanvas.scenarios.builtin import builtin_scenarios
from termcanvas.scenarios.registry import ScenarioRegistry, merge_config
from termcanvas.scenarios.types import CanvasKind, CloseOn, InteractionMode, ScenarioDefinition

registry = ScenarioRegistry(builtin_scenarios())


def get_scenario(kind: CanvasKind | str, name: str) -> ScenarioDefinition | None:
    return registry.lookup(kind, name)


def list_scenarios(kind: CanvasKind | str | None = None) -> list[ScenarioDefinition]:
    return registry.list(kind)


def register_scenario(definition: ScenarioDefinition) -> None:
    registry.register(definition)


__all__ = [
    "CanvasKind",
    "CloseOn",
    "InteractionMode",
    "ScenarioDefinition",
    "ScenarioRegistry",
    "get_scenario",
    "list_scenarios",
    "merge_config",
    "register_scenario",
    "registry",
]
