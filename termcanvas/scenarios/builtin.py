"""Built-in scenarios registered at import time."""

from __future__ import annotations

from typing import Any

from termcanvas.scenarios.types import CanvasKind, CloseOn, InteractionMode, ScenarioDefinition

_CHART_DEFAULTS = {"showLegend": True, "showValues": True, "showGrid": True}
_JSON_DEFAULTS = {"expandDepth": 2, "showPath": True, "showTypes": True}
_KANBAN_DEFAULTS = {"showDescription": True, "showLabels": True, "showCardCount": True}
_TABLE_SELECT_DEFAULTS = {"showRowNumbers": True, "emptyMessage": "No data to select from"}


def _view(kind: CanvasKind, name: str, description: str, defaults: dict[str, Any]) -> ScenarioDefinition:
    return ScenarioDefinition(
        name=name,
        canvas_kind=kind,
        description=description,
        interaction_mode=InteractionMode.VIEW_ONLY,
        close_on=CloseOn.ESCAPE,
        default_config=defaults,
    )


def _select(kind: CanvasKind, name: str, description: str, defaults: dict[str, Any]) -> ScenarioDefinition:
    return ScenarioDefinition(
        name=name,
        canvas_kind=kind,
        description=description,
        interaction_mode=InteractionMode.SELECTION,
        close_on=CloseOn.SELECTION,
        default_config=defaults,
    )


def builtin_scenarios() -> list[ScenarioDefinition]:
    """Fresh list of built-in definitions."""
    return [
        _view(CanvasKind.CHART, "display", "Read-only chart display for data visualization", _CHART_DEFAULTS),
        _select(CanvasKind.CHART, "select", "Select data points from the chart", _CHART_DEFAULTS),
        _view(CanvasKind.JSON, "explore", "Interactive JSON tree explorer with expand/collapse", _JSON_DEFAULTS),
        _select(CanvasKind.JSON, "select", "Select a value or path from the JSON tree", _JSON_DEFAULTS),
        _view(CanvasKind.KANBAN, "display", "View-only Kanban board display", _KANBAN_DEFAULTS),
        _select(CanvasKind.KANBAN, "select", "Select a card from the Kanban board", _KANBAN_DEFAULTS),
        _select(
            CanvasKind.KANBAN,
            "manage",
            "Move cards between columns on the Kanban board",
            {**_KANBAN_DEFAULTS, "showWipLimit": True},
        ),
        _view(
            CanvasKind.TABLE,
            "display",
            "Read-only table display for viewing tabular data",
            {"showRowNumbers": True, "emptyMessage": "No data to display"},
        ),
        _select(CanvasKind.TABLE, "select", "Select a single row from the table", _TABLE_SELECT_DEFAULTS),
        ScenarioDefinition(
            name="multi-select",
            canvas_kind=CanvasKind.TABLE,
            description="Select multiple rows from the table",
            interaction_mode=InteractionMode.MULTI_SELECT,
            close_on=CloseOn.COMMAND,
            default_config=_TABLE_SELECT_DEFAULTS,
        ),
        _view(
            CanvasKind.WEATHER,
            "display",
            "Display current weather and forecast for a location",
            {
                "location": {
                    "name": "New York",
                    "latitude": 40.7128,
                    "longitude": -74.006,
                    "timezone": "America/New_York",
                },
                "units": "fahrenheit",
            },
        ),
        _view(
            CanvasKind.ZMANIM,
            "display",
            "Display Jewish halachic times for a date and location",
            {
                "location": {
                    "name": "Jerusalem",
                    "latitude": 31.7683,
                    "longitude": 35.2137,
                    "timezone": "Asia/Jerusalem",
                },
                "times": [],
            },
        ),
    ]
