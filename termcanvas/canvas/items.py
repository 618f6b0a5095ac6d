"""Selectable items derived from a canvas config, one extractor per kind.

Items are the unit the cursor moves over. Each carries the display label
and the raw value its selection payload is built from. Malformed parts of a
config (a row that is not an object, a series without data) are skipped
rather than rejected, since configs arrive from a host we do not control.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from termcanvas.scenarios.types import CanvasKind

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True)
class CanvasItem:
    index: int
    label: str
    value: Any = None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "✓" if value else "✗"
    return str(value)


def table_items(config: Mapping[str, Any]) -> list[CanvasItem]:
    rows = _as_list(config.get("rows"))
    keys = [c["key"] for c in _as_list(config.get("columns")) if isinstance(c, dict) and "key" in c]
    items = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            continue
        cells = [row.get(k) for k in keys] if keys else list(row.values())
        items.append(CanvasItem(index=index, label=" │ ".join(_format_cell(c) for c in cells), value=row))
    return items


def kanban_items(config: Mapping[str, Any]) -> list[CanvasItem]:
    items: list[CanvasItem] = []
    for column in _as_list(config.get("columns")):
        if not isinstance(column, dict):
            continue
        column_title = column.get("title") or column.get("id", "")
        for card in _as_list(column.get("cards")):
            if not isinstance(card, dict):
                continue
            items.append(
                CanvasItem(
                    index=len(items),
                    label=f"[{column_title}] {card.get('title', card.get('id', ''))}",
                    value={"card": card, "columnId": column.get("id")},
                )
            )
    return items


def chart_items(config: Mapping[str, Any]) -> list[CanvasItem]:
    """One item per data point, series-major."""
    items: list[CanvasItem] = []
    for series in _as_list(config.get("series")):
        if not isinstance(series, dict):
            continue
        name = series.get("name", "")
        for point_index, point in enumerate(_as_list(series.get("data"))):
            if not isinstance(point, dict):
                continue
            label = point.get("label", "")
            value = point.get("value")
            items.append(
                CanvasItem(
                    index=len(items),
                    label=f"{name}: {label} = {value}",
                    value={"series": name, "label": label, "value": value, "index": point_index},
                )
            )
    return items


def json_path(path: list[str | int]) -> str:
    """Render a key path as `users[0].name`; the root is `$`."""
    if not path:
        return "$"
    result = ""
    for position, key in enumerate(path):
        if isinstance(key, int):
            result += f"[{key}]"
        elif _IDENTIFIER.match(key):
            result += key if position == 0 else f".{key}"
        else:
            result += f'["{key}"]'
    return result


def _json_leaves(value: Any, path: list[str | int]) -> list[tuple[list[str | int], Any]]:
    if isinstance(value, dict) and value:
        leaves = []
        for key, child in value.items():
            leaves += _json_leaves(child, path + [str(key)])
        return leaves
    if isinstance(value, list) and value:
        leaves = []
        for index, child in enumerate(value):
            leaves += _json_leaves(child, path + [index])
        return leaves
    return [(path, value)]


def json_items(config: Mapping[str, Any]) -> list[CanvasItem]:
    if "data" not in config:
        return []
    items = []
    for index, (path, value) in enumerate(_json_leaves(config["data"], [])):
        rendered = json_path(path)
        items.append(CanvasItem(index=index, label=f"{rendered} = {value!r}", value={"path": rendered, "value": value}))
    return items


def weather_items(config: Mapping[str, Any]) -> list[CanvasItem]:
    units = "°F" if config.get("units", "fahrenheit") == "fahrenheit" else "°C"
    location = config.get("location")
    rows = []
    if isinstance(location, dict) and location.get("name"):
        rows.append(str(location["name"]))
    current = config.get("current")
    if isinstance(current, dict):
        rows.append(
            f"Now {current.get('temperature')}{units}, wind {current.get('windSpeed')}, "
            f"humidity {current.get('humidity')}%"
        )
    for day in _as_list(config.get("forecast")):
        if isinstance(day, dict):
            rows.append(f"{day.get('date')}: {day.get('tempMin')}{units} / {day.get('tempMax')}{units}")
    return [CanvasItem(index=i, label=row) for i, row in enumerate(rows)]


def zmanim_items(config: Mapping[str, Any]) -> list[CanvasItem]:
    rows = []
    for zman in _as_list(config.get("times")):
        if not isinstance(zman, dict):
            continue
        marker = " (passed)" if zman.get("passed") else ""
        rows.append(f"{zman.get('time', '--:--')}  {zman.get('name', zman.get('id', ''))}{marker}")
    return [CanvasItem(index=i, label=row, value=None) for i, row in enumerate(rows)]


EXTRACTORS: dict[CanvasKind, Callable[[Mapping[str, Any]], list[CanvasItem]]] = {
    CanvasKind.CHART: chart_items,
    CanvasKind.JSON: json_items,
    CanvasKind.KANBAN: kanban_items,
    CanvasKind.TABLE: table_items,
    CanvasKind.WEATHER: weather_items,
    CanvasKind.ZMANIM: zmanim_items,
}


def extract_items(kind: CanvasKind, config: Mapping[str, Any]) -> list[CanvasItem]:
    return EXTRACTORS[kind](config)
