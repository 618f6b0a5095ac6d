"""Unit tests for per-kind item extraction."""

import pytest

from termcanvas.canvas.items import extract_items, json_path
from termcanvas.scenarios.types import CanvasKind

pytestmark = [pytest.mark.unit]


def test_table_rows_follow_column_order_and_skip_non_objects():
    config = {
        "columns": [{"key": "b", "label": "B"}, {"key": "a", "label": "A"}],
        "rows": [{"a": 1, "b": True}, "junk", {"a": None, "b": "x"}],
    }

    items = extract_items(CanvasKind.TABLE, config)

    assert [item.index for item in items] == [0, 2]
    assert items[0].label == "✓ │ 1"
    assert items[1].label == "x │ "


def test_kanban_cards_carry_column_id():
    config = {"columns": [{"id": "todo", "title": "To Do", "cards": [{"id": "1", "title": "A"}, {"id": "2"}]}]}

    items = extract_items(CanvasKind.KANBAN, config)

    assert [item.label for item in items] == ["[To Do] A", "[To Do] 2"]
    assert items[1].value == {"card": {"id": "2"}, "columnId": "todo"}


def test_chart_points_are_series_major():
    config = {
        "series": [
            {"name": "a", "data": [{"label": "x", "value": 1}]},
            {"name": "b", "data": [{"label": "x", "value": 2}, {"label": "y", "value": 3}]},
        ]
    }

    items = extract_items(CanvasKind.CHART, config)

    assert [(i.value["series"], i.value["index"]) for i in items] == [("a", 0), ("b", 0), ("b", 1)]


def test_json_leaves_include_empty_containers():
    items = extract_items(CanvasKind.JSON, {"data": {"a": {}, "b": [1, None], "weird key": "v"}})

    assert [item.value["path"] for item in items] == ["a", "b[0]", "b[1]", '["weird key"]']


def test_json_path_root_and_identifiers():
    assert json_path([]) == "$"
    assert json_path(["users", 0, "name"]) == "users[0].name"
    assert json_path(["1st"]) == '["1st"]'


def test_json_without_data_has_no_items():
    assert extract_items(CanvasKind.JSON, {"expandDepth": 2}) == []


def test_view_only_kinds_produce_rows():
    weather = extract_items(
        CanvasKind.WEATHER,
        {
            "location": {"name": "Oslo"},
            "units": "celsius",
            "forecast": [{"date": "2024-01-01", "tempMin": -3, "tempMax": 1}],
        },
    )
    zmanim = extract_items(CanvasKind.ZMANIM, {"times": [{"id": "sunrise", "name": "Sunrise", "time": "06:40"}]})

    assert [item.label for item in weather] == ["Oslo", "2024-01-01: -3°C / 1°C"]
    assert zmanim[0].label == "06:40  Sunrise"
