"""Unit tests for InteractionController rules."""

from unittest.mock import Mock

import pytest

from termcanvas.canvas.interaction import InteractionController, LocalEmitter
from termcanvas.scenarios import get_scenario

pytestmark = [pytest.mark.unit]

TABLE = {
    "columns": [{"key": "name", "label": "Name"}],
    "rows": [{"name": "alpha"}, {"name": "beta"}, {"name": "gamma"}, {"name": "delta"}],
}
KANBAN = {
    "columns": [
        {"id": "todo", "title": "To Do", "cards": [{"id": "c1", "title": "Write docs"}]},
        {"id": "done", "title": "Done", "cards": [{"id": "c2", "title": "Ship"}]},
    ]
}


def _controller(kind: str, name: str, config: dict, **kwargs) -> tuple[InteractionController, Mock]:
    emitter = Mock()
    return InteractionController(get_scenario(kind, name), config, emitter, **kwargs), emitter


def test_selection_commit_emits_one_selected_and_terminates():
    controller, emitter = _controller("table", "select", TABLE)

    controller.move(1)
    assert controller.commit() is True

    emitter.send_selected.assert_called_once_with({"selectedRows": [{"index": 1, "data": {"name": "beta"}}]})
    assert controller.terminated is True


def test_operations_after_termination_are_no_ops():
    controller, emitter = _controller("table", "select", TABLE)
    controller.commit()

    controller.move(2)
    assert controller.commit() is False
    assert controller.quit() is False
    controller.apply_update({"rows": []})

    assert controller.cursor == 0
    assert len(controller.items) == 4
    emitter.send_selected.assert_called_once()
    emitter.send_cancelled.assert_not_called()


def test_multi_select_three_toggles_then_confirm():
    controller, emitter = _controller("table", "multi-select", TABLE)

    controller.move(3)
    controller.toggle()
    controller.move(-3)
    controller.toggle()
    controller.move(2)
    controller.toggle()
    emitter.send_selected.assert_not_called()

    assert controller.confirm() is True

    emitter.send_selected.assert_called_once()
    rows = emitter.send_selected.call_args.args[0]["selectedRows"]
    assert [row["index"] for row in rows] == [0, 2, 3]
    assert rows[2]["data"] == {"name": "delta"}


def test_multi_select_commit_confirms_the_toggled_set():
    controller, emitter = _controller("table", "multi-select", TABLE)

    controller.toggle()
    controller.move(2)
    controller.toggle()

    assert controller.commit() is True
    emitter.send_selected.assert_called_once_with(
        {"selectedRows": [{"index": 0, "data": {"name": "alpha"}}, {"index": 2, "data": {"name": "gamma"}}]}
    )
    assert controller.terminated is True


def test_multi_select_preset_from_config():
    controller, _ = _controller("table", "multi-select", {**TABLE, "selectedRows": [1, 3, 99]})

    assert controller.selected == {1, 3}


def test_view_only_never_selects_and_quit_cancels():
    controller, emitter = _controller("table", "display", TABLE)

    assert controller.commit() is False
    controller.toggle()
    assert controller.confirm() is False
    assert controller.selection_snapshot() is None
    emitter.send_selected.assert_not_called()

    assert controller.quit() is True
    emitter.send_cancelled.assert_called_once_with("user cancelled")


def test_empty_items_commit_is_ignored_but_quit_cancels():
    controller, emitter = _controller("table", "select", {"rows": []})

    assert controller.commit() is False
    assert controller.terminated is False
    controller.quit("user cancelled")
    emitter.send_cancelled.assert_called_once()


def test_kanban_payloads():
    select, select_emitter = _controller("kanban", "select", KANBAN)
    select.move(1)
    select.commit()
    assert select_emitter.send_selected.call_args.args[0] == {"card": {"id": "c2", "title": "Ship"}, "columnId": "done"}

    manage, manage_emitter = _controller("kanban", "manage", KANBAN)
    manage.commit()
    assert manage_emitter.send_selected.call_args.args[0]["action"] == "move"


def test_chart_payload():
    config = {"series": [{"name": "sales", "data": [{"label": "Q1", "value": 10}, {"label": "Q2", "value": 12}]}]}
    controller, emitter = _controller("chart", "select", config)

    controller.move(1)
    controller.commit()

    emitter.send_selected.assert_called_once_with({"series": "sales", "label": "Q2", "value": 12, "index": 1})


def test_json_payload():
    controller, emitter = _controller("json", "select", {"data": {"users": [{"name": "Ada"}]}})

    controller.commit()

    emitter.send_selected.assert_called_once_with({"path": "users[0].name", "value": "Ada"})


def test_apply_update_replaces_config_and_resets_navigation():
    controller, _ = _controller("table", "multi-select", TABLE, page_size=2)
    controller.move(3)
    controller.toggle()
    assert controller.offset == 2

    controller.apply_update({"rows": [{"name": "x"}, {"name": "y"}], "selectedRows": [1]})

    assert controller.cursor == 0
    assert controller.offset == 0
    assert controller.selected == {1}
    assert [item.value for item in controller.items] == [{"name": "x"}, {"name": "y"}]
    assert "columns" not in controller.config


def test_move_and_page_clamp_and_scroll():
    rows = {"rows": [{"n": i} for i in range(25)]}
    controller, _ = _controller("table", "select", rows, page_size=10)

    controller.move(-5)
    assert controller.cursor == 0
    controller.page(1)
    assert (controller.cursor, controller.offset) == (10, 1)
    controller.page(5)
    assert (controller.cursor, controller.offset) == (24, 15)
    controller.page(-1)
    assert (controller.cursor, controller.offset) == (14, 14)
    assert len(controller.visible()) == 10


def test_selection_snapshot_matches_commit_shape():
    controller, _ = _controller("table", "multi-select", TABLE)
    controller.toggle()

    assert controller.selection_snapshot() == {"selectedRows": [{"index": 0, "data": {"name": "alpha"}}]}
    assert controller.terminated is False


def test_close_ends_without_emitting():
    controller, emitter = _controller("table", "select", TABLE)

    controller.close()

    assert controller.commit() is False
    emitter.send_selected.assert_not_called()
    emitter.send_cancelled.assert_not_called()


def test_local_emitter_keeps_first_outcome():
    emitter = LocalEmitter()

    assert emitter.send_selected({"a": 1}) is True
    assert emitter.send_cancelled("late") is False
    assert emitter.selected == {"a": 1}
    assert emitter.cancelled is None


@pytest.mark.parametrize("name", ["select", "display"])
def test_quit_reason_is_forwarded(name):
    controller, emitter = _controller("table", name, TABLE)

    controller.quit("escape")

    emitter.send_cancelled.assert_called_once_with("escape")
