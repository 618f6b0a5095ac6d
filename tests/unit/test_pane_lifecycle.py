"""Unit tests for PaneLifecycleManager reuse/create decisions."""

from unittest.mock import AsyncMock, Mock

import pytest

from termcanvas.core.pane_lifecycle import PaneLifecycleManager
from termcanvas.core.pane_registry import MemoryPaneStore, PaneRegistry
from termcanvas.core.tmux import TmuxResult, TmuxRunner
from termcanvas.errors import SpawnFailure

pytestmark = [pytest.mark.unit]

OK = TmuxResult(returncode=0, stdout="")


def _manager(stored: str, *results: TmuxResult) -> tuple[PaneLifecycleManager, Mock, MemoryPaneStore]:
    tmux = Mock(spec=TmuxRunner)
    tmux.run = AsyncMock(side_effect=list(results))
    store = MemoryPaneStore(stored)
    manager = PaneLifecycleManager(PaneRegistry(store, tmux), tmux, settle_delay_s=0)
    return manager, tmux, store


def _subcommands(tmux: Mock) -> list[str]:
    return [call.args[0] for call in tmux.run.await_args_list]


@pytest.mark.asyncio
async def test_run_creates_pane_when_none_recorded():
    manager, tmux, store = _manager("", TmuxResult(returncode=0, stdout="%9\n"))

    result = await manager.run("termcanvas show table")

    assert result.reused is False
    assert result.pane_id == "%9"
    assert result.method == "tmux"
    assert store.value == "%9"
    tmux.run.assert_awaited_once_with(
        "split-window", "-h", "-p", "50", "-P", "-F", "#{pane_id}", "termcanvas show table"
    )


@pytest.mark.asyncio
async def test_run_reuses_live_pane():
    manager, tmux, store = _manager(
        "%4",
        TmuxResult(returncode=0, stdout="%4"),  # verify
        OK,  # C-c
        OK,  # clear && command
    )

    result = await manager.run("termcanvas show chart")

    assert result.reused is True
    assert result.pane_id == "%4"
    assert tmux.run.await_args_list[1].args == ("send-keys", "-t", "%4", "C-c")
    assert tmux.run.await_args_list[2].args == ("send-keys", "-t", "%4", "clear && termcanvas show chart", "Enter")
    assert store.value == "%4"


@pytest.mark.asyncio
async def test_reuse_failure_falls_through_to_create_without_retry():
    manager, tmux, store = _manager(
        "%4",
        TmuxResult(returncode=0, stdout="%4"),  # verify
        OK,  # C-c
        TmuxResult(returncode=1, stdout="", stderr="pane dead"),  # inject fails
        TmuxResult(returncode=0, stdout="%8"),  # split-window
    )

    result = await manager.run("cmd")

    assert result.reused is False
    assert result.pane_id == "%8"
    assert store.value == "%8"
    assert _subcommands(tmux) == ["display-message", "send-keys", "send-keys", "split-window"]


@pytest.mark.asyncio
async def test_interrupt_failure_skips_inject():
    manager, tmux, _ = _manager(
        "%4",
        TmuxResult(returncode=0, stdout="%4"),
        TmuxResult(returncode=1, stdout=""),  # C-c fails
        TmuxResult(returncode=0, stdout="%5"),
    )

    result = await manager.run("cmd")

    assert result.pane_id == "%5"
    assert _subcommands(tmux) == ["display-message", "send-keys", "split-window"]


@pytest.mark.asyncio
async def test_stale_pane_goes_straight_to_create():
    manager, tmux, store = _manager(
        "%4",
        TmuxResult(returncode=0, stdout="%11"),  # recycled slot answers with another id
        TmuxResult(returncode=0, stdout="%6"),
    )

    result = await manager.run("cmd")

    assert result.pane_id == "%6"
    assert _subcommands(tmux) == ["display-message", "split-window"]
    assert store.value == "%6"


@pytest.mark.asyncio
async def test_create_failure_raises_spawn_failure_and_leaves_store_clear():
    manager, _, store = _manager(
        "%4",
        TmuxResult(returncode=1, stdout=""),  # verify fails
        TmuxResult(returncode=1, stdout="", stderr="no space for new pane"),
    )

    with pytest.raises(SpawnFailure) as exc_info:
        await manager.run("cmd")

    assert exc_info.value.method == "tmux"
    assert store.value == ""


@pytest.mark.asyncio
async def test_create_without_reported_id_still_succeeds():
    manager, _, store = _manager("", TmuxResult(returncode=0, stdout=""))

    result = await manager.run("cmd")

    assert result.pane_id is None
    assert result.reused is False
    assert store.value == ""


@pytest.mark.asyncio
async def test_split_percent_is_configurable():
    tmux = Mock(spec=TmuxRunner)
    tmux.run = AsyncMock(return_value=TmuxResult(returncode=0, stdout="%2"))
    manager = PaneLifecycleManager(PaneRegistry(MemoryPaneStore(), tmux), tmux, split_percent=30)

    await manager.run("cmd")

    assert tmux.run.await_args.args[:4] == ("split-window", "-h", "-p", "30")


@pytest.mark.asyncio
async def test_set_title_enables_border_status():
    tmux = Mock(spec=TmuxRunner)
    tmux.run = AsyncMock(return_value=OK)
    manager = PaneLifecycleManager(PaneRegistry(MemoryPaneStore(), tmux), tmux)

    await manager.set_title("%3", "hello")

    assert [call.args for call in tmux.run.await_args_list] == [
        ("select-pane", "-t", "%3", "-T", "hello"),
        ("set-option", "-p", "-t", "%3", "pane-border-status", "bottom"),
        ("set-option", "-p", "-t", "%3", "pane-border-format", " #{pane_title} "),
    ]
