"""Unit tests for TmuxRunner."""

import pytest

from termcanvas.core.tmux import TmuxResult, TmuxRunner

pytestmark = [pytest.mark.unit]


@pytest.mark.asyncio
async def test_missing_binary_returns_127_instead_of_raising(tmp_path):
    runner = TmuxRunner(str(tmp_path / "no-such-tmux"))

    result = await runner.run("display-message", "-p", "#{pane_id}")

    assert result.returncode == 127
    assert result.ok is False


@pytest.mark.asyncio
async def test_captures_stdout_and_exit_code():
    runner = TmuxRunner("echo")

    result = await runner.run("%4")

    assert result == TmuxResult(returncode=0, stdout="%4", stderr="")


@pytest.mark.asyncio
async def test_nonzero_exit_is_not_ok():
    result = await TmuxRunner("false").run()

    assert result.ok is False
    assert result.returncode == 1
