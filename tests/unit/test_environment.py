"""Unit tests for tmux environment detection."""

import os
from unittest.mock import patch

import pytest

from termcanvas.core.environment import detect, require_tmux
from termcanvas.errors import TmuxRequiredError

pytestmark = [pytest.mark.unit]


def test_detect_reports_tmux_when_env_var_set():
    with patch.dict(os.environ, {"TMUX": "/tmp/tmux-1000/default,123,0"}):
        env = detect()

    assert env.in_tmux is True
    assert env.summary == "tmux"


def test_detect_treats_empty_env_var_as_no_tmux():
    with patch.dict(os.environ, {"TMUX": ""}):
        env = detect()

    assert env.in_tmux is False
    assert env.summary == "no tmux"


def test_require_tmux_raises_actionable_error_outside_tmux():
    with patch.dict(os.environ):
        os.environ.pop("TMUX", None)
        with pytest.raises(TmuxRequiredError) as exc_info:
            require_tmux()

    assert str(exc_info.value) == "Canvas requires tmux. Please run inside a tmux session."


def test_require_tmux_names_the_feature():
    with patch.dict(os.environ):
        os.environ.pop("TMUX", None)
        with pytest.raises(TmuxRequiredError, match="^Browser requires tmux"):
            require_tmux("Browser")
