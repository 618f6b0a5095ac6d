"""Pytest configuration for termcanvas tests."""

import os
import tempfile

import pytest

# Import-time config must not pick up a developer's ~/.termcanvas files.
os.environ.setdefault("TERMCANVAS_CONFIG_PATH", os.path.join(tempfile.gettempdir(), "termcanvas-tests-absent.yml"))
os.environ.setdefault("TERMCANVAS_LOG_PATH", os.path.join(tempfile.gettempdir(), "termcanvas-tests.log"))


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))


@pytest.fixture
def short_tmp_dir():
    """Directory with a short path; AF_UNIX paths are limited to ~104 bytes."""
    with tempfile.TemporaryDirectory(prefix="tc-", dir="/tmp") as path:
        yield path
