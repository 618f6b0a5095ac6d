"""Global configuration management.

Config is loaded at module import time and available globally via:
    from termcanvas.config import config

Sources, lowest precedence first: built-in defaults, the YAML file at
`~/.termcanvas/termcanvas.yml` (or `TERMCANVAS_CONFIG_PATH`). A `.env` file
in the working directory (or `TERMCANVAS_ENV_PATH`) is loaded first so it can
provide both of those variables and `${VAR}` values used inside the YAML.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from termcanvas.config.loader import load_config
from termcanvas.config.schema import CanvasSettings

DEFAULT_CONFIG_PATH = Path("~/.termcanvas/termcanvas.yml")

_env_path = os.getenv("TERMCANVAS_ENV_PATH")
_dotenv_path = Path(_env_path).expanduser() if _env_path else Path.cwd() / ".env"
load_dotenv(_dotenv_path)


def config_path() -> Path:
    env_path = os.getenv("TERMCANVAS_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_settings(path: Path | None = None) -> CanvasSettings:
    """Load settings from path (default: config_path())."""
    return load_config(path or config_path(), CanvasSettings)


config = load_settings()

__all__ = ["CanvasSettings", "config", "config_path", "load_settings"]
