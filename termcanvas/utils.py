"""Utility functions for termcanvas."""

from __future__ import annotations

import os
import re
import uuid
from collections.abc import Mapping


def expand_env_vars(config: object) -> object:
    """Recursively expand environment variables in config.

    Replaces ${VAR} patterns with environment variable values; unknown
    variables are left as-is.
    """
    if isinstance(config, dict):
        return {k: expand_env_vars(v) for k, v in config.items()}
    if isinstance(config, list):
        return [expand_env_vars(item) for item in config]
    if isinstance(config, str):

        def replace_env_var(match: re.Match[str]) -> str:
            return os.getenv(match.group(1), match.group(0))

        return re.sub(r"\$\{([^}]+)\}", replace_env_var, config)
    return config


def new_invocation_id() -> str:
    """Short random id, safe to embed in file names and shell commands."""
    return uuid.uuid4().hex[:12]


_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


def is_safe_id(value: str) -> bool:
    """True if value can be used verbatim in a path component and a shell word."""
    return bool(value) and bool(_SAFE_ID.match(value)) and value not in (".", "..")


def shallow_merge(defaults: Mapping[str, object], overrides: Mapping[str, object] | None) -> dict[str, object]:
    """Overlay overrides onto defaults; None-valued overrides keep the default."""
    merged = dict(defaults)
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        merged[key] = value
    return merged
