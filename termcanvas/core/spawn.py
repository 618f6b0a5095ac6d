"""Launch canvases and the text browser in the canvas pane.

Every invocation gets its own id, socket path and config file under the
socket directory. The canvas command line only ever carries shell-quoted
paths; the config itself travels through the file so arbitrary JSON never
touches the shell.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from termcanvas.config import CanvasSettings
from termcanvas.config import config as default_settings
from termcanvas.constants import (
    BROWSER_BINARY,
    BROWSER_PANE_TITLE,
    CONFIG_NAME_TEMPLATE,
    SOCKET_NAME_TEMPLATE,
)
from termcanvas.core.environment import require_tmux
from termcanvas.core.pane_lifecycle import PaneLifecycleManager, SpawnResult
from termcanvas.core.pane_registry import FilePaneStore, PaneRegistry
from termcanvas.core.tmux import TmuxRunner
from termcanvas.errors import CanvasConfigError, SpawnFailure
from termcanvas.scenarios.types import CanvasKind
from termcanvas.utils import is_safe_id, new_invocation_id

logger = logging.getLogger(__name__)


@dataclass
class CanvasInvocation:
    """One request to display a canvas. Paths are never reused across ids."""

    id: str
    kind: CanvasKind
    scenario: Optional[str]
    socket_path: Path
    config_path: Path
    config: dict[str, Any] = field(default_factory=dict)


def build_invocation(
    kind: CanvasKind | str,
    *,
    scenario: Optional[str] = None,
    config: Optional[dict[str, Any]] = None,
    invocation_id: Optional[str] = None,
    socket_dir: Path | str | None = None,
) -> CanvasInvocation:
    """Assign id and file paths for an invocation.

    Raises:
        CanvasConfigError: invocation_id is not usable as a file name component.
        ScenarioNotFoundError: kind is not a known canvas kind.
    """
    invocation_id = invocation_id or new_invocation_id()
    if not is_safe_id(invocation_id):
        raise CanvasConfigError(f"Invalid canvas id: {invocation_id!r}")

    directory = Path(socket_dir or default_settings.socket_dir).expanduser()
    return CanvasInvocation(
        id=invocation_id,
        kind=CanvasKind.parse(kind, scenario or ""),
        scenario=scenario,
        socket_path=directory / SOCKET_NAME_TEMPLATE.format(id=invocation_id),
        config_path=directory / CONFIG_NAME_TEMPLATE.format(id=invocation_id),
        config=dict(config or {}),
    )


def write_config_file(invocation: CanvasInvocation) -> None:
    """Persist the invocation config where the canvas process reads it."""
    try:
        invocation.config_path.parent.mkdir(parents=True, exist_ok=True)
        invocation.config_path.write_text(json.dumps(invocation.config), encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        raise CanvasConfigError(f"Could not write canvas config {invocation.config_path}: {e}") from e


def build_canvas_command(invocation: CanvasInvocation, runner: str) -> str:
    """Shell command the pane runs for this invocation.

    The runner is a trusted setting and may contain several words
    (e.g. "python -m termcanvas"); everything else is quoted.
    """
    parts = [
        runner,
        "show",
        shlex.quote(invocation.kind.value),
        "--id",
        shlex.quote(invocation.id),
    ]
    if invocation.config:
        parts += ["--config", shlex.quote(f"@{invocation.config_path}")]
    parts += ["--socket", shlex.quote(str(invocation.socket_path))]
    if invocation.scenario:
        parts += ["--scenario", shlex.quote(invocation.scenario)]
    return " ".join(parts)


def build_browser_command(url: str, *, with_gui: bool = False) -> str:
    parts = [BROWSER_BINARY]
    if with_gui:
        parts.append("--firefox.with-gui")
    parts += ["--startup-url", shlex.quote(url)]
    return " ".join(parts)


def create_lifecycle_manager(settings: CanvasSettings | None = None) -> PaneLifecycleManager:
    """Pane manager wired from settings (file-backed registry)."""
    settings = settings or default_settings
    tmux = TmuxRunner(settings.tmux_binary)
    registry = PaneRegistry(FilePaneStore(Path(settings.pane_file).expanduser()), tmux)
    return PaneLifecycleManager(
        registry,
        tmux,
        split_percent=settings.split_percent,
        settle_delay_s=settings.reuse_settle_delay_s,
    )


async def spawn_canvas(
    invocation: CanvasInvocation,
    *,
    manager: PaneLifecycleManager | None = None,
    settings: CanvasSettings | None = None,
) -> SpawnResult:
    """Start the canvas process for invocation in the canvas pane.

    Raises:
        TmuxRequiredError: not inside a tmux session.
        CanvasConfigError: config file could not be written.
        SpawnFailure: no pane could be reused or created.
    """
    require_tmux("Canvas")
    settings = settings or default_settings
    manager = manager or create_lifecycle_manager(settings)

    if invocation.config:
        write_config_file(invocation)

    command = build_canvas_command(invocation, settings.runner)
    logger.info("Spawning %s canvas %s (scenario=%s)", invocation.kind.value, invocation.id, invocation.scenario)
    logger.debug("Canvas command: %s", command)
    return await manager.run(command)


async def spawn_browser(
    url: str,
    *,
    with_gui: bool = False,
    manager: PaneLifecycleManager | None = None,
    settings: CanvasSettings | None = None,
) -> SpawnResult:
    """Open url in browsh inside the canvas pane and title the pane with its shortcuts.

    browsh ignores C-c, so any running instance is killed first.

    Raises:
        TmuxRequiredError: not inside a tmux session.
        SpawnFailure: no pane could be reused or created.
    """
    require_tmux("Browser")
    settings = settings or default_settings
    manager = manager or create_lifecycle_manager(settings)

    await _kill_browser()
    await asyncio.sleep(settings.browser_kill_delay_s)

    try:
        result = await manager.run(build_browser_command(url, with_gui=with_gui))
    except SpawnFailure as e:
        raise SpawnFailure("browser") from e

    if result.pane_id:
        await manager.set_title(result.pane_id, BROWSER_PANE_TITLE)
    logger.info("Browser opened %s in pane %s", url, result.pane_id)
    return result


async def _kill_browser() -> None:
    try:
        proc = await asyncio.create_subprocess_exec(
            "pkill",
            "-f",
            BROWSER_BINARY,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as e:
        logger.warning("pkill unavailable, cannot stop running %s: %s", BROWSER_BINARY, e)
        return
    await proc.wait()
