"""termcanvas command line.

    termcanvas show <kind> --id ID [--config JSON|@FILE] [--socket PATH] [--scenario NAME]
    termcanvas spawn <kind> [--scenario NAME] [--config JSON|@FILE] [--timeout S] [--no-wait]
    termcanvas scenarios [--kind KIND] [--json]
    termcanvas env
    termcanvas browse URL [--with-gui]

`show` is what runs inside the canvas pane; the other commands run on the
host side. Errors are printed as `termcanvas error: <message>` with exit 1.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from termcanvas import __version__, scenarios
from termcanvas.canvas.app import CanvasApp
from termcanvas.core.environment import detect
from termcanvas.core.spawn import spawn_browser, spawn_canvas
from termcanvas.errors import CanvasConfigError, CanvasError, ScenarioNotFoundError
from termcanvas.host import CanvasHost
from termcanvas.logging_config import setup_logging
from termcanvas.scenarios.types import CanvasKind, ScenarioDefinition

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def parse_config_arg(value: Optional[str]) -> dict[str, Any]:
    """Decode a --config value: inline JSON, or @path to a JSON file.

    Raises:
        CanvasConfigError: unreadable file, invalid JSON or not an object.
    """
    if not value:
        return {}
    source = "--config"
    if value.startswith("@"):
        path = Path(value[1:]).expanduser()
        source = str(path)
        try:
            value = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CanvasConfigError(f"Cannot read config file {path}: {e}") from e
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise CanvasConfigError(f"Invalid JSON in {source}: {e}") from e
    if not isinstance(parsed, dict):
        raise CanvasConfigError(f"Config in {source} must be a JSON object")
    return parsed


def resolve_scenario(kind: str, name: Optional[str]) -> ScenarioDefinition:
    """Named scenario, or the first one registered for the kind."""
    if name:
        return scenarios.registry.require(kind, name)
    candidates = scenarios.list_scenarios(kind)
    if not candidates:
        raise ScenarioNotFoundError(kind, "")
    return candidates[0]


def _print_json(data: Any) -> None:
    sys.stdout.write(json.dumps(data) + "\n")


def cmd_show(args: argparse.Namespace) -> int:
    definition = resolve_scenario(args.kind, args.scenario)
    config = scenarios.merge_config(definition, parse_config_arg(args.config))
    logger.info("Canvas %s starting: %s:%s", args.id, definition.canvas_kind.value, definition.name)

    app = CanvasApp(definition, config, socket_path=args.socket)
    app.run()

    # Run by hand: report the outcome on stdout instead of the socket.
    if app.local is not None and app.local.selected is not None:
        _print_json(app.local.selected)
    # Non-zero when the app crashed, e.g. the socket could not be bound.
    return app.return_code or EXIT_OK


def cmd_spawn(args: argparse.Namespace) -> int:
    host = CanvasHost()
    config = parse_config_arg(args.config)
    scenario = resolve_scenario(args.kind, args.scenario)

    if args.no_wait:
        _, invocation = host.prepare(scenario.canvas_kind, scenario.name, config, invocation_id=args.id)
        result = asyncio.run(spawn_canvas(invocation, manager=host.manager, settings=host.settings))
        _print_json(
            {
                "id": invocation.id,
                "socket": str(invocation.socket_path),
                "paneId": result.pane_id,
                "reused": result.reused,
            }
        )
        return EXIT_OK

    outcome = asyncio.run(
        host.show(scenario.canvas_kind, scenario.name, config, invocation_id=args.id, timeout=args.timeout)
    )
    _print_json(outcome.to_dict())
    return EXIT_OK


def cmd_scenarios(args: argparse.Namespace) -> int:
    definitions = scenarios.list_scenarios(args.kind)
    if args.json:
        _print_json([d.to_dict() for d in definitions])
        return EXIT_OK

    table = Table(title="Canvas scenarios")
    table.add_column("Kind", style="cyan")
    table.add_column("Scenario", style="bold")
    table.add_column("Mode")
    table.add_column("Closes on")
    table.add_column("Description", style="dim")
    for d in definitions:
        table.add_row(
            d.canvas_kind.value, d.name, d.interaction_mode.value, d.close_on.value, d.description
        )
    Console().print(table)
    return EXIT_OK


def cmd_env(_args: argparse.Namespace) -> int:
    env = detect()
    _print_json({"inTmux": env.in_tmux, "summary": env.summary})
    return EXIT_OK


def cmd_browse(args: argparse.Namespace) -> int:
    result = asyncio.run(spawn_browser(args.url, with_gui=args.with_gui))
    _print_json({"method": result.method, "paneId": result.pane_id})
    return EXIT_OK


def _add_config_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Canvas config as JSON, or @path to a JSON file.")
    parser.add_argument("--scenario", default=None, help="Scenario name (default: first for the kind).")
    parser.add_argument("--id", default=None, help="Invocation id.")


def build_parser() -> argparse.ArgumentParser:
    kinds = [k.value for k in CanvasKind]
    parser = argparse.ArgumentParser(prog="termcanvas", description="Terminal canvases in a tmux pane.")
    parser.add_argument("--version", action="version", version=f"termcanvas {__version__}")
    parser.add_argument("--log-level", default=None, help="Override TERMCANVAS_LOG_LEVEL.")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Run a canvas in this terminal (used inside the canvas pane).")
    show.add_argument("kind", choices=kinds)
    _add_config_args(show)
    show.add_argument("--socket", default=None, help="Unix socket to serve the host on.")
    show.set_defaults(func=cmd_show)

    spawn = sub.add_parser("spawn", help="Open a canvas in the canvas pane and print its outcome.")
    spawn.add_argument("kind", choices=kinds)
    _add_config_args(spawn)
    spawn.add_argument("--timeout", type=float, default=None, help="Seconds to wait for an outcome.")
    spawn.add_argument("--no-wait", action="store_true", help="Spawn and return without attaching.")
    spawn.set_defaults(func=cmd_spawn)

    listing = sub.add_parser("scenarios", help="List registered scenarios.")
    listing.add_argument("--kind", choices=kinds, default=None)
    listing.add_argument("--json", action="store_true", help="Machine-readable output.")
    listing.set_defaults(func=cmd_scenarios)

    env = sub.add_parser("env", help="Report the terminal environment.")
    env.set_defaults(func=cmd_env)

    browse = sub.add_parser("browse", help="Open a URL with browsh in the canvas pane.")
    browse.add_argument("url")
    browse.add_argument("--with-gui", action="store_true", help="Show the headless Firefox window.")
    browse.set_defaults(func=cmd_browse)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return args.func(args)
    except CanvasError as e:
        logger.error("%s failed: %s", args.command, e)
        sys.stderr.write(f"termcanvas error: {e}\n")
        return EXIT_ERROR
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    raise SystemExit(main())
