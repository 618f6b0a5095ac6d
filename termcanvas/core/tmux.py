"""Async tmux command execution.

All pane operations go through TmuxRunner.run so tests can replace one
method instead of patching subprocess.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TMUX_COMMAND_TIMEOUT_S = 5.0


@dataclass(frozen=True)
class TmuxResult:
    returncode: int
    stdout: str
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class TmuxRunner:
    """Runs tmux subcommands; never raises for tmux-side failures."""

    def __init__(self, binary: str = "tmux", *, timeout_s: float = TMUX_COMMAND_TIMEOUT_S) -> None:
        self.binary = binary
        self.timeout_s = timeout_s

    async def run(self, *args: str) -> TmuxResult:
        """Run `tmux <args>` and capture its output.

        Returns:
            TmuxResult; returncode 127 if tmux could not be started,
            124 on timeout.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Failed to start %s: %s", self.binary, e)
            return TmuxResult(returncode=127, stdout="", stderr=str(e))

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning("tmux %s timed out after %.1fs", args[0] if args else "", self.timeout_s)
            return TmuxResult(returncode=124, stdout="", stderr="tmux timeout")

        result = TmuxResult(
            returncode=proc.returncode if proc.returncode is not None else 1,
            stdout=stdout.decode("utf-8", errors="replace").strip(),
            stderr=stderr.decode("utf-8", errors="replace").strip(),
        )
        if not result.ok:
            logger.debug("tmux %s failed (rc=%d): %s", " ".join(args), result.returncode, result.stderr)
        return result
