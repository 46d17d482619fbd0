"""Region capture through the session's screenshot tools.

Wayland uses slurp to pick a region and grim to grab it; X11 uses
maim's own selection. The tool writes the PNG straight to the target
path, nothing is buffered here.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .context import Context
from .errors import CaptureFailed, MissingTool, UnsupportedSession
from .session import SessionType
from .tools import GRIM, MAIM, SLURP

log = logging.getLogger(__name__)


@dataclass
class CaptureResult:
    """A screenshot written to disk."""

    path: Path
    session: SessionType
    tool: str


def _require(ctx: Context, tools: Sequence[str], message: str) -> list[str]:
    """Resolve `tools` to full paths, in order, or raise MissingTool."""
    missing = ctx.tools.missing(tools)
    if missing:
        ctx.notifier.error(message)
        raise MissingTool(missing, message)
    return [ctx.tools.find(name) for name in tools]


def _fail(ctx: Context, message: str) -> None:
    ctx.notifier.error(message)
    raise CaptureFailed(message)


def _capture_wayland(ctx: Context, output_path: Path) -> CaptureResult:
    grim, slurp = _require(ctx, (GRIM, SLURP), "grim and slurp are required for Wayland captures")

    selection = subprocess.run([slurp], capture_output=True, text=True)
    geometry = selection.stdout.strip()
    if selection.returncode != 0 or not geometry:
        _fail(ctx, "Region selection cancelled")

    log.debug("Selected region %s", geometry)
    result = subprocess.run(
        [grim, "-g", geometry, str(output_path)],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        _fail(ctx, f"grim failed: {result.stderr.strip()}")

    return CaptureResult(output_path, SessionType.WAYLAND, GRIM)


def _capture_x11(ctx: Context, output_path: Path) -> CaptureResult:
    maim, = _require(ctx, (MAIM,), "maim is required for X11 captures")

    result = subprocess.run(
        [maim, "-s", str(output_path)],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        _fail(ctx, f"maim failed: {result.stderr.strip() or 'selection cancelled'}")

    return CaptureResult(output_path, SessionType.X11, MAIM)


def capture(ctx: Context, output_path: Path) -> CaptureResult:
    """Capture an interactively selected region to `output_path`.

    Blocks until the operator finishes (or aborts) the selection.

    Raises:
        UnsupportedSession: No Wayland or X11 session; the path is untouched
        MissingTool: The session's capture tools are not installed
        CaptureFailed: The tool exited with an error or wrote nothing

    Every failure sends a desktop notification before raising.
    """
    if ctx.session is SessionType.WAYLAND:
        result = _capture_wayland(ctx, output_path)
    elif ctx.session is SessionType.X11:
        result = _capture_x11(ctx, output_path)
    else:
        error = UnsupportedSession()
        ctx.notifier.error(str(error))
        raise error

    if not output_path.exists():
        _fail(ctx, f"{result.tool} did not write {output_path}")

    log.info("Captured %s with %s", output_path, result.tool)
    return result
