"""Copy a saved screenshot to the system clipboard."""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .context import Context
from .errors import MissingTool, UnsupportedSession
from .session import SessionType
from .tools import WL_COPY, XCLIP, XSEL

log = logging.getLogger(__name__)


@dataclass
class ClipboardResult:
    ok: bool
    tool: Optional[str] = None
    error: Optional[str] = None


def _write(ctx: Context, path: Path) -> str:
    if ctx.session is SessionType.WAYLAND:
        wl_copy = ctx.tools.find(WL_COPY)
        if wl_copy is None:
            raise MissingTool([WL_COPY], "wl-clipboard is required to copy on Wayland")
        with open(path, "rb") as f:
            subprocess.run([wl_copy, "--type", "image/png"], stdin=f, check=True)
        return WL_COPY

    if ctx.session is SessionType.X11:
        tool = ctx.tools.first((XCLIP, XSEL))
        executable = ctx.tools.find(tool) if tool else None
        if tool == XCLIP:
            subprocess.run(
                [executable, "-selection", "clipboard", "-t", "image/png", "-i", str(path)],
                check=True,
            )
        elif tool == XSEL:
            # xsel has no MIME type option, it only stores raw bytes
            with open(path, "rb") as f:
                subprocess.run([executable, "--input", "--clipboard"], stdin=f, check=True)
        else:
            raise MissingTool([XCLIP, XSEL], "xclip or xsel is required to copy on X11")
        return tool

    raise UnsupportedSession()


def copy_to_clipboard(ctx: Context, path: Path) -> ClipboardResult:
    """Put the image at `path` on the clipboard.

    Never raises for a missing tool or a failing copy: the caller gets
    ok=False and the operator gets a notification.
    """
    try:
        tool = _write(ctx, path)
    except (MissingTool, UnsupportedSession, subprocess.CalledProcessError, OSError) as e:
        log.warning("Failed to copy to clipboard: %s", e)
        ctx.notifier.error(str(e))
        return ClipboardResult(ok=False, error=str(e))

    log.debug("Copied to clipboard with %s", tool)
    return ClipboardResult(ok=True, tool=tool)
