"""Post-capture output handling.

Handles:
- Naming and creating the screenshot directory
- The "save as" dialog and moving the file
- Announcing the result (notification, events, hooks)
"""

import logging
import shutil
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import Config
from .context import Context
from .emit import Operation
from .hooks import notify_save

log = logging.getLogger(__name__)


def prepare_output_dir(config: Config) -> Path:
    """Create the screenshot directory if needed."""
    config.output_dir.mkdir(parents=True, exist_ok=True)
    return config.output_dir


def screenshot_path(config: Config, now: Optional[datetime] = None) -> Path:
    """Default file for a new screenshot, e.g. screenshot_2024-05-01_13-37-00.png"""
    timestamp = (now or datetime.now()).strftime(config.timestamp_format)
    return config.output_dir / f"screenshot_{timestamp}.png"


def ask_save_location(ctx: Context, default: Path) -> Optional[Path]:
    """Show a save dialog pre-filled with `default`.

    Returns:
        The chosen path, or None if the dialog was cancelled or unavailable
    """
    dialog = ctx.tools.find(ctx.config.dialog)
    if dialog is None:
        log.warning("%s not found, keeping %s", ctx.config.dialog, default)
        return None

    result = subprocess.run(
        [
            dialog,
            "--file-selection",
            "--save",
            "--title=Save screenshot as...",
            f"--filename={default}",
        ],
        capture_output=True,
        text=True,
    )
    chosen = result.stdout.strip()
    if result.returncode != 0 or not chosen:
        log.debug("Save dialog cancelled")
        return None
    return Path(chosen).expanduser()


def relocate(source: Path, target: Path) -> Path:
    """Move the screenshot to `target` and return where it ended up."""
    if target == source:
        return source
    final = Path(shutil.move(str(source), str(target)))
    log.info("Moved %s -> %s", source, final)
    return final


def announce(ctx: Context, path: Path, title: str, operation: Operation) -> None:
    """Tell the operator, event listeners and hooks about a finished screenshot."""
    ctx.notifier.send(title, str(path))
    operation.artifact(path)
    notify_save(path, operation.mode, ctx.config.hooks_dir)
    log.info("%s: %s", title, path)
