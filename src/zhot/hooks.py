"""User hooks run after a screenshot is saved.

Hooks are executables in a directory; all of them run, in sorted order:

    <hooks_dir>/
    └── on_save.d/
        ├── 10-upload.sh
        └── 20-backup.sh

Each script receives: path mode
Scripts run detached, so a slow hook never delays the viewer.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)


def hook_scripts(hooks_dir: Optional[Path], event: str) -> list[Path]:
    """Executable scripts for `event`, sorted by name."""
    if not hooks_dir:
        return []

    event_dir = hooks_dir / f"{event}.d"
    if not event_dir.is_dir():
        return []

    return sorted(
        f for f in event_dir.iterdir()
        if f.is_file() and not f.name.startswith(".") and f.stat().st_mode & 0o111
    )


def run_hooks(hooks_dir: Optional[Path], event: str, *args) -> int:
    """Start every hook for `event`. Returns the number started."""
    started = 0
    for script in hook_scripts(hooks_dir, event):
        try:
            subprocess.Popen(
                [str(script)] + [str(a) for a in args],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            log.warning("Hook %s failed: %s", script.name, e)
            continue
        started += 1
        log.debug("Hook executed: %s", script.name)
    return started


def notify_save(path: Path, mode: str, hooks_dir: Optional[Path]) -> int:
    return run_hooks(hooks_dir, "on_save", path, mode)
