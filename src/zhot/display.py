"""Open a screenshot in the first available image viewer."""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from .context import Context

log = logging.getLogger(__name__)


def display_image(ctx: Context, path: Path) -> Optional[str]:
    """Launch a viewer for `path`, detached from this process.

    Returns the viewer used, or None if none could be started.
    """
    viewer = ctx.tools.first(ctx.config.viewers)
    if viewer is None:
        ctx.notifier.warning("No image viewer found")
        return None

    try:
        subprocess.Popen(
            [ctx.tools.find(viewer), str(path)],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        log.warning("Could not start %s: %s", viewer, e)
        ctx.notifier.warning(f"Could not open {viewer}")
        return None

    log.debug("Opened %s in %s", path, viewer)
    return viewer
