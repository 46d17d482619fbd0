"""Lookup of external programs.

Every check for an installed binary goes through a ToolLocator so the
rest of the code never touches PATH directly.
"""

import logging
import shutil
from typing import Iterable, Optional

log = logging.getLogger(__name__)

# Capture tool chains
SLURP = "slurp"
GRIM = "grim"
MAIM = "maim"

# Clipboard writers
WL_COPY = "wl-copy"
XCLIP = "xclip"
XSEL = "xsel"

DEFAULT_VIEWERS = ("feh", "xdg-open", "ristretto", "eog")


class ToolLocator:
    """Find executables on a search path.

    Args:
        search_path: PATH-style string. None uses the process PATH.
    """

    def __init__(self, search_path: Optional[str] = None):
        self.search_path = search_path

    def find(self, name: str) -> Optional[str]:
        """Return the full path of `name`, or None if it is not installed."""
        found = shutil.which(name, path=self.search_path)
        log.debug("Lookup %s -> %s", name, found)
        return found

    def has(self, name: str) -> bool:
        return self.find(name) is not None

    def first(self, names: Iterable[str]) -> Optional[str]:
        """Return the first name in `names` that is installed."""
        for name in names:
            if self.has(name):
                return name
        return None

    def missing(self, names: Iterable[str]) -> list[str]:
        return [name for name in names if not self.has(name)]
