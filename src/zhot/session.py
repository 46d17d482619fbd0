"""Graphical session detection."""

from enum import Enum
from typing import Mapping


class SessionType(Enum):
    WAYLAND = "wayland"
    X11 = "x11"
    UNKNOWN = "unknown"


def detect_session(env: Mapping[str, str]) -> SessionType:
    """Classify the display session from an environment mapping.

    WAYLAND_DISPLAY wins over DISPLAY; empty values count as unset.
    """
    if env.get("WAYLAND_DISPLAY"):
        return SessionType.WAYLAND
    if env.get("DISPLAY"):
        return SessionType.X11
    return SessionType.UNKNOWN
