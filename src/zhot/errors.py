"""Exceptions raised by zhot."""

from typing import Iterable


class ZhotError(Exception):
    """Base class for all zhot errors."""
    pass


class MissingTool(ZhotError):
    """A required external program is not installed."""

    def __init__(self, tools: Iterable[str], message: str = ""):
        self.tools = list(tools)
        super().__init__(message or f"Missing required tools: {', '.join(self.tools)}")


class UnsupportedSession(ZhotError):
    """No Wayland or X11 session was detected."""

    def __init__(self, message: str = "Could not detect a supported graphical session"):
        super().__init__(message)


class CaptureFailed(ZhotError):
    """The capture tool ran but did not produce a screenshot."""
    pass


class InvalidArgument(ZhotError):
    """Unrecognized command-line option."""

    def __init__(self, option: str):
        self.option = option
        super().__init__(f"Invalid option: {option}")


class UserCancelled(ZhotError):
    """The operator declined to continue."""
    pass
