"""Desktop notifications through notify-send."""

import logging
import subprocess

from .config import Config
from .tools import ToolLocator

log = logging.getLogger(__name__)


class Notifier:
    """Fire-and-forget desktop notifications.

    The result of the notifier process is not checked; a missing
    notifier binary only produces a log warning.
    """

    def __init__(self, config: Config, tools: ToolLocator):
        self.config = config
        self.tools = tools

    def send(
        self,
        title: str,
        body: str,
        urgency: str = "normal",
        icon: str = "camera-photo",
    ) -> None:
        if not self.config.enable_notification:
            log.debug("Notification suppressed: %s - %s", title, body)
            return

        notifier = self.tools.find(self.config.notifier)
        if notifier is None:
            log.warning("%s not found, dropping notification: %s - %s",
                        self.config.notifier, title, body)
            return

        subprocess.run(
            [notifier, "--urgency", urgency, "--icon", icon, title, body],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def error(self, body: str) -> None:
        self.send("Screenshot error", body, urgency="critical", icon="dialog-error")

    def warning(self, body: str) -> None:
        self.send("Screenshot warning", body, icon="dialog-warning")
