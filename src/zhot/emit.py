"""
Structured event emitter.

Default: JSON lines to stderr, one per event, distinguishable from log lines:
    {"event_type": "...", "timestamp": "...", "source": {"tool": "zhot"}, "data": {...}}

Extensible: add_handler() registers extra transports that receive the same dict.
"""

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

EventHandler = Callable[[dict], None]

_handlers: List[EventHandler] = []
_source: str = "zhot"
_stderr_enabled: bool = True


def configure(source: str = "zhot", stderr: bool = True) -> None:
    """Set the event source name and whether events reach stderr."""
    global _source, _stderr_enabled
    _source = source
    _stderr_enabled = stderr


def add_handler(handler: EventHandler) -> None:
    _handlers.append(handler)


def remove_handler(handler: EventHandler) -> None:
    if handler in _handlers:
        _handlers.remove(handler)


def emit(event_type: str, data: Dict[str, Any]) -> dict:
    """Emit a structured event and return it."""
    event = {
        "event_type": event_type,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "source": {"tool": _source},
        "data": data,
    }

    if _stderr_enabled:
        print(json.dumps(event, default=str), file=sys.stderr, flush=True)

    for handler in _handlers:
        try:
            handler(event)
        except Exception as exc:
            logger.debug("Event handler error: %s", exc)

    return event


class Operation:
    """One capture run, from operation.started to operation.completed."""

    operation_type = "screenshot.capture"

    def __init__(self, mode: str, session: str):
        self.mode = mode
        self.session = session
        self.operation_id = str(uuid.uuid4())
        self.outputs: List[str] = []

    def _payload(self) -> dict:
        return {
            "operation_type": self.operation_type,
            "operation_id": self.operation_id,
            "mode": self.mode,
            "session": self.session,
        }

    def start(self) -> None:
        emit("operation.started", self._payload())

    def artifact(self, path: Path) -> None:
        self.outputs.append(str(path))
        emit("artifact.created", {
            "operation_id": self.operation_id,
            "file_path": str(path),
            "file_type": "screenshot",
        })

    def complete(self) -> None:
        payload = self._payload()
        payload["success"] = True
        payload["outputs"] = [{"file_path": p, "file_type": "screenshot"} for p in self.outputs]
        emit("operation.completed", payload)

    def fail(self, error: Exception, message: Optional[str] = None) -> None:
        emit("error.handled", {
            "error_type": type(error).__name__,
            "message": message or str(error),
            "mode": self.mode,
        })
        payload = self._payload()
        payload["success"] = False
        payload["error_message"] = message or str(error)
        emit("operation.completed", payload)
