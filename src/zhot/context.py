"""Per-invocation context shared by every step of a command."""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .config import Config, resolve_home
from .notify import Notifier
from .session import SessionType, detect_session
from .tools import ToolLocator


@dataclass
class Context:
    """Everything a command needs, resolved once at startup.

    The session type is computed here and never re-read from the
    process environment by the steps that receive it.
    """

    config: Config
    session: SessionType
    tools: ToolLocator
    notifier: Notifier
    home: Path
    script_path: Path = field(default_factory=lambda: Path(sys.argv[0]))

    @classmethod
    def from_environment(
        cls,
        config: Config,
        env: Optional[Mapping[str, str]] = None,
    ) -> "Context":
        env = os.environ if env is None else env
        tools = ToolLocator(env.get("PATH"))
        home = resolve_home(env)
        return cls(
            config=config,
            session=detect_session(env),
            tools=tools,
            notifier=Notifier(config, tools),
            home=home,
        )
