"""Shell alias installation.

Appends `alias zhot="/path/to/zhot"` to the startup file of every shell
that looks configured for this user. Running it again changes nothing.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import Config
from .tools import ToolLocator

log = logging.getLogger(__name__)

# (shell, startup file relative to $HOME)
SHELL_FILES = (
    ("bash", Path(".bashrc")),
    ("zsh", Path(".zshrc")),
    ("fish", Path(".config/fish/config.fish")),
)


@dataclass
class InstallReport:
    configured: list[tuple[str, Path]] = field(default_factory=list)
    already_present: list[tuple[str, Path]] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


def alias_line(name: str, script_path: Path) -> str:
    return f'alias {name}="{script_path}"'


def _has_alias(rc_file: Path, name: str) -> bool:
    # rc files are not always UTF-8, so match on raw bytes
    return rc_file.exists() and f"alias {name}=".encode() in rc_file.read_bytes()


def _append_line(rc_file: Path, line: str) -> None:
    prefix = ""
    if rc_file.exists():
        data = rc_file.read_bytes()
        if data and not data.endswith(b"\n"):
            prefix = "\n"
    with open(rc_file, "a") as f:
        f.write(f"{prefix}{line}\n")


def install_alias(
    config: Config,
    script_path: Path,
    home: Path,
    tools: ToolLocator,
) -> InstallReport:
    """Add the alias to bash, zsh and fish startup files.

    bash and zsh are only touched when their rc file exists. fish is
    touched when ~/.config/fish exists; config.fish is created if missing.
    """
    script_path = Path(script_path).resolve()
    name = config.alias_name
    report = InstallReport()

    if not tools.has(name) and script_path != config.install_path:
        report.suggestions = [
            f'sudo cp "{script_path}" {config.install_path}',
            f"sudo chmod +x {config.install_path}",
        ]

    line = alias_line(name, script_path)
    for shell, relative in SHELL_FILES:
        rc_file = home / relative
        if shell == "fish":
            if not rc_file.parent.is_dir():
                continue
        elif not rc_file.is_file():
            continue

        if _has_alias(rc_file, name):
            report.already_present.append((shell, rc_file))
            log.debug("Alias already in %s", rc_file)
            continue

        _append_line(rc_file, line)
        report.configured.append((shell, rc_file))
        log.info("Added alias to %s", rc_file)

    return report


def print_install_report(report: InstallReport, config: Config) -> None:
    if report.suggestions:
        print(f"{config.alias_name} is not on your PATH. Consider installing it:")
        for command in report.suggestions:
            print(f"   {command}")

    for shell, rc_file in report.configured:
        print(f"Alias configured for {shell} ({rc_file})")
    for shell, rc_file in report.already_present:
        print(f"Alias already exists for {shell} ({rc_file})")

    print()
    print("To use the alias in the current session, run:")
    print("   source ~/.bashrc                   # bash")
    print("   source ~/.zshrc                    # zsh")
    print("   source ~/.config/fish/config.fish  # fish")
