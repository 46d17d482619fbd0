"""Dependency check for the external programs zhot drives."""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .context import Context
from .errors import UserCancelled
from .session import SessionType
from .tools import DEFAULT_VIEWERS, GRIM, MAIM, SLURP, WL_COPY, XCLIP, XSEL, ToolLocator

# (distribution family, package manager, install command)
PACKAGE_MANAGERS = (
    ("Debian/Ubuntu", "apt", "sudo apt install"),
    ("Arch", "pacman", "sudo pacman -S"),
    ("Fedora", "dnf", "sudo dnf install"),
)


@dataclass(frozen=True)
class Requirement:
    """One needed capability, satisfied by any of several executables."""

    any_of: tuple[str, ...]
    package: str
    # (manager, package) pairs where the name differs from `package`
    renamed: tuple[tuple[str, str], ...] = ()

    @property
    def label(self) -> str:
        return "/".join(self.any_of)

    def package_for(self, manager: str) -> str:
        return dict(self.renamed).get(manager, self.package)

    def satisfied(self, tools: ToolLocator) -> bool:
        return tools.first(self.any_of) is not None


COMMON_REQUIREMENTS = (
    Requirement(("zenity",), "zenity"),
    Requirement(("notify-send",), "libnotify-bin", (("pacman", "libnotify"), ("dnf", "libnotify"))),
)

SESSION_REQUIREMENTS = {
    SessionType.WAYLAND: (
        Requirement((GRIM,), "grim"),
        Requirement((SLURP,), "slurp"),
        Requirement((WL_COPY,), "wl-clipboard"),
    ),
    SessionType.X11: (
        Requirement((MAIM,), "maim"),
        Requirement((XCLIP, XSEL), "xclip"),
    ),
    SessionType.UNKNOWN: (),
}


@dataclass
class DependencyReport:
    session: SessionType
    missing: list[Requirement]

    @property
    def ok(self) -> bool:
        return not self.missing

    def labels(self) -> list[str]:
        return [r.label for r in self.missing]

    def install_commands(self) -> list[str]:
        lines = []
        for family, manager, command in PACKAGE_MANAGERS:
            packages = " ".join(r.package_for(manager) for r in self.missing)
            lines.append(f"  {family}: {command} {packages}")
        return lines


def check_dependencies(
    session: SessionType,
    tools: ToolLocator,
    viewers: Sequence[str] = DEFAULT_VIEWERS,
) -> DependencyReport:
    """List the requirements for `session` that no installed tool satisfies."""
    requirements = list(COMMON_REQUIREMENTS) + list(SESSION_REQUIREMENTS[session])
    if viewers:
        requirements.append(Requirement(tuple(viewers), viewers[0]))

    missing = [r for r in requirements if not r.satisfied(tools)]
    return DependencyReport(session=session, missing=missing)


def run_dependency_check(
    ctx: Context,
    ask: Optional[Callable[[str], str]] = None,
) -> DependencyReport:
    """Print missing dependencies and ask whether to go on.

    Raises:
        UserCancelled: Something is missing and the operator did not answer "y"
    """
    report = check_dependencies(ctx.session, ctx.tools, ctx.config.viewers)
    if report.ok:
        print(f"All dependencies are installed ({ctx.session.value} session).")
        return report

    print(f"Missing dependencies: {' '.join(report.labels())}")
    print("Install them for your distribution:")
    for line in report.install_commands():
        print(line)
    print()

    ask = ask or input
    try:
        answer = ask("Continue anyway? [y/N] ")
    except EOFError:
        answer = ""
    if answer.strip() not in ("y", "Y"):
        raise UserCancelled("Missing dependencies")
    return report
