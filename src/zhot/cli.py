"""Command-line interface for zhot.

Entry point flow:
1. Parse the single option (no option means --help)
2. Load configuration and resolve the session context once
3. Route to clipboard, save, where, install or deps
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from . import __version__
from .capture import capture
from .clipboard import copy_to_clipboard
from .config import config_to_dict, load_config, resolve_home
from .context import Context
from .deps import run_dependency_check
from .display import display_image
from .emit import Operation, configure
from .errors import InvalidArgument, UserCancelled, ZhotError
from .install import install_alias, print_install_report
from .output import announce, ask_save_location, prepare_output_dir, relocate, screenshot_path

log = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise InvalidArgument(message)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser: exactly one option per invocation."""
    parser = _ArgumentParser(
        prog="zhot",
        description=f"zhot {__version__}: region screenshots for Wayland and X11",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
        epilog="Works on Wayland (grim/slurp) and X11 (maim).",
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-c", "--clipboard",
        dest="mode", action="store_const", const="clipboard",
        help="Capture and copy to the clipboard",
    )
    group.add_argument(
        "-s", "--save",
        dest="mode", action="store_const", const="save",
        help="Capture and save to ~/Pictures/Screenshots",
    )
    group.add_argument(
        "-w", "--where",
        dest="mode", action="store_const", const="where",
        help="Capture and choose where to save it",
    )
    group.add_argument(
        "-i", "--install",
        dest="mode", action="store_const", const="install",
        help="Add a zhot alias to your shell (bash/zsh/fish)",
    )
    group.add_argument(
        "-d", "--deps",
        dest="mode", action="store_const", const="deps",
        help="Check required programs",
    )
    group.add_argument(
        "-h", "--help",
        dest="mode", action="store_const", const="help",
        help="Show this help",
    )

    return parser


def _capture_new(ctx: Context, mode: str, finish: Callable[[Context, Path, Operation], None]) -> int:
    """Shared pipeline: prepare dir, capture, then hand the file to `finish`."""
    operation = Operation(mode, ctx.session.value)
    operation.start()

    prepare_output_dir(ctx.config)
    path = screenshot_path(ctx.config)
    try:
        capture(ctx, path)
    except ZhotError as e:
        operation.fail(e)
        log.error("Capture failed: %s", e)
        return 1

    finish(ctx, path, operation)
    operation.complete()
    return 0


def _finish_clipboard(ctx: Context, path: Path, operation: Operation) -> None:
    # The viewer only opens when the copy worked.
    if copy_to_clipboard(ctx, path).ok:
        announce(ctx, path, "Screenshot copied to clipboard", operation)
        display_image(ctx, path)


def _finish_save(ctx: Context, path: Path, operation: Operation) -> None:
    announce(ctx, path, "Screenshot saved", operation)
    display_image(ctx, path)


def _finish_where(ctx: Context, path: Path, operation: Operation) -> None:
    chosen = ask_save_location(ctx, path)
    if chosen is not None:
        try:
            path = relocate(path, chosen)
        except OSError as e:
            # Keep the captured file where it is, as on cancel
            log.warning("Could not move %s to %s: %s", path, chosen, e)
            ctx.notifier.error(f"Could not save to {chosen}, kept {path}")
    announce(ctx, path, "Screenshot saved", operation)
    display_image(ctx, path)


def handle_clipboard(ctx: Context) -> int:
    return _capture_new(ctx, "clipboard", _finish_clipboard)


def handle_save(ctx: Context) -> int:
    return _capture_new(ctx, "save", _finish_save)


def handle_where(ctx: Context) -> int:
    return _capture_new(ctx, "where", _finish_where)


def handle_install(ctx: Context) -> int:
    report = install_alias(ctx.config, ctx.script_path, ctx.home, ctx.tools)
    print_install_report(report, ctx.config)
    return 0


def handle_deps(ctx: Context) -> int:
    try:
        run_dependency_check(ctx)
    except UserCancelled:
        return 1
    return 0


HANDLERS = {
    "clipboard": handle_clipboard,
    "save": handle_save,
    "where": handle_where,
    "install": handle_install,
    "deps": handle_deps,
}


def main(args: Optional[Sequence[str]] = None, context: Optional[Context] = None) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])
        context: Pre-built context; resolved from the environment if None

    Returns:
        Exit code
    """
    argv = sys.argv[1:] if args is None else list(args)
    # `zhot ""` behaves like no option at all
    argv = [a for a in argv if a]
    parser = create_argument_parser()

    try:
        # argparse reads a bare "--" as the end of options, not as an option
        if "--" in argv:
            raise InvalidArgument("--")
        parsed = parser.parse_args(argv)
    except InvalidArgument:
        print(f"Invalid option: {' '.join(argv)}")
        parser.print_help()
        return 1

    if parsed.mode in (None, "help"):
        parser.print_help()
        return 0

    if context is None:
        config = load_config(home=resolve_home())
        logging.basicConfig(
            level=logging.DEBUG if config.debug else logging.WARNING,
            format="%(levelname)s: %(message)s",
        )
        context = Context.from_environment(config)

    configure("zhot", stderr=context.config.emit_events)
    log.debug("Resolved config: %s", config_to_dict(context.config))
    log.debug("Session: %s", context.session.value)

    return HANDLERS[parsed.mode](context)


if __name__ == "__main__":
    sys.exit(main())
