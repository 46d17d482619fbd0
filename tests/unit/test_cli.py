"""End-to-end tests for the command dispatcher."""

from __future__ import annotations

import io
import re
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from zhot.cli import main
from zhot.session import SessionType

from tests.unit.fakes import commands_for, fake_run, make_context

WAYLAND_TOOLS = {"grim", "slurp", "wl-copy", "feh", "zenity", "notify-send"}
X11_TOOLS = {"maim", "xclip", "eog", "zenity", "notify-send"}
SHOT_NAME = re.compile(r"^screenshot_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.png$")


class DispatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.shots = self.root / "Pictures" / "Screenshots"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _main(self, args, ctx=None):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(args, context=ctx)
        return code, out.getvalue()

    def _run_with(self, args, ctx, **fake_options):
        """Run main with every subprocess faked; returns (code, run mock, Popen mock)."""
        with mock.patch("subprocess.run", side_effect=fake_run(**fake_options)) as run, \
                mock.patch("subprocess.Popen") as popen:
            code, _ = self._main(args, ctx)
        return code, run, popen

    def _shots(self) -> list[Path]:
        return sorted(self.shots.iterdir()) if self.shots.exists() else []

    def test_help_variants(self) -> None:
        for args in ([], [""], ["-h"], ["--help"]):
            with self.subTest(args=args):
                code, output = self._main(args)
                self.assertEqual(code, 0)
                self.assertIn("--clipboard", output)
                self.assertIn("--where", output)

    def test_invalid_option(self) -> None:
        for args in (["--bogus"], ["-x"], ["--clip"], ["-c", "-s"], ["save"], ["--"], ["-s", "--"]):
            with self.subTest(args=args):
                code, output = self._main(args)
                self.assertEqual(code, 1)
                self.assertTrue(output.startswith("Invalid option:"))
                self.assertIn("usage: zhot", output)

    def test_save_on_wayland(self) -> None:
        ctx = make_context(self.root, SessionType.WAYLAND, WAYLAND_TOOLS)
        code, _, popen = self._run_with(["--save"], ctx)

        self.assertEqual(code, 0)
        shots = self._shots()
        self.assertEqual(len(shots), 1)
        self.assertRegex(shots[0].name, SHOT_NAME)
        self.assertEqual(ctx.notifier.sent, [("Screenshot saved", str(shots[0]), "normal")])
        self.assertEqual(popen.call_args.args[0], ["/usr/bin/feh", str(shots[0])])

    def test_clipboard_on_unknown_session(self) -> None:
        ctx = make_context(self.root, SessionType.UNKNOWN, WAYLAND_TOOLS | X11_TOOLS)
        code, run, popen = self._run_with(["--clipboard"], ctx)

        self.assertEqual(code, 1)
        run.assert_not_called()
        popen.assert_not_called()
        self.assertEqual(self._shots(), [])
        self.assertEqual(len(ctx.notifier.sent), 1)
        self.assertIn("supported graphical session", ctx.notifier.sent[0][1])

    def test_clipboard_success_notifies_and_displays(self) -> None:
        ctx = make_context(self.root, SessionType.X11, X11_TOOLS)
        code, run, popen = self._run_with(["-c"], ctx)

        self.assertEqual(code, 0)
        shot = self._shots()[0]
        copies = commands_for(run, "xclip")
        self.assertEqual(len(copies), 1)
        self.assertEqual(copies[0][-1], str(shot))
        self.assertEqual(ctx.notifier.titles(), ["Screenshot copied to clipboard"])
        self.assertEqual(popen.call_args.args[0], ["/usr/bin/eog", str(shot)])

    def test_clipboard_failure_skips_notice_and_viewer(self) -> None:
        ctx = make_context(self.root, SessionType.X11, X11_TOOLS - {"xclip"})
        code, _, popen = self._run_with(["--clipboard"], ctx)

        self.assertEqual(code, 0)
        self.assertEqual(len(self._shots()), 1)
        self.assertEqual(ctx.notifier.titles(), ["Screenshot error"])
        popen.assert_not_called()

    def test_clipboard_tool_error_skips_viewer(self) -> None:
        ctx = make_context(self.root, SessionType.WAYLAND, WAYLAND_TOOLS)
        code, run, popen = self._run_with(["-c"], ctx, copy_returncode=1)

        self.assertEqual(code, 0)
        self.assertEqual(len(commands_for(run, "wl-copy")), 1)
        self.assertEqual(ctx.notifier.titles(), ["Screenshot error"])
        popen.assert_not_called()

    def test_missing_capture_tool_exits_1(self) -> None:
        ctx = make_context(self.root, SessionType.WAYLAND, WAYLAND_TOOLS - {"slurp"})
        code, run, _ = self._run_with(["-s"], ctx)
        self.assertEqual(code, 1)
        run.assert_not_called()
        self.assertTrue(self.shots.is_dir())
        self.assertEqual(self._shots(), [])

    def test_where_cancelled_keeps_original(self) -> None:
        ctx = make_context(self.root, SessionType.WAYLAND, WAYLAND_TOOLS)
        code, run, popen = self._run_with(["--where"], ctx, dialog_returncode=1)

        self.assertEqual(code, 0)
        shot = self._shots()[0]
        self.assertTrue(shot.exists())
        dialog = commands_for(run, "zenity")
        self.assertEqual(len(dialog), 1)
        self.assertIn(f"--filename={shot}", dialog[0])
        self.assertEqual(ctx.notifier.sent, [("Screenshot saved", str(shot), "normal")])
        self.assertEqual(popen.call_args.args[0], ["/usr/bin/feh", str(shot)])

    def test_where_moves_to_chosen_path(self) -> None:
        ctx = make_context(self.root, SessionType.WAYLAND, WAYLAND_TOOLS)
        chosen = self.root / "Desktop" / "bug.png"
        chosen.parent.mkdir()
        code, _, popen = self._run_with(["-w"], ctx, dialog_stdout=f"{chosen}\n")

        self.assertEqual(code, 0)
        self.assertEqual(self._shots(), [])
        self.assertTrue(chosen.exists())
        self.assertEqual(ctx.notifier.sent, [("Screenshot saved", str(chosen), "normal")])
        self.assertEqual(popen.call_args.args[0], ["/usr/bin/feh", str(chosen)])

    def test_where_move_failure_keeps_original(self) -> None:
        ctx = make_context(self.root, SessionType.WAYLAND, WAYLAND_TOOLS)
        chosen = self.root / "gone" / "bug.png"
        code, _, popen = self._run_with(["-w"], ctx, dialog_stdout=f"{chosen}\n")

        self.assertEqual(code, 0)
        self.assertFalse(chosen.exists())
        shot = self._shots()[0]
        self.assertEqual(ctx.notifier.titles(), ["Screenshot error", "Screenshot saved"])
        self.assertIn(str(chosen), ctx.notifier.sent[0][1])
        self.assertEqual(ctx.notifier.sent[1][1], str(shot))
        self.assertEqual(popen.call_args.args[0], ["/usr/bin/feh", str(shot)])

    def test_install(self) -> None:
        (self.root / ".bashrc").write_text("")
        ctx = make_context(self.root, SessionType.X11, X11_TOOLS)
        code, output = self._main(["--install"], ctx)
        self.assertEqual(code, 0)
        self.assertIn("Alias configured for bash", output)
        self.assertIn(f'alias zhot="{ctx.script_path.resolve()}"', (self.root / ".bashrc").read_text())

        code, output = self._main(["-i"], ctx)
        self.assertEqual(code, 0)
        self.assertIn("Alias already exists for bash", output)
        self.assertEqual((self.root / ".bashrc").read_text().count("alias zhot="), 1)

    def test_deps_decline_exits_1(self) -> None:
        ctx = make_context(self.root, SessionType.WAYLAND, {"grim"})
        with mock.patch("builtins.input", return_value="n"):
            code, output = self._main(["--deps"], ctx)
        self.assertEqual(code, 1)
        self.assertIn("sudo apt install", output)

    def test_deps_all_present(self) -> None:
        ctx = make_context(self.root, SessionType.WAYLAND, WAYLAND_TOOLS)
        with mock.patch("builtins.input") as ask:
            code, _ = self._main(["-d"], ctx)
        self.assertEqual(code, 0)
        ask.assert_not_called()


if __name__ == "__main__":
    unittest.main()
