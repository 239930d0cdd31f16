import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from rich.console import Console

from modix.cli import CommandContext
from modix.store import ConfigManager
from modix.tui import DashboardCommands, ModixTUI, TuiState, run_tui
from modix.ui import ModixUI


class FakeSession:
    def __init__(self, inputs):
        self.inputs = list(inputs)
        self.prompts = 0

    def prompt(self, message):
        self.prompts += 1
        if not self.inputs:
            raise EOFError
        return self.inputs.pop(0)


class ModixTUITests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self._tmp.name)
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.ctx = CommandContext(
            store=ConfigManager(self.tmp_dir / "settings.json"),
            ui=ModixUI(console=Console(file=self.out, width=200), err_console=Console(file=self.err, width=200)),
            claude_settings=self.tmp_dir / "claude" / "settings.json",
        )
        self.ctx.store.reset()

    def tearDown(self):
        self._tmp.cleanup()

    def run_tui_with(self, *inputs):
        tui = ModixTUI(self.ctx, session=FakeSession(inputs))
        tui.run()
        return tui

    def test_quit_word_exits(self):
        tui = self.run_tui_with("quit", "/status")
        self.assertEqual(tui.current_state, TuiState.EXITING)
        self.assertEqual(tui.session.inputs, ["/status"])
        self.assertIn("Current model status", self.out.getvalue())

    def test_switch_updates_config_and_claude_settings(self):
        self.run_tui_with("/switch deepseek-chat", "q")

        config = self.ctx.store.load()
        self.assertEqual((config.current_vendor, config.current_model), ("deepseek", "deepseek-chat"))
        settings = json.loads(self.ctx.claude_settings.read_text(encoding="utf-8"))
        self.assertEqual(settings["env"]["ANTHROPIC_MODEL"], "deepseek-chat")
        self.assertIn("Switched to model: deepseek-chat@deepseek", self.out.getvalue())

    def test_errors_do_not_end_the_session(self):
        tui = self.run_tui_with("/switch nope", "/agent codex", "/models")

        self.assertIn("model 'nope' not found", self.err.getvalue())
        self.assertIn("agent 'codex' not configured", self.err.getvalue())
        self.assertIn("deepseek-reasoner", self.out.getvalue())
        self.assertEqual(tui.session.prompts, 4)

    def test_unknown_and_plain_input(self):
        self.run_tui_with("/bogus", "hello", "")
        output = self.out.getvalue()
        self.assertIn("Unknown command: /bogus", output)
        self.assertIn("Commands start with '/'", output)

    def test_dispatcher_unknown_command_returns_false(self):
        self.assertFalse(DashboardCommands(self.ctx).execute("not_exist", ""))
        self.assertTrue(DashboardCommands(self.ctx).execute("vendors", ""))

    def test_project_without_directory(self):
        self.run_tui_with(f"/project {self.tmp_dir}")
        self.assertIn("No .modix/ project here", self.out.getvalue())

    def test_run_tui_requires_terminal(self):
        with patch("modix.tui.sys.stdin") as stdin:
            stdin.isatty.return_value = False
            self.assertEqual(run_tui(self.ctx), 1)
        self.assertIn("requires a terminal", self.err.getvalue())


if __name__ == "__main__":
    unittest.main()
