import json
import subprocess
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from modix.errors import AlreadyExistsError, InvalidConfigError, NotFoundError
from modix.project import (
    PROJECT_FILES,
    Tool,
    check_dependencies,
    check_tool,
    init_project,
    inspect_project,
    validate_project,
)


class ProjectTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_init_creates_state_files(self):
        files = init_project(self.root)

        self.assertEqual(files, PROJECT_FILES)
        for filename in PROJECT_FILES:
            self.assertTrue((self.root / ".modix" / filename).exists())
        state = json.loads((self.root / ".modix" / "state.json").read_text(encoding="utf-8"))
        self.assertEqual(state["counts"]["shells"], 0)
        self.assertEqual(state["history"], [])

        with self.assertRaises(AlreadyExistsError):
            init_project(self.root)

    def test_validate_fresh_project(self):
        init_project(self.root)
        results = validate_project(self.root)
        self.assertEqual(len(results), len(PROJECT_FILES))
        self.assertTrue(all(result["valid"] for result in results))

    def test_validate_reports_broken_files(self):
        init_project(self.root)
        (self.root / ".modix" / "shells.json").write_text("{broken", encoding="utf-8")
        (self.root / ".modix" / "state.json").write_text('{"counts": {}}', encoding="utf-8")
        (self.root / ".modix" / "version.json").unlink()

        results = {result["filename"]: result for result in validate_project(self.root)}

        self.assertIn("Invalid JSON format", results["shells.json"]["error"])
        self.assertEqual(results["state.json"]["error"], "Invalid state.json format")
        self.assertEqual(results["version.json"]["error"], "File not found")
        self.assertTrue(results["brains.json"]["valid"])

    def test_validate_reports_undecodable_file(self):
        init_project(self.root)
        (self.root / ".modix" / "shells.json").write_bytes(b"\xff\xfe")

        results = {result["filename"]: result for result in validate_project(self.root)}

        self.assertFalse(results["shells.json"]["valid"])
        self.assertIn("Invalid JSON format", results["shells.json"]["error"])

    def test_inspect_rejects_wrong_shapes(self):
        broken = [
            ("state.json", "[]"),
            ("state.json", '{"lastUpdated": "", "counts": [], "history": []}'),
            ("shells.json", '{"version": "v1", "shells": []}'),
            ("version.json", '{"version": "1.0.0"}'),
        ]
        for filename, content in broken:
            with self.subTest(filename=filename, content=content):
                with tempfile.TemporaryDirectory() as tmp_dir:
                    init_project(Path(tmp_dir))
                    (Path(tmp_dir) / ".modix" / filename).write_text(content, encoding="utf-8")
                    with self.assertRaises(InvalidConfigError):
                        inspect_project(Path(tmp_dir))

    def test_uninitialized_project(self):
        with self.assertRaises(NotFoundError):
            validate_project(self.root)
        with self.assertRaises(NotFoundError):
            inspect_project(self.root)

    def test_inspect_reads_every_file(self):
        init_project(self.root)
        contents = inspect_project(self.root)

        self.assertEqual(set(contents), {Path(name).stem for name in PROJECT_FILES})
        self.assertEqual(contents["agents"], {"version": "v1", "agents": {}})
        self.assertEqual(contents["version"]["configVersion"], "v1")

    def test_inspect_fails_on_corrupt_file(self):
        init_project(self.root)
        (self.root / ".modix" / "brains.json").write_text("nope", encoding="utf-8")
        with self.assertRaises(InvalidConfigError):
            inspect_project(self.root)


class DependencyCheckTests(unittest.TestCase):
    def test_installed_tool_reports_first_line(self):
        completed = SimpleNamespace(returncode=0, stdout="1.0.3 (Claude Code)\nextra\n", stderr="")
        with patch("modix.project.subprocess.run", return_value=completed) as run:
            result = check_tool(Tool("claude-code", "claude", "Claude Code CLI"))

        run.assert_called_once()
        self.assertEqual(run.call_args[0][0], ["claude", "--version"])
        self.assertTrue(result["installed"])
        self.assertEqual(result["version"], "1.0.3 (Claude Code)")

    def test_git_falls_back_to_version_subcommand(self):
        responses = [
            SimpleNamespace(returncode=1, stdout="", stderr="unknown option"),
            SimpleNamespace(returncode=0, stdout="git version 2.43.0\n", stderr=""),
        ]
        with patch("modix.project.subprocess.run", side_effect=responses) as run:
            result = check_tool(Tool("git", "git", "Version control system"))

        self.assertEqual(run.call_count, 2)
        self.assertEqual(result["version"], "git version 2.43.0")

    def test_missing_and_hanging_tools(self):
        side_effects = [FileNotFoundError("codex"), subprocess.TimeoutExpired("gemini", 10)]
        tools = [Tool("codex-cli", "codex", "OpenAI Codex CLI"), Tool("gemini-cli", "gemini", "Google Gemini CLI")]
        with patch("modix.project.subprocess.run", side_effect=side_effects):
            results = check_dependencies(tools)

        self.assertEqual([result["installed"] for result in results], [False, False])
        self.assertEqual(results[0]["version"], "unknown")


if __name__ == "__main__":
    unittest.main()
