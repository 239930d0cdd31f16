import json
import os
import stat
import tempfile
import unittest
from pathlib import Path

from modix.claude import (
    build_env,
    is_claude_model,
    load_claude_settings,
    update_claude_env_config,
)
from modix.config import ModixConfig, VendorConfig
from modix.defaults import WELCOME_ANNOUNCEMENT
from modix.errors import InvalidConfigError, NotFoundError


def make_config() -> ModixConfig:
    config = ModixConfig.default()
    config.add_vendor(
        "deepseek",
        VendorConfig(
            company="DeepSeek",
            api_endpoint="https://api.deepseek.com/v1",
            api_key="sk-test",
            models=["deepseek-chat"],
        ),
    )
    return config


class ClaudeSettingsTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.settings_file = Path(self._tmp.name) / ".claude" / "settings.json"

    def tearDown(self):
        self._tmp.cleanup()

    def read_settings(self):
        return json.loads(self.settings_file.read_text(encoding="utf-8"))

    def test_third_party_model_writes_env_block(self):
        update_claude_env_config(make_config(), "deepseek-chat", "deepseek", self.settings_file)

        settings = self.read_settings()
        self.assertEqual(settings["companyAnnouncements"], [WELCOME_ANNOUNCEMENT])
        self.assertEqual(settings["env"], build_env("https://api.deepseek.com/v1", "sk-test", "deepseek-chat"))
        self.assertEqual(settings["env"]["ANTHROPIC_DEFAULT_HAIKU_MODEL"], "deepseek-chat")
        self.assertEqual(settings["env"]["API_TIMEOUT_MS"], "3000000")
        self.assertEqual(settings["env"]["CLAUDE_CODE_DISABLE_NONESSENTIAL_TRAFFIC"], 1)
        self.assertEqual(stat.S_IMODE(os.stat(self.settings_file).st_mode), 0o600)

    def test_claude_model_removes_env_and_keeps_other_keys(self):
        self.settings_file.parent.mkdir(parents=True)
        self.settings_file.write_text(
            json.dumps({"env": {"ANTHROPIC_MODEL": "old"}, "permissions": {"allow": ["Bash"]}}),
            encoding="utf-8",
        )

        update_claude_env_config(make_config(), "Claude", "anthropic", self.settings_file)

        settings = self.read_settings()
        self.assertNotIn("env", settings)
        self.assertNotIn("companyAnnouncements", settings)
        self.assertEqual(settings["permissions"], {"allow": ["Bash"]})

    def test_unknown_model_raises_without_writing(self):
        with self.assertRaises(NotFoundError):
            update_claude_env_config(make_config(), "Claude", "deepseek", self.settings_file)
        self.assertFalse(self.settings_file.exists())

    def test_blank_settings_file_counts_as_empty(self):
        self.settings_file.parent.mkdir(parents=True)
        self.settings_file.write_text("", encoding="utf-8")

        self.assertEqual(load_claude_settings(self.settings_file), {})
        update_claude_env_config(make_config(), "deepseek-chat", "deepseek", self.settings_file)
        self.assertIn("companyAnnouncements", self.read_settings())

    def test_non_object_settings_are_left_untouched(self):
        self.settings_file.parent.mkdir(parents=True)
        original = b'["user", "data"]\n'
        self.settings_file.write_bytes(original)

        with self.assertRaises(InvalidConfigError):
            update_claude_env_config(make_config(), "deepseek-chat", "deepseek", self.settings_file)
        self.assertEqual(self.settings_file.read_bytes(), original)

    def test_is_claude_model(self):
        self.assertTrue(is_claude_model("Claude", "anthropic"))
        self.assertTrue(is_claude_model("claude-sonnet", "proxy"))
        self.assertTrue(is_claude_model("anything", "Anthropic"))
        self.assertFalse(is_claude_model("deepseek-chat", "deepseek"))


if __name__ == "__main__":
    unittest.main()
