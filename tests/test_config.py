import unittest

from modix.config import AgentConfig, ModixConfig, VendorConfig
from modix.defaults import PRESET_VENDORS
from modix.errors import AlreadyExistsError, InvalidConfigError, ModixError, NotFoundError


def make_config() -> ModixConfig:
    config = ModixConfig.default()
    config.add_vendor(
        "deepseek",
        VendorConfig(
            company="DeepSeek",
            api_endpoint="https://api.deepseek.com/v1",
            api_key="sk-test",
            models=["deepseek-chat", "deepseek-reasoner"],
        ),
    )
    return config


class ModixConfigTests(unittest.TestCase):
    def test_default_config_is_valid(self):
        config = ModixConfig.default()
        config.validate()
        self.assertEqual(config.current_vendor, "anthropic")
        self.assertEqual(config.current_model, "Claude")
        self.assertEqual(config.vendors["anthropic"].models, ["Claude"])

    def test_presets_are_valid_and_isolated(self):
        config = ModixConfig.with_presets()
        config.validate()
        self.assertEqual(set(config.vendors), set(PRESET_VENDORS))

        config.vendors["deepseek"].models.append("extra")
        self.assertNotIn("extra", PRESET_VENDORS["deepseek"]["models"])

    def test_from_dict_ignores_unknown_keys(self):
        data = make_config().to_dict()
        data["legacy_field"] = "ignored"
        data["vendors"]["deepseek"]["extra"] = True

        config = ModixConfig.from_dict(data)

        self.assertEqual(config.vendors["deepseek"].api_key, "sk-test")
        self.assertEqual(config.to_dict()["vendors"], make_config().to_dict()["vendors"])

    def test_from_dict_rejects_non_object(self):
        with self.assertRaises(InvalidConfigError):
            ModixConfig.from_dict(["not", "a", "dict"])
        with self.assertRaises(InvalidConfigError):
            ModixConfig.from_dict({"vendors": {"broken": "not-an-object"}})

    def test_add_model_keeps_names_globally_unique(self):
        config = make_config()
        config.add_vendor("acme", VendorConfig(company="Acme"))

        with self.assertRaises(AlreadyExistsError):
            config.add_model_to_vendor("acme", "deepseek-chat")
        with self.assertRaises(AlreadyExistsError):
            config.add_vendor("other", VendorConfig(models=["Claude"]))

        self.assertFalse(config.add_model_to_vendor("deepseek", "deepseek-chat"))
        self.assertFalse(config.add_model_to_vendor("deepseek", "deepseek-chat"))
        self.assertEqual(len(config.vendors["deepseek"].models), 2)
        self.assertTrue(config.add_model_to_vendor("acme", "acme-1"))
        self.assertEqual(config.find_vendor_for_model("acme-1"), "acme")

    def test_add_vendor_collapses_repeated_models(self):
        config = make_config()
        config.add_vendor("acme", VendorConfig(company="Acme", models=["acme-1", "acme-2", "acme-1"]))

        self.assertEqual(config.vendors["acme"].models, ["acme-1", "acme-2"])
        config.validate()

    def test_from_dict_rejects_wrong_types(self):
        bad_documents = [
            {"current_vendor": ["x"], "vendors": {"a": {"models": ["m"]}}},
            {"current_agent": 3},
            {"created_at": 12},
            {"vendors": ["anthropic"]},
            {"vendors": {"a": {"models": "abc"}}},
            {"vendors": {"a": {"models": [["nested"]]}}},
            {"vendors": {"a": {"api_key": 42}}},
            {"agents": {"codex": {"enabled": "yes"}}},
        ]
        for document in bad_documents:
            with self.subTest(document=document):
                with self.assertRaises(InvalidConfigError):
                    ModixConfig.from_dict(document)

    def test_from_dict_accepts_null_timestamps(self):
        data = make_config().to_dict()
        config = ModixConfig.from_dict(data)
        self.assertIsNone(config.created_at)
        self.assertEqual(config.vendors["deepseek"].models, ["deepseek-chat", "deepseek-reasoner"])

    def test_add_model_to_missing_vendor(self):
        with self.assertRaises(NotFoundError):
            make_config().add_model_to_vendor("nope", "m")

    def test_remove_current_model_falls_back_to_default(self):
        config = make_config()
        config.set_current_vendor_and_model("deepseek", "deepseek-chat")

        self.assertTrue(config.remove_model("deepseek", "deepseek-chat"))

        self.assertEqual((config.current_vendor, config.current_model), ("anthropic", "Claude"))
        self.assertEqual(config.vendors["deepseek"].models, ["deepseek-reasoner"])
        config.validate()

    def test_remove_other_model_keeps_selection(self):
        config = make_config()
        config.set_current_vendor_and_model("deepseek", "deepseek-chat")

        self.assertFalse(config.remove_model("deepseek", "deepseek-reasoner"))
        self.assertEqual(config.current_model, "deepseek-chat")

    def test_remove_default_model_is_refused(self):
        config = make_config()
        with self.assertRaises(ModixError):
            config.remove_model("anthropic", "Claude")
        with self.assertRaises(NotFoundError):
            config.remove_model("deepseek", "missing")
        with self.assertRaises(NotFoundError):
            config.remove_model("missing", "Claude")

    def test_set_current_requires_existing_pair(self):
        config = make_config()
        with self.assertRaises(NotFoundError):
            config.set_current_vendor_and_model("missing", "Claude")
        with self.assertRaises(NotFoundError):
            config.set_current_vendor_and_model("deepseek", "Claude")
        self.assertEqual(config.current_vendor, "anthropic")

    def test_get_current_model(self):
        config = make_config()
        config.set_current_vendor_and_model("deepseek", "deepseek-reasoner")
        model, vendor_config = config.get_current_model()
        self.assertEqual(model, "deepseek-reasoner")
        self.assertEqual(vendor_config.company, "DeepSeek")

    def test_model_infos_sorted_by_vendor_then_model(self):
        infos = make_config().model_infos()
        self.assertEqual(
            [(info.vendor, info.model) for info in infos],
            [("anthropic", "Claude"), ("deepseek", "deepseek-chat"), ("deepseek", "deepseek-reasoner")],
        )
        self.assertTrue(infos[1].has_api_key)
        self.assertFalse(infos[0].has_endpoint)

    def test_status_counts_configured_vendors(self):
        status = make_config().status()
        self.assertEqual(status.total_vendors, 2)
        self.assertEqual(status.total_models, 3)
        self.assertEqual(status.configured_vendors, 1)

    def test_validate_rejects_duplicate_model(self):
        config = make_config()
        config.vendors["copy"] = VendorConfig(models=["deepseek-chat"])
        with self.assertRaises(InvalidConfigError):
            config.validate()

    def test_validate_rejects_dangling_selection(self):
        config = make_config()
        config.current_model = "gone"
        with self.assertRaises(InvalidConfigError):
            config.validate()

        config = make_config()
        config.default_vendor = "gone"
        with self.assertRaises(InvalidConfigError):
            config.validate()

        with self.assertRaises(InvalidConfigError):
            ModixConfig().validate()

    def test_health_issues_skip_anthropic(self):
        config = make_config()
        self.assertEqual(config.health_issues(), [])

        config.add_vendor("acme", VendorConfig(company="Acme", models=["acme-1"]))
        issues = config.health_issues()
        self.assertIn("Vendor 'acme' has empty API endpoint", issues)
        self.assertIn("Vendor 'acme' has empty API key", issues)

    def test_agent_lifecycle(self):
        config = make_config()
        config.add_agent("claude-code", AgentConfig(name="Claude Code"))
        with self.assertRaises(AlreadyExistsError):
            config.add_agent("claude-code", AgentConfig())

        config.set_current_agent("claude-code")
        config.remove_agent("claude-code")
        self.assertEqual(config.current_agent, "")
        with self.assertRaises(NotFoundError):
            config.remove_agent("claude-code")
        with self.assertRaises(NotFoundError):
            config.set_current_agent("claude-code")


if __name__ == "__main__":
    unittest.main()
