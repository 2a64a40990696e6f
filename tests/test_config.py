"""Tests for config validation, YAML round trips and type safety."""

import os
import shutil
import tempfile
import unittest

import yaml

from AssetMill.config import AssetGroup, AssetMillConfig, _merge_dict_to_dataclass
from AssetMill.core.paths import COMPILE_TARGETS


class TestConfigValidation(unittest.TestCase):
    def test_default_config_valid(self):
        AssetMillConfig().validate()

    def test_empty_environment_rejected(self):
        config = AssetMillConfig()
        config.environment = " "
        with self.assertRaises(ValueError):
            config.validate()

    def test_invalid_log_level_rejected(self):
        config = AssetMillConfig()
        config.log_level = "LOUD"
        with self.assertRaises(ValueError):
            config.validate()

    def test_remote_timeout_must_be_positive(self):
        config = AssetMillConfig()
        config.remote.timeout_seconds = 0
        with self.assertRaises(ValueError):
            config.validate()

    def test_overlapping_extensions_rejected(self):
        config = AssetMillConfig()
        config.extensions.javascripts.append("css")
        with self.assertRaises(ValueError) as cm:
            config.validate()
        self.assertIn("css", str(cm.exception))

    def test_bad_compile_target_rejected(self):
        config = AssetMillConfig()
        config.extensions.compile_targets["sass"] = ".css"
        with self.assertRaises(ValueError):
            config.validate()

    def test_filter_aliases_validated(self):
        config = AssetMillConfig()
        config.filters = {
            "A": {"engine": "CssMinFilter", "groups": ["images"]},
            "B": {"engine": "ReplaceFilter", "arguments": "html"},
            "C": {"engin": "ReplaceFilter"},
            "D": {"environments": [""]},
            "E": "CssMinFilter",
        }
        with self.assertRaises(ValueError) as cm:
            config.validate()
        message = str(cm.exception)
        for alias in ("filters.A", "filters.B", "filters.C", "filters.D", "filters.E"):
            self.assertIn(alias, message)

    def test_all_errors_reported_together(self):
        config = AssetMillConfig()
        config.environment = ""
        config.remote.timeout_seconds = -1
        with self.assertRaises(ValueError) as cm:
            config.validate()
        self.assertIn("environment", str(cm.exception))
        self.assertIn("remote.timeout_seconds", str(cm.exception))

    def test_group_for_extension(self):
        config = AssetMillConfig()
        self.assertIs(config.group_for_extension("js"), AssetGroup.JAVASCRIPTS)
        self.assertIs(config.group_for_extension(".SCSS"), AssetGroup.STYLESHEETS)
        self.assertIsNone(config.group_for_extension("png"))

    def test_compile_targets_default_matches_path_rules(self):
        first = AssetMillConfig()
        second = AssetMillConfig()
        self.assertEqual(first.extensions.compile_targets, COMPILE_TARGETS)
        first.extensions.compile_targets["sass"] = "txt"
        self.assertEqual(second.extensions.compile_targets["sass"], "css")
        self.assertEqual(COMPILE_TARGETS["sass"], "css")


class TestConfigYaml(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.path = os.path.join(self.tmpdir, "assetmill.yaml")

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _write(self, data):
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f)

    def test_round_trip(self):
        config = AssetMillConfig()
        config.environment = "staging"
        config.filters = {"Minify": {"engine": "CssMinFilter", "groups": ["stylesheets"]}}
        config.to_yaml(self.path)
        loaded = AssetMillConfig.from_yaml(self.path)
        self.assertEqual(loaded.environment, "staging")
        self.assertEqual(loaded.filters, config.filters)

    def test_nested_sections_merge(self):
        self._write({
            "environment": "local",
            "production_build": False,
            "remote": {"timeout_seconds": 5},
            "extensions": {"compile_targets": {"pcss": "css"}},
        })
        config = AssetMillConfig.from_yaml(self.path)
        self.assertEqual(config.environment, "local")
        self.assertFalse(config.production_build)
        self.assertEqual(config.remote.timeout_seconds, 5.0)
        self.assertIsInstance(config.remote.timeout_seconds, float)
        self.assertEqual(config.extensions.compile_targets["pcss"], "css")
        self.assertEqual(config.extensions.compile_targets["sass"], "css")

    def test_invalid_yaml_raises_value_error(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("environment: [unclosed\n")
        with self.assertRaises(ValueError):
            AssetMillConfig.from_yaml(self.path)

    def test_non_mapping_rejected(self):
        self._write(["a", "b"])
        with self.assertRaises(ValueError):
            AssetMillConfig.from_yaml(self.path)

    def test_missing_file_uses_defaults(self):
        with self.assertLogs("asset_mill.config", level="WARNING"):
            config = AssetMillConfig.from_yaml(os.path.join(self.tmpdir, "nope.yaml"))
        self.assertEqual(config.environment, "production")

    def test_invalid_values_rejected_on_load(self):
        self._write({"remote": {"timeout_seconds": -3}})
        with self.assertRaises(ValueError):
            AssetMillConfig.from_yaml(self.path)


class TestMergeDict(unittest.TestCase):
    def test_unknown_key_warns(self):
        config = AssetMillConfig()
        with self.assertLogs("asset_mill.config", level="WARNING") as cm:
            _merge_dict_to_dataclass(config, {"nonsense": 1})
        self.assertTrue(any("nonsense" in msg for msg in cm.output))

    def test_type_mismatch_keeps_default(self):
        config = AssetMillConfig()
        with self.assertLogs("asset_mill.config", level="WARNING"):
            _merge_dict_to_dataclass(config, {"environment": 42})
        self.assertEqual(config.environment, "production")

    def test_null_keeps_default(self):
        config = AssetMillConfig()
        with self.assertLogs("asset_mill.config", level="WARNING"):
            _merge_dict_to_dataclass(config, {"remote": {"user_agent": None}})
        self.assertEqual(config.remote.user_agent, "AssetMill")


if __name__ == "__main__":
    unittest.main(verbosity=2)
