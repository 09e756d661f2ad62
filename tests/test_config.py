"""
Test cases for configuration loading.
"""
import tempfile
import unittest
import sys
from pathlib import Path

import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))

from handsign.config import DEFAULT_CONFIG_PATH, load_config, config_from_dict, parse_cli_args, Cfg

DEFAULT_CONFIG = Path(__file__).parent.parent / "handsign" / "config.default.yaml"


class TestLoadConfig(unittest.TestCase):

    def test_defaults(self):
        cfg = load_config()
        self.assertIsInstance(cfg, Cfg)
        self.assertEqual(cfg.letters.min_confidence, 0.7)
        self.assertEqual(cfg.letters.cooldown_ms, 1200)
        self.assertEqual(cfg.letters.history_len, 4)
        self.assertEqual(cfg.letters.stable_repeats, 2)
        self.assertEqual(cfg.presence.enter_frames, 3)
        self.assertEqual(cfg.presence.exit_frames, 5)
        self.assertEqual(cfg.motion.buffer_size, 20)
        self.assertEqual(cfg.motion.evaluation_interval_ms, 2000)
        self.assertEqual(cfg.motion.chin_landmark, 152)
        self.assertEqual(cfg.display.mode, "static")

    def test_default_file_ships_with_package(self):
        """The default file sits beside the module so installed copies find it."""
        self.assertEqual(DEFAULT_CONFIG_PATH.parent, Path(sys.modules["handsign.config"].__file__).parent)
        self.assertTrue(DEFAULT_CONFIG_PATH.exists())
        self.assertEqual(load_config(), Cfg())

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/handsign.yaml")

    def _write(self, data):
        tmp = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False)
        with tmp:
            yaml.safe_dump(data, tmp)
        self.addCleanup(Path(tmp.name).unlink)
        return tmp.name

    def test_override(self):
        with open(DEFAULT_CONFIG) as f:
            data = yaml.safe_load(f)
        data["display"]["mode"] = "motion"
        data["letters"]["cooldown_ms"] = 500
        cfg = load_config(self._write(data))
        self.assertEqual(cfg.display.mode, "motion")
        self.assertEqual(cfg.letters.cooldown_ms, 500)

    def test_bad_mode(self):
        with open(DEFAULT_CONFIG) as f:
            data = yaml.safe_load(f)
        data["display"]["mode"] = "video"
        with self.assertRaises(ValueError):
            load_config(self._write(data))

    def test_partial_file_uses_defaults(self):
        cfg = load_config(self._write({"presence": {"enter_frames": 1}}))
        self.assertEqual(cfg.presence.enter_frames, 1)
        self.assertEqual(cfg.presence.exit_frames, 5)
        self.assertEqual(cfg.letters, Cfg().letters)

    def test_empty_file(self):
        path = self._write({})
        self.assertEqual(load_config(path), Cfg())


class TestConfigFromDict(unittest.TestCase):

    def test_unknown_section(self):
        with self.assertRaises(ValueError):
            config_from_dict({"audio": {}})

    def test_unknown_key(self):
        with self.assertRaises(ValueError):
            config_from_dict({"letters": {"cooldown": 100}})

    def test_repeats_exceed_history(self):
        with self.assertRaises(ValueError):
            config_from_dict({"letters": {"history_len": 2, "stable_repeats": 3}})

    def test_scalar_section(self):
        with self.assertRaises(ValueError):
            config_from_dict({"letters": 5})

    def test_list_section(self):
        with self.assertRaises(ValueError):
            config_from_dict({"motion": [20, 2000]})

    def test_falsy_scalar_section(self):
        with self.assertRaises(ValueError):
            config_from_dict({"presence": 0})

    def test_empty_section_uses_defaults(self):
        self.assertEqual(config_from_dict({"display": None}), Cfg())

    def test_top_level_not_a_mapping(self):
        with self.assertRaises(ValueError):
            config_from_dict(["letters", "motion"])

    def test_non_positive_buffer(self):
        with self.assertRaises(ValueError):
            config_from_dict({"motion": {"buffer_size": 0}})


class TestParseCliArgs(unittest.TestCase):

    def test_no_arguments(self):
        self.assertEqual(parse_cli_args([]), (None, None))

    def test_config_and_motion(self):
        self.assertEqual(parse_cli_args(["--motion", "--config", "my.yaml"]), ("my.yaml", "motion"))

    def test_trailing_config_flag(self):
        """A bare --config at the end is reported, not indexed past."""
        with self.assertRaises(ValueError):
            parse_cli_args(["--motion", "--config"])

    def test_config_followed_by_flag(self):
        with self.assertRaises(ValueError):
            parse_cli_args(["--config", "--motion"])


if __name__ == "__main__":
    unittest.main()
