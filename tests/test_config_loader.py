import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from trac_digest.config.loader import DEFAULT_CONFIG, ConfigError, load_config


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def _load_with(self, content=None):
        with tempfile.TemporaryDirectory() as tmp:
            config_dir = Path(tmp)
            if content is not None:
                text = content if isinstance(content, str) else json.dumps(content)
                (config_dir / ".tracdigest_config.json").write_text(text)
            with patch('trac_digest.config.loader._get_config_directory', return_value=config_dir):
                return load_config()

    def test_missing_file_uses_defaults(self) -> None:
        result = self._load_with()
        self.assertEqual(result, DEFAULT_CONFIG)
        self.assertEqual(result["base_url"], "https://core.trac.wordpress.org")
        self.assertEqual(result["limit"], 400)
        self.assertIsNone(result["max_workers"])

    def test_defaults_are_copied(self) -> None:
        result = self._load_with()
        result["limit"] = 1
        self.assertEqual(DEFAULT_CONFIG["limit"], 400)

    def test_overrides(self) -> None:
        result = self._load_with({
            "base_url": "https://trac.example.org",
            "request_timeout": 12.5,
            "limit": 50,
            "max_workers": 4,
            "user_agent": "digest-bot",
        })
        self.assertEqual(result["base_url"], "https://trac.example.org")
        self.assertEqual(result["request_timeout"], 12.5)
        self.assertEqual(result["limit"], 50)
        self.assertEqual(result["max_workers"], 4)
        self.assertEqual(result["user_agent"], "digest-bot")

    def test_partial_file_keeps_other_defaults(self) -> None:
        result = self._load_with({"limit": 10})
        self.assertEqual(result["limit"], 10)
        self.assertEqual(result["base_url"], DEFAULT_CONFIG["base_url"])

    def test_unknown_keys_ignored(self) -> None:
        result = self._load_with({"colour": "blue"})
        self.assertNotIn("colour", result)

    def test_invalid_json(self) -> None:
        with self.assertRaises(ConfigError):
            self._load_with("{invalid}")

    def test_not_an_object(self) -> None:
        with self.assertRaises(ConfigError) as cm:
            self._load_with([1, 2])
        self.assertIn("JSON object", str(cm.exception))

    def test_invalid_types(self) -> None:
        cases = [
            ({"base_url": 1}, "'base_url' must be a string"),
            ({"user_agent": None}, "'user_agent' must be a string"),
            ({"request_timeout": "slow"}, "'request_timeout' must be a positive number"),
            ({"request_timeout": 0}, "'request_timeout' must be a positive number"),
            ({"limit": 0}, "'limit' must be a positive integer"),
            ({"limit": True}, "'limit' must be a positive integer"),
            ({"limit": "10"}, "'limit' must be a positive integer"),
            ({"max_workers": -1}, "'max_workers' must be a positive integer or null"),
        ]
        for data, message in cases:
            with self.subTest(data=data):
                with self.assertRaises(ConfigError) as cm:
                    self._load_with(data)
                self.assertIn(message, str(cm.exception))

    def test_null_max_workers_allowed(self) -> None:
        self.assertIsNone(self._load_with({"max_workers": None})["max_workers"])


if __name__ == "__main__":
    unittest.main()
