"""
Tests for configuration resolution.

Tests cover:
- Defaults
- Environment variable overrides
- YAML config file loading and malformed files
- Precedence of explicit values
- Validation and coercion errors
"""

import tempfile
import unittest
from pathlib import Path

from storetranslate.config import (
    CONFIG_FILE_NAME,
    ConfigError,
    TranslateConfig,
    config_file_path,
    load_config_file,
    mask_token,
)
from storetranslate.content import ContentType
from storetranslate.metadata import Platform


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def write_config(self, content: str) -> Path:
        path = self.root / CONFIG_FILE_NAME
        path.write_text(content, encoding="utf-8")
        return path


class TestDefaults(ConfigTestCase):
    """Tests for default values."""

    def test_defaults(self):
        config = TranslateConfig.load(root=self.root, environ={})

        self.assertEqual(config.api_token, "")
        self.assertEqual(config.model_name, "gpt-4-turbo-preview")
        self.assertEqual(config.request_timeout, 30)
        self.assertIsNone(config.temperature)
        self.assertEqual(config.master_locale, "en-US")
        self.assertIs(config.platform, Platform.IOS)
        self.assertIsNone(config.context)
        self.assertEqual(config.input_file, "release_notes.txt")
        self.assertIsNone(config.max_chars)
        self.assertIs(config.content_type, ContentType.RELEASE_NOTES)
        self.assertIsNone(config.app_name)
        self.assertEqual(config.request_delay, 0)
        self.assertFalse(config.force)
        self.assertFalse(config.dry_run)
        self.assertEqual(config.root, self.root)


class TestEnvironment(ConfigTestCase):
    """Tests for environment variable overrides."""

    def test_env_values_are_coerced(self):
        environ = {
            "GPT_API_KEY": "sk-env",
            "GPT_MODEL_NAME": "gpt-4o",
            "GPT_REQUEST_TIMEOUT": "60",
            "GPT_TEMPERATURE": "0.9",
            "MASTER_LOCALE": "de-DE",
            "PLATFORM": "android",
            "GPT_CONTEXT": "A vocabulary app",
            "INPUT_FILE_NAME": "description.txt",
            "GPT_MAX_CHARS": "170",
            "CONTENT_TYPE": "description",
            "APP_NAME": "Wisser",
        }
        config = TranslateConfig.load(root=self.root, environ=environ)

        self.assertEqual(config.api_token, "sk-env")
        self.assertEqual(config.model_name, "gpt-4o")
        self.assertEqual(config.request_timeout, 60)
        self.assertEqual(config.temperature, 0.9)
        self.assertEqual(config.master_locale, "de-DE")
        self.assertIs(config.platform, Platform.ANDROID)
        self.assertEqual(config.context, "A vocabulary app")
        self.assertEqual(config.input_file, "description.txt")
        self.assertEqual(config.max_chars, 170)
        self.assertIs(config.content_type, ContentType.DESCRIPTION)
        self.assertEqual(config.app_name, "Wisser")

    def test_openai_api_key_fallback(self):
        config = TranslateConfig.load(root=self.root, environ={"OPENAI_API_KEY": "sk-openai"})
        self.assertEqual(config.api_token, "sk-openai")

    def test_gpt_api_key_preferred(self):
        environ = {"GPT_API_KEY": "sk-gpt", "OPENAI_API_KEY": "sk-openai"}
        config = TranslateConfig.load(root=self.root, environ=environ)
        self.assertEqual(config.api_token, "sk-gpt")

    def test_empty_env_value_ignored(self):
        config = TranslateConfig.load(root=self.root, environ={"GPT_MAX_CHARS": "  "})
        self.assertIsNone(config.max_chars)

    def test_invalid_number_raises(self):
        with self.assertRaises(ConfigError):
            TranslateConfig.load(root=self.root, environ={"GPT_MAX_CHARS": "many"})

    def test_invalid_platform_raises(self):
        with self.assertRaises(ConfigError) as context:
            TranslateConfig.load(root=self.root, environ={"PLATFORM": "windows"})
        self.assertIn("Unsupported platform", str(context.exception))

    def test_unknown_content_type_uses_default(self):
        config = TranslateConfig.load(root=self.root, environ={"CONTENT_TYPE": "promo_text"})
        self.assertIs(config.content_type, ContentType.DEFAULT)


class TestConfigFile(ConfigTestCase):
    """Tests for the YAML config file."""

    def test_file_values_used(self):
        self.write_config("platform: android\nmax_chars: 80\napp_name: Wisser\n")
        config = TranslateConfig.load(root=self.root, environ={})

        self.assertIs(config.platform, Platform.ANDROID)
        self.assertEqual(config.max_chars, 80)
        self.assertEqual(config.app_name, "Wisser")

    def test_env_overrides_file(self):
        self.write_config("master_locale: fr-FR\n")
        config = TranslateConfig.load(root=self.root, environ={"MASTER_LOCALE": "de-DE"})
        self.assertEqual(config.master_locale, "de-DE")

    def test_explicit_overrides_env_and_file(self):
        self.write_config("model_name: file-model\n")
        config = TranslateConfig.load(
            overrides={"model_name": "cli-model", "max_chars": None},
            root=self.root,
            environ={"GPT_MODEL_NAME": "env-model", "GPT_MAX_CHARS": "50"},
        )
        self.assertEqual(config.model_name, "cli-model")
        self.assertEqual(config.max_chars, 50)

    def test_config_path_from_environment(self):
        custom = self.root / "custom.yaml"
        custom.write_text("input_file: subtitle.txt\n", encoding="utf-8")

        environ = {"STORETRANSLATE_CONFIG": str(custom)}
        self.assertEqual(config_file_path(self.root, environ), custom)

        config = TranslateConfig.load(root=self.root, environ=environ)
        self.assertEqual(config.input_file, "subtitle.txt")

    def test_malformed_yaml_ignored(self):
        self.write_config("platform: [android\n")
        with self.assertLogs("storetranslate.config", level="WARNING") as logs:
            config = TranslateConfig.load(root=self.root, environ={})

        self.assertIs(config.platform, Platform.IOS)
        self.assertIn("Malformed YAML", logs.output[0])

    def test_non_mapping_ignored(self):
        path = self.write_config("just a plain string")
        with self.assertLogs("storetranslate.config", level="WARNING"):
            self.assertEqual(load_config_file(path), {})

    def test_empty_file(self):
        path = self.write_config("")
        self.assertEqual(load_config_file(path), {})

    def test_unknown_keys_ignored(self):
        path = self.write_config("platform: android\ncolour: blue\nroot: /elsewhere\n")
        with self.assertLogs("storetranslate.config", level="WARNING") as logs:
            values = load_config_file(path)

        self.assertEqual(values, {"platform": "android"})
        self.assertIn("colour", logs.output[0])

    def test_missing_file(self):
        self.assertEqual(load_config_file(self.root / "missing.yaml"), {})


class TestValidation(unittest.TestCase):
    """Tests for value validation."""

    def test_non_positive_max_chars(self):
        with self.assertRaises(ConfigError):
            TranslateConfig(max_chars=0)

    def test_temperature_range(self):
        with self.assertRaises(ConfigError):
            TranslateConfig(temperature=2.5)
        self.assertEqual(TranslateConfig(temperature="1.5").temperature, 1.5)

    def test_negative_request_delay(self):
        with self.assertRaises(ConfigError):
            TranslateConfig(request_delay=-1)

    def test_boolean_strings(self):
        config = TranslateConfig(force="yes", dry_run="false")
        self.assertTrue(config.force)
        self.assertFalse(config.dry_run)

    def test_validate_requires_token(self):
        with self.assertRaises(ConfigError) as context:
            TranslateConfig().validate()
        self.assertIn("API token is required", str(context.exception))

    def test_validate_dry_run_without_token(self):
        TranslateConfig(dry_run=True).validate()

    def test_app_name_not_required(self):
        TranslateConfig(api_token="sk-test", content_type="name").validate()


class TestDisplay(unittest.TestCase):
    """Tests for the display dictionary."""

    def test_mask_token(self):
        self.assertEqual(mask_token(""), "(not set)")
        self.assertEqual(mask_token("short"), "*****")
        self.assertEqual(mask_token("sk-1234567890abcd"), "sk-...abcd")

    def test_display_dict_masks_token(self):
        config = TranslateConfig(api_token="sk-1234567890abcd", max_chars=30)
        display = config.as_display_dict()

        self.assertEqual(display["API token"], "sk-...abcd")
        self.assertEqual(display["Max chars"], "30")
        self.assertEqual(display["Temperature"], "content default")
        self.assertNotIn("sk-1234567890abcd", "".join(display.values()))


if __name__ == "__main__":
    unittest.main()
