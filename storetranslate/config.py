"""
Configuration for storetranslate.

Handles:
- Option defaults
- Environment variable overrides (the same names the fastlane plugin used)
- An optional YAML config file in the project root
- Type coercion and validation

Resolution order for every option:
1. Explicit value (command line argument)
2. Environment variable
3. Config file (.storetranslate.yaml, or the path in STORETRANSLATE_CONFIG)
4. Default
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from storetranslate.content import ContentType
from storetranslate.metadata import Platform

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".storetranslate.yaml"
CONFIG_PATH_ENV = "STORETRANSLATE_CONFIG"

DEFAULT_MODEL = "gpt-4-turbo-preview"
DEFAULT_TIMEOUT = 30
DEFAULT_MASTER_LOCALE = "en-US"
DEFAULT_INPUT_FILE = "release_notes.txt"

# Environment variables checked for each option, first match wins
ENV_VARS: dict[str, tuple[str, ...]] = {
    "api_token": ("GPT_API_KEY", "OPENAI_API_KEY"),
    "model_name": ("GPT_MODEL_NAME",),
    "request_timeout": ("GPT_REQUEST_TIMEOUT",),
    "temperature": ("GPT_TEMPERATURE",),
    "master_locale": ("MASTER_LOCALE",),
    "platform": ("PLATFORM",),
    "context": ("GPT_CONTEXT",),
    "input_file": ("INPUT_FILE_NAME",),
    "max_chars": ("GPT_MAX_CHARS",),
    "content_type": ("CONTENT_TYPE",),
    "app_name": ("APP_NAME",),
    "request_delay": ("GPT_REQUEST_DELAY",),
}

INT_OPTIONS = {"request_timeout", "max_chars", "request_delay"}
BOOL_OPTIONS = {"force", "dry_run"}
TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass
class TranslateConfig:
    """Effective settings for one translation run."""

    api_token: str = ""
    model_name: str = DEFAULT_MODEL
    request_timeout: int = DEFAULT_TIMEOUT
    temperature: float | None = None
    master_locale: str = DEFAULT_MASTER_LOCALE
    platform: Platform = Platform.IOS
    context: str | None = None
    input_file: str = DEFAULT_INPUT_FILE
    max_chars: int | None = None
    content_type: ContentType = ContentType.RELEASE_NOTES
    app_name: str | None = None
    request_delay: int = 0
    force: bool = False
    dry_run: bool = False
    root: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        self.platform = _parse_platform(self.platform)
        self.content_type = ContentType.parse(self.content_type)

        for name in INT_OPTIONS:
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, _parse_int(name, value))
        if self.temperature is not None:
            self.temperature = _parse_float("temperature", self.temperature)
        for name in BOOL_OPTIONS:
            value = getattr(self, name)
            if isinstance(value, str):
                setattr(self, name, value.strip().lower() in TRUE_VALUES)

        if self.max_chars is not None and self.max_chars < 1:
            raise ConfigError(f"max_chars must be a positive integer, got {self.max_chars}")
        if self.temperature is not None and not 0 <= self.temperature <= 2:
            raise ConfigError(f"temperature must be between 0 and 2, got {self.temperature}")
        if self.request_timeout < 1:
            raise ConfigError(f"request_timeout must be at least 1 second, got {self.request_timeout}")
        if self.request_delay < 0:
            raise ConfigError(f"request_delay cannot be negative, got {self.request_delay}")

    @classmethod
    def load(
        cls,
        overrides: Mapping[str, Any] | None = None,
        root: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> TranslateConfig:
        """
        Build a configuration from explicit values, the environment and the config file.

        Args:
            overrides: Explicit values; None entries are treated as unset
            root: Project root holding fastlane/ and the config file (default: cwd)
            environ: Environment mapping (default: os.environ)

        Returns:
            The resolved configuration

        Raises:
            ConfigError: If a value cannot be coerced or is out of range
        """
        overrides = dict(overrides or {})
        environ = os.environ if environ is None else environ
        root_path = Path(root) if root is not None else Path.cwd()

        file_values = load_config_file(config_file_path(root_path, environ))

        values: dict[str, Any] = {}
        for option in fields(cls):
            name = option.name
            if name == "root":
                continue
            if overrides.get(name) is not None:
                values[name] = overrides[name]
                continue
            env_value = _lookup_env(name, environ)
            if env_value is not None:
                values[name] = env_value
                continue
            if file_values.get(name) is not None:
                values[name] = file_values[name]

        return cls(root=root_path, **values)

    def validate(self) -> None:
        """
        Check that the configuration is usable for a real run.

        Raises:
            ConfigError: If the API token is missing and this is not a dry run
        """
        if not self.dry_run and not self.api_token:
            raise ConfigError(
                "API token is required. Set GPT_API_KEY (or OPENAI_API_KEY) or pass --api-token."
            )

    def as_display_dict(self) -> dict[str, str]:
        """Human readable settings with the API token masked."""
        return {
            "API token": mask_token(self.api_token),
            "Model": self.model_name,
            "Request timeout": f"{self.request_timeout}s",
            "Temperature": (
                str(self.temperature) if self.temperature is not None else "content default"
            ),
            "Master locale": self.master_locale,
            "Platform": self.platform.value,
            "Input file": self.input_file,
            "Content type": self.content_type.value,
            "Max chars": str(self.max_chars) if self.max_chars is not None else "-",
            "App name": self.app_name or "-",
            "Context": self.context or "-",
            "Request delay": f"{self.request_delay}s",
            "Root": str(self.root),
        }


def config_file_path(root: Path, environ: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if environ is None else environ
    explicit = environ.get(CONFIG_PATH_ENV, "").strip()
    if explicit:
        return Path(explicit).expanduser()
    return root / CONFIG_FILE_NAME


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load option values from a YAML config file.

    Returns:
        Mapping of option name to value, or an empty dict when the file is
        missing, empty, malformed or not a mapping
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning(f"Malformed YAML in config file {path}: {e}. Ignoring it.")
        return {}
    except OSError as e:
        logger.warning(f"Could not read config file {path}: {e}")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            f"Config file {path} contains {type(data).__name__}, expected a mapping. Ignoring it."
        )
        return {}

    known = {option.name for option in fields(TranslateConfig)} - {"root"}
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        logger.warning(f"Ignoring unknown options in {path}: {', '.join(unknown)}")

    logger.debug(f"Loaded config file {path}")
    return {key: value for key, value in data.items() if key in known}


def mask_token(token: str) -> str:
    if not token:
        return "(not set)"
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:3]}...{token[-4:]}"


def _lookup_env(name: str, environ: Mapping[str, str]) -> str | None:
    for env_name in ENV_VARS.get(name, ()):
        value = environ.get(env_name, "")
        if value.strip():
            return value
    return None


def _parse_platform(value: Platform | str) -> Platform:
    try:
        return Platform.parse(value)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        return int(str(value).strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


def _parse_float(name: str, value: Any) -> float:
    try:
        return float(str(value).strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
