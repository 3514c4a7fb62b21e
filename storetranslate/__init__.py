"""
storetranslate - translate app store metadata with OpenAI.

Reads the master-locale text from a fastlane metadata tree and writes a
translation for every other locale found there:
- Release notes, descriptions, subtitles, keywords and app names
- iOS (fastlane/metadata/<locale>) and Android
  (fastlane/metadata/android/<locale>/changelogs) layouts
- Skips locales whose file is already newer than the master file
- Retries when a translation exceeds the character limit

Usage:
    from storetranslate import MetadataTranslator, TranslateConfig

    config = TranslateConfig.load(overrides={"platform": "android"})
    summary = MetadataTranslator(config).run()
"""

from storetranslate.config import ConfigError, TranslateConfig
from storetranslate.content import CONTENT_PROFILES, ContentProfile, ContentType
from storetranslate.metadata import MetadataTranslator, Platform, RunSummary, list_locales
from storetranslate.translator import MAX_ATTEMPTS, Translator

VERSION = "1.0.0"

__all__ = [
    # Orchestration
    "MetadataTranslator",
    "Platform",
    "RunSummary",
    "list_locales",
    # Prompt and retry
    "Translator",
    "MAX_ATTEMPTS",
    "ContentType",
    "ContentProfile",
    "CONTENT_PROFILES",
    # Configuration
    "TranslateConfig",
    "ConfigError",
    "VERSION",
]
