"""
Content types and their prompt profiles.

Each content type maps to the guideline lines placed in the prompt, the
sampling temperature used when none is configured, and whether enclosing
quotes are stripped from the model's answer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ContentType(str, Enum):
    """Kinds of store metadata that can be translated."""

    NAME = "name"
    SUBTITLE = "subtitle"
    DESCRIPTION = "description"
    KEYWORDS = "keywords"
    RELEASE_NOTES = "release_notes"
    DEFAULT = "default"

    @classmethod
    def parse(cls, value: ContentType | str | None) -> ContentType:
        """Resolve a content type from its name, falling back to DEFAULT."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.DEFAULT

        normalized = str(value).strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            logger.warning(f"Unknown content type '{value}', using generic guidelines")
            return cls.DEFAULT


@dataclass(frozen=True)
class ContentProfile:
    """Prompt settings for one content type."""

    label: str
    guidelines: tuple[str, ...]
    temperature: float
    strip_quotes: bool = False
    brand_guideline: str | None = None

    def render_guidelines(self, app_name: str | None = None) -> list[str]:
        lines = list(self.guidelines)
        if self.brand_guideline and app_name:
            lines.insert(0, self.brand_guideline.format(app_name=app_name))
        return lines


CONTENT_PROFILES: dict[ContentType, ContentProfile] = {
    ContentType.NAME: ContentProfile(
        label="app name",
        guidelines=(
            "Keep the brand name untranslated; translate or adapt only the descriptive part.",
            "Keep it short and memorable. Do not add taglines or punctuation at the end.",
        ),
        temperature=0.7,
        strip_quotes=True,
        brand_guideline="The app name '{app_name}' must stay first and unchanged.",
    ),
    ContentType.SUBTITLE: ContentProfile(
        label="subtitle",
        guidelines=(
            "If an exact translation does not fit, adapt the subtitle creatively so it stays "
            "engaging, concise and culturally relevant.",
            "Capture the core message and appeal of the original rather than its literal wording.",
        ),
        temperature=0.7,
        strip_quotes=True,
        brand_guideline="Do not repeat the app name ('{app_name}'); it is shown next to the subtitle.",
    ),
    ContentType.DESCRIPTION: ContentProfile(
        label="app description",
        guidelines=(
            "Translate faithfully and completely; do not drop features or sentences.",
            "Preserve paragraphs, line breaks, bullet points and any URLs exactly.",
            "Use the natural, persuasive tone of store listings written by native speakers.",
        ),
        temperature=0.3,
    ),
    ContentType.KEYWORDS: ContentProfile(
        label="search keywords",
        guidelines=(
            "Return a comma-separated list with no space after the commas.",
            "Localize each keyword to the terms people actually search for in the target "
            "market instead of translating literally.",
            "Do not repeat words and do not include the app name.",
        ),
        temperature=0.3,
    ),
    ContentType.RELEASE_NOTES: ContentProfile(
        label="release notes",
        guidelines=(
            "Keep the structure of the original: one line per change, same bullets and order.",
            "Keep version numbers, product names and technical terms unchanged.",
            "Use a friendly, concise tone suitable for a 'What's New' section.",
        ),
        temperature=0.5,
    ),
    ContentType.DEFAULT: ContentProfile(
        label="text",
        guidelines=(
            "Translate accurately while sounding natural to native speakers.",
            "Preserve formatting, line breaks and placeholders.",
        ),
        temperature=0.5,
    ),
}


def profile_for(content_type: ContentType | str | None) -> ContentProfile:
    return CONTENT_PROFILES[ContentType.parse(content_type)]
