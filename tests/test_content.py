"""
Tests for content types and their prompt profiles
"""

import pytest

from storetranslate.content import CONTENT_PROFILES, ContentType, profile_for


class TestContentType:
    """Tests for ContentType parsing."""

    def test_values(self):
        assert ContentType.NAME.value == "name"
        assert ContentType.SUBTITLE.value == "subtitle"
        assert ContentType.DESCRIPTION.value == "description"
        assert ContentType.KEYWORDS.value == "keywords"
        assert ContentType.RELEASE_NOTES.value == "release_notes"
        assert ContentType.DEFAULT.value == "default"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("name", ContentType.NAME),
            ("Subtitle", ContentType.SUBTITLE),
            ("release-notes", ContentType.RELEASE_NOTES),
            (" keywords ", ContentType.KEYWORDS),
            (ContentType.DESCRIPTION, ContentType.DESCRIPTION),
        ],
    )
    def test_parse(self, value, expected):
        assert ContentType.parse(value) is expected

    def test_unknown_falls_back_to_default(self):
        assert ContentType.parse("promotional_text") is ContentType.DEFAULT
        assert ContentType.parse(None) is ContentType.DEFAULT


class TestContentProfiles:
    """Tests for the content profile table."""

    def test_every_type_has_a_profile(self):
        assert set(CONTENT_PROFILES) == set(ContentType)

    def test_guidelines_are_distinct(self):
        guidelines = [profile.guidelines for profile in CONTENT_PROFILES.values()]
        assert len(set(guidelines)) == len(guidelines)

    def test_creative_types_run_hotter(self):
        assert profile_for("subtitle").temperature > profile_for("description").temperature
        assert profile_for("name").temperature > profile_for("keywords").temperature

    def test_quote_stripping_only_for_name_and_subtitle(self):
        stripped = {ct for ct, profile in CONTENT_PROFILES.items() if profile.strip_quotes}
        assert stripped == {ContentType.NAME, ContentType.SUBTITLE}

    def test_brand_guideline_needs_app_name(self):
        profile = profile_for(ContentType.NAME)
        assert profile.render_guidelines() == list(profile.guidelines)

        lines = profile.render_guidelines("Wisser")
        assert lines[0] == "The app name 'Wisser' must stay first and unchanged."
        assert lines[1:] == list(profile.guidelines)

    def test_no_brand_guideline_for_description(self):
        profile = profile_for(ContentType.DESCRIPTION)
        assert profile.render_guidelines("Wisser") == list(profile.guidelines)
