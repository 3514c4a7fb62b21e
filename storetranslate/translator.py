"""
Prompt construction and length-constrained translation requests.

Provides:
- A translation prompt tailored to each content type
- A single completion request per attempt
- Bounded retries while the answer exceeds the character limit
- Fallback to the source text once the retries are exhausted
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.markup import escape

from storetranslate import ui
from storetranslate.client import CompletionClient, CompletionError
from storetranslate.content import ContentType, profile_for

if TYPE_CHECKING:
    from storetranslate.config import TranslateConfig

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5

# Characters treated as quotes around a model answer
ENCLOSING_QUOTES = "\"'“”‘’«»„"
# Characters removed from the source text when falling back to it
FALLBACK_QUOTES = "\"“”«»„"


class Translator:
    """
    Translates one piece of store metadata into a target locale.

    Features:
    - Content-type specific guidelines and default temperatures
    - Optional free-form context for the model
    - Retries that show the model its previously rejected, too long answers
    - Never retries on API errors; the caller gets None instead
    """

    def __init__(self, config: TranslateConfig, client: CompletionClient | None = None):
        """
        Initialize the translator.

        Args:
            config: Effective configuration (model, master locale, context, ...)
            client: Completion client; created from the config on first use if omitted
        """
        self.config = config
        self._client = client

    @property
    def client(self) -> CompletionClient:
        if self._client is None:
            self._client = CompletionClient(
                api_token=self.config.api_token,
                timeout=self.config.request_timeout,
            )
        return self._client

    def temperature_for(self, content_type: ContentType) -> float:
        if self.config.temperature is not None:
            return self.config.temperature
        return profile_for(content_type).temperature

    def build_prompt(
        self,
        text: str,
        target_locale: str,
        content_type: ContentType,
        max_chars: int | None = None,
        rejected: Sequence[str] = (),
    ) -> str:
        """
        Build the instruction prompt sent to the model.

        Args:
            text: Source text in the master locale
            target_locale: Locale to translate into
            content_type: Kind of metadata being translated
            max_chars: Hard character limit, if any
            rejected: Earlier answers that were too long

        Returns:
            The full prompt
        """
        profile = profile_for(content_type)
        source_locale = self.config.master_locale

        prompt = "# Your role\n"
        prompt += (
            "You are an expert translator specializing in localizing content for apps "
            "published on the Apple App Store and Google Play. You understand cultural "
            "nuances and know how to adapt content to fit the target audience and the "
            "stores' metadata guidelines.\n\n"
        )
        prompt += "# Your task\n"
        prompt += (
            f"Translate the following {profile.label} from {source_locale} to {target_locale}.\n"
        )
        prompt += "**Source text:**\n"
        prompt += '"""\n'
        prompt += text
        prompt += '\n"""\n\n'

        if self.config.context:
            prompt += "## Context\n"
            prompt += '"""\n'
            prompt += self.config.context
            prompt += '\n"""\n\n'

        prompt += "# Important Guidelines:\n"
        for line in profile.render_guidelines(self.config.app_name):
            prompt += f"* {line}\n"
        if max_chars is not None:
            prompt += f"* The translation must not exceed **{max_chars} characters** (including spaces).\n"
        if rejected:
            prompt += (
                "* These earlier versions were rejected for being too long. "
                "Do not repeat them; write something shorter:\n"
            )
            for variant in rejected:
                prompt += f"  - \"{variant}\" ({len(variant)} characters)\n"
        prompt += "* Provide only the final translated text, without quotes or explanations.\n"

        return prompt

    def translate(
        self,
        text: str,
        target_locale: str,
        content_type: ContentType | str | None = None,
        max_chars: int | None = None,
    ) -> str | None:
        """
        Translate text into the target locale, enforcing the character limit.

        Args:
            text: Source text in the master locale
            target_locale: Locale to translate into
            content_type: Kind of metadata (default: configured content type)
            max_chars: Character limit (default: configured max_chars)

        Returns:
            The translated text, the quote-stripped source text if every
            attempt was too long, or None if the API reported an error.

        Note:
            The fallback text is returned even when it is itself longer
            than max_chars.
        """
        content_type = (
            ContentType.parse(content_type) if content_type is not None else self.config.content_type
        )
        if max_chars is None:
            max_chars = self.config.max_chars
        temperature = self.temperature_for(content_type)

        rejected: list[str] = []
        for attempt in range(1, MAX_ATTEMPTS + 1):
            prompt = self.build_prompt(text, target_locale, content_type, max_chars, rejected)
            logger.debug(f"Prompt for {target_locale} (attempt {attempt}/{MAX_ATTEMPTS}):\n{prompt}")

            try:
                with ui.spinner(f"Translating to {escape(target_locale)}..."):
                    answer = self.client.complete(
                        prompt, model=self.config.model_name, temperature=temperature
                    )
            except CompletionError as e:
                ui.error(f"Error translating text to {escape(target_locale)}: {escape(str(e))}")
                return None

            translated = self._clean_answer(answer, content_type)

            if max_chars is None or len(translated) <= max_chars:
                ui.info(f"Translated text ({escape(target_locale)}): {escape(translated)}")
                return translated

            if attempt < MAX_ATTEMPTS:
                rejected.append(translated)
                ui.warning(
                    f'Translated text ("{escape(translated)}") exceeds the max_chars limit ({max_chars}). '
                    f"Retrying with more emphasis on brevity "
                    f"(attempt {attempt + 1}/{MAX_ATTEMPTS})..."
                )

        fallback = remove_quotes(text)
        ui.warning(
            f"No translation for {escape(target_locale)} fit in {max_chars} characters after "
            f"{MAX_ATTEMPTS} attempts. Using the source text instead.",
            details=escape(fallback),
        )
        return fallback

    def _clean_answer(self, answer: str, content_type: ContentType) -> str:
        translated = answer.strip()
        if profile_for(content_type).strip_quotes:
            translated = strip_enclosing_quotes(translated)

        app_name = self.config.app_name
        if content_type is ContentType.NAME and app_name and not translated.startswith(app_name):
            translated = f"{app_name}: {translated}"

        return translated


def strip_enclosing_quotes(text: str) -> str:
    return text.strip(ENCLOSING_QUOTES).strip()


def remove_quotes(text: str) -> str:
    """Remove double quote characters anywhere in the text and trim it."""
    # apostrophes and single quotes (' ‘ ’) are never removed
    for quote in FALLBACK_QUOTES:
        text = text.replace(quote, "")
    return text.strip()
