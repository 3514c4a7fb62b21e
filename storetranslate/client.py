"""
Thin wrapper around the OpenAI chat completion API.
"""

from __future__ import annotations

import logging
from typing import Any

from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Raised when the completion service reports an error."""


class CompletionClient:
    """Sends a single-message chat completion request and returns the text."""

    def __init__(self, api_token: str, timeout: float = 30, client: Any | None = None):
        self._client = client if client is not None else OpenAI(api_key=api_token, timeout=timeout)

    def complete(self, prompt: str, model: str, temperature: float) -> str:
        """
        Request one completion for the prompt.

        Args:
            prompt: Full prompt, sent as a single user message
            model: Model identifier
            temperature: Sampling temperature

        Returns:
            Content of the first choice's message

        Raises:
            CompletionError: If the API call fails or returns no content
        """
        logger.debug(f"Requesting completion from {model} (temperature={temperature})")
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
            )
        except OpenAIError as e:
            message = getattr(e, "message", None) or str(e)
            raise CompletionError(message) from e

        if not response.choices:
            raise CompletionError("No completion choices returned")

        content = response.choices[0].message.content
        if content is None:
            raise CompletionError("Completion returned no content")
        return content
