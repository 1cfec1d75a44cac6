"""Claude Direct API provider implementation.

This module provides an AIProvider implementation that connects directly
to Anthropic's Messages API using the official SDK.

Usage:
    provider = ClaudeDirectProvider(api_key="sk-ant-...")
    answer = provider.call_model("SECTION: compra ...", system=SYSTEM_PROMPT)
"""
import logging
from typing import Optional

from .base import AIProvider
from .wrapper import ProviderNotConfiguredError

logger = logging.getLogger(__name__)


def extract_text(response: object) -> str:
    """Join the text blocks of a Messages API response.

    Falls back to the serialized response when it carries no text, so the
    caller always gets something to show.
    """
    blocks = getattr(response, "content", None) or []
    texts = [getattr(block, "text", None) for block in blocks]
    answer = "\n".join(t for t in texts if isinstance(t, str) and t).strip()
    if answer:
        return answer
    if hasattr(response, "model_dump_json"):
        return response.model_dump_json()
    return str(response)


class ClaudeDirectProvider(AIProvider):
    """AIProvider implementation using Anthropic's Claude API directly.

    The API key may be missing at construction time; the first call then
    fails with ProviderNotConfiguredError instead of the app refusing to
    start.

    Attributes:
        api_key: Anthropic API key for authentication.
        model: Claude model to use.
        base_url: Anthropic API base URL.
    """

    DEFAULT_MODEL = "claude-3-5-sonnet-latest"
    DEFAULT_BASE_URL = "https://api.anthropic.com"

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.base_url = base_url or self.DEFAULT_BASE_URL
        self._client: Optional[object] = None

    def _get_client(self) -> object:
        """Get or create the Anthropic client.

        Raises:
            ProviderNotConfiguredError: If no API key is configured.
            ImportError: If anthropic package is not installed.
        """
        if not self.api_key:
            raise ProviderNotConfiguredError(
                "ANTHROPIC_API_KEY is not configured (see .env.example)."
            )
        if self._client is None:
            try:
                import anthropic
                self._client = anthropic.Anthropic(
                    api_key=self.api_key,
                    base_url=self.base_url,
                    max_retries=0,
                )
            except ImportError:
                raise ImportError(
                    "anthropic package is required for ClaudeDirectProvider. "
                    "Install it with: pip install anthropic"
                )
        return self._client

    def call_model(
        self,
        prompt: str,
        max_tokens: int = 900,
        system: str | None = None,
    ) -> str:
        """Send a single user turn to Claude and return the joined text."""
        client = self._get_client()

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        logger.debug("Calling Claude model=%s prompt_chars=%d", self.model, len(prompt))
        response = client.messages.create(**kwargs)
        return extract_text(response)
