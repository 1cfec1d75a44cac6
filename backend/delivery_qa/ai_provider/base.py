"""AIProvider abstract interface for the answering service.

Usage:
    from delivery_qa.ai_provider import ClaudeDirectProvider

    provider = ClaudeDirectProvider(api_key="sk-ant-...")
    text = provider.call_model(prompt, max_tokens=900, system=SYSTEM_PROMPT)
"""
from abc import ABC, abstractmethod


class AIProvider(ABC):
    """Abstract base class for answering service clients.

    Methods:
        call_model: Send one prompt and return the response text.
    """

    @abstractmethod
    def call_model(
        self,
        prompt: str,
        max_tokens: int = 900,
        system: str | None = None,
    ) -> str:
        """Call the model with a prompt and return the response text.

        Args:
            prompt:     The user-turn prompt to send to the model.
            max_tokens: Maximum tokens in the response.
            system:     Optional system-role instruction.

        Returns:
            str: The model's response text.

        Raises:
            Exception: If the call fails.
        """
        pass
