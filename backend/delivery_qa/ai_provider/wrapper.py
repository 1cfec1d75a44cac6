"""Error handling around answering service calls.

Usage:
    from delivery_qa.ai_provider.wrapper import call_answer

    answer = call_answer(provider, prompt, system=SYSTEM_PROMPT, max_tokens=900)
"""
import json
import logging

from delivery_qa.errors import ServiceError

logger = logging.getLogger(__name__)


class AIProviderError(ServiceError):
    """Base exception for AI provider errors."""
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message, status_code=status_code)


class ProviderNotConfiguredError(AIProviderError):
    """Raised when the provider lacks credentials."""
    def __init__(self, message: str = "AI provider is not configured"):
        super().__init__(message, status_code=500)


class ProviderCallError(AIProviderError):
    """Raised when the call to the answering service fails."""
    def __init__(self, message: str, provider_name: str = "anthropic"):
        self.provider_name = provider_name
        super().__init__(f"Provider {provider_name} error: {message}", status_code=500)


def describe_provider_exception(exc: Exception) -> str:
    """Build a message from an SDK exception, keeping the API's error body."""
    status = getattr(exc, "status_code", None)
    body = getattr(exc, "body", None)
    if status is not None and body is not None:
        try:
            body_text = json.dumps(body, ensure_ascii=False)
        except (TypeError, ValueError):
            body_text = str(body)
        return f"status {status}: {body_text}"
    if status is not None:
        return f"status {status}: {exc}"
    return str(exc) or exc.__class__.__name__


def call_answer(provider, prompt: str, system: str | None = None, max_tokens: int = 900) -> str:
    """Call the provider and normalise failures to AIProviderError.

    Raises:
        ProviderNotConfiguredError: If credentials are missing (500).
        ProviderCallError: If the call fails or returns a non-success status (500).
    """
    provider_name = getattr(provider, "model", provider.__class__.__name__)
    try:
        answer = provider.call_model(prompt, max_tokens=max_tokens, system=system)
    except AIProviderError:
        raise
    except Exception as e:
        error_msg = describe_provider_exception(e)
        logger.error("Answering service call failed (%s): %s", provider_name, error_msg)
        raise ProviderCallError(error_msg) from e

    logger.info("Answering service replied (%s, %d chars)", provider_name, len(answer))
    return answer
