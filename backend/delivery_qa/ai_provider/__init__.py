"""AI Provider module for the answering service.

Usage:
    from delivery_qa.ai_provider import ClaudeDirectProvider, call_answer

    provider = ClaudeDirectProvider(api_key="sk-ant-...")
    answer = call_answer(provider, prompt, system=SYSTEM_PROMPT)
"""
from .base import AIProvider
from .claude_direct import ClaudeDirectProvider, extract_text
from .prompts import SYSTEM_PROMPT, build_answer_prompt
from .wrapper import (
    AIProviderError,
    ProviderCallError,
    ProviderNotConfiguredError,
    call_answer,
)

__all__ = [
    "AIProvider",
    "ClaudeDirectProvider",
    "extract_text",
    "SYSTEM_PROMPT",
    "build_answer_prompt",
    "AIProviderError",
    "ProviderCallError",
    "ProviderNotConfiguredError",
    "call_answer",
]
