"""Tests for the Anthropic provider, error wrapper and prompt building."""
import json
from unittest.mock import MagicMock, patch

import pytest

from delivery_qa.ai_provider import (
    AIProvider,
    ClaudeDirectProvider,
    ProviderCallError,
    ProviderNotConfiguredError,
    SYSTEM_PROMPT,
    build_answer_prompt,
    call_answer,
    extract_text,
)
from delivery_qa.sheets.schemas import DatasetSummary, MatchedRow

from conftest import FakeProvider


def _mock_anthropic(texts=("Answer.",)):
    mock_anthropic = MagicMock()
    mock_client = MagicMock()
    mock_anthropic.Anthropic.return_value = mock_client
    mock_response = MagicMock()
    mock_response.content = [MagicMock(text=t) for t in texts]
    mock_client.messages.create.return_value = mock_response
    return mock_anthropic, mock_client


class TestClaudeDirectProvider:
    """Tests for ClaudeDirectProvider."""

    def test_is_ai_provider(self):
        assert isinstance(ClaudeDirectProvider(api_key="k"), AIProvider)

    def test_defaults(self):
        provider = ClaudeDirectProvider(api_key="k")
        assert provider.model == "claude-3-5-sonnet-latest"
        assert provider.base_url == "https://api.anthropic.com"

    def test_model_override(self):
        provider = ClaudeDirectProvider(api_key="k", model="claude-custom")
        assert provider.model == "claude-custom"

    def test_call_model_sends_system_and_prompt(self):
        mock_anthropic, mock_client = _mock_anthropic()
        with patch.dict("sys.modules", {"anthropic": mock_anthropic}):
            provider = ClaudeDirectProvider(api_key="sk-ant-test", model="claude-test")
            answer = provider.call_model("QUESTION", max_tokens=900, system="SYS")

        assert answer == "Answer."
        mock_anthropic.Anthropic.assert_called_once_with(
            api_key="sk-ant-test",
            base_url="https://api.anthropic.com",
            max_retries=0,
        )
        mock_client.messages.create.assert_called_once_with(
            model="claude-test",
            max_tokens=900,
            system="SYS",
            messages=[{"role": "user", "content": "QUESTION"}],
        )

    def test_call_model_without_system(self):
        mock_anthropic, mock_client = _mock_anthropic()
        with patch.dict("sys.modules", {"anthropic": mock_anthropic}):
            ClaudeDirectProvider(api_key="k").call_model("hi")
        assert "system" not in mock_client.messages.create.call_args.kwargs

    def test_text_blocks_are_joined(self):
        mock_anthropic, _ = _mock_anthropic(texts=("First part.", "Second part. "))
        with patch.dict("sys.modules", {"anthropic": mock_anthropic}):
            answer = ClaudeDirectProvider(api_key="k").call_model("hi")
        assert answer == "First part.\nSecond part."

    def test_client_is_reused(self):
        mock_anthropic, _ = _mock_anthropic()
        with patch.dict("sys.modules", {"anthropic": mock_anthropic}):
            provider = ClaudeDirectProvider(api_key="k")
            provider.call_model("a")
            provider.call_model("b")
        assert mock_anthropic.Anthropic.call_count == 1

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_missing_api_key_fails_at_call_time(self, api_key):
        provider = ClaudeDirectProvider(api_key=api_key)
        with pytest.raises(ProviderNotConfiguredError, match="ANTHROPIC_API_KEY"):
            provider.call_model("hi")

    def test_missing_anthropic_package(self):
        with patch.dict("sys.modules", {"anthropic": None}):
            provider = ClaudeDirectProvider(api_key="k")
            with pytest.raises(ImportError, match="anthropic package is required"):
                provider.call_model("hi")


class TestExtractText:
    def test_skips_non_text_blocks(self):
        response = MagicMock()
        response.content = [MagicMock(text=None), MagicMock(text="Only text")]
        assert extract_text(response) == "Only text"

    def test_falls_back_to_serialized_response(self):
        response = MagicMock()
        response.content = []
        response.model_dump_json.return_value = '{"content": []}'
        assert extract_text(response) == '{"content": []}'


class TestCallAnswer:
    def test_returns_provider_answer(self):
        provider = FakeProvider(answer="ok")
        assert call_answer(provider, "prompt", system="sys", max_tokens=50) == "ok"
        assert provider.calls == [{"prompt": "prompt", "max_tokens": 50, "system": "sys"}]

    def test_sdk_status_error_is_wrapped(self):
        class FakeStatusError(Exception):
            status_code = 401
            body = {"type": "error", "error": {"type": "authentication_error"}}

        provider = FakeProvider(error=FakeStatusError("unauthorized"))
        with pytest.raises(ProviderCallError) as exc_info:
            call_answer(provider, "prompt")
        err = exc_info.value
        assert err.status_code == 500
        assert "status 401" in err.message
        assert "authentication_error" in err.message
        assert err.message.startswith("Provider anthropic error")

    def test_transport_error_is_wrapped(self):
        provider = FakeProvider(error=ConnectionError("connection reset"))
        with pytest.raises(ProviderCallError, match="connection reset"):
            call_answer(provider, "prompt")

    def test_not_configured_passes_through(self):
        provider = FakeProvider(error=ProviderNotConfiguredError("ANTHROPIC_API_KEY missing"))
        with pytest.raises(ProviderNotConfiguredError):
            call_answer(provider, "prompt")


class TestBuildAnswerPrompt:
    def test_layout(self):
        datasets = {
            "plataforma": DatasetSummary(
                kind="plataforma",
                originalName="delivery.xlsx",
                sheetName="Data",
                matchCount=1,
                headers=["AdSet", "Impressions"],
                rows=[MatchedRow(rowIndex=5, values=["BR_01", "100"])],
            )
        }
        prompt = build_answer_prompt(
            section="compra",
            adset="BR_01",
            tokens=["meta", "video"],
            question="Is delivery on pace?",
            datasets=datasets,
        )
        assert prompt.startswith("SECTION: compra\nADSET: BR_01\nTOKENS: meta | video\n")
        assert "QUESTION:\nIs delivery on pace?\n" in prompt

        data_part = prompt.split("DATA (rows filtered by AdSet):\n", 1)[1]
        data = json.loads(data_part)
        assert data["plataforma"]["matchCount"] == 1
        assert data["plataforma"]["rows"] == [{"rowIndex": 5, "values": ["BR_01", "100"]}]

    def test_no_datasets_and_no_tokens(self):
        prompt = build_answer_prompt("ias", "BR_01", [], "Anything?", {})
        assert "TOKENS: \n" in prompt
        assert prompt.rstrip().endswith("{}")

    def test_braces_in_question_are_kept(self):
        prompt = build_answer_prompt("ias", "BR_{01}", [], "What about {x}?", {})
        assert "ADSET: BR_{01}" in prompt
        assert "What about {x}?" in prompt

    def test_system_prompt_asks_for_missing_columns(self):
        assert "column/sheet" in SYSTEM_PROMPT
