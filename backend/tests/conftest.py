"""Shared test fixtures and configuration for backend tests."""
from pathlib import Path
from typing import List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from delivery_qa.ai_provider.base import AIProvider
from delivery_qa.config import AppConfig
from delivery_qa.main import create_app


class FakeProvider(AIProvider):
    """Records prompts instead of calling Anthropic."""

    def __init__(self, answer: str = "Delivery is on track.", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.calls: List[dict] = []

    def call_model(self, prompt: str, max_tokens: int = 900, system: str | None = None) -> str:
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "system": system})
        if self.error is not None:
            raise self.error
        return self.answer


def write_workbook(path: Path, rows: Sequence[Sequence[object]], sheet_name: str = "Data") -> Path:
    """Save ``rows`` as the only sheet of an xlsx workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    for row in rows:
        ws.append(list(row))
    wb.save(path)
    return path


DELIVERY_ROWS = [
    ["Delivery report - week 12", "", "", ""],
    ["Exported 2024-03-18", "", "", ""],
    ["", "", "", ""],
    ["Campaign", "AdSet Name", "Impressions", "Spend"],
    ["Spring", "BR_Prospecting_01", 12000, 350.5],
    ["Spring", "BR_Retargeting_02", 8000, 120],
    ["Spring", "br_prospecting_01", 3000, 90],
    ["Summer", "MX_Awareness_07", 50000, 800],
]


@pytest.fixture
def app_config(tmp_path):
    """Configuration pointing uploads at a temporary directory."""
    return AppConfig(
        uploads={"dir": str(tmp_path / "uploads"), "max_file_bytes": 1024 * 1024},
        anthropic={"api_key": "sk-ant-test", "model": "claude-test"},
    )


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def test_app(app_config, fake_provider):
    return create_app(config=app_config, provider=fake_provider)


@pytest.fixture
def api_client(test_app):
    """Provide a TestClient for an isolated application instance."""
    return TestClient(test_app)


@pytest.fixture
def delivery_xlsx(tmp_path):
    """An xlsx export with three title lines above the header."""
    return write_workbook(tmp_path / "delivery.xlsx", DELIVERY_ROWS)
