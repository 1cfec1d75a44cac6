"""Prompt templates for the delivery analyst.

The user turn carries the request context followed by the filtered
spreadsheet rows serialized as JSON, one entry per file label.
"""
import json
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel

SYSTEM_PROMPT = """You are a media delivery analyst.
Answer objectively and base your answer on the datasets.
If data is missing, say which column/sheet is missing."""

ANSWER_PROMPT = """SECTION: {section}
ADSET: {adset}
TOKENS: {tokens}

QUESTION:
{question}

DATA (rows filtered by AdSet):
{datasets}
"""


def serialize_datasets(datasets: Mapping[str, Any]) -> str:
    """Render dataset summaries as indented JSON."""
    plain: Dict[str, Any] = {
        label: value.model_dump() if isinstance(value, BaseModel) else value
        for label, value in datasets.items()
    }
    return json.dumps(plain, indent=2, ensure_ascii=False, default=str)


def build_answer_prompt(
    section: str,
    adset: str,
    tokens: List[str],
    question: str,
    datasets: Mapping[str, Any],
) -> str:
    """Fill the answer template.

    Args:
        section: Report section the question belongs to.
        adset: Search token used to filter the datasets.
        tokens: Auxiliary tokens, joined with " | ".
        question: The caller's question.
        datasets: Dataset summaries keyed by file label.
    """
    return ANSWER_PROMPT.format(
        section=section,
        adset=adset,
        tokens=" | ".join(tokens),
        question=question,
        datasets=serialize_datasets(datasets),
    )
