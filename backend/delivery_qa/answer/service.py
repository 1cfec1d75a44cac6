"""Answer proxy: filter the referenced spreadsheets and ask the model.

Each request is independent. File references that are not in the
registry are skipped, so the model only ever sees the datasets that
could be resolved.
"""
import logging
from typing import Dict

from delivery_qa.ai_provider.base import AIProvider
from delivery_qa.ai_provider.prompts import SYSTEM_PROMPT, build_answer_prompt
from delivery_qa.ai_provider.wrapper import call_answer
from delivery_qa.files.registry import FileRegistry
from delivery_qa.files.schemas import StoredFile
from delivery_qa.sheets.filter import DEFAULT_MAX_ROWS, filter_rows
from delivery_qa.sheets.reader import read_sheet_rows
from delivery_qa.sheets.schemas import DatasetSummary

from .schemas import AnswerRequest

logger = logging.getLogger(__name__)


class AnswerService:
    """Builds dataset summaries and forwards them to the AI provider.

    Attributes:
        registry: Uploaded files to resolve references against.
        provider: Answering service client.
        max_rows: Row cap applied to every file.
        max_tokens: Response budget for the model.
    """

    def __init__(
        self,
        registry: FileRegistry,
        provider: AIProvider,
        max_rows: int = DEFAULT_MAX_ROWS,
        max_tokens: int = 900,
    ) -> None:
        self.registry = registry
        self.provider = provider
        self.max_rows = max_rows
        self.max_tokens = max_tokens

    def summarize_file(self, stored: StoredFile, adset: str) -> DatasetSummary:
        """Filter one stored spreadsheet by AdSet."""
        sheet_name, rows = read_sheet_rows(stored.path)
        result = filter_rows(rows, adset, max_rows=self.max_rows)
        return DatasetSummary(
            kind=stored.kind,
            originalName=stored.original_name,
            sheetName=sheet_name,
            matchCount=len(result.rows),
            headers=result.headers,
            rows=result.rows,
        )

    def collect_datasets(self, request: AnswerRequest) -> Dict[str, DatasetSummary]:
        datasets: Dict[str, DatasetSummary] = {}
        for label, file_id in request.files.items():
            stored = self.registry.get(file_id)
            if stored is None:
                logger.info("Skipping file reference %s=%r: not in registry", label, file_id)
                continue
            datasets[label] = self.summarize_file(stored, request.context.adset)
            logger.debug("Dataset %s: %d matching rows", label, datasets[label].matchCount)
        return datasets

    def answer(self, request: AnswerRequest) -> str:
        """Run the filter for every referenced file and ask the model.

        Raises:
            SheetNotFoundError: If a referenced workbook has no sheets.
            AIProviderError: If the answering service call fails.
            Exception: Whatever the spreadsheet reader raises.
        """
        datasets = self.collect_datasets(request)
        prompt = build_answer_prompt(
            section=request.section,
            adset=request.context.adset,
            tokens=request.context.tokens,
            question=request.question,
            datasets=datasets,
        )
        logger.info(
            "Answering section=%s adset=%s with %d dataset(s)",
            request.section, request.context.adset, len(datasets),
        )
        return call_answer(self.provider, prompt, system=SYSTEM_PROMPT, max_tokens=self.max_tokens)
