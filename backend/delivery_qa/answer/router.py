"""Answer API router.

Endpoints:
    POST /api/ia - Answer a question from AdSet-filtered spreadsheet rows
"""
import asyncio
import json
import logging

from fastapi import APIRouter, Depends, Request

from delivery_qa.ai_provider.base import AIProvider
from delivery_qa.config import AppConfig
from delivery_qa.deps import get_app_config, get_provider, get_registry
from delivery_qa.errors import InvalidRequestError, PayloadTooLargeError, ServiceError
from delivery_qa.files.registry import FileRegistry

from .schemas import AnswerRequest, AnswerResponse
from .service import AnswerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["answer"])


async def _read_json_body(request: Request, limit_bytes: int) -> object:
    body = await request.body()
    if len(body) > limit_bytes:
        raise PayloadTooLargeError(limit_bytes, what="Request body")
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError:
        raise InvalidRequestError("Request body is not valid JSON.")


@router.post("/ia", response_model=AnswerResponse)
async def answer_question(
    request: Request,
    config: AppConfig = Depends(get_app_config),
    registry: FileRegistry = Depends(get_registry),
    provider: AIProvider = Depends(get_provider),
):
    """Answer a question using rows of the referenced spreadsheets.

    Request body:
        {
          "section": "formato" | "compra" | "plano" | "ias" | "evid" | ...,
          "question": "...",
          "context": {"adset": "...", "tokens": [...], ...},
          "files": {"plataforma": "<fileId>", "ias": "<fileId>", ...}
        }

    Returns:
        AnswerResponse with the model's answer.

    Raises:
        ServiceError 400: If section, question or context.adset is missing
        ServiceError 500: If a spreadsheet cannot be read or the model call fails
    """
    payload = await _read_json_body(request, config.requests.max_json_bytes)
    answer_request = AnswerRequest.from_payload(payload)

    service = AnswerService(
        registry=registry,
        provider=provider,
        max_rows=config.filter.max_rows,
        max_tokens=config.anthropic.max_tokens,
    )

    try:
        loop = asyncio.get_running_loop()
        answer = await loop.run_in_executor(None, service.answer, answer_request)
    except ServiceError:
        raise
    except Exception as e:
        logger.exception("Answer request failed for adset=%s", answer_request.context.adset)
        raise ServiceError(str(e) or e.__class__.__name__) from e

    return AnswerResponse(answer=answer)
