"""Request and response models for ``POST /api/ia``.

The request body is free-form JSON. ``AnswerRequest.from_payload`` pulls
out the required fields one by one so each missing field gets its own
400 message, then builds the typed model. Unknown context fields
(partner, formato, statusOper...) are kept on the context.
"""
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field

from delivery_qa.errors import InvalidRequestError, MissingFieldError


class AnswerContext(BaseModel):
    model_config = ConfigDict(extra="allow")

    adset: str
    tokens: List[str] = Field(default_factory=list)


class AnswerRequest(BaseModel):
    section: str
    question: str
    context: AnswerContext
    files: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "AnswerRequest":
        """Validate a decoded JSON body.

        Raises:
            MissingFieldError: If section, question or context.adset is absent.
            InvalidRequestError: If files or context has the wrong shape.
        """
        if not isinstance(payload, Mapping):
            payload = {}

        section = payload.get("section")
        if not section:
            raise MissingFieldError("section")
        question = payload.get("question")
        if not question:
            raise MissingFieldError("question")

        context = payload.get("context")
        if context is None:
            context = {}
        if not isinstance(context, Mapping):
            raise InvalidRequestError('Field "context" must be an object.')
        adset = str(context.get("adset") or "").strip()
        if not adset:
            raise MissingFieldError("context.adset")

        files = payload.get("files")
        if files is None:
            files = {}
        if not isinstance(files, Mapping):
            raise InvalidRequestError('Field "files" must be an object.')

        extra = {k: v for k, v in context.items() if k not in ("adset", "tokens")}
        return cls(
            section=str(section),
            question=str(question),
            context=AnswerContext(adset=adset, tokens=_coerce_tokens(context.get("tokens")), **extra),
            files={str(label): str(file_id or "") for label, file_id in files.items()},
        )


def _coerce_tokens(raw: Any) -> List[str]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, (list, tuple)):
        return [str(t) for t in raw if t is not None]
    return [str(raw)]


class AnswerResponse(BaseModel):
    answer: str
