"""FastAPI dependencies.

Shared objects (config, registry, services, AI provider) are created by
``create_app`` and kept on ``app.state``; route handlers receive them
through these functions so tests can swap them with
``app.dependency_overrides``.
"""
from fastapi import Request

from delivery_qa.ai_provider.base import AIProvider
from delivery_qa.config import AppConfig
from delivery_qa.files.registry import FileRegistry
from delivery_qa.files.service import FileStorageService


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_registry(request: Request) -> FileRegistry:
    return request.app.state.registry


def get_storage_service(request: Request) -> FileStorageService:
    return request.app.state.storage


def get_provider(request: Request) -> AIProvider:
    """Provide the answering service client."""
    return request.app.state.provider
