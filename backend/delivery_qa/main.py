"""delivery-qa backend application.

Entry point for the delivery Q&A service: upload delivery spreadsheets,
then ask questions about a single AdSet. Matching rows are pulled out of
each referenced spreadsheet and sent to Claude together with the question.

Modules:
    - files: spreadsheet uploads and the in-memory file registry
    - sheets: workbook reading and AdSet row filtering
    - answer: the question answering endpoint
    - ai_provider: Anthropic Messages API client
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from delivery_qa.ai_provider.base import AIProvider
from delivery_qa.ai_provider.claude_direct import ClaudeDirectProvider
from delivery_qa.answer.router import router as answer_router
from delivery_qa.config import AppConfig, get_config
from delivery_qa.errors import ServiceError
from delivery_qa.files.registry import FileRegistry
from delivery_qa.files.router import router as files_router
from delivery_qa.files.service import FileStorageService

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Connection-level chatter from the HTTP client stack.
for _noisy in (
    "anthropic",
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def apply_log_level(level_name: str) -> None:
    """Set the root logger level from a config string such as "debug"."""
    level = getattr(logging, level_name.upper(), None)
    if isinstance(level, int):
        logging.getLogger().setLevel(level)
        logger.info("Root logger level set to %s", level_name.upper())
    else:
        logger.warning("Unknown log level %r, keeping current level", level_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    config: AppConfig = app.state.config
    logger.info(
        "delivery-qa backend running on http://%s:%s (uploads in %s)",
        config.server.host, config.server.port, config.uploads.dir,
    )
    if not config.anthropic.api_key:
        logger.warning("ANTHROPIC_API_KEY not set; /api/ia will fail until it is configured")

    yield  # Application runs here

    logger.info(
        "Application shutdown complete (%d uploaded file(s) forgotten)",
        len(app.state.registry),
    )


async def service_error_handler(request: Request, exc: ServiceError) -> PlainTextResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    errors = exc.errors()
    loc = errors[0].get("loc", ()) if errors else ()
    field = loc[-1] if loc else "request"
    logger.info("%s %s rejected: invalid %s", request.method, request.url.path, field)
    return PlainTextResponse(f'Field "{field}" is invalid.', status_code=400)


def create_app(config: Optional[AppConfig] = None, provider: Optional[AIProvider] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration to use. Defaults to ``get_config()``.
        provider: Answering service client. Defaults to a ClaudeDirectProvider
            built from ``config.anthropic``.

    Returns:
        FastAPI: The application, with registry, storage and provider on
        ``app.state``.
    """
    config = config or get_config()
    apply_log_level(config.logging.level)

    app = FastAPI(
        title="delivery-qa API",
        description="Spreadsheet upload and AdSet question answering for media delivery analysis",
        version="0.1.0",
        lifespan=lifespan,
    )

    registry = FileRegistry()
    app.state.config = config
    app.state.registry = registry
    app.state.storage = FileStorageService(
        upload_dir=config.uploads.dir,
        registry=registry,
        max_file_bytes=config.uploads.max_file_bytes,
    )
    app.state.provider = provider or ClaudeDirectProvider(
        api_key=config.anthropic.api_key,
        model=config.anthropic.model,
        base_url=config.anthropic.base_url,
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.include_router(files_router)
    app.include_router(answer_router)

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint. No dependencies are checked."""
        return {"ok": True}

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "delivery_qa.main:app",
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    run()
