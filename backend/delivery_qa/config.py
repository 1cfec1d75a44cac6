"""delivery-qa application configuration.

Settings come from an optional YAML file (``delivery_qa.settings.yaml``)
and are then overridden by environment variables:

  * ANTHROPIC_API_KEY: answering service credentials
  * ANTHROPIC_MODEL: model identifier override
  * PORT: listening port
  * UPLOAD_DIR: storage directory for uploaded spreadsheets
  * LOG_LEVEL: root logger level

A missing API key is not a startup error; it fails the first call that
needs it.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("delivery_qa.settings.yaml")

MB = 1024 * 1024


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.debug("Settings file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def _default_upload_dir() -> str:
    return str(Path(tempfile.gettempdir()) / "uploads")


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000


class UploadSettings(BaseModel):
    dir:            str = Field(default_factory=_default_upload_dir)
    max_file_bytes: int = 25 * MB


class FilterSettings(BaseModel):
    max_rows: int = Field(default=80, ge=1)


class RequestSettings(BaseModel):
    max_json_bytes: int = 5 * MB


class AnthropicSettings(BaseModel):
    api_key:    Optional[str] = None
    model:      str = "claude-3-5-sonnet-latest"
    base_url:   Optional[str] = None
    max_tokens: int = 900


class LoggingSettings(BaseModel):
    level: str = "info"


class AppConfig(BaseModel):
    server:    ServerSettings    = Field(default_factory=ServerSettings)
    uploads:   UploadSettings    = Field(default_factory=UploadSettings)
    filter:    FilterSettings    = Field(default_factory=FilterSettings)
    requests:  RequestSettings   = Field(default_factory=RequestSettings)
    anthropic: AnthropicSettings = Field(default_factory=AnthropicSettings)
    logging:   LoggingSettings   = Field(default_factory=LoggingSettings)


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------

# env var -> (section, field)
ENV_OVERRIDES = {
    "ANTHROPIC_API_KEY": ("anthropic", "api_key"),
    "ANTHROPIC_MODEL":   ("anthropic", "model"),
    "PORT":              ("server", "port"),
    "UPLOAD_DIR":        ("uploads", "dir"),
    "LOG_LEVEL":         ("logging", "level"),
}


def _apply_env_overrides(data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value.strip() == "":
            continue
        data.setdefault(section, {})[field] = value.strip()
    return data


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    settings_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load the YAML settings file and apply environment overrides.

    Args:
        settings_path: Settings file to read. Defaults to
            ``delivery_qa.settings.yaml`` in the working directory.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        AppConfig: The validated configuration.
    """
    path = Path(settings_path) if settings_path else SETTINGS_FILE
    # Sections left empty in YAML load as None; treat them as absent.
    data = {k: v for k, v in _load_yaml(path).items() if v is not None}
    data = _apply_env_overrides(data, os.environ if environ is None else environ)

    config = AppConfig(**data)
    logger.info(
        "Settings loaded (port=%s, upload_dir=%s, model=%s, api_key_configured=%s)",
        config.server.port,
        config.uploads.dir,
        config.anthropic.model,
        bool(config.anthropic.api_key),
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the process configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached configuration (for testing)."""
    global _config
    _config = None
