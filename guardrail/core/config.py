"""Guardrail settings: YAML loader and Pydantic models."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GUARDRAIL_CONFIG"


class RewriteSettings(BaseModel):
    """Remote (smart) rewrite provider settings."""

    enabled: bool = True
    model: str = "qwen3:8b"
    host: Optional[str] = Field(
        default=None, description="Ollama server URL; None uses the client default"
    )
    temperature: float = Field(default=0.0, ge=0.0, le=1.0)


class ScoringSettings(BaseModel):
    """Citation relevance scorer cut-offs."""

    max_suggestions: int = Field(default=5, ge=1)
    noise_threshold: float = Field(default=0.1, ge=0.0, le=1.0)


class GuardrailConfig(BaseModel):
    rewrite: RewriteSettings = Field(default_factory=RewriteSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)


def load_config(path: str | Path | None = None) -> GuardrailConfig:
    """Load settings from YAML.

    Falls back to ``$GUARDRAIL_CONFIG`` and then to built-in defaults.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return GuardrailConfig()

    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    logger.debug("Loaded guardrail config from %s", path)
    return GuardrailConfig.model_validate(raw)
