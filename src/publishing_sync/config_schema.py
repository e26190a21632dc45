"""Unified configuration schema for publishing_sync.

Defines Pydantic models for the YAML config structure with dedicated
sections for the publishing API connection, job queue policy, content
visibility policy, and logging.  ``to_yaml_fallbacks`` flattens a
validated config into the fallback dict consumed by ``load_config()``.

Usage:
    from publishing_sync.config_schema import build_config, to_yaml_fallbacks

    raw = load_hierarchical_config()
    unified = build_config(raw)
    config = load_config(yaml_fallbacks=to_yaml_fallbacks(unified))
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .config import DEFAULT_SERVED_LOCALLY_FORMATS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class PublishingApiConfig(BaseModel):
    """Publishing API connection settings.

    All fields are optional to support zero-config: env vars and CLI args
    can supply them at runtime instead.
    """

    url: str | None = Field(default=None, description="Publishing API URL")
    bearer_token: str | None = Field(
        default=None, description="Bearer token for the publishing API"
    )
    insecure: bool = Field(
        default=False,
        description="Disable SSL verification (development only)",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    publishing_app: str = Field(
        default="whitehall",
        description="Value sent as publishing_app in every payload",
    )
    rendering_app: str = Field(
        default="government-frontend",
        description="Frontend that renders content from the store",
    )

    model_config = {"frozen": True}


class QueueConfig(BaseModel):
    """Job queue and delivery retry policy."""

    default_queue: str = Field(
        default="publishing_api", min_length=1, description="Default queue"
    )
    max_attempts: int = Field(
        default=5,
        ge=1,
        le=25,
        description="Delivery attempts per job before giving up (1-25)",
    )
    backoff_base: float = Field(
        default=1.0,
        ge=0,
        description="Seconds before the first retry; doubles per attempt",
    )
    max_parallel_jobs: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Jobs executed concurrently by the runner (1-64)",
    )

    model_config = {"frozen": True}


class PolicyConfig(BaseModel):
    """Content visibility policy.

    Attributes:
        served_locally_formats: Content types whose public pages are
            rendered by the platform itself and never pushed to the
            content store.
    """

    served_locally_formats: tuple[str, ...] = Field(
        default=DEFAULT_SERVED_LOCALLY_FORMATS
    )

    model_config = {"frozen": True}

    @field_validator("served_locally_formats")
    @classmethod
    def _strip_formats(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(v.strip() for v in value if v and v.strip())


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has sensible defaults, so ``UnifiedConfig()``
    (zero-config) is always valid.
    """

    publishing_api: PublishingApiConfig = Field(
        default_factory=PublishingApiConfig
    )
    queue: QueueConfig = Field(default_factory=QueueConfig)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Anything absent gets defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


# ---------------------------------------------------------------------------
# Adapter: UnifiedConfig -> load_config() fallbacks
# ---------------------------------------------------------------------------


def to_yaml_fallbacks(unified: UnifiedConfig) -> dict[str, Any]:
    """Flatten a ``UnifiedConfig`` into the fallback dict for ``load_config()``.

    ``None`` values are dropped so they never shadow built-in defaults.
    """
    flat: dict[str, Any] = {}
    flat.update(unified.publishing_api.model_dump())
    flat.update(unified.queue.model_dump())
    flat.update(unified.policy.model_dump())
    flat["log_level"] = unified.logging.level
    flat["log_file"] = unified.logging.file
    return {k: v for k, v in flat.items() if v is not None}
