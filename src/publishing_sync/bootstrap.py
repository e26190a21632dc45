"""Wire configuration, client, queue and runner into a ready runtime."""

import logging
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv

from .config import Config, load_config
from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import build_config, to_yaml_fallbacks
from .content_source import ContentSource, InMemoryContentSource
from .core.client import PublishingApiClient
from .dispatch import PublishingApi
from .jobs.queue import InMemoryJobQueue
from .jobs.runner import JobRunner
from .jobs.workers import JobExecutor
from .visibility import VisibilityPolicy

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Everything an embedding application needs to dispatch and run jobs."""

    config: Config
    client: PublishingApiClient
    queue: InMemoryJobQueue
    content_source: ContentSource
    publishing_api: PublishingApi
    runner: JobRunner


def resolve_config(config_overrides: dict[str, Any] | None = None) -> Config:
    """Load configuration with unified precedence.

    CLI overrides > env vars (.env loaded first) > YAML config > defaults.

    Args:
        config_overrides: Optional dict with ``url``, ``bearer_token``,
            ``insecure`` and ``debug`` values from the CLI.

    Raises:
        ValueError: If the resulting configuration is missing or invalid.
    """
    overrides = config_overrides or {}

    # .env first so ${VAR} interpolation in YAML can use its values
    load_dotenv()

    yaml_fallbacks: dict[str, Any] | None = None
    config_files = discover_config_files()
    if config_files:
        unified = build_config(load_hierarchical_config())
        yaml_fallbacks = to_yaml_fallbacks(unified)
        logger.info("Loaded config file: %s", config_files[0])

    return load_config(
        url=overrides.get("url"),
        bearer_token=overrides.get("bearer_token"),
        insecure=overrides.get("insecure", False),
        debug=overrides.get("debug", False),
        yaml_fallbacks=yaml_fallbacks,
    )


def build_runtime(
    config: Config,
    content_source: ContentSource | None = None,
    queue: InMemoryJobQueue | None = None,
) -> Runtime:
    """Construct the dispatcher, executor and runner for *config*."""
    client = PublishingApiClient(config)
    queue = queue if queue is not None else InMemoryJobQueue()
    content_source = (
        content_source
        if content_source is not None
        else InMemoryContentSource()
    )
    policy = VisibilityPolicy(config.served_locally_formats)

    publishing_api = PublishingApi(
        queue=queue,
        client=client,
        policy=policy,
        default_queue=config.default_queue,
        publishing_app=config.publishing_app,
    )
    executor = JobExecutor(
        client,
        content_source,
        publishing_app=config.publishing_app,
        rendering_app=config.rendering_app,
    )
    runner = JobRunner(
        executor,
        max_attempts=config.max_attempts,
        backoff_base=config.backoff_base,
        max_parallel_jobs=config.max_parallel_jobs,
    )
    logger.debug(
        "Runtime ready: api=%s queue=%s max_attempts=%d",
        config.publishing_api_url,
        config.default_queue,
        config.max_attempts,
    )
    return Runtime(
        config=config,
        client=client,
        queue=queue,
        content_source=content_source,
        publishing_api=publishing_api,
        runner=runner,
    )
