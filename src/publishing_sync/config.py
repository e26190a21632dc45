"""Runtime configuration for the publishing sync engine.

Reads publishing API connection settings and job policy from CLI args,
environment variables, .env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    PUBLISHING_API_URL: Publishing API base URL (required)
    PUBLISHING_API_BEARER_TOKEN: Bearer token for the API (optional)
    PUBLISHING_API_INSECURE: Skip SSL verification (optional, default: false)
    PUBLISHING_SYNC_DEBUG: Enable debug logging (optional, default: false)
    PUBLISHING_SYNC_QUEUE: Default job queue name (optional, default: publishing_api)
    PUBLISHING_SYNC_MAX_ATTEMPTS: Delivery attempts per job (optional, default: 5)
    PUBLISHING_SYNC_MAX_PARALLEL_JOBS: Concurrent job workers (optional, default: 4)
"""

import logging
import os
from dataclasses import dataclass, field
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# Formats whose public pages are still rendered by the platform itself.
DEFAULT_SERVED_LOCALLY_FORMATS: tuple[str, ...] = (
    "consultation",
    "corporate_information_page",
    "detailed_guide",
    "fatality_notice",
    "news_article",
    "publication",
    "speech",
    "statistical_data_set",
    "world_location_news_article",
)


@dataclass
class Config:
    publishing_api_url: str
    bearer_token: str = ""
    insecure: bool = False
    debug: bool = False
    default_queue: str = "publishing_api"
    max_attempts: int = 5
    backoff_base: float = 1.0
    max_parallel_jobs: int = 4
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    publishing_app: str = "whitehall"
    rendering_app: str = "government-frontend"
    log_level: str = "INFO"
    log_file: str | None = None
    served_locally_formats: tuple[str, ...] = field(
        default=DEFAULT_SERVED_LOCALLY_FORMATS
    )


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If URL format is invalid or a numeric setting is out of range.
    """
    config.publishing_api_url = config.publishing_api_url.strip()

    if not config.publishing_api_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid publishing API URL '{config.publishing_api_url}': "
            "must start with http:// or https://"
        )

    parsed = urlparse(config.publishing_api_url)
    if not parsed.hostname:
        raise ValueError(
            f"Invalid publishing API URL '{config.publishing_api_url}': "
            "URL must include a hostname"
        )

    config.publishing_api_url = config.publishing_api_url.removesuffix("/")

    if not config.default_queue.strip():
        raise ValueError(
            "Default queue name cannot be empty. Set PUBLISHING_SYNC_QUEUE."
        )

    if not (1 <= config.max_attempts <= 25):
        raise ValueError(
            f"Invalid max_attempts {config.max_attempts}: must be between 1 and 25"
        )

    if not (1 <= config.max_parallel_jobs <= 64):
        raise ValueError(
            f"Invalid max_parallel_jobs {config.max_parallel_jobs}: "
            "must be between 1 and 64"
        )

    if config.backoff_base < 0:
        raise ValueError(
            f"Invalid backoff_base {config.backoff_base}: must not be negative"
        )

    if config.insecure:
        logger.warning(
            "WARNING: SSL verification disabled (insecure=True). Use only for development."
        )


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def _get_int_env(key: str, low: int, high: int) -> int | None:
    raw = os.getenv(key)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            f"Invalid {key} '{raw}': must be a number between {low} and {high}"
        ) from None
    if not (low <= value <= high):
        raise ValueError(
            f"Invalid {key} '{raw}': must be a number between {low} and {high}"
        )
    return value


def load_config(
    url: str | None = None,
    bearer_token: str | None = None,
    insecure: bool = False,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        url: Override publishing API URL.
        bearer_token: Override bearer token.
        insecure: Skip SSL verification (CLI flag).
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Flat dict of values from the YAML config file,
            used when CLI arg and env var are both unset.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If the publishing API URL is missing after checking
            all sources, or any value is invalid.
    """
    fb = yaml_fallbacks or {}

    api_url = url or os.getenv("PUBLISHING_API_URL") or fb.get("url")
    if not api_url:
        raise ValueError(
            "Publishing API URL not found. Set PUBLISHING_API_URL environment "
            "variable, pass --url CLI argument, or add 'url' to config.yml."
        )

    token = (
        bearer_token
        or os.getenv("PUBLISHING_API_BEARER_TOKEN")
        or fb.get("bearer_token")
        or ""
    )

    if insecure:
        final_insecure = True
    else:
        env_insecure = _get_bool_env("PUBLISHING_API_INSECURE")
        if env_insecure is not None:
            final_insecure = env_insecure
        else:
            final_insecure = bool(fb.get("insecure", False))

    if debug:
        final_debug = True
    else:
        env_debug = _get_bool_env("PUBLISHING_SYNC_DEBUG")
        if env_debug is not None:
            final_debug = env_debug
        else:
            final_debug = bool(fb.get("debug", False))

    queue = (
        os.getenv("PUBLISHING_SYNC_QUEUE")
        or fb.get("default_queue")
        or "publishing_api"
    )

    max_attempts = _get_int_env("PUBLISHING_SYNC_MAX_ATTEMPTS", 1, 25)
    if max_attempts is None:
        max_attempts = int(fb.get("max_attempts", 5))

    max_parallel = _get_int_env("PUBLISHING_SYNC_MAX_PARALLEL_JOBS", 1, 64)
    if max_parallel is None:
        max_parallel = int(fb.get("max_parallel_jobs", 4))

    served_locally = fb.get("served_locally_formats")
    if served_locally is None:
        served_locally = DEFAULT_SERVED_LOCALLY_FORMATS

    config = Config(
        publishing_api_url=api_url.strip(),
        bearer_token=token.strip(),
        insecure=final_insecure,
        debug=final_debug,
        default_queue=queue.strip(),
        max_attempts=max_attempts,
        backoff_base=float(fb.get("backoff_base", 1.0)),
        max_parallel_jobs=max_parallel,
        publishing_app=fb.get("publishing_app", "whitehall"),
        rendering_app=fb.get("rendering_app", "government-frontend"),
        log_level=fb.get("log_level", "INFO"),
        log_file=fb.get("log_file"),
        served_locally_formats=tuple(served_locally),
    )

    validate_config(config)

    return config
