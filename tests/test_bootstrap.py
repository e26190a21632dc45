"""Tests for publishing_sync.bootstrap: config resolution and runtime wiring.

resolve_config() loads .env, discovers YAML config and applies CLI
overrides; build_runtime() wires client, queue, dispatcher and runner
from a Config.
"""

import textwrap
from unittest.mock import patch

import pytest

from publishing_sync.bootstrap import build_runtime, resolve_config
from publishing_sync.config import Config
from publishing_sync.content_source import InMemoryContentSource
from publishing_sync.core.client import PublishingApiClient
from publishing_sync.jobs.queue import InMemoryJobQueue

ENV_VARS = (
    "PUBLISHING_API_URL",
    "PUBLISHING_API_BEARER_TOKEN",
    "PUBLISHING_API_INSECURE",
    "PUBLISHING_SYNC_DEBUG",
    "PUBLISHING_SYNC_QUEUE",
    "PUBLISHING_SYNC_MAX_ATTEMPTS",
    "PUBLISHING_SYNC_MAX_PARALLEL_JOBS",
    "PUBLISHING_SYNC_CONFIG",
)


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    # keep a developer's own .env out of the test
    monkeypatch.setattr(
        "publishing_sync.bootstrap.load_dotenv", lambda: False
    )
    return tmp_path


# -------------------------------------------------------------------------
# resolve_config()
# -------------------------------------------------------------------------


class TestResolveConfig:
    def test_cli_overrides(self, isolated):
        config = resolve_config(
            {"url": "https://cli.example.com", "insecure": True}
        )
        assert config.publishing_api_url == "https://cli.example.com"
        assert config.insecure is True

    def test_missing_url_raises(self, isolated):
        with pytest.raises(ValueError, match="Publishing API URL not found"):
            resolve_config()

    def test_yaml_config_used(self, isolated):
        cfg = isolated / ".publishing_sync" / "config.yml"
        cfg.parent.mkdir()
        cfg.write_text(
            textwrap.dedent("""\
            publishing_api:
              url: https://yaml.example.com
            queue:
              default_queue: bulk_republishing
              max_attempts: 3
            policy:
              served_locally_formats: [speech]
            """)
        )

        config = resolve_config()

        assert config.publishing_api_url == "https://yaml.example.com"
        assert config.default_queue == "bulk_republishing"
        assert config.max_attempts == 3
        assert config.served_locally_formats == ("speech",)

    def test_dotenv_loaded(self, isolated, monkeypatch):
        def _fake_load_dotenv():
            monkeypatch.setenv(
                "PUBLISHING_API_URL", "https://dotenv.example.com"
            )

        with patch(
            "publishing_sync.bootstrap.load_dotenv",
            side_effect=_fake_load_dotenv,
        ) as mock_dotenv:
            config = resolve_config()

        mock_dotenv.assert_called_once()
        assert config.publishing_api_url == "https://dotenv.example.com"


# -------------------------------------------------------------------------
# build_runtime()
# -------------------------------------------------------------------------


class TestBuildRuntime:
    def test_wires_components(self):
        config = Config(
            publishing_api_url="https://api.example.com",
            default_queue="bulk",
            max_attempts=2,
            backoff_base=0.1,
            max_parallel_jobs=8,
            publishing_app="publisher",
            served_locally_formats=("speech",),
        )

        runtime = build_runtime(config)

        assert isinstance(runtime.client, PublishingApiClient)
        assert isinstance(runtime.queue, InMemoryJobQueue)
        assert runtime.publishing_api.default_queue == "bulk"
        assert runtime.publishing_api.publishing_app == "publisher"
        assert runtime.publishing_api.policy.served_locally_formats == {
            "speech"
        }
        assert runtime.runner.max_attempts == 2
        assert runtime.runner.backoff_base == 0.1
        assert runtime.runner.max_parallel_jobs == 8
        assert runtime.runner.executor.apps["publishing_app"] == "publisher"

    def test_uses_given_source_and_queue(self):
        source = InMemoryContentSource()
        queue = InMemoryJobQueue()

        runtime = build_runtime(
            Config(publishing_api_url="https://api.example.com"),
            content_source=source,
            queue=queue,
        )

        assert runtime.content_source is source
        assert runtime.queue is queue
        assert runtime.publishing_api.queue is queue
        assert runtime.runner.executor.content_source is source
