from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from notegraph.config import (
    ConfigurationError,
    MissingConfigurationError,
    PipelineConfig,
    StorageConfig,
    get_anthropic_config,
    get_database_config,
    get_pipeline_config,
    require_env_vars,
)
from notegraph.config.anthropic import DEFAULT_MODEL, is_message_payload

if TYPE_CHECKING:
    from pathlib import Path

_PIPELINE_VARS = (
    "NOTEGRAPH_SIMILARITY_THRESHOLD",
    "NOTEGRAPH_LOCATION_WINDOW",
    "NOTEGRAPH_WEB_SEARCH",
    "NOTEGRAPH_ID_ATTEMPTS",
    "NOTEGRAPH_MERGE_ATTEMPTS",
)
_ANTHROPIC_VARS = (
    "NOTEGRAPH_MODEL",
    "NOTEGRAPH_HTTP_CACHE",
    "NOTEGRAPH_MAX_TOKENS",
    "NOTEGRAPH_WEB_SEARCH_MAX_USES",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (*_PIPELINE_VARS, *_ANTHROPIC_VARS, "DATABASE_URI"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  value ")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_pipeline_defaults(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env

    assert get_pipeline_config() == PipelineConfig()


def test_pipeline_values_from_environment(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("NOTEGRAPH_SIMILARITY_THRESHOLD", "0.85")
    clean_env.setenv("NOTEGRAPH_LOCATION_WINDOW", "120")
    clean_env.setenv("NOTEGRAPH_WEB_SEARCH", "off")
    clean_env.setenv("NOTEGRAPH_MERGE_ATTEMPTS", "5")

    config = get_pipeline_config()

    assert config.similarity_threshold == pytest.approx(0.85)
    assert config.location_window == 120
    assert config.web_search is False
    assert config.merge_attempts == 5
    assert config.id_attempts == 10


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("NOTEGRAPH_SIMILARITY_THRESHOLD", "high"),
        ("NOTEGRAPH_SIMILARITY_THRESHOLD", "1.5"),
        ("NOTEGRAPH_LOCATION_WINDOW", "-1"),
        ("NOTEGRAPH_WEB_SEARCH", "maybe"),
        ("NOTEGRAPH_ID_ATTEMPTS", "0"),
    ],
)
def test_invalid_pipeline_values_are_rejected(
    clean_env: pytest.MonkeyPatch, name: str, value: str
) -> None:
    clean_env.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_pipeline_config()


def test_anthropic_config_requires_an_api_key(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.delenv("ANTHROPIC_API_KEY", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_anthropic_config()


def test_anthropic_config_sends_key_and_version(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-test")

    config = get_anthropic_config()

    assert config.model == DEFAULT_MODEL
    assert config.max_tokens == 4000
    assert config.resilience.base_url == "https://api.anthropic.com"
    headers = config.resilience.default_headers
    assert headers is not None
    assert headers["x-api-key"] == "sk-test"
    assert "anthropic-version" in headers
    assert config.resilience.cache is None


def test_anthropic_http_cache_lives_in_the_data_dir(
    clean_env: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-test")
    clean_env.setenv("NOTEGRAPH_HTTP_CACHE", "1")
    clean_env.setenv("NOTEGRAPH_DATA_DIR", str(tmp_path))
    clean_env.setenv("NOTEGRAPH_MODEL", "claude-test")

    config = get_anthropic_config()

    assert config.model == "claude-test"
    assert config.resilience.cache is not None
    assert config.resilience.cache.sqlite_path == str(tmp_path.resolve() / "http_cache.db")


def test_only_assistant_messages_are_cacheable() -> None:
    assert is_message_payload({"type": "message", "content": []})
    assert not is_message_payload({"type": "error", "error": {"message": "overloaded"}})
    assert not is_message_payload(["message"])


def test_database_uri_prefers_environment(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    storage = StorageConfig(data_dir=tmp_path / "data")

    assert get_database_config(storage=storage).uri.endswith("data/notegraph.db")
    assert (tmp_path / "data").is_dir()

    clean_env.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    assert get_database_config(storage=storage).uri == "sqlite+pysqlite:///:memory:"
