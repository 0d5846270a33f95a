"""Anthropic Messages API configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import cast

from .env import env_flag, env_int, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

DEFAULT_ANTHROPIC_BASE_URL = "https://api.anthropic.com"
DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MODEL = "claude-haiku-4-5-20251001"
DEFAULT_MAX_TOKENS = 4000


def is_message_payload(payload: object) -> bool:
    """Only complete assistant messages are worth caching; errors are not."""

    if not isinstance(payload, dict):
        return False
    return cast(dict[str, object], payload).get("type") == "message"


@dataclass(frozen=True, slots=True)
class AnthropicConfig:
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(
            name="anthropic", base_url=DEFAULT_ANTHROPIC_BASE_URL
        )
    )
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    web_search_max_uses: int = 3


def get_anthropic_config() -> AnthropicConfig:
    values = require_env_vars(("ANTHROPIC_API_KEY",))
    model = (os.getenv("NOTEGRAPH_MODEL") or "").strip() or DEFAULT_MODEL

    cache: CacheConfig | None = None
    if env_flag("NOTEGRAPH_HTTP_CACHE", default=False):
        cache_path = get_storage_config().http_cache_path()
        cache = CacheConfig(
            enabled=True,
            backend="sqlite",
            sqlite_path=str(cache_path),
            should_cache=is_message_payload,
        )

    resilience = ResilienceConfig(
        name="anthropic",
        base_url=DEFAULT_ANTHROPIC_BASE_URL,
        ratelimit=RateLimit(max_calls=50, per_seconds=60.0),
        retry=RetryPolicy(total=3),
        cache=cache,
        default_headers={
            "x-api-key": values["ANTHROPIC_API_KEY"],
            "anthropic-version": DEFAULT_ANTHROPIC_VERSION,
        },
    )

    return AnthropicConfig(
        resilience=resilience,
        model=model,
        max_tokens=env_int("NOTEGRAPH_MAX_TOKENS", DEFAULT_MAX_TOKENS),
        web_search_max_uses=env_int("NOTEGRAPH_WEB_SEARCH_MAX_USES", 3),
    )
