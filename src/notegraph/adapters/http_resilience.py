"""httpx client with retries, rate limiting and optional response caching."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from notegraph.config.storage import get_storage_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from notegraph.config.http_resilience import (
        CacheConfig,
        ResilienceConfig,
        RetryPolicy,
        ShouldCacheHook,
    )

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=sorted(policy.allowed_methods),
        status_forcelist=sorted(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
    )


class ResilientClient:
    """Async JSON client: every request waits for the rate limiter, then goes through
    the retrying transport, and is answered from the hishel cache when one is configured.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        ratelimit = config.ratelimit
        self._limiter = (
            AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds) if ratelimit else None
        )
        self._client = _open_client(config)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post(
        self,
        url: str,
        *,
        json: object,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.post(url, json=json, headers=headers)
        async with self._limiter:
            return await self._client.post(url, json=json, headers=headers)


def _open_client(config: ResilienceConfig) -> httpx.AsyncClient:
    options: dict[str, Any] = {
        "timeout": config.timeout_seconds,
        "transport": RetryTransport(retry=build_retry(config.retry)),
    }
    if config.base_url is not None:
        options["base_url"] = config.base_url
    if config.default_headers:
        options["headers"] = dict(config.default_headers)

    cache = config.cache
    if cache is None or not cache.enabled:
        return httpx.AsyncClient(**options)

    log.debug("HTTP cache enabled for %s (%s)", config.name, cache.backend)
    policy = _cache_policy(cache.should_cache)
    if policy is None:
        return AsyncCacheClient(**options, storage=_cache_storage(cache))
    return AsyncCacheClient(**options, storage=_cache_storage(cache), policy=policy)


def _cache_storage(config: CacheConfig) -> AsyncSqliteStorage:
    match config.backend:
        case "sqlite":
            path = config.sqlite_path or str(get_storage_config().http_cache_path())
        case "memory":
            path = ":memory:"
        case other:
            raise ValueError(f"Unsupported cache backend: {other}")
    return AsyncSqliteStorage(
        database_path=path,
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )


def _cache_policy(should_cache: ShouldCacheHook | None) -> FilterPolicy | None:
    if should_cache is None:
        return None
    return FilterPolicy(response_filters=[_ShouldCacheResponseFilter(should_cache)])


class _ShouldCacheResponseFilter(BaseFilter[HishelCacheResponse]):
    """Stores a response only when its decoded JSON body satisfies the predicate."""

    def __init__(self, predicate: ShouldCacheHook) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if not body:
            return False
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            log.debug("Not caching a response without a JSON body")
            return False
        return bool(self._predicate(payload))
