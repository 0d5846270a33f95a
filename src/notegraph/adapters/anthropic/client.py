"""Anthropic Messages API client."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from notegraph.adapters.http_resilience import ResilientClient
from notegraph.domain.errors import OracleError

from .schema import ErrorResponse, MessageResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from notegraph.config.anthropic import AnthropicConfig
    from notegraph.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

MESSAGES_PATH = "/v1/messages"


class AnthropicAPIError(OracleError):
    """Raised when the Messages API fails or answers with something unexpected."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnthropicClient:
    """Low-level HTTP client for the Messages API."""

    def __init__(
        self,
        *,
        config: AnthropicConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    @property
    def config(self) -> AnthropicConfig:
        return self._config

    def create_message(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        tools: Sequence[Mapping[str, Any]] | None = None,
    ) -> MessageResponse:
        return asyncio.run(
            self._create_message_async(prompt=prompt, max_tokens=max_tokens, tools=tools)
        )

    async def _create_message_async(
        self,
        *,
        prompt: str,
        max_tokens: int | None,
        tools: Sequence[Mapping[str, Any]] | None,
    ) -> MessageResponse:
        body: dict[str, Any] = {
            "model": self._config.model,
            "max_tokens": max_tokens or self._config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if tools:
            body["tools"] = [dict(tool) for tool in tools]

        async with self._client_factory(self._resilience) as client:
            return await self._perform_request(client=client, body=body)

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        body: dict[str, Any],
    ) -> MessageResponse:
        if self._resilience.base_url is None:
            raise AnthropicAPIError("Missing Anthropic base_url in resilience configuration")
        try:
            response = await client.post(MESSAGES_PATH, json=body)
        except httpx.HTTPError as exc:
            raise AnthropicAPIError(f"Failed to call the Messages API: {exc}") from exc

        payload = _json_or_none(response)
        if response.is_error:
            raise AnthropicAPIError(
                _error_message(response, payload), status_code=response.status_code
            )
        if not isinstance(payload, dict):
            raise AnthropicAPIError("Unexpected Messages API response payload")

        try:
            message = MessageResponse.model_validate(payload)
        except ValidationError as exc:
            raise AnthropicAPIError(f"Invalid Messages API response: {exc}") from exc
        if message.usage is not None:
            log.debug(
                "Messages API usage: %s in, %s out",
                message.usage.input_tokens,
                message.usage.output_tokens,
            )
        return message


def _json_or_none(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response, payload: object) -> str:
    if isinstance(payload, dict):
        try:
            error = ErrorResponse.model_validate(payload)
        except ValidationError:
            pass
        else:
            return f"Anthropic API error {response.status_code}: {error.error.message}"
    return f"Anthropic API error {response.status_code} {response.reason_phrase}"
