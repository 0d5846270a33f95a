from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from notegraph.adapters.anthropic import AnthropicAPIError, AnthropicClient
from tests.helpers.fakes import make_client_factory

if TYPE_CHECKING:
    from notegraph.config.anthropic import AnthropicConfig
    from tests.helpers.fakes import FakeResilientClient, ScriptedMessages


def test_create_message_posts_the_prompt(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.answer("YES")

    message = anthropic_client.create_message("Is this English?", max_tokens=50)

    assert message.text == "YES"
    assert message.usage is not None
    assert message.usage.output_tokens == 34
    (request,) = scripted.requests
    assert request.method == "POST"
    assert request.url == "https://anthropic.test/v1/messages"
    assert request.headers["x-api-key"] == "test-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    assert scripted.bodies[0] == {
        "model": "claude-haiku-4-5-20251001",
        "max_tokens": 50,
        "messages": [{"role": "user", "content": "Is this English?"}],
    }


def test_create_message_passes_tools_and_default_max_tokens(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.answer("{}")

    anthropic_client.create_message("Find it", tools=[{"type": "web_search_20250305"}])

    body = scripted.bodies[0]
    assert body["max_tokens"] == 4000
    assert body["tools"] == [{"type": "web_search_20250305"}]


def test_text_joins_only_text_blocks(
    anthropic_config: AnthropicConfig,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(
            200,
            json={
                "id": "msg_1",
                "type": "message",
                "content": [
                    {"type": "server_tool_use", "id": "tool_1", "name": "web_search"},
                    {"type": "text", "text": "country: Japan"},
                    {"type": "text", "text": "\ncity: Tokyo"},
                ],
            },
        )

    client = AnthropicClient(config=anthropic_config, client_factory=make_client_factory(handler))

    assert client.create_message("Find it").text == "country: Japan\ncity: Tokyo"


def test_error_responses_raise_with_status(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.fail(400, "max_tokens: must be positive")

    with pytest.raises(AnthropicAPIError, match="max_tokens: must be positive") as excinfo:
        anthropic_client.create_message("Hello")

    assert excinfo.value.status_code == 400


def test_non_json_answers_are_rejected(anthropic_config: AnthropicConfig) -> None:
    created: list[FakeResilientClient] = []

    def handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(200, text="<html>gateway</html>")

    client = AnthropicClient(
        config=anthropic_config, client_factory=make_client_factory(handler, created=created)
    )

    with pytest.raises(AnthropicAPIError, match="Unexpected Messages API response payload"):
        client.create_message("Hello")
    assert len(created) == 1


def test_transport_errors_are_wrapped(anthropic_config: AnthropicConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = AnthropicClient(config=anthropic_config, client_factory=make_client_factory(handler))

    with pytest.raises(AnthropicAPIError, match="Failed to call the Messages API"):
        client.create_message("Hello")
