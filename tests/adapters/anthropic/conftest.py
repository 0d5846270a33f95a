"""Shared fixtures for Anthropic adapter tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from notegraph.adapters.anthropic import AnthropicClient
from notegraph.config.anthropic import AnthropicConfig
from notegraph.config.http_resilience import ResilienceConfig
from tests.helpers.fakes import ScriptedMessages, make_client_factory

FIXTURES = Path("tests/data/anthropic")


@pytest.fixture
def anthropic_config() -> AnthropicConfig:
    return AnthropicConfig(
        resilience=ResilienceConfig(
            name="anthropic-test",
            base_url="https://anthropic.test",
            default_headers={"x-api-key": "test-key", "anthropic-version": "2023-06-01"},
        ),
        web_search_max_uses=2,
    )


@pytest.fixture
def scripted() -> ScriptedMessages:
    return ScriptedMessages()


@pytest.fixture
def anthropic_client(
    anthropic_config: AnthropicConfig, scripted: ScriptedMessages
) -> AnthropicClient:
    return AnthropicClient(config=anthropic_config, client_factory=make_client_factory(scripted))


@pytest.fixture
def analysis_answer() -> str:
    payload = json.loads((FIXTURES / "analysis_office.json").read_text())
    return f"Here is the analysis:\n```json\n{json.dumps(payload, indent=2)}\n```"
