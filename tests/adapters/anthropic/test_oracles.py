from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from notegraph.adapters.anthropic import (
    ClaudeExtractionOracle,
    ClaudeTranslationOracle,
    ClaudeWebSearchOracle,
)
from notegraph.domain.errors import ExtractionError, TranslationError, WebSearchError
from notegraph.domain.model import Category
from notegraph.domain.ports import ExtractionOracle, TranslationOracle, WebSearchOracle

if TYPE_CHECKING:
    from notegraph.adapters.anthropic import AnthropicClient
    from tests.helpers.fakes import ScriptedMessages


def test_oracles_satisfy_their_ports(anthropic_client: AnthropicClient) -> None:
    assert isinstance(ClaudeTranslationOracle(anthropic_client), TranslationOracle)
    assert isinstance(ClaudeExtractionOracle(anthropic_client), ExtractionOracle)
    assert isinstance(ClaudeWebSearchOracle(anthropic_client), WebSearchOracle)


@pytest.mark.parametrize(("answer", "expected"), [("YES", True), (" yes.", True), ("NO", False)])
def test_detect_english(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages, answer: str, expected: bool
) -> None:
    scripted.answer(answer)

    assert ClaudeTranslationOracle(anthropic_client).detect_english("Hola") is expected
    assert scripted.bodies[0]["max_tokens"] == 50
    assert '"Hola"' in scripted.bodies[0]["messages"][0]["content"]


def test_empty_detection_answer_is_an_error(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.answer("  ")

    with pytest.raises(TranslationError):
        ClaudeTranslationOracle(anthropic_client).detect_english("Hola")


def test_translate_returns_the_stripped_answer(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.answer("  Studio based in Madrid \n")

    assert ClaudeTranslationOracle(anthropic_client).translate("Estudio") == (
        "Studio based in Madrid"
    )


def test_translation_api_failure(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.fail(529, "Overloaded")

    with pytest.raises(TranslationError, match="Overloaded"):
        ClaudeTranslationOracle(anthropic_client).translate("Estudio")


def test_analyze_text_parses_the_answer(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages, analysis_answer: str
) -> None:
    scripted.answer(analysis_answer, stop_reason="max_tokens")

    analysis = ClaudeExtractionOracle(anthropic_client).analyze_text("Foster + Partners")

    assert analysis.category is Category.OFFICE
    assert "Foster + Partners" in scripted.bodies[0]["messages"][0]["content"]


def test_analyze_text_failures_are_extraction_errors(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.fail(500, "Internal server error")
    scripted.answer("Sorry, I cannot help with that.")
    oracle = ClaudeExtractionOracle(anthropic_client)

    with pytest.raises(ExtractionError, match="Analysis request failed"):
        oracle.analyze_text("note")
    with pytest.raises(ExtractionError, match="Failed to parse"):
        oracle.analyze_text("note")


def test_web_search_sends_the_tool(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.answer('{"country": "Norway", "city": "Oslo", "website": "snohetta.com"}')

    hint = ClaudeWebSearchOracle(anthropic_client).search_office_location("Snohetta")

    assert hint is not None
    assert (hint.city, hint.country, hint.website) == ("Oslo", "Norway", "snohetta.com")
    assert scripted.bodies[0]["tools"] == [
        {"type": "web_search_20250305", "name": "web_search", "max_uses": 2}
    ]


def test_web_search_without_result_and_failure(
    anthropic_client: AnthropicClient, scripted: ScriptedMessages
) -> None:
    scripted.answer("I could not find this office.")
    scripted.fail(429, "Rate limited")
    oracle = ClaudeWebSearchOracle(anthropic_client)

    assert oracle.search_office_location("Studio Nowhere") is None
    with pytest.raises(WebSearchError, match="Rate limited"):
        oracle.search_office_location("Studio Nowhere")
