"""Claude-backed implementations of the oracle ports."""

from __future__ import annotations

from functools import lru_cache
from logging import getLogger
from typing import TYPE_CHECKING, Any

from notegraph.config.anthropic import get_anthropic_config
from notegraph.domain.errors import ExtractionError, TranslationError, WebSearchError

from .client import AnthropicAPIError, AnthropicClient
from .prompts import (
    analysis_prompt,
    detect_english_prompt,
    location_search_prompt,
    translate_prompt,
)
from .translator import parse_analysis, parse_location_answer

if TYPE_CHECKING:
    from notegraph.domain.ports import Analysis, LocationHint

log = getLogger(__name__)

DETECT_MAX_TOKENS = 50
WEB_SEARCH_TOOL = "web_search_20250305"


@lru_cache(maxsize=1)
def _get_default_client() -> AnthropicClient:
    return AnthropicClient(config=get_anthropic_config())


class ClaudeTranslationOracle:
    def __init__(self, client: AnthropicClient | None = None) -> None:
        self._client = client or _get_default_client()

    def detect_english(self, text: str) -> bool:
        try:
            message = self._client.create_message(
                detect_english_prompt(text), max_tokens=DETECT_MAX_TOKENS
            )
        except AnthropicAPIError as exc:
            raise TranslationError(f"Language detection failed: {exc}") from exc
        answer = message.text.strip().upper()
        if not answer:
            raise TranslationError("Language detection returned an empty answer")
        return answer.startswith("YES")

    def translate(self, text: str) -> str:
        try:
            message = self._client.create_message(translate_prompt(text))
        except AnthropicAPIError as exc:
            raise TranslationError(f"Translation failed: {exc}") from exc
        translated = message.text.strip()
        if not translated:
            raise TranslationError("Translation returned an empty answer")
        return translated


class ClaudeExtractionOracle:
    def __init__(self, client: AnthropicClient | None = None) -> None:
        self._client = client or _get_default_client()

    def analyze_text(self, text: str) -> Analysis:
        try:
            message = self._client.create_message(analysis_prompt(text))
        except AnthropicAPIError as exc:
            raise ExtractionError(f"Analysis request failed: {exc}") from exc
        if message.stop_reason == "max_tokens":
            log.warning("Analysis answer hit the token limit; parsing what arrived")
        return parse_analysis(message.text)


class ClaudeWebSearchOracle:
    """Looks up an office headquarters with the server-side web search tool."""

    def __init__(self, client: AnthropicClient | None = None) -> None:
        self._client = client or _get_default_client()

    def _tools(self) -> list[dict[str, Any]]:
        return [
            {
                "type": WEB_SEARCH_TOOL,
                "name": "web_search",
                "max_uses": self._client.config.web_search_max_uses,
            }
        ]

    def search_office_location(self, name: str) -> LocationHint | None:
        try:
            message = self._client.create_message(
                location_search_prompt(name), tools=self._tools()
            )
        except AnthropicAPIError as exc:
            raise WebSearchError(f"Web search for {name!r} failed: {exc}") from exc
        hint = parse_location_answer(message.text)
        if hint is None:
            log.info("Web search found no location for %s", name)
        else:
            log.info("Web search located %s in %s, %s", name, hint.city, hint.country)
        return hint
