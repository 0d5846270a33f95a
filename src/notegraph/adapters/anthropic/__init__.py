"""Public interface for the Anthropic adapter."""

from __future__ import annotations

from .client import AnthropicAPIError, AnthropicClient
from .oracles import ClaudeExtractionOracle, ClaudeTranslationOracle, ClaudeWebSearchOracle
from .schema import AnalysisPayload, MessageResponse
from .translator import parse_analysis, parse_location_answer

__all__ = [
    "AnalysisPayload",
    "AnthropicAPIError",
    "AnthropicClient",
    "ClaudeExtractionOracle",
    "ClaudeTranslationOracle",
    "ClaudeWebSearchOracle",
    "MessageResponse",
    "parse_analysis",
    "parse_location_answer",
]
