"""Pipeline tuning values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, env_float, env_int
from .errors import ConfigurationError

DEFAULT_SIMILARITY_THRESHOLD = 0.7
DEFAULT_LOCATION_WINDOW = 200


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    location_window: int = DEFAULT_LOCATION_WINDOW
    web_search: bool = True
    id_attempts: int = 10
    merge_attempts: int = 3

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ConfigurationError(
                "similarity_threshold must be within [0, 1]", setting="similarity_threshold"
            )
        if self.location_window < 0:
            raise ConfigurationError(
                "location_window must be non-negative", setting="location_window"
            )
        if self.id_attempts < 1 or self.merge_attempts < 1:
            raise ConfigurationError("attempt counts must be at least 1")


def get_pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        similarity_threshold=env_float(
            "NOTEGRAPH_SIMILARITY_THRESHOLD", DEFAULT_SIMILARITY_THRESHOLD
        ),
        location_window=env_int("NOTEGRAPH_LOCATION_WINDOW", DEFAULT_LOCATION_WINDOW),
        web_search=env_flag("NOTEGRAPH_WEB_SEARCH", default=True),
        id_attempts=env_int("NOTEGRAPH_ID_ATTEMPTS", 10),
        merge_attempts=env_int("NOTEGRAPH_MERGE_ATTEMPTS", 3),
    )
