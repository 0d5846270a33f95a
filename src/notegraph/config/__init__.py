"""Application configuration helpers."""

from __future__ import annotations

from .anthropic import AnthropicConfig, get_anthropic_config
from .env import env_flag, env_float, env_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .pipeline import PipelineConfig, get_pipeline_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "AnthropicConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "PipelineConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_float",
    "env_int",
    "get_anthropic_config",
    "get_database_config",
    "get_pipeline_config",
    "get_storage_config",
    "require_env_vars",
]
