"""Application configuration helpers."""

from __future__ import annotations

from .api import ApiConfig, build_api_config, get_api_config
from .env import int_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .orchestration import (
    OrchestrationConfig,
    UniquenessFailurePolicy,
    get_orchestration_config,
)
from .session import SessionConfig, get_session_config
from .storage import CacheConfig, get_cache_config

__all__ = [
    "ApiConfig",
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "OrchestrationConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SessionConfig",
    "UniquenessFailurePolicy",
    "build_api_config",
    "configure_logging",
    "get_api_config",
    "get_cache_config",
    "get_orchestration_config",
    "get_session_config",
    "int_env_var",
    "require_env_var",
    "require_env_vars",
]
