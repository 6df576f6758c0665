"""Acting-user configuration for non-interactive entry points."""

from __future__ import annotations

from dataclasses import dataclass

from .env import int_env_var


@dataclass(frozen=True, slots=True)
class SessionConfig:
    user_id: int
    user_category: int


def get_session_config() -> SessionConfig:
    return SessionConfig(
        user_id=int_env_var("MASTERSYNC_USER_ID"),
        user_category=int_env_var("MASTERSYNC_USER_CATEGORY"),
    )
