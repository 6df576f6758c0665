from __future__ import annotations

from pathlib import Path

import pytest

from mastersync.config import (
    ConfigurationError,
    get_api_config,
    get_cache_config,
    get_orchestration_config,
    get_session_config,
)
from mastersync.config.env import int_env_var, require_env_vars
from mastersync.config.errors import MissingConfigurationError
from mastersync.config.orchestration import UniquenessFailurePolicy


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FIRST_SETTING", raising=False)
    monkeypatch.setenv("SECOND_SETTING", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(("SECOND_SETTING", "FIRST_SETTING"))

    assert str(exc.value) == "Missing configuration for: FIRST_SETTING, SECOND_SETTING"


def test_int_env_var_parses_and_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOME_NUMBER", " 7 ")
    monkeypatch.delenv("OTHER_NUMBER", raising=False)

    assert int_env_var("SOME_NUMBER") == 7
    assert int_env_var("OTHER_NUMBER", default=3) == 3


def test_int_env_var_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOME_NUMBER", "seven")

    with pytest.raises(ConfigurationError, match="must be an integer"):
        int_env_var("SOME_NUMBER")


def test_api_config_normalizes_base_url_and_sets_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MASTERSYNC_API_BASE_URL", "https://sales.example.com/backend")
    monkeypatch.setenv("MASTERSYNC_API_TOKEN", "secret")

    config = get_api_config()

    assert config.base_url == "https://sales.example.com/backend/"
    assert config.resilience.base_url == config.base_url
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["Authorization"] == "Bearer secret"
    assert config.push_resilience.timeout_seconds > config.resilience.timeout_seconds


def test_api_config_requires_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MASTERSYNC_API_BASE_URL", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_api_config()


def test_orchestration_policy_defaults_to_block(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MASTERSYNC_UNIQUENESS_ON_FAILURE", raising=False)

    config = get_orchestration_config()

    assert config.uniqueness_on_failure is UniquenessFailurePolicy.BLOCK
    assert config.draft_invoice_prefix == "ORDER"


def test_orchestration_policy_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MASTERSYNC_UNIQUENESS_ON_FAILURE", "Proceed")

    assert get_orchestration_config().uniqueness_on_failure is UniquenessFailurePolicy.PROCEED


def test_orchestration_policy_rejects_unknown_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MASTERSYNC_UNIQUENESS_ON_FAILURE", "maybe")

    with pytest.raises(ConfigurationError, match="block, proceed"):
        get_orchestration_config()


def test_session_config_requires_user(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MASTERSYNC_USER_ID", "12")
    monkeypatch.setenv("MASTERSYNC_USER_CATEGORY", "1")

    config = get_session_config()

    assert (config.user_id, config.user_category) == (12, 1)


def test_cache_config_prefers_database_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("MASTERSYNC_SQL_ECHO", "yes")

    config = get_cache_config()

    assert config.is_in_memory
    assert config.echo


def test_cache_config_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.delenv("MASTERSYNC_SQL_ECHO", raising=False)
    monkeypatch.setenv("MASTERSYNC_DATA_DIR", str(tmp_path / "data"))

    config = get_cache_config()

    assert config.database_uri.endswith("cache.db")
    assert (tmp_path / "data").is_dir()
    assert not config.echo
