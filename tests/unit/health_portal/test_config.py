"""
Tests for configuration management in `health_portal/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Assessment and persistence overrides
- Fail-fast validation of bad values
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from health_portal.config import (
    AppConfig,
    AssessmentConfig,
    PersistenceConfig,
    get_config,
    load_config_from_env,
)

_ENV_VARS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "ENFORCE_SYMPTOM_CATALOG",
    "STORE_TIMEOUT_SECONDS",
    "PERSISTENCE_BACKEND",
    "HEALTH_METRICS_TABLE",
    "RISK_SCORES_TABLE",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from defaults and an empty get_config cache."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_load_config_dev_defaults() -> None:
    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.logging.level == "INFO"
    assert config.assessment.enforce_symptom_catalog is False
    assert config.assessment.store_timeout_seconds == 10.0
    assert config.persistence.backend == "memory"
    assert config.persistence.health_metrics_table == "health_metrics"
    assert config.persistence.risk_scores_table == "risk_scores"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("dev", "development"),
        ("Stage", "staging"),
        ("production", "production"),
        ("qa", "production"),
    ],
)
def test_environment_aliases(monkeypatch: pytest.MonkeyPatch, raw: str, expected: str) -> None:
    monkeypatch.setenv("ENVIRONMENT", raw)

    config = load_config_from_env()

    assert config.environment == expected
    assert config.debug is (expected == "development")


def test_non_dev_environments_log_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    assert load_config_from_env().logging.format == "json"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "unknown")
    assert load_config_from_env().logging.level == "INFO"

    monkeypatch.setenv("LOG_LEVEL", "error")
    assert load_config_from_env().logging.level == "ERROR"


@pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("off", False), ("", False)])
def test_symptom_catalog_flag_parsing(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.setenv("ENFORCE_SYMPTOM_CATALOG", raw)

    assert load_config_from_env().assessment.enforce_symptom_catalog is expected


def test_persistence_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSISTENCE_BACKEND", " MEMORY ")
    monkeypatch.setenv("HEALTH_METRICS_TABLE", "questionnaires")
    monkeypatch.setenv("RISK_SCORES_TABLE", "assessments")
    monkeypatch.setenv("STORE_TIMEOUT_SECONDS", "2.5")

    config = load_config_from_env()

    assert config.persistence.backend == "memory"
    assert config.persistence.health_metrics_table == "questionnaires"
    assert config.persistence.risk_scores_table == "assessments"
    assert config.assessment.store_timeout_seconds == 2.5


def test_unsupported_backend_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")

    with pytest.raises(ValidationError):
        load_config_from_env()


def test_non_positive_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        AssessmentConfig(store_timeout_seconds=0)


def test_blank_table_name_is_rejected() -> None:
    with pytest.raises(ValueError):
        PersistenceConfig(risk_scores_table="")


def test_get_config_cache() -> None:
    c1 = get_config()
    c2 = get_config()

    assert c1 is c2  # same object due to lru_cache


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(environment="production", debug=True)


def test_app_config_defaults() -> None:
    config = AppConfig()

    assert config.assessment == AssessmentConfig()
    assert config.persistence == PersistenceConfig()
