"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()


class AssessmentConfig(BaseModel):
    """Questionnaire submission behaviour."""

    enforce_symptom_catalog: bool = Field(
        default=False, description="Reject symptom labels outside the form catalog"
    )
    store_timeout_seconds: float = Field(
        default=10.0, gt=0.0, description="Timeout for each persistence call"
    )


class PersistenceConfig(BaseModel):
    """Record store configuration."""

    backend: Literal["memory"] = Field(default="memory", description="Record store backend")
    health_metrics_table: str = Field(
        default="health_metrics", min_length=1, description="Table for raw questionnaires"
    )
    risk_scores_table: str = Field(
        default="risk_scores", min_length=1, description="Table for computed assessments"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    assessment: AssessmentConfig = Field(default_factory=AssessmentConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _parse_bool(val: str | None, default: bool) -> bool:
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "on"}

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    assessment_config = AssessmentConfig(
        enforce_symptom_catalog=_parse_bool(os.getenv("ENFORCE_SYMPTOM_CATALOG"), False),
        store_timeout_seconds=float(os.getenv("STORE_TIMEOUT_SECONDS", "10.0")),
    )

    # Unsupported backends fail validation here rather than at first write
    backend = os.getenv("PERSISTENCE_BACKEND", "memory").strip().lower()
    persistence_config = PersistenceConfig(
        backend=cast(Literal["memory"], backend),
        health_metrics_table=os.getenv("HEALTH_METRICS_TABLE", "health_metrics"),
        risk_scores_table=os.getenv("RISK_SCORES_TABLE", "risk_scores"),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        assessment=assessment_config,
        persistence=persistence_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"Configuration loaded for {config.environment} environment")
        if config.assessment.enforce_symptom_catalog:
            print("Symptom catalog enforcement enabled")
    except Exception as e:
        print(f"Configuration validation failed: {e}")
        raise


# Development helpers
def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\nCONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level} ({config.logging.format})")

    print("\nASSESSMENT CONFIGURATION")
    print(f"Enforce Symptom Catalog: {config.assessment.enforce_symptom_catalog}")
    print(f"Store Timeout: {config.assessment.store_timeout_seconds}s")

    print("\nPERSISTENCE CONFIGURATION")
    print(f"Backend: {config.persistence.backend}")
    print(
        f"Tables: {config.persistence.health_metrics_table}, "
        f"{config.persistence.risk_scores_table}"
    )


if __name__ == "__main__":
    validate_config()
    print_config_summary()
