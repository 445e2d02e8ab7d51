"""
Persistence boundary for questionnaire submissions.

The portal stores two records per submission: the raw questionnaire (for
audit) and the computed risk score linked to it. Stores implement the
AssessmentStore protocol and report expected failures as Result errors.
"""

import asyncio
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field

from health_portal.domain.models import RiskLevel
from health_portal.services.result import Result

logger = structlog.get_logger(__name__)


class StoreError(Exception):
    """Expected persistence failure (rejected write, unavailable store)."""


class StoreTimeoutError(StoreError):
    """A store call exceeded its timeout."""


class HealthMetricRecord(BaseModel):
    """Raw questionnaire row, kept for audit."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    user_id: str = Field(min_length=1)
    age: int | None = None
    weight: float | None = None
    height: float | None = None
    smoking_status: str | None = None
    alcohol_consumption: str | None = None
    exercise_frequency: str | None = None
    symptoms: list[str] | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class RiskScoreRecord(BaseModel):
    """Computed assessment row, linked to the questionnaire it was scored from."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    user_id: str = Field(min_length=1)
    health_metric_id: str
    overall_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    cardiac_risk: float | None = Field(default=None, ge=0.0, le=100.0)
    diabetes_risk: float | None = Field(default=None, ge=0.0, le=100.0)
    stroke_risk: float | None = Field(default=None, ge=0.0, le=100.0)
    recommendations: list[str] | None = None
    analysis_notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class AssessmentStore(Protocol):
    """
    Protocol for the record store holding submissions.

    Why Protocol over ABC: Structural typing, easier mocking, less coupling.
    """

    async def insert_health_metric(
        self, record: HealthMetricRecord
    ) -> Result[HealthMetricRecord, StoreError]:
        """Insert a questionnaire row; the stored row carries its id."""
        ...

    async def insert_risk_score(
        self, record: RiskScoreRecord
    ) -> Result[RiskScoreRecord, StoreError]:
        """Insert a risk score row; the stored row carries its id."""
        ...

    async def latest_risk_score(self, user_id: str) -> Result[RiskScoreRecord | None, StoreError]:
        """Newest risk score for a user, or None when there is none."""
        ...


class InMemoryAssessmentStore:
    """
    Dict-backed store for tests and local runs.

    Writes are serialized with an asyncio.Lock so a submission's two inserts
    see a consistent view of existing ids.
    """

    def __init__(
        self,
        health_metrics_table: str = "health_metrics",
        risk_scores_table: str = "risk_scores",
    ) -> None:
        self.health_metrics_table = health_metrics_table
        self.risk_scores_table = risk_scores_table
        self.logger = logger.bind(store="memory")
        self._health_metrics: dict[str, HealthMetricRecord] = {}
        self._risk_scores: dict[str, RiskScoreRecord] = {}
        self._lock = asyncio.Lock()

    @property
    def health_metrics(self) -> list[HealthMetricRecord]:
        return list(self._health_metrics.values())

    @property
    def risk_scores(self) -> list[RiskScoreRecord]:
        return list(self._risk_scores.values())

    async def insert_health_metric(
        self, record: HealthMetricRecord
    ) -> Result[HealthMetricRecord, StoreError]:
        async with self._lock:
            record_id = record.id or str(uuid4())
            if record_id in self._health_metrics:
                return Result.err(
                    StoreError(f"Duplicate id {record_id} in {self.health_metrics_table}")
                )
            stored = record.model_copy(update={"id": record_id})
            self._health_metrics[record_id] = stored

        self.logger.debug("record_inserted", table=self.health_metrics_table, record_id=record_id)
        return Result.ok(stored)

    async def insert_risk_score(
        self, record: RiskScoreRecord
    ) -> Result[RiskScoreRecord, StoreError]:
        async with self._lock:
            if record.health_metric_id not in self._health_metrics:
                return Result.err(
                    StoreError(
                        f"Unknown health_metric_id {record.health_metric_id} "
                        f"for {self.risk_scores_table}"
                    )
                )
            record_id = record.id or str(uuid4())
            if record_id in self._risk_scores:
                return Result.err(
                    StoreError(f"Duplicate id {record_id} in {self.risk_scores_table}")
                )
            stored = record.model_copy(update={"id": record_id})
            self._risk_scores[record_id] = stored

        self.logger.debug("record_inserted", table=self.risk_scores_table, record_id=record_id)
        return Result.ok(stored)

    async def latest_risk_score(self, user_id: str) -> Result[RiskScoreRecord | None, StoreError]:
        candidates = [
            (position, record)
            for position, record in enumerate(self._risk_scores.values())
            if record.user_id == user_id
        ]
        if not candidates:
            return Result.ok(None)

        # Insertion order breaks created_at ties
        _, latest = max(candidates, key=lambda item: (item[1].created_at, item[0]))
        return Result.ok(latest)
