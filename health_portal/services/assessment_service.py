"""
Questionnaire submission flow.

One submission produces two stored records:
1. The raw questionnaire, stored first for audit
2. The risk score computed from it, linked by health_metric_id

Design principles:
- The scoring engine stays pure; logging and I/O live here
- Expected failures (store errors, timeouts, strict-mode rejections) are
  returned as Result errors, programming errors raise
- No risk score is stored unless its questionnaire row was stored
"""

import asyncio
from collections.abc import Awaitable, Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict

from health_portal.adapters.questionnaire_form import (
    UnknownSymptomError,
    parse_questionnaire_form,
)
from health_portal.config import AssessmentConfig
from health_portal.domain.models import Choice, QuestionnaireResponse, RiskAssessment
from health_portal.domain.scoring import assess, raw_score
from health_portal.services.persistence import (
    AssessmentStore,
    HealthMetricRecord,
    RiskScoreRecord,
    StoreError,
    StoreTimeoutError,
)
from health_portal.services.result import Result

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT")

NOT_SPECIFIED = "not specified"


class AssessmentOutcome(BaseModel):
    """Everything a completed submission produced."""

    model_config = ConfigDict(frozen=True)

    health_metric: HealthMetricRecord
    risk_score: RiskScoreRecord
    assessment: RiskAssessment


def _stored_choice(choice: Choice) -> str | None:
    return None if choice.value == "unspecified" else choice.value


def _note_label(choice: Choice) -> str:
    return _stored_choice(choice) or NOT_SPECIFIED


def build_health_metric_record(
    user_id: str, response: QuestionnaireResponse
) -> HealthMetricRecord:
    """Audit row for a questionnaire; condition answers are folded into the notes."""
    notes = (
        f"Hypertension: {_note_label(response.hypertension_status)}, "
        f"Diabetes: {_note_label(response.diabetes_status)}, "
        f"Heartbeat: {_note_label(response.heartbeat_feeling)}, "
        f"Cholesterol: {_note_label(response.cholesterol_status)}. "
        f"{response.notes or ''}"
    ).strip()

    return HealthMetricRecord(
        user_id=user_id,
        age=response.age,
        weight=response.weight_kg,
        height=response.height_cm,
        smoking_status=_stored_choice(response.smoking_status),
        alcohol_consumption=_stored_choice(response.alcohol_consumption),
        exercise_frequency=_stored_choice(response.exercise_frequency),
        symptoms=sorted(response.symptoms) or None,
        notes=notes,
    )


def build_risk_score_record(
    user_id: str,
    health_metric_id: str,
    assessment: RiskAssessment,
    symptom_count: int,
    completed_at: datetime | None = None,
) -> RiskScoreRecord:
    """Risk score row for a stored questionnaire."""
    completed_at = completed_at or datetime.now(UTC)

    return RiskScoreRecord(
        user_id=user_id,
        health_metric_id=health_metric_id,
        overall_score=assessment.overall_score,
        risk_level=assessment.risk_level,
        cardiac_risk=assessment.cardiac_risk,
        diabetes_risk=assessment.diabetes_risk,
        stroke_risk=assessment.stroke_risk,
        recommendations=list(assessment.recommendations),
        analysis_notes=(
            f"Assessment completed on {completed_at.date().isoformat()}. "
            f"{symptom_count} symptoms reported."
        ),
        created_at=completed_at,
    )


class AssessmentService:
    """
    Runs a questionnaire submission against an AssessmentStore.

    Each store call gets its own timeout; a timed out call is reported as a
    StoreTimeoutError result.
    """

    def __init__(self, store: AssessmentStore, config: AssessmentConfig | None = None) -> None:
        self.store = store
        self.config = config or AssessmentConfig()
        self.logger = logger.bind(component="assessment_service")

    async def _call_store(
        self, operation: str, call: Awaitable[Result[RecordT, StoreError]]
    ) -> Result[RecordT, StoreError]:
        try:
            return await asyncio.wait_for(call, timeout=self.config.store_timeout_seconds)
        except TimeoutError:
            return Result.err(
                StoreTimeoutError(
                    f"{operation} timed out after {self.config.store_timeout_seconds}s"
                )
            )

    async def submit(
        self, user_id: str, response: QuestionnaireResponse
    ) -> Result[AssessmentOutcome, Exception]:
        """
        Store the questionnaire, score it, and store the resulting assessment.

        Returns:
            Result[AssessmentOutcome]: Stored records and the assessment, or the
            store error that stopped the submission.
        """
        if not user_id or not user_id.strip():
            raise ValueError("user_id must be a non-empty string")

        log = self.logger.bind(user_id=user_id)
        log.info("assessment_submitted", symptom_count=len(response.symptoms))

        metric_result = await self._call_store(
            "insert_health_metric",
            self.store.insert_health_metric(build_health_metric_record(user_id, response)),
        )
        if metric_result.is_err():
            log.error(
                "assessment_store_failed",
                operation="insert_health_metric",
                error=str(metric_result.unwrap_err()),
            )
            return Result.err(metric_result.unwrap_err())
        health_metric = metric_result.unwrap()
        if health_metric.id is None:
            raise RuntimeError("Store returned a questionnaire row without an id")

        assessment = assess(response)
        log.info(
            "assessment_scored",
            raw_score=raw_score(response),
            overall_score=assessment.overall_score,
            risk_level=assessment.risk_level.value,
            symptom_count=len(response.symptoms),
        )

        risk_result = await self._call_store(
            "insert_risk_score",
            self.store.insert_risk_score(
                build_risk_score_record(
                    user_id, health_metric.id, assessment, len(response.symptoms)
                )
            ),
        )
        if risk_result.is_err():
            log.error(
                "assessment_store_failed",
                operation="insert_risk_score",
                health_metric_id=health_metric.id,
                error=str(risk_result.unwrap_err()),
            )
            return Result.err(risk_result.unwrap_err())

        return Result.ok(
            AssessmentOutcome(
                health_metric=health_metric,
                risk_score=risk_result.unwrap(),
                assessment=assessment,
            )
        )

    async def submit_form(
        self, user_id: str, form: Mapping[str, Any]
    ) -> Result[AssessmentOutcome, Exception]:
        """Parse a raw form payload, then submit it."""
        try:
            response = parse_questionnaire_form(
                form, enforce_catalog=self.config.enforce_symptom_catalog
            )
        except UnknownSymptomError as e:
            self.logger.warning("questionnaire_rejected", user_id=user_id, error=str(e))
            return Result.err(e)

        return await self.submit(user_id, response)
