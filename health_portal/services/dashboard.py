"""
Dashboard view of a user's latest assessment.

Reads the newest stored risk score and turns it into the values the
presentation layer renders: gauge scores, tier badges and the ordered
recommendation list.
"""

import math

from pydantic import BaseModel, ConfigDict, Field

from health_portal.domain.models import RiskLevel
from health_portal.domain.scoring import classify_risk_level
from health_portal.services.persistence import AssessmentStore, RiskScoreRecord, StoreError
from health_portal.services.result import Result

NO_LEVEL_LABEL = "N/A"
NO_SCORE_LABEL = "—"


class RiskGauge(BaseModel):
    """One dial on the dashboard."""

    model_config = ConfigDict(frozen=True)

    label: str
    score: int = Field(ge=0, le=100)
    level: RiskLevel


class DashboardSummary(BaseModel):
    """Latest-assessment panel; empty when the user has no assessment yet."""

    risk_level_label: str
    score_label: str
    gauges: list[RiskGauge] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    @property
    def has_assessment(self) -> bool:
        return bool(self.gauges)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def build_risk_gauges(record: RiskScoreRecord) -> list[RiskGauge]:
    """
    Gauges for a stored risk score.

    The overall gauge uses the stored tier. Sub-risk gauges are shown only
    when present and non-zero, and are tiered with the overall bands applied
    to the unrounded value.
    """
    gauges = [
        RiskGauge(label="Overall Risk", score=record.overall_score, level=record.risk_level)
    ]

    for label, value in (
        ("Cardiac Risk", record.cardiac_risk),
        ("Diabetes Risk", record.diabetes_risk),
    ):
        if value:
            gauges.append(
                RiskGauge(
                    label=label, score=round_half_up(value), level=classify_risk_level(value)
                )
            )

    return gauges


def summarize(record: RiskScoreRecord | None) -> DashboardSummary:
    if record is None:
        return DashboardSummary(risk_level_label=NO_LEVEL_LABEL, score_label=NO_SCORE_LABEL)

    return DashboardSummary(
        risk_level_label=record.risk_level.value.capitalize(),
        score_label=str(record.overall_score),
        gauges=build_risk_gauges(record),
        recommendations=list(record.recommendations or []),
    )


async def load_dashboard(
    store: AssessmentStore, user_id: str
) -> Result[DashboardSummary, StoreError]:
    """Fetch the user's newest risk score and summarize it."""
    latest = await store.latest_risk_score(user_id)
    if latest.is_err():
        return Result.err(latest.unwrap_err())
    return Result.ok(summarize(latest.unwrap()))
