"""
Health risk scoring engine.

A fixed, additive point system over the questionnaire:
- Each rule group reads one field and contributes a fixed delta
- Banded factors are mutually exclusive: the highest matching band wins
- The sum is clamped to [0, 100] and classified into a risk tier
- Sub-risks are linear scalings of the clamped overall score

Everything here is pure: no I/O, no shared mutable state, and identical input
always yields an identical assessment.
"""

from health_portal.domain.models import (
    CholesterolStatus,
    DiabetesStatus,
    ExerciseFrequency,
    HeartbeatFeeling,
    HypertensionStatus,
    QuestionnaireResponse,
    RiskAssessment,
    RiskLevel,
    SmokingStatus,
    SubRisks,
)
from health_portal.domain.recommendations import build_recommendations

MIN_SCORE = 0
MAX_SCORE = 100

# (exclusive lower bound, points), checked from the oldest band down
AGE_BANDS: tuple[tuple[int, int], ...] = ((65, 25), (50, 15), (40, 10))

HYPERTENSION_POINTS: dict[HypertensionStatus, int] = {
    HypertensionStatus.YES: 25,
    HypertensionStatus.SUSPECTED: 12,
}

DIABETES_POINTS: dict[DiabetesStatus, int] = {
    DiabetesStatus.TYPE1: 25,
    DiabetesStatus.TYPE2: 25,
    DiabetesStatus.PREDIABETIC: 12,
    DiabetesStatus.UNSURE: 5,
}

HEARTBEAT_POINTS: dict[HeartbeatFeeling, int] = {
    HeartbeatFeeling.IRREGULAR: 20,
    HeartbeatFeeling.FAST: 15,
    HeartbeatFeeling.SLOW: 10,
    HeartbeatFeeling.UNSURE: 5,
}

CHOLESTEROL_POINTS: dict[CholesterolStatus, int] = {
    CholesterolStatus.HIGH: 20,
    CholesterolStatus.BORDERLINE: 10,
}

SMOKING_POINTS: dict[SmokingStatus, int] = {
    SmokingStatus.CURRENT: 20,
    SmokingStatus.FORMER: 5,
}

# Daily exercise is the only credit in the table
EXERCISE_POINTS: dict[ExerciseFrequency, int] = {
    ExerciseFrequency.NEVER: 10,
    ExerciseFrequency.RARELY: 5,
    ExerciseFrequency.DAILY: -10,
}

POINTS_PER_SYMPTOM = 5

# (inclusive upper bound, tier); anything above the last bound is critical
RISK_LEVEL_BANDS: tuple[tuple[int, RiskLevel], ...] = (
    (25, RiskLevel.LOW),
    (50, RiskLevel.MODERATE),
    (75, RiskLevel.HIGH),
)

CARDIAC_MULTIPLIER = 1.1
DIABETES_MULTIPLIER = 0.9
STROKE_MULTIPLIER = 0.85


def age_points(age: int) -> int:
    for lower_bound, points in AGE_BANDS:
        if age > lower_bound:
            return points
    return 0


def raw_score(response: QuestionnaireResponse) -> int:
    """Unclamped sum of every rule group."""
    return (
        age_points(response.scoring_age)
        + HYPERTENSION_POINTS.get(response.hypertension_status, 0)
        + DIABETES_POINTS.get(response.diabetes_status, 0)
        + HEARTBEAT_POINTS.get(response.heartbeat_feeling, 0)
        + CHOLESTEROL_POINTS.get(response.cholesterol_status, 0)
        + SMOKING_POINTS.get(response.smoking_status, 0)
        + EXERCISE_POINTS.get(response.exercise_frequency, 0)
        + POINTS_PER_SYMPTOM * len(response.symptoms)
    )


def compute_overall_score(response: QuestionnaireResponse) -> int:
    """Overall risk score, clamped to [0, 100]."""
    return min(MAX_SCORE, max(MIN_SCORE, raw_score(response)))


def classify_risk_level(score: float) -> RiskLevel:
    """Map a score onto its tier; each band includes its upper edge."""
    for upper_bound, level in RISK_LEVEL_BANDS:
        if score <= upper_bound:
            return level
    return RiskLevel.CRITICAL


def derive_sub_risks(overall_score: int) -> SubRisks:
    """
    Scale the overall score into cardiac, diabetes and stroke estimates.

    Only the upper bound needs clamping since the score is non-negative and
    every multiplier is positive. Values are left unrounded.
    """
    return SubRisks(
        cardiac_risk=min(float(MAX_SCORE), overall_score * CARDIAC_MULTIPLIER),
        diabetes_risk=min(float(MAX_SCORE), overall_score * DIABETES_MULTIPLIER),
        stroke_risk=min(float(MAX_SCORE), overall_score * STROKE_MULTIPLIER),
    )


def assess(response: QuestionnaireResponse) -> RiskAssessment:
    """Score a questionnaire: score, then tier, then sub-risks, then advice."""
    overall_score = compute_overall_score(response)
    risk_level = classify_risk_level(overall_score)
    sub_risks = derive_sub_risks(overall_score)
    recommendations = build_recommendations(risk_level)

    return RiskAssessment(
        overall_score=overall_score,
        risk_level=risk_level,
        cardiac_risk=sub_risks.cardiac_risk,
        diabetes_risk=sub_risks.diabetes_risk,
        stroke_risk=sub_risks.stroke_risk,
        recommendations=recommendations,
    )


__all__ = [
    "assess",
    "build_recommendations",
    "classify_risk_level",
    "compute_overall_score",
    "derive_sub_risks",
    "raw_score",
]
