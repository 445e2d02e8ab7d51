"""
Domain models for the health questionnaire and its risk assessment.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation and are frozen so a submission is built once
and passed by value into the scoring engine.
"""

import math
import re
from collections.abc import Iterable
from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")
_LEADING_DECIMAL = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class Choice(str, Enum):
    """Questionnaire select value that degrades to ``unspecified`` instead of failing."""

    @classmethod
    def parse(cls, value: Any) -> Self:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        return cls("unspecified")


class HypertensionStatus(Choice):
    """Diagnosed high blood pressure."""

    YES = "yes"
    SUSPECTED = "suspected"
    NO = "no"
    UNSPECIFIED = "unspecified"


class DiabetesStatus(Choice):
    """Diabetes diagnosis as reported by the patient."""

    TYPE1 = "type1"
    TYPE2 = "type2"
    PREDIABETIC = "prediabetic"
    NO = "no"
    UNSURE = "unsure"
    UNSPECIFIED = "unspecified"


class HeartbeatFeeling(Choice):
    """How the patient's heartbeat feels right now."""

    NORMAL = "normal"
    FAST = "fast"
    SLOW = "slow"
    IRREGULAR = "irregular"
    UNSURE = "unsure"
    UNSPECIFIED = "unspecified"


class CholesterolStatus(Choice):
    """High cholesterol awareness."""

    HIGH = "high"
    BORDERLINE = "borderline"
    NORMAL = "normal"
    UNSURE = "unsure"
    UNSPECIFIED = "unspecified"


class SmokingStatus(Choice):
    NEVER = "never"
    FORMER = "former"
    CURRENT = "current"
    UNSPECIFIED = "unspecified"


class ExerciseFrequency(Choice):
    NEVER = "never"
    RARELY = "rarely"
    WEEKLY = "weekly"
    DAILY = "daily"
    UNSPECIFIED = "unspecified"


class AlcoholConsumption(Choice):
    """Collected for the audit record only; not scored."""

    NONE = "none"
    OCCASIONAL = "occasional"
    MODERATE = "moderate"
    HEAVY = "heavy"
    UNSPECIFIED = "unspecified"


class RiskLevel(str, Enum):
    """Risk tiers, declared from least to most severe."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


_CHOICE_FIELDS: dict[str, type[Choice]] = {
    "hypertension_status": HypertensionStatus,
    "diabetes_status": DiabetesStatus,
    "heartbeat_feeling": HeartbeatFeeling,
    "cholesterol_status": CholesterolStatus,
    "smoking_status": SmokingStatus,
    "exercise_frequency": ExerciseFrequency,
    "alcohol_consumption": AlcoholConsumption,
}


def parse_age(value: Any) -> int | None:
    """
    Lenient whole-year parsing for the free-text age input.

    Leading digits win ("45 years" -> 45, "45.7" -> 45). Anything without a
    leading integer, booleans, and non-finite numbers resolve to None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INTEGER.match(value)
        return int(match.group(1)) if match else None
    return None


def parse_measurement(value: Any) -> float | None:
    """
    Parse weight/height input like JavaScript ``parseFloat``.

    The leading decimal wins ("70kg" -> 70.0); text without one, booleans
    and non-finite numbers become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _LEADING_DECIMAL.match(value)
        if not match:
            return None
        number = float(match.group(1))
    else:
        return None
    return number if math.isfinite(number) else None


class QuestionnaireResponse(BaseModel):
    """
    One self-reported health questionnaire submission.

    Construction never fails on questionnaire content: unknown select values
    become ``unspecified`` and unparseable numbers become ``None``.
    """

    model_config = ConfigDict(frozen=True)

    age: int | None = Field(default=None, description="Age in whole years")
    hypertension_status: HypertensionStatus = HypertensionStatus.UNSPECIFIED
    diabetes_status: DiabetesStatus = DiabetesStatus.UNSPECIFIED
    heartbeat_feeling: HeartbeatFeeling = HeartbeatFeeling.UNSPECIFIED
    cholesterol_status: CholesterolStatus = CholesterolStatus.UNSPECIFIED
    smoking_status: SmokingStatus = SmokingStatus.UNSPECIFIED
    exercise_frequency: ExerciseFrequency = ExerciseFrequency.UNSPECIFIED
    symptoms: frozenset[str] = Field(default_factory=frozenset)
    notes: str | None = Field(default=None, description="Free text, stored for audit only")

    # Stored with the questionnaire, never scored
    weight_kg: float | None = None
    height_cm: float | None = None
    alcohol_consumption: AlcoholConsumption = AlcoholConsumption.UNSPECIFIED

    @field_validator(*_CHOICE_FIELDS, mode="before")
    @classmethod
    def _normalize_choice(cls, value: Any, info: ValidationInfo) -> Choice:
        return _CHOICE_FIELDS[info.field_name].parse(value)

    @field_validator("age", mode="before")
    @classmethod
    def _normalize_age(cls, value: Any) -> int | None:
        return parse_age(value)

    @field_validator("weight_kg", "height_cm", mode="before")
    @classmethod
    def _normalize_measurement(cls, value: Any) -> float | None:
        return parse_measurement(value)

    @field_validator("symptoms", mode="before")
    @classmethod
    def _normalize_symptoms(cls, value: Any) -> frozenset[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        elif not isinstance(value, Iterable):
            return frozenset()
        return frozenset(
            label.strip() for label in value if isinstance(label, str) and label.strip()
        )

    @field_validator("notes", mode="before")
    @classmethod
    def _normalize_notes(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @property
    def scoring_age(self) -> int:
        """Age used for scoring; an absent age scores exactly like age 0."""
        return self.age if self.age is not None else 0


class SubRisks(BaseModel):
    """Domain-specific estimates scaled from the overall score."""

    model_config = ConfigDict(frozen=True)

    cardiac_risk: float = Field(ge=0.0, le=100.0)
    diabetes_risk: float = Field(ge=0.0, le=100.0)
    stroke_risk: float = Field(ge=0.0, le=100.0)


class RiskAssessment(BaseModel):
    """Result of scoring one questionnaire."""

    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    cardiac_risk: float = Field(ge=0.0, le=100.0)
    diabetes_risk: float = Field(ge=0.0, le=100.0)
    stroke_risk: float = Field(ge=0.0, le=100.0)
    recommendations: tuple[str, ...] = Field(
        description="Ordered by priority, displayed top to bottom"
    )
