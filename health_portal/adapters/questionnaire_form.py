"""
Questionnaire form adapter.

The portal form submits select values and free-text numbers as strings and
the symptom checkboxes as a list of labels. This module maps that payload
onto an immutable QuestionnaireResponse.

Key form concepts:
- Select fields: empty string means "not answered"
- Symptom catalog: the fixed checkbox labels offered by the form
- Strict mode: optionally reject labels outside the catalog
"""

from collections.abc import Iterable, Mapping
from typing import Any

from health_portal.domain.models import QuestionnaireResponse

SYMPTOM_CATALOG: tuple[str, ...] = (
    "Chest pain",
    "Shortness of breath",
    "Dizziness",
    "Fatigue",
    "Headaches",
    "Numbness",
    "Vision changes",
    "Irregular heartbeat",
)

# Model field -> accepted form keys, first match wins
FORM_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "age": ("age",),
    "weight_kg": ("weight", "weightKg", "weight_kg"),
    "height_cm": ("height", "heightCm", "height_cm"),
    "hypertension_status": ("hypertension", "hypertensionStatus", "hypertension_status"),
    "diabetes_status": ("diabetes", "diabetesStatus", "diabetes_status"),
    "heartbeat_feeling": ("heartbeatFeeling", "heartbeat_feeling", "heartbeat"),
    "cholesterol_status": ("cholesterol", "cholesterolStatus", "cholesterol_status"),
    "smoking_status": ("smokingStatus", "smoking_status", "smoking"),
    "alcohol_consumption": ("alcoholConsumption", "alcohol_consumption", "alcohol"),
    "exercise_frequency": ("exerciseFrequency", "exercise_frequency", "exercise"),
    "symptoms": ("symptoms",),
    "notes": ("notes",),
}


class UnknownSymptomError(ValueError):
    """Raised in strict mode when a symptom label is not in the catalog."""

    def __init__(self, labels: Iterable[str]) -> None:
        self.labels = sorted(labels)
        super().__init__(f"Unknown symptoms: {', '.join(self.labels)}")


def parse_questionnaire_form(
    form: Mapping[str, Any], *, enforce_catalog: bool = False
) -> QuestionnaireResponse:
    """
    Build a QuestionnaireResponse from a raw form payload.

    Args:
        form: Submitted fields, camelCase or snake_case keys
        enforce_catalog: Reject symptom labels outside SYMPTOM_CATALOG

    Returns:
        QuestionnaireResponse: Normalized, immutable submission

    Raises:
        UnknownSymptomError: Only when enforce_catalog is set
    """
    values: dict[str, Any] = {}
    for field_name, keys in FORM_FIELD_KEYS.items():
        for key in keys:
            if key in form:
                values[field_name] = form[key]
                break

    response = QuestionnaireResponse.model_validate(values)

    if enforce_catalog:
        unknown = response.symptoms - frozenset(SYMPTOM_CATALOG)
        if unknown:
            raise UnknownSymptomError(unknown)

    return response


def toggle_symptom(selected: Iterable[str], symptom: str, checked: bool) -> tuple[str, ...]:
    """Checkbox change: add the label once when checked, drop every copy when not."""
    current = tuple(selected)
    if checked:
        return current if symptom in current else (*current, symptom)
    return tuple(label for label in current if label != symptom)
