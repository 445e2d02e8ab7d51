"""
Tier-specific advice shown with an assessment.

Order within a tier is significant: generic, preventive advice comes first and
the critical tier escalates toward seeking immediate attention.
"""

from collections.abc import Mapping
from types import MappingProxyType

from health_portal.domain.models import RiskLevel

RECOMMENDATIONS: Mapping[RiskLevel, tuple[str, ...]] = MappingProxyType(
    {
        RiskLevel.LOW: (
            "Continue maintaining a healthy lifestyle",
            "Schedule annual health checkups",
            "Stay physically active",
        ),
        RiskLevel.MODERATE: (
            "Consider scheduling a consultation with a healthcare provider",
            "Monitor your blood pressure regularly",
            "Improve diet and increase physical activity",
            "Reduce stress through relaxation techniques",
        ),
        RiskLevel.HIGH: (
            "Schedule an appointment with a doctor soon",
            "Monitor your vital signs daily",
            "Make immediate lifestyle changes",
            "Consider medication consultation",
            "Avoid smoking and limit alcohol",
        ),
        RiskLevel.CRITICAL: (
            "Seek immediate medical attention",
            "Contact your healthcare provider urgently",
            "Monitor symptoms closely",
            "Have someone available to assist if needed",
            "Keep emergency contacts readily available",
        ),
    }
)

_unmapped = [level.value for level in RiskLevel if level not in RECOMMENDATIONS]
if _unmapped:
    raise RuntimeError(f"Risk levels without recommendations: {_unmapped}")


def build_recommendations(risk_level: RiskLevel | str) -> tuple[str, ...]:
    """Advice for a tier; an unmapped tier yields an empty tuple."""
    return RECOMMENDATIONS.get(risk_level, ())  # type: ignore[call-overload]
