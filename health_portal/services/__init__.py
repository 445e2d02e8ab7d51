"""
Services around the scoring engine.

This package contains the submission flow, the persistence boundary it
writes through, and the dashboard summary read from stored assessments.
"""

from .assessment_service import (
    AssessmentOutcome,
    AssessmentService,
    build_health_metric_record,
    build_risk_score_record,
)
from .dashboard import DashboardSummary, RiskGauge, build_risk_gauges, load_dashboard
from .persistence import (
    AssessmentStore,
    HealthMetricRecord,
    InMemoryAssessmentStore,
    RiskScoreRecord,
    StoreError,
    StoreTimeoutError,
)
from .result import Result

__all__ = [
    "AssessmentOutcome",
    "AssessmentService",
    "AssessmentStore",
    "DashboardSummary",
    "HealthMetricRecord",
    "InMemoryAssessmentStore",
    "Result",
    "RiskGauge",
    "RiskScoreRecord",
    "StoreError",
    "StoreTimeoutError",
    "build_health_metric_record",
    "build_risk_gauges",
    "build_risk_score_record",
    "load_dashboard",
]
