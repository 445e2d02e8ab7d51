"""
End-to-end system check of the assessment pipeline.

This script exercises:
1. Configuration loading and validation
2. Scoring sample questionnaires across every risk tier
3. The submission flow against the in-memory store
4. The dashboard summary read back from the store
5. Error handling when the store rejects a write

Run with: uv run python system_check.py
"""

import asyncio
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from health_portal.adapters.questionnaire_form import parse_questionnaire_form
from health_portal.config import get_config, print_config_summary, validate_config
from health_portal.domain.scoring import assess
from health_portal.logging_setup import configure_logging
from health_portal.services.assessment_service import AssessmentService
from health_portal.services.dashboard import load_dashboard
from health_portal.services.persistence import (
    HealthMetricRecord,
    InMemoryAssessmentStore,
    StoreError,
)
from health_portal.services.result import Result

console = Console()

SAMPLE_FORMS: dict[str, dict[str, Any]] = {
    "empty": {},
    "middle_aged": {"age": "45", "exerciseFrequency": "weekly"},
    "symptomatic": {
        "age": "38",
        "symptoms": [
            "Fatigue",
            "Headaches",
            "Dizziness",
            "Numbness",
            "Chest pain",
            "Vision changes",
        ],
    },
    "hypertensive": {
        "age": "58",
        "hypertension": "yes",
        "cholesterol": "borderline",
        "smokingStatus": "former",
        "exerciseFrequency": "rarely",
    },
    "critical": {
        "age": "70",
        "hypertension": "yes",
        "diabetes": "type2",
        "heartbeatFeeling": "irregular",
        "cholesterol": "high",
        "smokingStatus": "current",
        "exerciseFrequency": "never",
    },
}


class RejectingStore(InMemoryAssessmentStore):
    """Store that refuses every questionnaire row."""

    async def insert_health_metric(
        self, record: HealthMetricRecord
    ) -> Result[HealthMetricRecord, StoreError]:
        return Result.err(StoreError("health_metrics is read-only"))


async def check_configuration() -> bool:
    """Check configuration loading and validation."""

    console.print(Panel("Checking Configuration", style="blue"))

    try:
        validate_config()
        configure_logging(get_config().logging)
        console.print("Configuration loaded successfully", style="green")
        print_config_summary()
        return True

    except Exception as e:
        console.print(f"Configuration check failed: {e}", style="red")
        return False


async def check_scoring() -> bool:
    """Score the sample questionnaires and show the results."""

    console.print(Panel("Checking Risk Scoring", style="blue"))

    table = Table(title="Sample Assessments")
    table.add_column("Sample", style="cyan")
    table.add_column("Score", style="green")
    table.add_column("Level", style="magenta")
    table.add_column("Cardiac / Diabetes / Stroke", style="yellow")
    table.add_column("First Recommendation")

    levels = set()
    for name, form in SAMPLE_FORMS.items():
        assessment = assess(parse_questionnaire_form(form))
        levels.add(assessment.risk_level)
        table.add_row(
            name,
            str(assessment.overall_score),
            assessment.risk_level.value,
            f"{assessment.cardiac_risk:.1f} / {assessment.diabetes_risk:.1f} / "
            f"{assessment.stroke_risk:.1f}",
            assessment.recommendations[0],
        )

    console.print(table)
    console.print(f"Covered {len(levels)} of 4 risk levels", style="green")
    return len(levels) == 4


async def check_submission_flow() -> bool:
    """Submit a form, then read the dashboard back from the store."""

    console.print(Panel("Checking Submission Flow", style="blue"))

    config = get_config()
    store = InMemoryAssessmentStore(
        health_metrics_table=config.persistence.health_metrics_table,
        risk_scores_table=config.persistence.risk_scores_table,
    )
    service = AssessmentService(store, config.assessment)

    result = await service.submit_form("demo-user", SAMPLE_FORMS["hypertensive"])
    if result.is_err():
        console.print(f"Submission failed: {result.unwrap_err()}", style="red")
        return False

    outcome = result.unwrap()
    console.print(f"Stored questionnaire {outcome.health_metric.id}", style="green")
    console.print(f"Audit notes: {outcome.health_metric.notes}")
    console.print(f"Analysis notes: {outcome.risk_score.analysis_notes}")

    dashboard = (await load_dashboard(store, "demo-user")).unwrap()

    gauge_table = Table(title=f"Dashboard (Risk Level: {dashboard.risk_level_label})")
    gauge_table.add_column("Gauge", style="cyan")
    gauge_table.add_column("Score", style="green")
    gauge_table.add_column("Level", style="magenta")
    for gauge in dashboard.gauges:
        gauge_table.add_row(gauge.label, str(gauge.score), gauge.level.value)
    console.print(gauge_table)

    for index, recommendation in enumerate(dashboard.recommendations, start=1):
        console.print(f"  {index}. {recommendation}")

    return dashboard.score_label == str(outcome.assessment.overall_score)


async def check_error_handling() -> bool:
    """A rejected questionnaire row must stop the submission."""

    console.print(Panel("Checking Error Handling", style="blue"))

    store = RejectingStore()
    service = AssessmentService(store)
    result = await service.submit_form("demo-user", SAMPLE_FORMS["critical"])

    if result.is_ok() or store.risk_scores:
        console.print("Rejected questionnaire still produced a risk score", style="red")
        return False

    console.print(f"Submission failed as expected: {result.unwrap_err()}", style="green")
    return True


async def run_all_checks() -> None:
    """Run all system checks."""

    console.print(Panel("Health Portal - System Checks", style="bold blue"))

    checks = [
        ("Configuration", check_configuration),
        ("Risk Scoring", check_scoring),
        ("Submission Flow", check_submission_flow),
        ("Error Handling", check_error_handling),
    ]

    results = []
    for check_name, check_func in checks:
        console.print(f"\n{'=' * 60}")
        try:
            results.append((check_name, await check_func()))
        except Exception as e:
            console.print(f"{check_name} failed with exception: {e}", style="red")
            results.append((check_name, False))

    console.print(f"\n{'=' * 60}")
    summary_table = Table(title="Check Results Summary")
    summary_table.add_column("Check", style="cyan")
    summary_table.add_column("Result")
    for check_name, passed in results:
        summary_table.add_row(check_name, "PASS" if passed else "FAIL")
    console.print(summary_table)

    passed_count = sum(1 for _, passed in results if passed)
    console.print(f"\nResults: {passed_count}/{len(results)} checks passed")


if __name__ == "__main__":
    try:
        asyncio.run(run_all_checks())
    except KeyboardInterrupt:
        console.print("\nChecks stopped by user", style="yellow")
