"""
Screening report generation and history records.

Builds the caregiver-facing report for a scored screening (motor age text,
status band, category breakdown, not-mastered list, red flags) and the
append-only history record the caller persists. Multiple history records
can be summarized into a progress trend.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from screening.data_models import AssessmentResult, Milestone
from screening.enums import CategoryBand, MilestoneCategory, Response
from scoring.development_status import (
    RedFlag,
    StatusSummary,
    detect_red_flags,
    summarize_development_status
)
from utils.age_utils import format_age_equivalency

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "This assessment is a screening tool and is NOT a substitute for a professional "
    "evaluation. Age equivalency estimates are approximate. Always consult a qualified "
    "pediatric physical therapist or pediatrician for clinical diagnosis and treatment planning."
)

DEFAULT_STRONG_PERCENT = 80.0
DEFAULT_EMERGING_PERCENT = 50.0


@dataclass
class CategoryBreakdown:
    """Display row for one category."""
    category: MilestoneCategory
    label: str
    raw: int
    max: int
    percent: float
    band: CategoryBand


@dataclass
class ScreeningReport:
    """
    Container for a finished screening, ready for display.

    Attributes:
        chronological_age_months: Child's age when screened
        age_equivalent_months: Estimated motor age
        age_equivalent_text: Motor age formatted for caregivers
        status: Delay band with wording
        raw_score: Total points earned
        max_score: Total points possible over asked milestones
        percent_score: raw_score as a percentage of max_score
        answered_count: Number of milestones asked
        categories: Per-category breakdown in display order
        not_mastered: Asked milestones answered 'sometimes' or 'not_yet'
        red_flags: Red-flag milestones not mastered past their concern age
        disclaimer: Non-diagnostic notice
    """
    chronological_age_months: float
    age_equivalent_months: float
    age_equivalent_text: str
    status: StatusSummary
    raw_score: int
    max_score: int
    percent_score: float = 0.0
    answered_count: int = 0
    categories: List[CategoryBreakdown] = field(default_factory=list)
    not_mastered: List[Dict[str, Any]] = field(default_factory=list)
    red_flags: List[RedFlag] = field(default_factory=list)
    disclaimer: str = DISCLAIMER


@dataclass
class HistoryTrend:
    """
    Progress across saved screenings of one child.

    Attributes:
        assessment_count: Number of records considered
        first_age_equivalent: Motor age at the earliest screening
        latest_age_equivalent: Motor age at the latest screening
        total_gain_months: Latest minus first motor age
        gain_per_month: Motor months gained per chronological month
            (least-squares slope; None with fewer than two distinct ages)
    """
    assessment_count: int
    first_age_equivalent: Optional[float] = None
    latest_age_equivalent: Optional[float] = None
    total_gain_months: float = 0.0
    gain_per_month: Optional[float] = None


def build_screening_report(
    result: AssessmentResult,
    milestones: Sequence[Milestone],
    chronological_age_months: float,
    config: Optional[Dict] = None
) -> ScreeningReport:
    """
    Assemble the display report for a scored screening.

    Args:
        result: AssessmentResult from the scoring engine
        milestones: Catalog the session was run against
        chronological_age_months: Child's age in months
        config: Optional configuration dict ('reporting.category_bands')
    """
    logger.info("Building screening report")

    status = summarize_development_status(
        chronological_age_months, result.age_equivalent_months, config
    )

    by_id = {m.id: m for m in milestones}
    not_mastered = [
        {
            'id': milestone_id,
            'display_name': by_id[milestone_id].display_name,
            'response': response,
            'expected_by_month': by_id[milestone_id].expected_by_month,
            'red_flag': by_id[milestone_id].red_flag,
        }
        for milestone_id, response in result.answers.items()
        if not response.is_pass and milestone_id in by_id
    ]

    return ScreeningReport(
        chronological_age_months=chronological_age_months,
        age_equivalent_months=result.age_equivalent_months,
        age_equivalent_text=format_age_equivalency(result.age_equivalent_months),
        status=status,
        raw_score=result.raw_score,
        max_score=result.max_score,
        percent_score=round(result.percent_score, 1),
        answered_count=result.answered_count,
        categories=_build_category_breakdown(result, config),
        not_mastered=not_mastered,
        red_flags=detect_red_flags(milestones, result.answers, chronological_age_months),
    )


def _build_category_breakdown(
    result: AssessmentResult,
    config: Optional[Dict]
) -> List[CategoryBreakdown]:
    band_config = (config or {}).get('reporting', {}).get('category_bands', {})
    strong = band_config.get('strong_percent', DEFAULT_STRONG_PERCENT)
    emerging = band_config.get('emerging_percent', DEFAULT_EMERGING_PERCENT)

    rows = []
    for category, score in result.category_scores.items():
        percent = 100.0 * score.ratio
        if percent >= strong:
            band = CategoryBand.STRONG
        elif percent >= emerging:
            band = CategoryBand.EMERGING
        else:
            band = CategoryBand.NEEDS_SUPPORT

        rows.append(CategoryBreakdown(
            category=category,
            label=category.label,
            raw=score.raw,
            max=score.max,
            percent=round(percent, 1),
            band=band,
        ))
    return rows


_RESPONSE_TEXT = {
    Response.YES: "Yes",
    Response.SOMETIMES: "Sometimes",
    Response.NOT_YET: "Not yet",
}


def render_text_report(report: ScreeningReport) -> str:
    """Plain-text rendering for terminals and logs."""
    lines = [
        "=" * 60,
        "GROSS MOTOR SCREENING RESULTS",
        "=" * 60,
        f"Chronological age:  {format_age_equivalency(report.chronological_age_months)}",
        f"Motor age estimate: {report.age_equivalent_text} "
        f"({report.age_equivalent_months:.1f} months)",
        f"Status:             {report.status.label}",
        f"  {report.status.description}",
        "",
        f"Score: {report.raw_score}/{report.max_score} ({report.percent_score:.1f}%) "
        f"over {report.answered_count} milestones",
    ]

    if report.categories:
        lines.append("")
        lines.append("Category breakdown:")
        for row in report.categories:
            lines.append(
                f"  {row.label:<22} {row.raw:>3}/{row.max:<3} {row.percent:5.1f}%  "
                f"[{row.band.value}]"
            )

    lines.append("")
    if report.not_mastered:
        lines.append("Milestones not yet mastered:")
        for item in report.not_mastered:
            suffix = " - Red flag" if item['red_flag'] else ""
            lines.append(
                f"  - {item['display_name']} ({_RESPONSE_TEXT[item['response']]}); "
                f"expected by {item['expected_by_month']} months{suffix}"
            )
    else:
        lines.append("All milestones asked were mastered.")

    if report.red_flags:
        lines.append("")
        lines.append("RED FLAGS - discuss with your pediatrician:")
        for flag in report.red_flags:
            lines.append(
                f"  ! {flag.milestone.display_name} "
                f"(concern if not met by {flag.milestone.concern_if_missing_by_month} months)"
            )

    lines.extend(["", report.disclaimer, "=" * 60])
    return "\n".join(lines)


def to_history_record(
    result: AssessmentResult,
    profile_id: str,
    chronological_age_months: float,
    assessed_on: Optional[date] = None,
    notes: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build the append-only history record for a screening.

    The record carries a generated record_id so whoever persists it can
    de-duplicate on that key. Nothing is written here.
    """
    assessed_on = assessed_on or date.today()
    record = {
        'record_id': str(uuid.uuid4()),
        'pediatric_profile_id': profile_id,
        'assessment_date': assessed_on.isoformat(),
        'chronological_age_months': chronological_age_months,
        'raw_score': result.raw_score,
        'max_score': result.max_score,
        'age_equivalent_months': result.age_equivalent_months,
        'category_scores': result.to_dict()['category_scores'],
        'milestones_snapshot': result.points_snapshot(),
        'notes': notes,
    }
    logger.debug(f"History record {record['record_id']} for profile {profile_id}")
    return record


def summarize_history(records: Sequence[Mapping[str, Any]]) -> HistoryTrend:
    """
    Summarize progress across history records of one child.

    Records are ordered by assessment_date (ISO strings sort correctly).
    """
    if not records:
        return HistoryTrend(assessment_count=0)

    ordered = sorted(records, key=lambda r: r['assessment_date'])
    motor_ages = np.array([float(r['age_equivalent_months']) for r in ordered])
    chrono_ages = np.array([float(r['chronological_age_months']) for r in ordered])

    gain_per_month = None
    if len(np.unique(chrono_ages)) >= 2:
        slope, _ = np.polyfit(chrono_ages, motor_ages, 1)
        gain_per_month = round(float(slope), 2)

    trend = HistoryTrend(
        assessment_count=len(ordered),
        first_age_equivalent=float(motor_ages[0]),
        latest_age_equivalent=float(motor_ages[-1]),
        total_gain_months=round(float(motor_ages[-1] - motor_ages[0]), 1),
        gain_per_month=gain_per_month,
    )
    logger.info(
        f"History: {trend.assessment_count} screenings, "
        f"gain {trend.total_gain_months:+.1f} months"
    )
    return trend
