"""
Development status classification and red-flag detection.

Status compares the estimated motor age with the child's chronological age:
- delay <= 0: On track
- 0 < delay <= 3 months: Mild delay
- 3 < delay <= 6 months: Moderate delay
- delay > 6 months: Significant delay

Each band includes its upper edge, so a delay of exactly 3.0 months is mild.

Status is a display value derived on demand; it is never stored in an
AssessmentResult.

Red flags are answered milestones marked red_flag that were not mastered
while the child is at or past the month by which their absence is a
concern. Unasked milestones are never flagged.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from screening.data_models import Milestone
from screening.enums import DevelopmentStatus, Response

logger = logging.getLogger(__name__)

DEFAULT_MILD_MAX_DELAY = 3.0
DEFAULT_MODERATE_MAX_DELAY = 6.0

_STATUS_TEXT = {
    DevelopmentStatus.ON_TRACK: (
        "On Track",
        "Your child's gross motor development appears to be progressing well for their age."
    ),
    DevelopmentStatus.MILD: (
        "Mild Delay",
        "The assessment suggests some areas of delay. Consider discussing these results "
        "with your pediatrician or a pediatric physical therapist."
    ),
    DevelopmentStatus.MODERATE: (
        "Moderate Delay",
        "The assessment suggests a moderate gross motor delay. We recommend discussing these "
        "results with your pediatrician or a pediatric physical therapist."
    ),
    DevelopmentStatus.SIGNIFICANT: (
        "Significant Delay",
        "The assessment suggests a significant gross motor delay. We strongly recommend "
        "consulting a pediatric physical therapist for a comprehensive evaluation."
    ),
}


@dataclass
class StatusSummary:
    """
    Caregiver-facing status for one screening.

    Attributes:
        status: Delay band
        delay_months: Chronological age minus age equivalency (negative = ahead)
        label: Short heading
        description: One or two sentences of guidance
    """
    status: DevelopmentStatus
    delay_months: float
    label: str
    description: str


@dataclass
class RedFlag:
    """A red-flag milestone the child has not mastered by its concern age."""
    milestone: Milestone
    response: Response
    months_past_concern: float


def classify_development_status(
    chronological_age_months: float,
    age_equivalent_months: float,
    config: Optional[Dict] = None
) -> DevelopmentStatus:
    """
    Map the gap between chronological and motor age onto a status band.

    Args:
        chronological_age_months: Child's age in months
        age_equivalent_months: Estimated motor age in months
        config: Optional configuration dict
            ('scoring.development_status.mild_max_delay', '...moderate_max_delay')
    """
    status_config = (config or {}).get('scoring', {}).get('development_status', {})
    mild_max = status_config.get('mild_max_delay', DEFAULT_MILD_MAX_DELAY)
    moderate_max = status_config.get('moderate_max_delay', DEFAULT_MODERATE_MAX_DELAY)

    delay = chronological_age_months - age_equivalent_months

    if delay <= 0:
        return DevelopmentStatus.ON_TRACK
    elif delay <= mild_max:
        return DevelopmentStatus.MILD
    elif delay <= moderate_max:
        return DevelopmentStatus.MODERATE
    else:
        return DevelopmentStatus.SIGNIFICANT


def summarize_development_status(
    chronological_age_months: float,
    age_equivalent_months: float,
    config: Optional[Dict] = None
) -> StatusSummary:
    """Classify the delay and attach display wording."""
    status = classify_development_status(
        chronological_age_months, age_equivalent_months, config
    )
    label, description = _STATUS_TEXT[status]
    delay = round(chronological_age_months - age_equivalent_months, 1)

    logger.info(f"Development status: {status.value} (delay {delay:+.1f} months)")

    return StatusSummary(
        status=status,
        delay_months=delay,
        label=label,
        description=description,
    )


def detect_red_flags(
    milestones: Sequence[Milestone],
    answers: Mapping[str, Response],
    chronological_age_months: float
) -> List[RedFlag]:
    """
    Find red-flag milestones that were answered below 'yes' past their concern age.

    Returns:
        RedFlag list in catalog order
    """
    flags = []
    for milestone in milestones:
        if not milestone.red_flag:
            continue
        response = answers.get(milestone.id)
        if response is None or response.is_pass:
            continue
        if chronological_age_months < milestone.concern_if_missing_by_month:
            continue

        flags.append(RedFlag(
            milestone=milestone,
            response=response,
            months_past_concern=chronological_age_months - milestone.concern_if_missing_by_month,
        ))

    if flags:
        logger.warning(f"{len(flags)} red flag(s): {[f.milestone.id for f in flags]}")

    return flags
