"""
Motor age equivalency computation.

Turns the answers of a screening into a months-denominated estimate of
functional motor level, plus raw and per-category sub-scores.

Method (cumulative threshold with interpolation):
- Group answered milestones by age (age_equivalent_months, else
  expected_by_month); each group is worth 2 points per milestone
- Walk groups from youngest to oldest accumulating points; the highest age
  at which the cumulative score is still >= 80% of the cumulative maximum
  is the last "full" age
- Above that age, collect partial credit group by group until a group
  scores nothing, then interpolate between the last full age and the
  highest contributing age by the partial credit fraction
- Round to one decimal (half up)

Only answered milestones count. Unasked milestones are neither credited
nor penalised, so the estimate does not depend on which items the traversal
skipped or on the order they were asked.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Mapping, Optional, Sequence

from screening.data_models import AssessmentResult, CategoryScore, Milestone
from screening.enums import MAX_POINTS_PER_MILESTONE, MilestoneCategory, Response
from screening.exceptions import SessionNotCompleteError, UnknownMilestoneError

logger = logging.getLogger(__name__)

DEFAULT_MASTERY_THRESHOLD = 0.8


@dataclass
class AgeGroupScore:
    """Points earned by all answered milestones sharing one age."""
    age_months: float
    score: int = 0
    max: int = 0


def compute_age_equivalency(
    milestones: Sequence[Milestone],
    answers: Mapping[str, Response],
    config: Optional[Dict] = None
) -> AssessmentResult:
    """
    Score a set of answers against the catalog.

    Args:
        milestones: Catalog the answers refer to (any order)
        answers: Milestone id -> Response, in presentation order
        config: Optional configuration dict
            ('scoring.age_equivalency.mastery_threshold')

    Returns:
        AssessmentResult

    Raises:
        UnknownMilestoneError: If an answer references a milestone not in the catalog
    """
    scoring_config = (config or {}).get('scoring', {}).get('age_equivalency', {})
    threshold = scoring_config.get('mastery_threshold', DEFAULT_MASTERY_THRESHOLD)

    by_id = {m.id: m for m in milestones}
    unknown = [milestone_id for milestone_id in answers if milestone_id not in by_id]
    if unknown:
        raise UnknownMilestoneError(f"Answers reference unknown milestones: {unknown}")

    answered = [(by_id[milestone_id], response) for milestone_id, response in answers.items()]

    if not answered:
        logger.warning("No answered milestones; age equivalency is 0")
        return AssessmentResult(
            age_equivalent_months=0.0,
            raw_score=0,
            max_score=0,
            category_scores={},
            answers={},
        )

    groups = _group_by_age(answered)
    last_full_age = _find_last_full_age(groups, threshold)
    age_equivalent = _interpolate_partial_credit(groups, last_full_age)

    raw_score = sum(response.points for _, response in answered)
    max_score = MAX_POINTS_PER_MILESTONE * len(answered)

    result = AssessmentResult(
        age_equivalent_months=_round_half_up(age_equivalent),
        raw_score=raw_score,
        max_score=max_score,
        category_scores=_compute_category_scores(answered),
        answers=answers,
    )

    logger.info(
        f"Age equivalency: {result.age_equivalent_months} months "
        f"(raw {raw_score}/{max_score}, last full age {last_full_age:g})"
    )
    return result


def score_session(session, config: Optional[Dict] = None) -> AssessmentResult:
    """
    Score a finished AssessmentSession.

    Raises:
        SessionNotCompleteError: If the session is still asking questions
    """
    if not session.is_terminal():
        raise SessionNotCompleteError(
            f"Cannot score a session with a pending question "
            f"({len(session.answers)} answered so far)"
        )
    return compute_age_equivalency(session.milestones, session.answers, config)


def _group_by_age(answered) -> List[AgeGroupScore]:
    """Group answered milestones by age, youngest first."""
    groups: Dict[float, AgeGroupScore] = {}
    for milestone, response in answered:
        age = milestone.age_key
        group = groups.setdefault(age, AgeGroupScore(age_months=age))
        group.score += response.points
        group.max += MAX_POINTS_PER_MILESTONE
    return [groups[age] for age in sorted(groups)]


def _find_last_full_age(groups: List[AgeGroupScore], threshold: float) -> float:
    """Highest group age where the cumulative score ratio is >= threshold."""
    cumulative_score = 0
    cumulative_max = 0
    last_full_age = 0.0

    for group in groups:
        cumulative_score += group.score
        cumulative_max += group.max
        if cumulative_max > 0 and _safe_ratio(cumulative_score, cumulative_max) >= threshold:
            last_full_age = group.age_months

    return last_full_age


def _interpolate_partial_credit(groups: List[AgeGroupScore], last_full_age: float) -> Decimal:
    """
    Extend the last full age by partial credit earned above it.

    Accumulation stops at the first group that earns nothing; that group
    does not contribute to the maximum either. Computed in Decimal so that
    exact halves survive until rounding.
    """
    partial_score = 0
    partial_max = 0
    highest_contributing_age = last_full_age

    for group in groups:
        if group.age_months <= last_full_age:
            continue
        if group.score == 0:
            break
        partial_score += group.score
        partial_max += group.max
        highest_contributing_age = group.age_months

    base = _to_decimal(last_full_age)
    if partial_max > 0 and partial_score > 0:
        span = _to_decimal(highest_contributing_age) - base
        return base + span * partial_score / partial_max

    return base


def _compute_category_scores(answered) -> Dict[MilestoneCategory, CategoryScore]:
    """Raw/max per category over answered milestones, in category display order."""
    totals = OrderedDict((category, [0, 0]) for category in MilestoneCategory.ordered())
    for milestone, response in answered:
        totals[milestone.category][0] += response.points
        totals[milestone.category][1] += MAX_POINTS_PER_MILESTONE

    return {
        category: CategoryScore(raw=raw, max=maximum)
        for category, (raw, maximum) in totals.items()
        if maximum > 0
    }


def _safe_ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(repr(float(value)))


def _round_half_up(value) -> float:
    """Round to one decimal place, halves away from zero."""
    return float(_to_decimal(value).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))
