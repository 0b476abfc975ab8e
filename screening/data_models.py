"""
Core data models for the motor screening engine.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .enums import (
    MAX_POINTS_PER_MILESTONE, MilestoneCategory, Response, SearchDirection,
    TerminationReason
)
from .exceptions import InvalidCatalogError


@dataclass(frozen=True)
class Milestone:
    """A single age-normed motor skill used as a test item."""
    id: str
    display_name: str
    expected_by_month: Optional[int]
    concern_if_missing_by_month: int
    category: MilestoneCategory = MilestoneCategory.LOCOMOTION
    red_flag: bool = False
    display_order: int = 0
    age_equivalent_months: Optional[float] = None
    description: Optional[str] = None

    @property
    def age_key(self) -> Optional[float]:
        """Age used for ordering and grouping (age equivalent, else expected month)."""
        if self.age_equivalent_months is not None:
            return float(self.age_equivalent_months)
        if self.expected_by_month is not None:
            return float(self.expected_by_month)
        return None

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> 'Milestone':
        """
        Build a Milestone from a raw catalog record (YAML entry or datastore row).

        Accepts either 'id' or 'milestone_key' as the identifier. A missing
        category falls back to locomotion.

        Raises:
            InvalidCatalogError: If the record is malformed, the id is missing
                or the category is unknown
        """
        if not isinstance(record, Mapping):
            raise InvalidCatalogError(f"Milestone record must be a mapping, got {record!r}")

        milestone_id = record.get('id', record.get('milestone_key'))
        if milestone_id is None or str(milestone_id).strip() == '':
            raise InvalidCatalogError(f"Milestone record has no id: {dict(record)}")

        category_value = record.get('category') or MilestoneCategory.LOCOMOTION.value
        try:
            category = MilestoneCategory(category_value)
        except ValueError:
            raise InvalidCatalogError(
                f"Milestone '{milestone_id}' has unknown category '{category_value}'"
            ) from None

        expected = record.get('expected_by_month')
        age_equivalent = record.get('age_equivalent_months')
        concern_by = record.get('concern_if_missing_by_month')
        if concern_by is None:
            concern_by = expected if expected is not None else 0

        try:
            return cls(
                id=str(milestone_id),
                display_name=record.get('display_name', str(milestone_id)),
                description=record.get('description'),
                expected_by_month=int(expected) if expected is not None else None,
                age_equivalent_months=float(age_equivalent) if age_equivalent is not None else None,
                concern_if_missing_by_month=int(concern_by),
                red_flag=bool(record.get('red_flag', False)),
                category=category,
                display_order=int(record.get('display_order', 0)),
            )
        except (TypeError, ValueError) as e:
            raise InvalidCatalogError(
                f"Milestone '{milestone_id}' has a non-numeric field: {e}"
            ) from e


@dataclass(frozen=True)
class AgeGroup:
    """Chronological age bracket used for display and content lookup."""
    key: str
    display_name: str
    min_months: int
    max_months: int
    display_order: int = 0

    def contains(self, months: float) -> bool:
        return self.min_months <= months < self.max_months


@dataclass(frozen=True)
class CategoryScore:
    """Raw points and maximum possible points for one category."""
    raw: int
    max: int

    @property
    def ratio(self) -> float:
        if self.max <= 0:
            return 0.0
        return self.raw / self.max

    def to_dict(self) -> Dict[str, int]:
        return {'raw': self.raw, 'max': self.max}


@dataclass(frozen=True)
class SessionState:
    """Snapshot of a session after an answer has been applied."""
    current_milestone: Optional[Milestone]
    direction: SearchDirection
    terminal: bool
    answered_count: int
    termination_reason: Optional[TerminationReason] = None


@dataclass(frozen=True)
class AssessmentResult:
    """
    Immutable outcome of a completed screening.

    Attributes:
        age_equivalent_months: Estimated motor age, one decimal place
        raw_score: Sum of points over all answered milestones
        max_score: Two points per answered milestone
        category_scores: Per-category raw/max (only categories that were asked)
        answers: Milestone id -> Response, in presentation order
    """
    age_equivalent_months: float
    raw_score: int
    max_score: int
    category_scores: Mapping[MilestoneCategory, CategoryScore] = field(default_factory=dict)
    answers: Mapping[str, Response] = field(default_factory=dict)

    def __post_init__(self):
        """Freeze the mappings so the result cannot be edited in place."""
        object.__setattr__(self, 'category_scores', MappingProxyType(dict(self.category_scores)))
        object.__setattr__(self, 'answers', MappingProxyType(dict(self.answers)))

    @property
    def percent_score(self) -> float:
        if self.max_score <= 0:
            return 0.0
        return 100.0 * self.raw_score / self.max_score

    @property
    def answered_count(self) -> int:
        return self.max_score // MAX_POINTS_PER_MILESTONE

    def points_snapshot(self) -> Dict[str, int]:
        """Milestone id -> points, the form history records store."""
        return {milestone_id: response.points for milestone_id, response in self.answers.items()}

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation with deterministic key order."""
        return {
            'age_equivalent_months': self.age_equivalent_months,
            'raw_score': self.raw_score,
            'max_score': self.max_score,
            'category_scores': {
                category.value: score.to_dict()
                for category, score in self.category_scores.items()
            },
            'answers': {
                milestone_id: response.value
                for milestone_id, response in self.answers.items()
            },
        }
