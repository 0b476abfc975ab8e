"""
Enumerations for the motor screening engine.
"""

from enum import Enum
from typing import List, Union

from .exceptions import InvalidResponseError


class Response(Enum):
    """Caregiver answer to a single milestone question."""
    YES = "yes"  # Mastered
    SOMETIMES = "sometimes"  # Emerging
    NOT_YET = "not_yet"  # Not present

    @property
    def points(self) -> int:
        """Score contribution of this answer (2, 1 or 0)."""
        return _RESPONSE_POINTS[self]

    @property
    def is_pass(self) -> bool:
        """Only a full 'yes' counts as a pass during traversal."""
        return self is Response.YES

    @classmethod
    def parse(cls, value: Union['Response', str, int]) -> 'Response':
        """
        Translate a raw answer into a Response.

        Accepts the string form ('yes', 'sometimes', 'not_yet') or the
        point form (2, 1, 0).

        Raises:
            InvalidResponseError: If the value is not one of the above
        """
        if isinstance(value, cls):
            return value

        # bool is an int subclass; True/False are not answers
        if isinstance(value, int) and not isinstance(value, bool):
            for response, points in _RESPONSE_POINTS.items():
                if points == value:
                    return response
            raise InvalidResponseError(f"Unknown response points: {value}")

        if isinstance(value, str):
            normalized = value.strip().lower().replace(' ', '_').replace('-', '_')
            try:
                return cls(normalized)
            except ValueError:
                raise InvalidResponseError(f"Unknown response: {value!r}") from None

        raise InvalidResponseError(
            f"Response must be a Response, str or int, got {type(value).__name__}"
        )


_RESPONSE_POINTS = {
    Response.YES: 2,
    Response.SOMETIMES: 1,
    Response.NOT_YET: 0,
}

MAX_POINTS_PER_MILESTONE = 2


class MilestoneCategory(Enum):
    """Gross motor domains a milestone can belong to."""
    REFLEXES = "reflexes"
    STATIONARY = "stationary"
    LOCOMOTION = "locomotion"
    OBJECT_MANIPULATION = "object_manipulation"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @classmethod
    def ordered(cls) -> List['MilestoneCategory']:
        """Categories in display order."""
        return list(cls)


_CATEGORY_LABELS = {
    MilestoneCategory.REFLEXES: "Reflexes",
    MilestoneCategory.STATIONARY: "Stationary",
    MilestoneCategory.LOCOMOTION: "Locomotion",
    MilestoneCategory.OBJECT_MANIPULATION: "Object Manipulation",
}


class SearchDirection(Enum):
    """Phase of the basal/ceiling search."""
    BACKWARD = "backward"  # Looking for a mastered floor
    FORWARD = "forward"  # Climbing toward the ceiling


class TerminationReason(Enum):
    """Why a session stopped asking questions."""
    FLOOR_EXHAUSTED = "floor_exhausted"  # No milestone was mastered going backward
    CEILING_REACHED = "ceiling_reached"  # A forward item failed
    CATALOG_END = "catalog_end"  # Ran out of milestones going forward


class DevelopmentStatus(Enum):
    """Qualitative delay classification."""
    ON_TRACK = "on_track"
    MILD = "mild"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


class CategoryBand(Enum):
    """Display band for a category percentage."""
    STRONG = "strong"  # >= 80%
    EMERGING = "emerging"  # >= 50%
    NEEDS_SUPPORT = "needs_support"
