"""
Adaptive basal/ceiling traversal over the milestone catalog.

The session opens at the first milestone expected at or after the child's
chronological age and walks backward until a milestone is mastered (the
basal). It then turns forward and keeps asking until a milestone is not
mastered (the ceiling) or the catalog runs out.

Transition rules (pass = yes, fail = sometimes / not_yet):
- backward + pass: pivot forward. If the very first item passed, continue
  after it; otherwise resume from the start position.
- backward + fail: step to the previous milestone; below index 0 the floor
  is exhausted and the session ends.
- forward + pass: next unanswered milestone; none left ends the session.
- forward + fail: the session ends.

Every milestone is asked at most once, so a session ends within
len(catalog) answers.
"""

import logging
import math
from numbers import Real
from typing import Dict, Iterable, Optional, Tuple

from .catalog import CatalogRepository, order_milestones
from .data_models import Milestone, SessionState
from .enums import Response, SearchDirection, TerminationReason
from .exceptions import InvalidAgeError, InvalidResponseError, SessionTerminatedError

logger = logging.getLogger(__name__)

DEFAULT_MIN_AGE_MONTHS = 0
DEFAULT_MAX_AGE_MONTHS = 60


def validate_chronological_age(age_months, config: Optional[Dict] = None) -> float:
    """
    Check that a chronological age is a finite number inside the screening range.

    Args:
        age_months: Age in months
        config: Optional configuration dict ('screening.min_age_months',
            'screening.max_age_months')

    Returns:
        The age as a float

    Raises:
        InvalidAgeError: If the age is not numeric or out of range
    """
    screening_config = (config or {}).get('screening', {})
    min_age = screening_config.get('min_age_months', DEFAULT_MIN_AGE_MONTHS)
    max_age = screening_config.get('max_age_months', DEFAULT_MAX_AGE_MONTHS)

    if isinstance(age_months, bool) or not isinstance(age_months, Real):
        raise InvalidAgeError(f"Chronological age must be a number, got {age_months!r}")

    age = float(age_months)
    if math.isnan(age) or not (min_age <= age <= max_age):
        raise InvalidAgeError(
            f"Chronological age {age_months} months is outside {min_age}-{max_age} months"
        )
    return age


class AssessmentSession:
    """
    Mutable state of one in-progress screening.

    The catalog is snapshotted and ordered at creation. The only mutator is
    submit(); once the session is terminal it rejects further answers.
    """

    def __init__(
        self,
        milestones: Iterable[Milestone],
        chronological_age_months: float,
        config: Optional[Dict] = None
    ):
        self.chronological_age_months = validate_chronological_age(
            chronological_age_months, config
        )
        self._milestones: Tuple[Milestone, ...] = order_milestones(milestones)

        self._answers: Dict[str, Response] = {}
        self._answered_indices = set()

        self.start_index = self._find_start_index()
        self.current_index: Optional[int] = self.start_index
        self.direction = SearchDirection.BACKWARD
        self.basal_index: Optional[int] = None
        self.ceiling_index: Optional[int] = None
        self.termination_reason: Optional[TerminationReason] = None

        logger.info(
            f"Started screening at {self.chronological_age_months:g} months: "
            f"{len(self._milestones)} milestones, first question "
            f"'{self._milestones[self.start_index].id}' (index {self.start_index})"
        )

    @classmethod
    def from_repository(
        cls,
        repository: CatalogRepository,
        chronological_age_months: float,
        config: Optional[Dict] = None
    ) -> 'AssessmentSession':
        """Start a session from a catalog repository."""
        return cls(repository.load_milestones(), chronological_age_months, config)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def milestones(self) -> Tuple[Milestone, ...]:
        """Catalog snapshot in traversal order."""
        return self._milestones

    @property
    def answers(self) -> Dict[str, Response]:
        """Copy of answers so far, in presentation order."""
        return dict(self._answers)

    @property
    def terminal(self) -> bool:
        return self.termination_reason is not None

    def is_terminal(self) -> bool:
        return self.terminal

    @property
    def current_milestone(self) -> Optional[Milestone]:
        """Milestone awaiting an answer (None once terminal)."""
        if self.terminal or self.current_index is None:
            return None
        return self._milestones[self.current_index]

    @property
    def basal_milestone(self) -> Optional[Milestone]:
        if self.basal_index is None:
            return None
        return self._milestones[self.basal_index]

    @property
    def ceiling_milestone(self) -> Optional[Milestone]:
        """Last milestone passed on the forward climb, or the basal if none was."""
        if self.ceiling_index is None:
            return None
        return self._milestones[self.ceiling_index]

    def state(self) -> SessionState:
        return SessionState(
            current_milestone=self.current_milestone,
            direction=self.direction,
            terminal=self.terminal,
            answered_count=len(self._answers),
            termination_reason=self.termination_reason,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def submit(self, response: Response) -> SessionState:
        """
        Record the answer for the current milestone and move to the next one.

        Args:
            response: Answer for current_milestone

        Returns:
            SessionState after the transition

        Raises:
            SessionTerminatedError: If the session has already finished
            InvalidResponseError: If response is not a Response
        """
        if self.terminal:
            raise SessionTerminatedError(
                f"Session already finished ({self.termination_reason.value})"
            )
        if not isinstance(response, Response):
            raise InvalidResponseError(
                f"submit() expects a Response, got {type(response).__name__}; "
                f"use Response.parse() for raw values"
            )

        index = self.current_index
        milestone = self._milestones[index]
        self._answers[milestone.id] = response
        self._answered_indices.add(index)

        logger.debug(
            f"[{self.direction.value}] {milestone.id} (index {index}) -> {response.value}"
        )

        if self.direction is SearchDirection.BACKWARD:
            if response.is_pass:
                self._pivot_forward(index)
            else:
                self._step_backward(index)
        else:
            if response.is_pass:
                self.ceiling_index = index
                self._advance_forward(index)
            else:
                self._finish(TerminationReason.CEILING_REACHED)

        return self.state()

    def _pivot_forward(self, index: int) -> None:
        self.basal_index = index
        self.ceiling_index = index
        self.direction = SearchDirection.FORWARD

        if index >= self.start_index:
            next_index = self._next_unanswered(index + 1)
        elif self.start_index not in self._answered_indices:
            next_index = self.start_index
        else:
            next_index = self._next_unanswered(self.start_index + 1)

        logger.debug(f"Basal found at index {index}; pivoting forward")
        self._move_or_finish(next_index, TerminationReason.CATALOG_END)

    def _step_backward(self, index: int) -> None:
        next_index = index - 1
        if next_index < 0:
            self._finish(TerminationReason.FLOOR_EXHAUSTED)
            return
        self.current_index = next_index

    def _advance_forward(self, index: int) -> None:
        self._move_or_finish(self._next_unanswered(index + 1), TerminationReason.CATALOG_END)

    def _move_or_finish(self, next_index: Optional[int], reason: TerminationReason) -> None:
        if next_index is None:
            self._finish(reason)
        else:
            self.current_index = next_index

    def _finish(self, reason: TerminationReason) -> None:
        self.termination_reason = reason
        self.current_index = None
        logger.info(
            f"Screening finished after {len(self._answers)} answers ({reason.value}); "
            f"basal={self._describe(self.basal_index)}, ceiling={self._describe(self.ceiling_index)}"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_start_index(self) -> int:
        """First milestone expected at or after the child's age, else the last one."""
        for index, milestone in enumerate(self._milestones):
            expected = milestone.expected_by_month
            if expected is None:
                expected = milestone.age_key
            if expected >= self.chronological_age_months:
                return index
        return len(self._milestones) - 1

    def _next_unanswered(self, from_index: int) -> Optional[int]:
        for index in range(from_index, len(self._milestones)):
            if index not in self._answered_indices:
                return index
        return None

    def _describe(self, index: Optional[int]) -> str:
        if index is None:
            return "none"
        return self._milestones[index].id
