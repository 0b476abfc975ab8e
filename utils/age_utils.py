"""Age arithmetic and display helpers."""

import logging
import math
from datetime import date
from typing import Optional, Sequence

from screening.data_models import AgeGroup

logger = logging.getLogger(__name__)


def months_between(birthdate: date, on_date: Optional[date] = None) -> int:
    """
    Whole calendar months from birthdate to on_date (default today).

    Counts month boundaries only; the day of month is ignored.
    """
    on_date = on_date or date.today()
    if on_date < birthdate:
        raise ValueError(f"Birthdate {birthdate} is after {on_date}")
    return (on_date.year - birthdate.year) * 12 + (on_date.month - birthdate.month)


def age_group_for_months(months: float, age_groups: Sequence[AgeGroup]) -> Optional[AgeGroup]:
    """
    Find the age group containing an age.

    Ages at or past the oldest group's upper bound map to the oldest group.
    """
    for group in age_groups:
        if group.contains(months):
            return group

    if age_groups and months >= age_groups[-1].max_months:
        return age_groups[-1]

    logger.warning(f"No age group covers {months} months")
    return None


def format_age_equivalency(months: float) -> str:
    """
    Human-readable age, e.g. '9 months', '2 years', '1 year, 3 months'.
    """
    if months < 1:
        return "Less than 1 month"

    years = int(months // 12)
    remaining = int(math.floor(months % 12 + 0.5))
    # 23.6 months rounds to 12 remaining months
    if remaining == 12:
        years += 1
        remaining = 0

    if years == 0:
        return _plural(remaining, 'month')
    if remaining == 0:
        return _plural(years, 'year')
    return f"{_plural(years, 'year')}, {_plural(remaining, 'month')}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"
