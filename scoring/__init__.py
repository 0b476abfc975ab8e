"""
Screening scoring module.

This package turns a finished screening into interpretable outputs:
1. Motor age equivalency (months, one decimal place)
2. Raw and per-category sub-scores
3. Development status band (on track / mild / moderate / significant)
4. Red-flag milestones not mastered by their concern age

All outputs are:
- Deterministic (same answers, same result)
- Explainable (cumulative threshold plus linear interpolation)
- Non-diagnostic (screening aid, not a normed clinical instrument)
"""

from .age_equivalency import compute_age_equivalency, score_session
from .development_status import (
    classify_development_status,
    summarize_development_status,
    detect_red_flags,
    StatusSummary,
    RedFlag,
)

__all__ = [
    'compute_age_equivalency',
    'score_session',
    'classify_development_status',
    'summarize_development_status',
    'detect_red_flags',
    'StatusSummary',
    'RedFlag',
]
