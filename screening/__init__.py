"""
Adaptive motor milestone screening.

This package holds the question-traversal core:
1. Milestone catalog: ordering, validation, repository interfaces
2. Assessment session: basal/ceiling search over the catalog
3. Result value handed to scoring and reporting

The engine performs no I/O and keeps no state between sessions.
Scoring of a finished session lives in the `scoring` package.
"""

from .enums import (
    Response,
    MilestoneCategory,
    SearchDirection,
    TerminationReason,
    DevelopmentStatus,
    CategoryBand,
)
from .data_models import (
    Milestone,
    AgeGroup,
    CategoryScore,
    SessionState,
    AssessmentResult,
)
from .exceptions import (
    ScreeningError,
    InvalidCatalogError,
    InvalidAgeError,
    InvalidResponseError,
    UnknownMilestoneError,
    SessionTerminatedError,
    SessionNotCompleteError,
)
from .catalog import (
    CatalogRepository,
    InMemoryCatalogRepository,
    YamlCatalogRepository,
    order_milestones,
    validate_catalog,
)
from .traversal import AssessmentSession, validate_chronological_age

__all__ = [
    # Enums
    'Response',
    'MilestoneCategory',
    'SearchDirection',
    'TerminationReason',
    'DevelopmentStatus',
    'CategoryBand',

    # Data models
    'Milestone',
    'AgeGroup',
    'CategoryScore',
    'SessionState',
    'AssessmentResult',

    # Errors
    'ScreeningError',
    'InvalidCatalogError',
    'InvalidAgeError',
    'InvalidResponseError',
    'UnknownMilestoneError',
    'SessionTerminatedError',
    'SessionNotCompleteError',

    # Catalog
    'CatalogRepository',
    'InMemoryCatalogRepository',
    'YamlCatalogRepository',
    'order_milestones',
    'validate_catalog',

    # Traversal
    'AssessmentSession',
    'validate_chronological_age',
]
