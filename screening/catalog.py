"""
Milestone catalog: ordering, validation and repository interfaces.

The catalog is supplied by the surrounding application. Before a session can
start, the catalog must be non-empty, every item must carry an age
(age_equivalent_months or expected_by_month), and milestone ids must be
unique. The resulting order is ascending age, ties broken by display_order.

Repositories own any caching of a fetched catalog; nothing is cached at
module level.
"""

import logging
from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import yaml

from .data_models import AgeGroup, Milestone
from .exceptions import InvalidCatalogError

logger = logging.getLogger(__name__)


def validate_catalog(milestones: Sequence[Milestone]) -> None:
    """
    Check the catalog preconditions.

    Raises:
        InvalidCatalogError: If the catalog is empty, an item has no age,
            or milestone ids repeat
    """
    if not milestones:
        raise InvalidCatalogError("Milestone catalog is empty")

    unordered = [m.id for m in milestones if m.age_key is None]
    if unordered:
        raise InvalidCatalogError(
            f"Milestones missing both age_equivalent_months and expected_by_month: {unordered}"
        )

    counts = Counter(m.id for m in milestones)
    duplicates = sorted(milestone_id for milestone_id, n in counts.items() if n > 1)
    if duplicates:
        raise InvalidCatalogError(f"Duplicate milestone ids in catalog: {duplicates}")


def order_milestones(milestones: Iterable[Milestone]) -> Tuple[Milestone, ...]:
    """
    Validate and return the catalog in its fixed traversal order.

    Returns:
        Tuple of milestones sorted by (age_key, display_order)
    """
    items = list(milestones)
    validate_catalog(items)
    ordered = tuple(sorted(items, key=lambda m: (m.age_key, m.display_order)))
    logger.debug(f"Ordered catalog of {len(ordered)} milestones "
                 f"({ordered[0].age_key:g}-{ordered[-1].age_key:g} months)")
    return ordered


class CatalogRepository(ABC):
    """Interface for anything that can supply the milestone catalog."""

    @abstractmethod
    def load_milestones(self) -> List[Milestone]:
        """Return every milestone in the catalog (any order)."""
        pass

    def load_age_groups(self) -> List[AgeGroup]:
        """Return age groups in display order (empty if the source has none)."""
        return []

    def ordered_milestones(self) -> Tuple[Milestone, ...]:
        """Validated catalog in traversal order."""
        return order_milestones(self.load_milestones())


class InMemoryCatalogRepository(CatalogRepository):
    """Catalog held in memory, typically built by the caller or a test."""

    def __init__(
        self,
        milestones: Iterable[Union[Milestone, Dict[str, Any]]],
        age_groups: Optional[Iterable[AgeGroup]] = None
    ):
        self._milestones = [
            m if isinstance(m, Milestone) else Milestone.from_dict(m)
            for m in milestones
        ]
        self._age_groups = sorted(age_groups or [], key=lambda g: g.display_order)

    def load_milestones(self) -> List[Milestone]:
        return list(self._milestones)

    def load_age_groups(self) -> List[AgeGroup]:
        return list(self._age_groups)


class YamlCatalogRepository(CatalogRepository):
    """
    Catalog read from a YAML file with top-level 'milestones' and
    optional 'age_groups' lists.

    The file is parsed once per repository instance.
    """

    def __init__(self, catalog_path: Union[str, Path]):
        self.catalog_path = Path(catalog_path)
        self._document: Optional[Dict[str, Any]] = None

    def _load_document(self) -> Dict[str, Any]:
        if self._document is None:
            if not self.catalog_path.exists():
                raise FileNotFoundError(f"Catalog file not found: {self.catalog_path}")

            logger.info(f"Loading milestone catalog from {self.catalog_path}")
            try:
                with open(self.catalog_path, 'r', encoding='utf-8') as f:
                    document = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise InvalidCatalogError(
                    f"Catalog file {self.catalog_path} is not valid YAML: {e}"
                ) from e

            if not isinstance(document, dict):
                raise InvalidCatalogError(
                    f"Catalog file must contain a mapping, got {type(document).__name__}"
                )
            self._document = document
        return self._document

    def load_milestones(self) -> List[Milestone]:
        records = self._load_document().get('milestones') or []
        milestones = [Milestone.from_dict(record) for record in records]
        logger.debug(f"Parsed {len(milestones)} milestones")
        return milestones

    def load_age_groups(self) -> List[AgeGroup]:
        records = self._load_document().get('age_groups') or []
        groups = [_age_group_from_dict(record) for record in records]
        return sorted(groups, key=lambda g: g.display_order)


def _age_group_from_dict(record: Dict[str, Any]) -> AgeGroup:
    try:
        return AgeGroup(
            key=str(record['key']),
            display_name=record.get('display_name', str(record['key'])),
            min_months=int(record['min_months']),
            max_months=int(record['max_months']),
            display_order=int(record.get('display_order', 0)),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InvalidCatalogError(f"Malformed age group record {record!r}: {e}") from e
