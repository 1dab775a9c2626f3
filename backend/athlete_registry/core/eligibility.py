"""Eligibility Policy — category to minimum-age table and the age check applied at finalization.

Invariants:
    - minimum_age is total over SportCategory (every member has an entry)
    - All functions are PURE: no IO, no side effects
    - check_age_requirement returns an error instance on violation, None on success

Design Decisions:
    - Age is encrypted at admission, so this check only runs once a disclosure arrives
      (ADR: two-phase eligibility, never forced into intake)
"""

from types import MappingProxyType

from athlete_registry.core.domain_types import SportCategory
from athlete_registry.core.errors import AgeRequirementNotMetError, ErrorContext


CATEGORY_MIN_AGES = MappingProxyType({
    SportCategory.INDIVIDUAL: 16,
    SportCategory.TEAM: 14,
    SportCategory.ENDURANCE: 18,
    SportCategory.COMBAT: 16,
    SportCategory.OTHER: 14,
})


def minimum_age(category: SportCategory) -> int:
    return CATEGORY_MIN_AGES[SportCategory(category)]


def category_min_ages() -> dict[str, int]:
    """Whole table keyed by category value (JSON-ready)."""
    return {c.value: age for c, age in CATEGORY_MIN_AGES.items()}


def check_age_requirement(
    category: SportCategory, age: int, context: ErrorContext | None = None,
) -> AgeRequirementNotMetError | None:
    required = minimum_age(category)
    if age < required:
        return AgeRequirementNotMetError(
            SportCategory(category).value, required, context,
        )
    return None
