"""
Fiscal Schedule Registry

Static allowance and bracket schedule per relationship category (French
droits de mutation à titre gratuit, simplified). Built and validated once at
import; exposed read-only.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import List, Mapping, Sequence, Tuple

from modules.tax.models import (
    UNBOUNDED,
    Bracket,
    FiscalProfile,
    InvalidCategoryError,
    RelationshipCategory,
)
from utils.formatting import format_amount, format_percent


def _schedule(*pairs: Tuple[object, str]) -> Tuple[Bracket, ...]:
    """Build brackets from (upper_bound, rate) pairs; upper_bound may be UNBOUNDED."""
    return tuple(
        Bracket(
            upper_bound=upper if upper is UNBOUNDED else Decimal(upper),
            rate=Decimal(rate),
        )
        for upper, rate in pairs
    )


# Ligne directe (also used for donations between spouses)
DIRECT_LINE_BRACKETS = _schedule(
    (8072, "0.05"),
    (12109, "0.10"),
    (15932, "0.15"),
    (552324, "0.20"),
    (902838, "0.30"),
    (1805677, "0.40"),
    (UNBOUNDED, "0.45"),
)

SIBLING_BRACKETS = _schedule(
    (24430, "0.35"),
    (UNBOUNDED, "0.45"),
)

NIECE_NEPHEW_BRACKETS = _schedule((UNBOUNDED, "0.55"))

OTHER_BRACKETS = _schedule((UNBOUNDED, "0.60"))


_PROFILES: Mapping[RelationshipCategory, FiscalProfile] = MappingProxyType({
    RelationshipCategory.CHILD: FiscalProfile(
        allowance=Decimal(100000),
        brackets=DIRECT_LINE_BRACKETS,
    ),
    RelationshipCategory.SPOUSE: FiscalProfile(
        allowance=Decimal(80724),
        brackets=DIRECT_LINE_BRACKETS,
        note="Pour une succession, le conjoint ou partenaire de PACS est totalement exonéré.",
    ),
    RelationshipCategory.SIBLING: FiscalProfile(
        allowance=Decimal(15932),
        brackets=SIBLING_BRACKETS,
    ),
    RelationshipCategory.NIECE_NEPHEW: FiscalProfile(
        allowance=Decimal(7967),
        brackets=NIECE_NEPHEW_BRACKETS,
    ),
    RelationshipCategory.OTHER: FiscalProfile(
        allowance=Decimal(1594),
        brackets=OTHER_BRACKETS,
    ),
})

# Every category must have a profile; a missing entry is a build error, not a runtime default
_missing = set(RelationshipCategory) - set(_PROFILES)
if _missing:
    raise InvalidCategoryError(f"No fiscal profile for: {sorted(c.value for c in _missing)}")


def get_profile(category: RelationshipCategory) -> FiscalProfile:
    """
    Look up the fiscal profile of a relationship category.

    Args:
        category: A RelationshipCategory member

    Returns:
        The category's FiscalProfile

    Raises:
        InvalidCategoryError: If `category` is not a registered category.
            Plain strings are rejected; normalize them first.
    """
    if not isinstance(category, RelationshipCategory):
        raise InvalidCategoryError(f"Unknown relationship category: {category!r}")
    return _PROFILES[category]


def list_categories() -> List[RelationshipCategory]:
    """Registered categories in display order."""
    return list(_PROFILES)


def describe_schedule(brackets: Sequence[Bracket]) -> List[str]:
    """Human-readable bracket lines, e.g. "de 8 072 € à 12 109 € : 10 %"."""
    lines = []
    previous_upper = Decimal(0)
    for bracket in brackets:
        if bracket.is_unbounded and previous_upper == 0:
            lines.append(f"taux unique : {format_percent(bracket.rate)}")
        elif bracket.is_unbounded:
            lines.append(f"au-delà de {format_amount(previous_upper)} : {format_percent(bracket.rate)}")
        else:
            lines.append(
                f"de {format_amount(previous_upper)} à {format_amount(bracket.upper_bound)} : "
                f"{format_percent(bracket.rate)}"
            )
            previous_upper = bracket.upper_bound
    return lines
