"""
Succession & Donation Data Models

Defines the value types used by the transfer tax engine:
- RelationshipCategory / TransmissionType: closed sets chosen by the caller
- Bracket / FiscalProfile: static fiscal schedule data
- SimulationInput: validated, immutable caller input
- SimulationResult / BreakdownEntry: derived engine output

All monetary values are Decimal. Nothing here is mutable after construction.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Tuple, Union


# Custom exceptions
class SimulationError(ValueError):
    """Base class for errors raised while preparing or running a simulation."""
    pass


class InvalidCategoryError(SimulationError):
    """Raised when a relationship category is not part of the fiscal registry."""
    pass


class InvalidTransmissionTypeError(SimulationError):
    """Raised when a transmission type is neither inheritance nor gift."""
    pass


class InvalidAmountError(SimulationError):
    """Raised when an amount is negative, non-finite or not a number."""

    def __init__(self, field_name: str, value, reason: str):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field_name}: {value!r} ({reason})")


class FiscalScheduleError(SimulationError):
    """Raised when fiscal schedule data violates its invariants."""
    pass


class RelationshipCategory(str, Enum):
    """Relationship between the deceased/donor and the beneficiary."""

    CHILD = "child"
    SPOUSE = "spouse"
    SIBLING = "sibling"
    NIECE_NEPHEW = "niece-nephew"
    OTHER = "other"

    @property
    def label(self) -> str:
        """French display label."""
        return _CATEGORY_LABELS[self]

    @classmethod
    def normalize(cls, value) -> 'RelationshipCategory':
        """Normalize a category from English keys or the French form values.

        Raises:
            InvalidCategoryError: If the value does not map to a category.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidCategoryError(f"Unknown relationship category: {value!r}")

        category_map = {
            # English
            "CHILD": cls.CHILD,
            "SPOUSE": cls.SPOUSE,
            "PARTNER": cls.SPOUSE,
            "SIBLING": cls.SIBLING,
            "NIECENEPHEW": cls.NIECE_NEPHEW,
            "NEPHEWNIECE": cls.NIECE_NEPHEW,
            "OTHER": cls.OTHER,

            # French
            "ENFANT": cls.CHILD,
            "CONJOINT": cls.SPOUSE,
            "PACS": cls.SPOUSE,
            "FRERESOEUR": cls.SIBLING,
            "NEVEUNIECE": cls.NIECE_NEPHEW,
            "AUTRE": cls.OTHER,
        }

        clean_value = value.strip().upper().replace(" ", "").replace("-", "").replace("_", "")
        result = category_map.get(clean_value)

        if result is None:
            raise InvalidCategoryError(f"Unknown relationship category: '{value}'")

        return result


_CATEGORY_LABELS = {
    RelationshipCategory.CHILD: "Enfant (ligne directe)",
    RelationshipCategory.SPOUSE: "Conjoint / Partenaire de PACS",
    RelationshipCategory.SIBLING: "Frère / Sœur",
    RelationshipCategory.NIECE_NEPHEW: "Neveu / Nièce",
    RelationshipCategory.OTHER: "Autre (tiers)",
}


class TransmissionType(str, Enum):
    """Transfer on death (succession) or during lifetime (donation)."""

    INHERITANCE = "inheritance"
    GIFT = "gift"

    @property
    def label(self) -> str:
        """French display label."""
        return "Succession" if self is TransmissionType.INHERITANCE else "Donation"

    @classmethod
    def normalize(cls, value) -> 'TransmissionType':
        """Normalize a transmission type from English or French spellings.

        Raises:
            InvalidTransmissionTypeError: If the value cannot be mapped.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidTransmissionTypeError(f"Unknown transmission type: {value!r}")

        type_map = {
            "INHERITANCE": cls.INHERITANCE,
            "SUCCESSION": cls.INHERITANCE,
            "GIFT": cls.GIFT,
            "DONATION": cls.GIFT,
        }

        result = type_map.get(value.strip().upper())
        if result is None:
            raise InvalidTransmissionTypeError(f"Unknown transmission type: '{value}'")

        return result


class _Unbounded:
    """Upper bound of the last bracket: every remaining euro falls inside it."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNBOUNDED"

    def __reduce__(self):
        return (_Unbounded, ())


UNBOUNDED = _Unbounded()

UpperBound = Union[Decimal, _Unbounded]


@dataclass(frozen=True)
class Bracket:
    """One slice of a progressive schedule: taxes the base up to `upper_bound` at `rate`."""

    upper_bound: UpperBound
    rate: Decimal

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is UNBOUNDED


@dataclass(frozen=True)
class FiscalProfile:
    """
    Allowance and bracket schedule for one relationship category.

    Key Invariants (checked at construction):
    - allowance is non-negative
    - brackets are non-empty, upper bounds strictly increasing from 0
    - every rate lies in [0, 1]
    - only the final bracket is unbounded, and it must be
    """

    allowance: Decimal
    brackets: Tuple[Bracket, ...]
    note: Optional[str] = None

    def __post_init__(self):
        if self.allowance < 0:
            raise FiscalScheduleError(f"Allowance cannot be negative: {self.allowance}")
        if not self.brackets:
            raise FiscalScheduleError("Bracket schedule cannot be empty")

        previous_upper = Decimal(0)
        last_index = len(self.brackets) - 1

        for index, bracket in enumerate(self.brackets):
            if not Decimal(0) <= bracket.rate <= Decimal(1):
                raise FiscalScheduleError(f"Bracket rate out of range: {bracket.rate}")

            if bracket.is_unbounded:
                if index != last_index:
                    raise FiscalScheduleError("Only the last bracket may be unbounded")
                continue

            if index == last_index:
                raise FiscalScheduleError("Last bracket must be unbounded")
            if bracket.upper_bound <= previous_upper:
                raise FiscalScheduleError(
                    f"Bracket upper bounds must be strictly increasing "
                    f"({bracket.upper_bound} after {previous_upper})"
                )
            previous_upper = bracket.upper_bound


def coerce_amount(value, field_name: str) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal, rejecting bad values.

    Accepts Decimal, int, float and numeric strings. Booleans, NaN,
    infinities, negatives and anything non-numeric raise InvalidAmountError.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(field_name, value, "not a number")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        # str() keeps floats like 0.1 from expanding to their binary value
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            # fr-FR grouping: plain, no-break and narrow no-break spaces; decimal comma
            cleaned = value.strip()
            for separator in (" ", "\u00a0", "\u202f"):
                cleaned = cleaned.replace(separator, "")
            amount = Decimal(cleaned.replace(",", "."))
        except InvalidOperation:
            raise InvalidAmountError(field_name, value, "not a number")
    else:
        raise InvalidAmountError(field_name, value, "not a number")

    if not amount.is_finite():
        raise InvalidAmountError(field_name, value, "not finite")
    if amount < 0:
        raise InvalidAmountError(field_name, value, "negative")

    return amount


@dataclass(frozen=True)
class SimulationInput:
    """
    Caller-supplied parameters of one simulation.

    Category and type accept their enum members or any spelling understood by
    `normalize()`; amounts are coerced to Decimal and validated.
    """

    transmission_type: TransmissionType
    relationship_category: RelationshipCategory
    transfer_amount: Decimal
    prior_gifts_amount: Decimal = field(default_factory=lambda: Decimal(0))

    def __post_init__(self):
        # frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, 'transmission_type', TransmissionType.normalize(self.transmission_type))
        object.__setattr__(self, 'relationship_category', RelationshipCategory.normalize(self.relationship_category))
        object.__setattr__(self, 'transfer_amount', coerce_amount(self.transfer_amount, 'transfer_amount'))
        object.__setattr__(self, 'prior_gifts_amount', coerce_amount(self.prior_gifts_amount, 'prior_gifts_amount'))

    @property
    def is_spouse_inheritance(self) -> bool:
        return (
            self.transmission_type is TransmissionType.INHERITANCE
            and self.relationship_category is RelationshipCategory.SPOUSE
        )


@dataclass(frozen=True)
class SimulationResult:
    """
    Output of one engine run. Recomputed from scratch on every input change.

    Invariant: net_amount_received + tax_due == simulation_input.transfer_amount
    """

    tax_due: Decimal
    net_amount_received: Decimal
    allowance_applied: Decimal
    taxable_base: Decimal
    simulation_input: SimulationInput
    exempt: bool = False

    @property
    def effective_rate(self) -> Decimal:
        """Tax due as a share of the transferred amount (0 when nothing is transferred)."""
        if self.simulation_input.transfer_amount == 0:
            return Decimal(0)
        return self.tax_due / self.simulation_input.transfer_amount


@dataclass(frozen=True)
class BreakdownEntry:
    """One slice of the net/tax chart."""

    label: str
    value: Decimal


@dataclass(frozen=True)
class BracketSlice:
    """Portion of the taxable base that fell into one bracket, and the tax it produced."""

    lower_bound: Decimal
    upper_bound: UpperBound
    rate: Decimal
    taxed_amount: Decimal
    tax: Decimal

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is UNBOUNDED
