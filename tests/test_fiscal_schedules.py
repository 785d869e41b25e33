"""
Tests for the fiscal schedule registry and its construction checks.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import pytest
from decimal import Decimal

from modules.tax.models import (
    UNBOUNDED,
    Bracket,
    FiscalProfile,
    FiscalScheduleError,
    InvalidCategoryError,
    RelationshipCategory,
)
from modules.tax.schedules import (
    DIRECT_LINE_BRACKETS,
    NIECE_NEPHEW_BRACKETS,
    OTHER_BRACKETS,
    SIBLING_BRACKETS,
    describe_schedule,
    get_profile,
    list_categories,
)


class TestRegistry:

    @pytest.mark.parametrize("category,allowance,brackets", [
        (RelationshipCategory.CHILD, Decimal("100000"), DIRECT_LINE_BRACKETS),
        (RelationshipCategory.SPOUSE, Decimal("80724"), DIRECT_LINE_BRACKETS),
        (RelationshipCategory.SIBLING, Decimal("15932"), SIBLING_BRACKETS),
        (RelationshipCategory.NIECE_NEPHEW, Decimal("7967"), NIECE_NEPHEW_BRACKETS),
        (RelationshipCategory.OTHER, Decimal("1594"), OTHER_BRACKETS),
    ])
    def test_profile_values(self, category, allowance, brackets):
        profile = get_profile(category)

        assert profile.allowance == allowance
        assert profile.brackets == brackets

    def test_direct_line_schedule(self):
        bounds = [b.upper_bound for b in DIRECT_LINE_BRACKETS]
        rates = [b.rate for b in DIRECT_LINE_BRACKETS]

        assert bounds[:-1] == [Decimal(v) for v in (8072, 12109, 15932, 552324, 902838, 1805677)]
        assert bounds[-1] is UNBOUNDED
        assert rates == [Decimal(r) for r in ("0.05", "0.10", "0.15", "0.20", "0.30", "0.40", "0.45")]

    def test_flat_schedules(self):
        assert len(NIECE_NEPHEW_BRACKETS) == 1
        assert NIECE_NEPHEW_BRACKETS[0].rate == Decimal("0.55")
        assert len(OTHER_BRACKETS) == 1
        assert OTHER_BRACKETS[0].rate == Decimal("0.60")

    def test_every_category_registered(self):
        assert set(list_categories()) == set(RelationshipCategory)

    def test_only_spouse_carries_a_note(self):
        assert get_profile(RelationshipCategory.SPOUSE).note
        assert get_profile(RelationshipCategory.CHILD).note is None

    @pytest.mark.parametrize("bad", ["child", "cousin", None, 3])
    def test_lookup_requires_category_member(self, bad):
        with pytest.raises(InvalidCategoryError):
            get_profile(bad)

    def test_profiles_are_immutable(self):
        profile = get_profile(RelationshipCategory.CHILD)
        with pytest.raises(Exception):
            profile.allowance = Decimal(0)


class TestFiscalProfileValidation:
    """Malformed schedules are rejected at construction."""

    def test_negative_allowance(self):
        with pytest.raises(FiscalScheduleError):
            FiscalProfile(allowance=Decimal(-1), brackets=OTHER_BRACKETS)

    def test_empty_schedule(self):
        with pytest.raises(FiscalScheduleError):
            FiscalProfile(allowance=Decimal(0), brackets=())

    def test_last_bracket_must_be_unbounded(self):
        with pytest.raises(FiscalScheduleError):
            FiscalProfile(allowance=Decimal(0), brackets=(Bracket(Decimal(1000), Decimal("0.1")),))

    def test_unbounded_bracket_must_be_last(self):
        with pytest.raises(FiscalScheduleError):
            FiscalProfile(
                allowance=Decimal(0),
                brackets=(Bracket(UNBOUNDED, Decimal("0.1")), Bracket(UNBOUNDED, Decimal("0.2"))),
            )

    def test_bounds_strictly_increasing(self):
        with pytest.raises(FiscalScheduleError):
            FiscalProfile(
                allowance=Decimal(0),
                brackets=(
                    Bracket(Decimal(5000), Decimal("0.1")),
                    Bracket(Decimal(5000), Decimal("0.2")),
                    Bracket(UNBOUNDED, Decimal("0.3")),
                ),
            )

    @pytest.mark.parametrize("rate", [Decimal("-0.01"), Decimal("1.01")])
    def test_rate_out_of_range(self, rate):
        with pytest.raises(FiscalScheduleError):
            FiscalProfile(allowance=Decimal(0), brackets=(Bracket(UNBOUNDED, rate),))

    def test_schedule_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            FiscalProfile(allowance=Decimal(0), brackets=())


class TestDescribeSchedule:

    def test_flat_rate(self):
        assert describe_schedule(OTHER_BRACKETS) == ["taux unique : 60\u00a0%"]

    def test_progressive_schedule(self):
        lines = describe_schedule(SIBLING_BRACKETS)

        assert lines == [
            "de 0\u00a0€ à 24\u202f430\u00a0€ : 35\u00a0%",
            "au-delà de 24\u202f430\u00a0€ : 45\u00a0%",
        ]

    def test_one_line_per_bracket(self):
        assert len(describe_schedule(DIRECT_LINE_BRACKETS)) == len(DIRECT_LINE_BRACKETS)
