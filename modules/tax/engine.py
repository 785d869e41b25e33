"""
Transfer Tax Engine - Succession & Donation

Pure computation of French transfer duties (droits de succession et de
donation) under a simplified progressive-bracket model:
1. Spouse/PACS partner inheritance is fully exempt
2. Prior gifts consume the category allowance first
3. The taxable base is taxed bracket by bracket

Same input, same output: no I/O, no shared mutable state.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from decimal import Decimal, getcontext, localcontext
from typing import List, Sequence

from modules.tax.models import (
    Bracket,
    BracketSlice,
    BreakdownEntry,
    SimulationInput,
    SimulationResult,
)
from modules.tax.schedules import get_profile
from utils.logging_config import setup_logger, simulation_context

logger = setup_logger(__name__)

NET_AMOUNT_LABEL = "Montant net reçu"
TAX_DUE_LABEL = "Droits à payer"


def _exact_context(amounts: Sequence[Decimal], brackets: Sequence[Bracket]):
    """
    Decimal context wide enough that subtractions and bracket products stay
    exact, so net + tax == transfer holds whatever the number of digits.
    """
    values = [a for a in amounts if a != 0]
    values += [b.upper_bound for b in brackets if not b.is_unbounded]
    if not values:
        return localcontext()

    highest = max(v.adjusted() for v in values)
    lowest = min(v.as_tuple().exponent for v in values)
    rate_exponent = min(b.rate.as_tuple().exponent for b in brackets)

    context = getcontext().copy()
    context.prec = max(context.prec, highest - lowest - rate_exponent + 4)
    return localcontext(context)


def bracket_details(taxable_base: Decimal, brackets: Sequence[Bracket]) -> List[BracketSlice]:
    """
    Walk the schedule and report what each bracket taxed.

    Each bracket taxes only the slice of the base between the previous upper
    bound and its own; the unbounded last bracket takes whatever remains.
    Brackets the base never reaches are not reported.

    Args:
        taxable_base: Non-negative amount to tax
        brackets: Schedule sorted by upper bound, last one unbounded

    Returns:
        One BracketSlice per bracket reached, in ascending order
    """
    slices = []
    remaining = taxable_base
    previous_upper = Decimal(0)

    with _exact_context([taxable_base], brackets):
        for bracket in brackets:
            if remaining <= 0:
                break

            if bracket.is_unbounded:
                amount_in_bracket = remaining
            else:
                amount_in_bracket = min(remaining, bracket.upper_bound - previous_upper)

            slices.append(BracketSlice(
                lower_bound=previous_upper,
                upper_bound=bracket.upper_bound,
                rate=bracket.rate,
                taxed_amount=amount_in_bracket,
                tax=amount_in_bracket * bracket.rate,
            ))

            remaining -= amount_in_bracket
            if not bracket.is_unbounded:
                previous_upper = bracket.upper_bound

    return slices


def apply_brackets(taxable_base: Decimal, brackets: Sequence[Bracket]) -> Decimal:
    """Total progressive tax on `taxable_base` (unrounded)."""
    slices = bracket_details(taxable_base, brackets)
    with _exact_context([taxable_base], brackets):
        return sum((s.tax for s in slices), start=Decimal(0))


def marginal_rate(taxable_base: Decimal, brackets: Sequence[Bracket]) -> Decimal:
    """Rate applied to the last euro of the base (0 when nothing is taxable)."""
    if taxable_base <= 0:
        return Decimal(0)

    for bracket in brackets:
        if bracket.is_unbounded or taxable_base <= bracket.upper_bound:
            return bracket.rate

    # Unreachable for validated schedules: the last bracket is unbounded
    return brackets[-1].rate


def compute(simulation_input: SimulationInput) -> SimulationResult:
    """
    Compute the duties owed for one transfer.

    Args:
        simulation_input: Validated simulation parameters

    Returns:
        SimulationResult with tax due, net amount, allowance applied and taxable base

    Raises:
        InvalidCategoryError: If the category has no fiscal profile
    """
    transfer = simulation_input.transfer_amount

    # Statutory exemption: surviving spouse / PACS partner on succession only.
    # Donations to a spouse go through the spouse allowance and schedule below.
    if simulation_input.is_spouse_inheritance:
        logger.debug(
            "Spouse inheritance exemption applied",
            extra=simulation_context(transfer=transfer),
        )
        return SimulationResult(
            tax_due=Decimal(0),
            net_amount_received=transfer,
            allowance_applied=transfer,
            taxable_base=Decimal(0),
            simulation_input=simulation_input,
            exempt=True,
        )

    profile = get_profile(simulation_input.relationship_category)

    prior_gifts = simulation_input.prior_gifts_amount
    with _exact_context([transfer, prior_gifts, profile.allowance], profile.brackets):
        # Prior gifts in excess of the allowance are dropped, never carried forward
        allowance_applied = max(Decimal(0), profile.allowance - prior_gifts)
        taxable_base = max(Decimal(0), transfer - allowance_applied)
        tax_due = apply_brackets(taxable_base, profile.brackets)
        net_amount_received = transfer - tax_due

    logger.debug(
        "Simulation computed",
        extra=simulation_context(
            type=simulation_input.transmission_type.value,
            category=simulation_input.relationship_category.value,
            base=taxable_base,
            tax=tax_due,
        ),
    )

    return SimulationResult(
        tax_due=tax_due,
        net_amount_received=net_amount_received,
        allowance_applied=allowance_applied,
        taxable_base=taxable_base,
        simulation_input=simulation_input,
    )


def breakdown(result: SimulationResult) -> List[BreakdownEntry]:
    """
    Net/tax split for the chart. Collapses to the single net entry when the
    transfer is exempt.
    """
    if result.exempt:
        return [BreakdownEntry(NET_AMOUNT_LABEL, result.net_amount_received)]

    return [
        BreakdownEntry(NET_AMOUNT_LABEL, result.net_amount_received),
        BreakdownEntry(TAX_DUE_LABEL, result.tax_due),
    ]


def simulate(
    transmission_type,
    relationship_category,
    transfer_amount,
    prior_gifts_amount=0,
) -> SimulationResult:
    """
    Convenience entry point taking raw values.

    Accepts enum members or their English/French spellings
    ('gift'/'donation', 'child'/'enfant', ...) and numbers or numeric strings.

    Raises:
        InvalidCategoryError, InvalidTransmissionTypeError, InvalidAmountError
    """
    return compute(SimulationInput(
        transmission_type=transmission_type,
        relationship_category=relationship_category,
        transfer_amount=transfer_amount,
        prior_gifts_amount=prior_gifts_amount,
    ))


def calculation_details(result: SimulationResult) -> List[BracketSlice]:
    """Per-bracket detail behind `result.tax_due` (empty for exempt transfers)."""
    if result.exempt:
        return []
    profile = get_profile(result.simulation_input.relationship_category)
    return bracket_details(result.taxable_base, profile.brackets)
