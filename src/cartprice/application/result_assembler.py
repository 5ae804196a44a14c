"""
Result Assembler - Packaging a Finished Calculation

Turns the totals, breakdown and pass messages of a completed calculation into
one immutable DiscountedPrice.

Files that USE this module:
- cartprice.application.discount_service (final step of calculate)

Files that this module USES:
- cartprice.domain.models (DiscountedPrice)
- cartprice.domain.money (Money)
"""
from __future__ import annotations

from typing import Iterable, Mapping

from cartprice.domain.errors import DiscountCalculationError
from cartprice.domain.models import DiscountedPrice
from cartprice.domain.money import Money

DEFAULT_SEPARATOR = " | "


def assemble_result(
    original_total: Money,
    final_total: Money,
    breakdown: Mapping[str, Money],
    messages: Iterable[str],
    separator: str = DEFAULT_SEPARATOR,
) -> DiscountedPrice:
    """
    Build the DiscountedPrice for a finished calculation.

    Args:
        original_total: Pre-discount cart total
        final_total: Total after every pass
        breakdown: Discount label → amount removed
        messages: Narrative fragment from each pass, in order
        separator: Joins the narrative fragments

    Returns:
        Immutable DiscountedPrice

    Raises:
        DiscountCalculationError: If the breakdown does not account for the
            difference between original and final totals, or the final total
            is negative
    """
    applied = Money.sum(breakdown.values())
    if original_total - applied != final_total:
        raise DiscountCalculationError(
            f"Breakdown {applied} does not reconcile original {original_total} "
            f"with final {final_total}"
        )
    if final_total.is_negative():
        raise DiscountCalculationError(f"Final total is negative: {final_total}")

    return DiscountedPrice(
        original_price=original_total,
        final_price=final_total,
        applied_discounts=dict(breakdown),
        message=separator.join(m for m in messages if m),
    )
