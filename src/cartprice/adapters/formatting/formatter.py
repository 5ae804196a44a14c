"""
Result Formatter - Text Rendering of Prices and Discounts

This module renders pricing results for display. It is the only place where
amounts are rounded: the pipeline keeps exact values and hands them over
through DiscountedPrice.

Currency symbol and decimal places come from Settings (CARTPRICE_CURRENCY_SYMBOL,
CARTPRICE_DISPLAY_PLACES) unless passed explicitly.

Files that USE this module:
- Host applications (display of carts, results and available discounts)
- tests.test_formatter (unit tests)

Files that this module USES:
- cartprice.domain.models (DiscountedPrice, LineItem)
- cartprice.domain.money (Money)
- cartprice.application.discount_service (ApplicableDiscounts)
- cartprice.config (Settings for display options)
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence, Tuple

from cartprice.application.discount_service import ApplicableDiscounts
from cartprice.config.settings import Settings
from cartprice.domain.models import DiscountedPrice, LineItem
from cartprice.domain.money import Money


def _display_options(
    symbol: Optional[str],
    places: Optional[int],
    config: Optional[Settings],
) -> Tuple[str, int]:
    """Fill in symbol and places missing from the call with configured values."""
    if symbol is None or places is None:
        if config is None:
            from cartprice.config import settings as config
        if symbol is None:
            symbol = config.currency_symbol
        if places is None:
            places = config.display_places
    return symbol, places


def format_money(
    amount: Money,
    symbol: Optional[str] = None,
    places: Optional[int] = None,
    config: Optional[Settings] = None,
) -> str:
    """
    Format an amount for display.

    Args:
        amount: Exact amount
        symbol: Currency symbol prefix (default: configured currency_symbol)
        places: Decimal places after rounding half-up (default: configured display_places)
        config: Settings to read defaults from (default: global settings)

    Returns:
        Formatted string like '₹2673.00'
    """
    symbol, places = _display_options(symbol, places, config)
    return f"{symbol}{amount.quantize(places)}"


def _fmt_pct(value: Decimal, places: int = 1) -> str:
    return f"{value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)}%"


def _label(name: str) -> str:
    # Brand_PUMA -> Brand PUMA
    return name.replace("_", " ", 1)


def format_breakdown(
    result: DiscountedPrice,
    symbol: Optional[str] = None,
    places: Optional[int] = None,
    config: Optional[Settings] = None,
) -> str:
    """
    Format the applied discounts as one bullet line per label.

    Returns:
        Multi-line string, or 'No discounts applied' when the breakdown is empty
    """
    if not result.applied_discounts:
        return "No discounts applied"
    symbol, places = _display_options(symbol, places, config)
    return "\n".join(
        f"  • {_label(name)}: {format_money(amount, symbol, places)}"
        for name, amount in result.applied_discounts.items()
    )


def format_result(
    result: DiscountedPrice,
    title: str = "Price Summary",
    symbol: Optional[str] = None,
    places: Optional[int] = None,
    config: Optional[Settings] = None,
) -> str:
    """
    Format a complete pricing result.

    Args:
        result: DiscountedPrice to render
        title: Heading line
        symbol: Currency symbol prefix
        places: Decimal places for amounts
        config: Settings to read display defaults from

    Returns:
        Multi-line summary with totals, savings, breakdown and narrative
    """
    symbol, places = _display_options(symbol, places, config)
    lines = [
        title,
        "-" * 40,
        f"Original Price: {format_money(result.original_price, symbol, places)}",
        f"Final Price: {format_money(result.final_price, symbol, places)}",
        f"Total Savings: {format_money(result.total_discount, symbol, places)} "
        f"({_fmt_pct(result.discount_percentage)})",
        "",
        "Discounts Applied:",
        format_breakdown(result, symbol, places),
    ]
    if result.message:
        lines.extend(["", f"Message: {result.message}"])
    return "\n".join(lines)


def format_cart(
    cart_items: Sequence[LineItem],
    symbol: Optional[str] = None,
    places: Optional[int] = None,
    config: Optional[Settings] = None,
) -> str:
    """
    Format cart contents with per-line totals at base price.

    Returns:
        Multi-line string ending with the cart total
    """
    symbol, places = _display_options(symbol, places, config)
    lines: List[str] = []
    for index, item in enumerate(cart_items, start=1):
        product = item.product
        lines.append(f"{index}. {product.brand} {product.category}")
        lines.append(
            f"   Price: {format_money(product.base_price, symbol, places)} x {item.quantity}"
            f" = {format_money(item.base_total(), symbol, places)}"
        )
        if item.size:
            lines.append(f"   Size: {item.size}")
    total = Money.sum(item.base_total() for item in cart_items)
    lines.append(f"Cart Total: {format_money(total, symbol, places)}")
    return "\n".join(lines)


def format_applicable_discounts(discounts: ApplicableDiscounts) -> str:
    """
    Format the brand and category rules that match a cart.

    Returns:
        Multi-line string with one bullet per matching rule
    """
    lines = ["Brand Discounts:"]
    if discounts.brands:
        for brand, rule in discounts.brands.items():
            lines.append(f"  • {brand}: {rule.percentage.normalize():f}% off")
    else:
        lines.append("  • none")
    lines.append("Category Discounts:")
    if discounts.categories:
        for category, rule in discounts.categories.items():
            lines.append(f"  • {category}: {rule.percentage.normalize():f}% off")
    else:
        lines.append("  • none")
    return "\n".join(lines)
