"""Text formatting for cart prices and discount breakdowns."""

from cartprice.adapters.formatting.formatter import (
    format_applicable_discounts,
    format_breakdown,
    format_cart,
    format_money,
    format_result,
)

__all__ = [
    "format_money",
    "format_breakdown",
    "format_result",
    "format_cart",
    "format_applicable_discounts",
]
