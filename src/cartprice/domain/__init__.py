"""
Domain Layer - Pure Business Objects

This package contains domain models, the Money value type and business errors.
No dependencies on configuration or external systems.
"""

from cartprice.domain.money import Money
from cartprice.domain.models import (
    BankOffer,
    BrandRule,
    BrandTier,
    CategoryRule,
    CustomerProfile,
    DiscountedPrice,
    LineItem,
    PaymentInfo,
    PaymentMethod,
    Product,
    VoucherOffer,
    cart_base_total,
)
from cartprice.domain.errors import (
    DiscountCalculationError,
    DomainError,
    InvalidAmount,
    InvalidCartItem,
    InvalidInput,
    InvalidRule,
    RuleConfigError,
    VoucherRejected,
    VoucherRejectionCode,
)

__all__ = [
    "Money",
    "Product",
    "LineItem",
    "CustomerProfile",
    "PaymentInfo",
    "PaymentMethod",
    "BrandTier",
    "BrandRule",
    "CategoryRule",
    "BankOffer",
    "VoucherOffer",
    "DiscountedPrice",
    "cart_base_total",
    "DomainError",
    "InvalidInput",
    "InvalidCartItem",
    "InvalidAmount",
    "InvalidRule",
    "RuleConfigError",
    "VoucherRejected",
    "VoucherRejectionCode",
    "DiscountCalculationError",
]
