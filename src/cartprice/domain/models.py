"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Products, cart line items, customers and payment details
- Discount rules and offers (brand, category, bank, voucher)
- The discounted price result

Files that USE this module:
- cartprice.application.* (all services use domain models)
- cartprice.config.rules (builds rule records from configuration)
- cartprice.adapters.formatting.formatter (renders results)
- tests.* (tests use domain models for test data)

Files that this module USES:
- cartprice.domain.money (Money for all amounts)
- cartprice.domain.errors (InvalidRule, InvalidAmount)
- cartprice.domain.time (UTC guard for voucher expiry)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorator for creating data classes
from datetime import datetime  # Voucher expiry timestamps
from decimal import Decimal  # Exact percentages
from enum import Enum  # Fixed vocabularies (tiers, payment methods)
from types import MappingProxyType  # Read-only view over the breakdown
from typing import Any, Iterable, Mapping, Optional, Union

from cartprice.domain.errors import InvalidRule
from cartprice.domain.money import Money, to_decimal
from cartprice.domain.time import require_utc_timestamp


class BrandTier(str, Enum):
    """Positioning of a product's brand."""
    PREMIUM = "premium"
    REGULAR = "regular"
    BUDGET = "budget"


class PaymentMethod(str, Enum):
    """How the customer pays. Only card payments qualify for bank offers by default."""
    CARD = "CARD"
    UPI = "UPI"
    NET_BANKING = "NET_BANKING"
    WALLET = "WALLET"
    COD = "COD"


# ---------------------------------------------------------------------------
# Cart side
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Product:
    """
    A sellable product.

    Attributes:
        id: Product identifier (e.g. "PUMA-TSHIRT-001")
        brand: Brand name, matched exactly against brand rules
        brand_tier: Brand positioning
        category: Category name, matched exactly against category rules
        base_price: List price; fixed once the product is built
        current_price: Working price for display, defaults to base_price.
            Updated by DiscountService.calculate after a successful run.
    """
    id: str
    brand: str
    category: str
    base_price: Money
    brand_tier: BrandTier = BrandTier.REGULAR
    current_price: Optional[Money] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_price", Money(self.base_price))
        if self.current_price is None:
            self.current_price = self.base_price
        else:
            self.current_price = Money(self.current_price)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "base_price" and "base_price" in self.__dict__:
            raise AttributeError("base_price is fixed at construction")
        super().__setattr__(name, value)


@dataclass
class LineItem:
    """
    One cart line: a product, how many, and which size.

    Construction does not validate the line; DiscountService rejects malformed
    lines with InvalidCartItem so every caller gets the same error.
    """
    product: Optional[Product]
    quantity: int
    size: Optional[str] = None

    def base_total(self) -> Money:
        """Base price × quantity."""
        return self.product.base_price * self.quantity

    def current_total(self) -> Money:
        """Current working price × quantity."""
        return self.product.current_price * self.quantity


def cart_base_total(items: Iterable[LineItem]) -> Money:
    """Sum of base price × quantity across the cart (the pre-discount total)."""
    return Money.sum(item.base_total() for item in items)


@dataclass(frozen=True)
class CustomerProfile:
    """
    The shopper. voucher_code, when set, is the only trigger for the voucher pass.
    """
    id: str
    tier: str = "regular"
    email: Optional[str] = None
    phone: Optional[str] = None
    is_premium_member: bool = False
    voucher_code: Optional[str] = None


@dataclass(frozen=True)
class PaymentInfo:
    """Payment details for the bank-offer pass."""
    method: Union[PaymentMethod, str]
    bank_name: Optional[str] = None
    card_type: Optional[str] = None  # CREDIT, DEBIT

    @property
    def method_name(self) -> str:
        if isinstance(self.method, PaymentMethod):
            return self.method.value
        return str(self.method)


# ---------------------------------------------------------------------------
# Rules and offers
# ---------------------------------------------------------------------------

def _require_percentage(owner: str, value: Any) -> Decimal:
    try:
        pct = to_decimal(value, f"{owner} percentage")
    except ValueError as e:
        raise InvalidRule(str(e)) from e
    if pct < 0 or pct > 100:
        raise InvalidRule(f"{owner} percentage must be between 0 and 100, got {pct}")
    return pct


def _optional_amount(owner: str, name: str, value: Any) -> Optional[Money]:
    if value is None:
        return None
    try:
        amount = Money(value)
    except ValueError as e:
        raise InvalidRule(f"{owner} {name}: {e}") from e
    if amount.is_negative():
        raise InvalidRule(f"{owner} {name} must not be negative, got {amount}")
    return amount


def _cap(amount: Money, cap: Optional[Money]) -> Money:
    if cap is None:
        return amount
    return min(amount, cap)


@dataclass(frozen=True)
class BrandRule:
    """
    Percentage discount for every product of a brand.

    Attributes:
        percentage: Discount percentage in [0, 100]
        min_discount: Advertised floor ("min 40% off"); informational only
        max_discount: Optional cap on the per-unit discount amount
    """
    percentage: Decimal
    min_discount: Optional[Decimal] = None
    max_discount: Optional[Money] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "percentage", _require_percentage("Brand rule", self.percentage))
        if self.min_discount is not None:
            object.__setattr__(
                self, "min_discount", _require_percentage("Brand rule floor", self.min_discount)
            )
        object.__setattr__(
            self, "max_discount", _optional_amount("Brand rule", "max_discount", self.max_discount)
        )

    def discount_for(self, unit_price: Money) -> Money:
        return _cap(unit_price.percent(self.percentage), self.max_discount)


@dataclass(frozen=True)
class CategoryRule:
    """Percentage discount for every product of a category."""
    percentage: Decimal
    max_discount: Optional[Money] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "percentage", _require_percentage("Category rule", self.percentage))
        object.__setattr__(
            self, "max_discount", _optional_amount("Category rule", "max_discount", self.max_discount)
        )

    def discount_for(self, unit_price: Money) -> Money:
        return _cap(unit_price.percent(self.percentage), self.max_discount)


@dataclass(frozen=True)
class BankOffer:
    """Instant discount for paying with a given bank's card."""
    percentage: Decimal
    max_discount: Optional[Money] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "percentage", _require_percentage("Bank offer", self.percentage))
        object.__setattr__(
            self, "max_discount", _optional_amount("Bank offer", "max_discount", self.max_discount)
        )

    def discount_for(self, total: Money) -> Money:
        return _cap(total.percent(self.percentage), self.max_discount)


@dataclass(frozen=True)
class VoucherOffer:
    """
    Discount unlocked by a voucher code.

    Attributes:
        percentage: Discount percentage in [0, 100]
        max_discount: Optional cap on the discount amount
        min_order_value: Minimum pre-discount cart total, if any
        valid_until: Aware UTC expiry; the voucher is expired once now is past it
    """
    percentage: Decimal
    max_discount: Optional[Money] = None
    min_order_value: Optional[Money] = None
    valid_until: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "percentage", _require_percentage("Voucher", self.percentage))
        object.__setattr__(
            self, "max_discount", _optional_amount("Voucher", "max_discount", self.max_discount)
        )
        object.__setattr__(
            self, "min_order_value", _optional_amount("Voucher", "min_order_value", self.min_order_value)
        )
        if self.valid_until is not None:
            require_utc_timestamp("valid_until", self.valid_until)

    def is_expired(self, now: datetime) -> bool:
        return self.valid_until is not None and now > self.valid_until

    def discount_for(self, total: Money) -> Money:
        return _cap(total.percent(self.percentage), self.max_discount)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DiscountedPrice:
    """
    Final pricing for a cart.

    Attributes:
        original_price: Sum of base price × quantity
        final_price: Price after every discount pass
        applied_discounts: Read-only mapping of discount label → amount removed
        message: Human-readable narrative of applied (and rejected) discounts
    """
    original_price: Money
    final_price: Money
    applied_discounts: Mapping[str, Money] = field(default_factory=dict)
    message: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "applied_discounts", MappingProxyType(dict(self.applied_discounts))
        )

    @property
    def total_discount(self) -> Money:
        """Sum of every applied discount."""
        return Money.sum(self.applied_discounts.values())

    @property
    def discount_percentage(self) -> Decimal:
        """Total discount as a percentage of the original price (0 for an empty total)."""
        if self.original_price.is_zero():
            return Decimal(0)
        return self.total_discount / self.original_price * 100
