"""
Discount Service - Cart Discount Pipeline

This module contains the core business logic for pricing a cart. Discounts
are applied in a fixed order, each pass working on the output of the
previous one:

1. Brand, then category, per line item (category is computed on the
   brand-discounted unit price)
2. Voucher, if the customer carries a code and it passes validation
3. Bank offer, if paying by card with a bank that has an offer

Every amount removed is recorded under a label (Brand_<brand>,
Category_<category>, Voucher_<code>, Bank_<bank>) so the result explains
itself: original total - sum(breakdown) == final total.

Files that USE this module:
- tests.test_discount_service (unit tests)

Files that this module USES:
- cartprice.application.rule_tables (RuleTables, RuleSnapshot)
- cartprice.application.voucher_validator (VoucherValidator, ValidationOutcome)
- cartprice.application.result_assembler (assemble_result)
- cartprice.config.settings (Settings for separator, currency and card methods)
- cartprice.config.rules (build_rule_tables for default rules)
- cartprice.domain.* (models, Money, errors)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import logging  # Standard library for logging messages and errors
from dataclasses import dataclass, field  # Decorator for creating data classes
from datetime import datetime  # Clock type
from decimal import Decimal  # Percentages in messages
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple  # Type hints

from cartprice.application.result_assembler import assemble_result  # Builds the final result
from cartprice.application.rule_tables import RuleSnapshot, RuleTables  # Rule storage
from cartprice.application.voucher_validator import ValidationOutcome, VoucherValidator  # Voucher checks
from cartprice.config.settings import Settings  # Application configuration
from cartprice.domain.errors import (
    DiscountCalculationError,
    InvalidAmount,
    InvalidCartItem,
    InvalidInput,
)
from cartprice.domain.models import (
    BrandRule,
    CategoryRule,
    CustomerProfile,
    DiscountedPrice,
    LineItem,
    PaymentInfo,
    Product,
    cart_base_total,
)
from cartprice.domain.money import Money  # Exact monetary arithmetic
from cartprice.domain.time import utc_now  # Default clock

logger = logging.getLogger(__name__)


def _fmt_pct(percentage: Decimal) -> str:
    """Render a percentage without trailing zeros ('40', '12.5')."""
    return f"{percentage.normalize():f}"


@dataclass(frozen=True)
class ApplicableDiscounts:
    """
    Brand and category rules that match a cart, in first-seen order.

    Attributes:
        brands: Brand name → BrandRule for brands in the cart that have a rule
        categories: Category name → CategoryRule for categories that have a rule
    """
    brands: Mapping[str, BrandRule] = field(default_factory=dict)
    categories: Mapping[str, CategoryRule] = field(default_factory=dict)


@dataclass
class _PassResult:
    """Outcome of one pipeline pass."""
    total: Money
    discounts: Dict[str, Money] = field(default_factory=dict)
    messages: List[str] = field(default_factory=list)


class DiscountService:
    """
    Prices a cart by stacking brand, category, voucher and bank discounts.

    The service holds no per-call state; each calculate() call reads one rule
    snapshot and either returns a complete DiscountedPrice or raises.
    """

    def __init__(
        self,
        rule_tables: Optional[RuleTables] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the discount service.

        Args:
            rule_tables: Rule tables to read; defaults to the configured rule
                file or the built-in rules
            settings: Settings instance; defaults to a fresh Settings()
            clock: Returns the current aware UTC time (voucher expiry)
        """
        self.settings = settings or Settings()
        if rule_tables is None:
            from cartprice.config.rules import build_rule_tables
            rule_tables = build_rule_tables(self.settings)
        self.rule_tables = rule_tables
        self.clock = clock

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def calculate(
        self,
        cart_items: Sequence[LineItem],
        customer: CustomerProfile,
        payment_info: Optional[PaymentInfo] = None,
    ) -> DiscountedPrice:
        """
        Calculate the final price of a cart.

        Order: brand/category -> voucher -> bank offer.

        Args:
            cart_items: Cart lines; must be non-empty
            customer: Customer profile; voucher_code triggers the voucher pass
            payment_info: Optional payment details for the bank-offer pass

        Returns:
            DiscountedPrice with totals, breakdown and narrative

        Raises:
            InvalidInput: If the cart is missing/empty or the customer is missing
            InvalidCartItem: If a line lacks a product, positive quantity or valid price
            InvalidAmount: If a monetary value is malformed
            DiscountCalculationError: For any other failure (original chained)
        """
        self._require_cart(cart_items)
        if not isinstance(customer, CustomerProfile):
            raise InvalidInput("Invalid input: Customer profile is required")

        try:
            result, unit_prices = self._run_pipeline(cart_items, customer, payment_info)
        except (InvalidInput, InvalidCartItem, InvalidAmount, DiscountCalculationError):
            raise
        except Exception as e:
            logger.error("Error calculating cart discounts: %s", e, exc_info=True)
            raise DiscountCalculationError(f"Failed to calculate discounts: {e}") from e

        # Only a complete result updates the products' working prices
        for product, unit_price in unit_prices:
            product.current_price = unit_price

        logger.info(
            "Cart priced: original=%s final=%s discounts=%s",
            result.original_price, result.final_price, list(result.applied_discounts),
        )
        return result

    def validate_code(
        self,
        code: str,
        cart_items: Sequence[LineItem],
        customer: Optional[CustomerProfile] = None,
    ) -> ValidationOutcome:
        """
        Check a voucher code against a cart without pricing it.

        Args:
            code: Voucher code
            cart_items: Cart lines; must be non-empty and well-formed
            customer: Optional customer profile

        Returns:
            ValidationOutcome (valid flag, reason and reason code)

        Raises:
            InvalidInput: If the cart is missing or empty
            InvalidCartItem: If a cart line is malformed
        """
        self._require_cart(cart_items)
        return self._validator(self.rule_tables.snapshot()).validate(code, cart_items, customer)

    def list_applicable_discounts(self, cart_items: Sequence[LineItem]) -> ApplicableDiscounts:
        """
        List the brand and category rules that match a cart.

        Args:
            cart_items: Cart lines

        Returns:
            ApplicableDiscounts with one entry per distinct matching brand/category
        """
        rules = self.rule_tables.snapshot()
        brands: Dict[str, BrandRule] = {}
        categories: Dict[str, CategoryRule] = {}
        for item in cart_items or ():
            if item is None or item.product is None:
                continue
            product = item.product
            brand_rule = rules.brand_rule(product.brand)
            if brand_rule is not None and product.brand not in brands:
                brands[product.brand] = brand_rule
            category_rule = rules.category_rule(product.category)
            if category_rule is not None and product.category not in categories:
                categories[product.category] = category_rule
        return ApplicableDiscounts(brands=brands, categories=categories)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run_pipeline(
        self,
        cart_items: Sequence[LineItem],
        customer: CustomerProfile,
        payment_info: Optional[PaymentInfo],
    ) -> Tuple[DiscountedPrice, List[Tuple[Product, Money]]]:
        rules = self.rule_tables.snapshot()
        original_total = cart_base_total(cart_items)

        breakdown: Dict[str, Money] = {}
        messages: List[str] = []

        # Step 1: brand and category
        step, unit_prices = self._apply_brand_and_category(cart_items, rules)
        running_total = step.total
        breakdown.update(step.discounts)
        messages.extend(step.messages)

        # Step 2: voucher
        if customer.voucher_code:
            step = self._apply_voucher(customer, running_total, cart_items, rules)
            running_total = step.total
            breakdown.update(step.discounts)
            messages.extend(step.messages)

        # Step 3: bank offer
        if payment_info is not None and payment_info.bank_name:
            step = self._apply_bank_offer(payment_info, running_total, rules)
            running_total = step.total
            breakdown.update(step.discounts)
            messages.extend(step.messages)

        result = assemble_result(
            original_total,
            running_total,
            breakdown,
            messages,
            separator=self.settings.narrative_separator,
        )
        return result, unit_prices

    def _apply_brand_and_category(
        self,
        cart_items: Sequence[LineItem],
        rules: RuleSnapshot,
    ) -> Tuple[_PassResult, List[Tuple[Product, Money]]]:
        step = _PassResult(total=Money.zero())
        unit_prices: List[Tuple[Product, Money]] = []

        for item in cart_items:
            product = item.product
            quantity = item.quantity
            item_price = product.base_price

            brand_rule = rules.brand_rule(product.brand)
            if brand_rule is not None:
                discount = brand_rule.discount_for(item_price)
                item_price = item_price - discount
                self._record(
                    step, f"Brand_{product.brand}", discount * quantity,
                    f"{_fmt_pct(brand_rule.percentage)}% off on {product.brand}",
                )

            # Computed on the brand-discounted unit price
            category_rule = rules.category_rule(product.category)
            if category_rule is not None:
                discount = category_rule.discount_for(item_price)
                item_price = item_price - discount
                self._record(
                    step, f"Category_{product.category}", discount * quantity,
                    f"{_fmt_pct(category_rule.percentage)}% off on {product.category}",
                )

            step.total = step.total + item_price * quantity
            unit_prices.append((product, item_price))

        return step, unit_prices

    def _apply_voucher(
        self,
        customer: CustomerProfile,
        current_total: Money,
        cart_items: Sequence[LineItem],
        rules: RuleSnapshot,
    ) -> _PassResult:
        code = customer.voucher_code
        step = _PassResult(total=current_total)

        outcome = self._validator(rules).validate(code, cart_items, customer)
        if not outcome.valid:
            logger.warning(
                "Voucher validation failed for %s (%s): %s",
                code, outcome.reason_code.value, outcome.reason,
            )
            step.messages.append(f"Voucher {code} could not be applied: {outcome.reason}")
            return step

        voucher = rules.voucher(code)
        discount = voucher.discount_for(current_total)
        self._record(
            step, f"Voucher_{code}", discount,
            f"{_fmt_pct(voucher.percentage)}% off with {code}",
        )
        step.total = current_total - discount
        return step

    def _apply_bank_offer(
        self,
        payment_info: PaymentInfo,
        current_total: Money,
        rules: RuleSnapshot,
    ) -> _PassResult:
        step = _PassResult(total=current_total)

        if payment_info.method_name not in self.settings.card_methods:
            logger.debug("Payment method %s does not qualify for bank offers", payment_info.method_name)
            return step

        offer = rules.bank_offer(payment_info.bank_name)
        if offer is None:
            return step

        discount = offer.discount_for(current_total)
        self._record(
            step, f"Bank_{payment_info.bank_name}", discount,
            f"{_fmt_pct(offer.percentage)}% instant discount on {payment_info.bank_name} card",
        )
        step.total = current_total - discount
        return step

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _record(step: _PassResult, label: str, amount: Money, message: str) -> None:
        """Accumulate a discount under its label; zero amounts are not recorded."""
        if amount.is_zero():
            return
        step.discounts[label] = step.discounts.get(label, Money.zero()) + amount
        if message not in step.messages:
            step.messages.append(message)
        logger.debug("Applied %s: %s", label, amount)

    def _validator(self, rules: RuleSnapshot) -> VoucherValidator:
        return VoucherValidator(rules, clock=self.clock, currency_symbol=self.settings.currency_symbol)

    @staticmethod
    def _require_cart(cart_items: Sequence[LineItem]) -> None:
        """
        Check the cart before any arithmetic runs.

        Raises:
            InvalidInput: If the cart is missing, not a list or tuple, or empty
            InvalidCartItem: If a line is malformed
        """
        if not isinstance(cart_items, (list, tuple)) or len(cart_items) == 0:
            raise InvalidInput("Invalid input: Cart items are required and must be a non-empty list")

        for index, item in enumerate(cart_items):
            if not isinstance(item, LineItem):
                raise InvalidCartItem(f"Invalid cart data: item {index} is not a cart line item")
            if item.product is None:
                raise InvalidCartItem(f"Invalid cart data: item {index} is missing a product")
            product_id = getattr(item.product, "id", "?")
            quantity = item.quantity
            if isinstance(quantity, bool) or not isinstance(quantity, int):
                raise InvalidCartItem(
                    f"Invalid cart data: item {index} ({product_id}) has a non-integer quantity {quantity!r}"
                )
            if quantity < 1:
                raise InvalidCartItem(
                    f"Invalid cart data: item {index} ({product_id}) must have a positive quantity, got {quantity}"
                )
            base_price = getattr(item.product, "base_price", None)
            if not isinstance(base_price, Money):
                raise InvalidCartItem(
                    f"Invalid cart data: item {index} ({product_id}) is missing a base price"
                )
            if base_price.is_negative():
                raise InvalidCartItem(
                    f"Invalid cart data: item {index} ({product_id}) has a negative base price {base_price}"
                )
