"""
Voucher Validator - Voucher Eligibility Checks

This module decides whether a voucher code can be applied to a cart. Checks
run in order and stop at the first failure:

1. The code exists in the voucher table (VOUCHER_NOT_FOUND)
2. The voucher has not expired (VOUCHER_EXPIRED)
3. The pre-discount cart total meets the minimum order value (MIN_ORDER_NOT_MET)

Eligibility is judged on the raw basket (base price × quantity), never on a
total already reduced by brand or category discounts.

Files that USE this module:
- cartprice.application.discount_service (voucher pass and validate_code)
- tests.test_voucher_validator (unit tests)

Files that this module USES:
- cartprice.application.rule_tables (voucher lookups)
- cartprice.domain.models (LineItem, CustomerProfile, cart_base_total)
- cartprice.domain.errors (VoucherRejected, VoucherRejectionCode)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence, Union

from cartprice.application.rule_tables import RuleSnapshot, RuleTables
from cartprice.domain.errors import VoucherRejected, VoucherRejectionCode
from cartprice.domain.models import CustomerProfile, LineItem, cart_base_total
from cartprice.domain.time import utc_now


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of a voucher eligibility check.

    Attributes:
        code: The voucher code that was checked
        valid: True when every check passed
        reason: Human-readable rejection reason (None when valid)
        reason_code: Machine-readable rejection reason (None when valid)
    """
    code: str
    valid: bool
    reason: Optional[str] = None
    reason_code: Optional[VoucherRejectionCode] = None

    @classmethod
    def accepted(cls, code: str) -> ValidationOutcome:
        return cls(code=code, valid=True)

    @classmethod
    def rejected(cls, code: str, reason_code: VoucherRejectionCode, reason: str) -> ValidationOutcome:
        return cls(code=code, valid=False, reason=reason, reason_code=reason_code)

    def raise_for_rejection(self) -> None:
        """Raise VoucherRejected if this outcome is a rejection."""
        if not self.valid:
            raise VoucherRejected(self.code, self.reason_code, self.reason)


class VoucherValidator:
    """Pure voucher eligibility checks against a cart and customer."""

    def __init__(
        self,
        rules: Union[RuleTables, RuleSnapshot],
        clock: Callable[[], datetime] = utc_now,
        currency_symbol: str = "₹",
    ):
        """
        Initialize the validator.

        Args:
            rules: Rule tables (or a fixed snapshot) to look vouchers up in
            clock: Returns the current aware UTC time
            currency_symbol: Prefix for amounts in rejection messages
        """
        self.rules = rules
        self.clock = clock
        self.currency_symbol = currency_symbol

    def validate(
        self,
        code: str,
        cart_items: Sequence[LineItem],
        customer: Optional[CustomerProfile] = None,
    ) -> ValidationOutcome:
        """
        Check whether a voucher code can be applied.

        Args:
            code: Voucher code, matched exactly
            cart_items: Cart lines (assumed well-formed)
            customer: Customer profile; no customer-specific checks run today

        Returns:
            ValidationOutcome with the first failing check, or an accepted outcome
        """
        voucher = self.rules.voucher(code)
        if voucher is None:
            return ValidationOutcome.rejected(
                code,
                VoucherRejectionCode.CODE_NOT_FOUND,
                f"Voucher code '{code}' not found",
            )

        if voucher.is_expired(self.clock()):
            return ValidationOutcome.rejected(
                code,
                VoucherRejectionCode.EXPIRED,
                f"Voucher code '{code}' has expired on {voucher.valid_until:%Y-%m-%d}",
            )

        cart_total = cart_base_total(cart_items)
        if voucher.min_order_value is not None and cart_total < voucher.min_order_value:
            return ValidationOutcome.rejected(
                code,
                VoucherRejectionCode.MIN_ORDER_NOT_MET,
                f"Minimum order value of {self.currency_symbol}{voucher.min_order_value} required. "
                f"Current cart total: {self.currency_symbol}{cart_total}",
            )

        return ValidationOutcome.accepted(code)
