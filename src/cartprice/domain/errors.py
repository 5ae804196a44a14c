"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions that represent
business rule violations and domain errors.

Precondition failures (InvalidInput, InvalidCartItem, InvalidAmount) abort a
calculation. Voucher rejections are recovered by the discount pipeline and only
surface as VoucherRejected when a caller asks for it explicitly.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class InvalidInput(DomainError, ValueError):
    """Raised when the cart is missing/empty or the customer is missing."""
    pass


class InvalidCartItem(DomainError, ValueError):
    """Raised when a line item lacks a product, a positive quantity or a valid price."""
    pass


class InvalidAmount(DomainError, ValueError):
    """Raised when a monetary value is built from a non-numeric input."""
    pass


class InvalidRule(DomainError, ValueError):
    """Raised when a discount rule or offer violates its invariants."""
    pass


class RuleConfigError(InvalidRule):
    """Raised when a rule file cannot be read or validated."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class VoucherRejectionCode(str, Enum):
    """Reason codes for a voucher that failed eligibility checks."""
    CODE_NOT_FOUND = "VOUCHER_NOT_FOUND"
    EXPIRED = "VOUCHER_EXPIRED"
    MIN_ORDER_NOT_MET = "MIN_ORDER_NOT_MET"


class VoucherRejected(DomainError):
    """
    Raised on request for a voucher that failed validation.

    Attributes:
        code: The voucher code that was checked
        reason_code: Which eligibility check failed
    """

    def __init__(self, code: str, reason_code: VoucherRejectionCode, message: str):
        super().__init__(message)
        self.code = code
        self.reason_code = reason_code


class DiscountCalculationError(DomainError):
    """Raised when a calculation fails for a reason other than bad input."""
    pass
