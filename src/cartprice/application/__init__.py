"""
Application Layer - Use Cases and Services

This package contains the rule tables, voucher validation and the discount
pipeline that orchestrates them.
"""

from cartprice.application.rule_tables import RuleSnapshot, RuleTables
from cartprice.application.voucher_validator import ValidationOutcome, VoucherValidator
from cartprice.application.result_assembler import assemble_result
from cartprice.application.discount_service import ApplicableDiscounts, DiscountService

__all__ = [
    "RuleTables",
    "RuleSnapshot",
    "VoucherValidator",
    "ValidationOutcome",
    "assemble_result",
    "DiscountService",
    "ApplicableDiscounts",
]
