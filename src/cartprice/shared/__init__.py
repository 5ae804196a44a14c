"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from cartprice.shared.validators import (
    validate_currency_symbol,
    validate_rule_key,
    validate_voucher_code,
)
from cartprice.shared.logging_conf import setup_logging, setup_logging_from_settings

__all__ = [
    "validate_rule_key",
    "validate_voucher_code",
    "validate_currency_symbol",
    "setup_logging",
    "setup_logging_from_settings",
]
