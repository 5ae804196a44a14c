"""
Input Validation Utilities - Identifier and Value Checks

This module provides small validation functions for rule identifiers, voucher
codes and display settings.

Files that USE this module:
- cartprice.config.settings (uses validation functions in Settings field validators)
- cartprice.config.rules (validates rule table keys)
- cartprice.application.rule_tables (validates keys on insertion)

Files that this module USES:
- None (pure utility functions)
"""
import re


def validate_rule_key(key: str) -> bool:
    """
    Validate a rule table key (brand, category, bank name or payment method).

    Keys are matched exactly, so surrounding whitespace would make a rule
    unreachable.

    Args:
        key: Key to validate

    Returns:
        True if valid, False otherwise
    """
    if not isinstance(key, str) or not key:
        return False
    return key == key.strip()


def validate_voucher_code(code: str) -> bool:
    """
    Validate voucher code format.

    Args:
        code: Voucher code to validate

    Returns:
        True if valid, False otherwise
    """
    if not isinstance(code, str) or not code:
        return False

    # Codes like SUPER69, WELCOME20, NEW-YEAR_24
    return bool(re.match(r'^[A-Za-z0-9_-]{3,32}$', code))


def validate_currency_symbol(symbol: str) -> bool:
    if not symbol:
        return False
    return len(symbol) <= 3 and not any(ch.isspace() for ch in symbol)
