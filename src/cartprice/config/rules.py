"""
Rule Configuration - Loading Discount Rule Tables

This module defines the validated shape of a discount rule file and the
built-in default rule set. A rule file is JSON:

    {
      "brands":     {"PUMA": {"percentage": 40, "min_discount": 40}},
      "categories": {"T-shirts": {"percentage": 10}},
      "banks":      {"ICICI": {"percentage": 10, "max_discount": 2000}},
      "vouchers":   {"SUPER69": {"percentage": 69, "max_discount": 5000,
                                 "min_order_value": 1000,
                                 "valid_until": "2025-12-31T00:00:00Z"}}
    }

Files that USE this module:
- cartprice.application.discount_service (default rule tables)
- tests.test_rules_config (unit tests)

Files that this module USES:
- cartprice.application.rule_tables (RuleSnapshot, RuleTables)
- cartprice.domain.models (rule and offer records)
- cartprice.config.settings (rules_file location)
- cartprice.shared.validators (key validation)
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cartprice.application.rule_tables import RuleSnapshot, RuleTables
from cartprice.config.settings import Settings
from cartprice.domain.errors import RuleConfigError
from cartprice.domain.models import BankOffer, BrandRule, CategoryRule, VoucherOffer
from cartprice.shared.validators import validate_rule_key, validate_voucher_code

logger = logging.getLogger(__name__)


class _RuleModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    percentage: Decimal = Field(..., ge=0, le=100)
    max_discount: Optional[Decimal] = Field(default=None, ge=0)


class BrandRuleConfig(_RuleModel):
    min_discount: Optional[Decimal] = Field(default=None, ge=0, le=100)

    def to_rule(self) -> BrandRule:
        return BrandRule(
            percentage=self.percentage,
            min_discount=self.min_discount,
            max_discount=self.max_discount,
        )


class CategoryRuleConfig(_RuleModel):
    def to_rule(self) -> CategoryRule:
        return CategoryRule(percentage=self.percentage, max_discount=self.max_discount)


class BankOfferConfig(_RuleModel):
    def to_rule(self) -> BankOffer:
        return BankOffer(percentage=self.percentage, max_discount=self.max_discount)


class VoucherConfig(_RuleModel):
    min_order_value: Optional[Decimal] = Field(default=None, ge=0)
    valid_until: Optional[datetime] = None

    @field_validator("valid_until")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Read naive timestamps as UTC and normalize aware ones to UTC."""
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def to_rule(self) -> VoucherOffer:
        return VoucherOffer(
            percentage=self.percentage,
            max_discount=self.max_discount,
            min_order_value=self.min_order_value,
            valid_until=self.valid_until,
        )


class RulesConfig(BaseModel):
    """Complete rule set: one mapping per rule table."""

    model_config = ConfigDict(extra="forbid")

    brands: Dict[str, BrandRuleConfig] = Field(default_factory=dict)
    categories: Dict[str, CategoryRuleConfig] = Field(default_factory=dict)
    banks: Dict[str, BankOfferConfig] = Field(default_factory=dict)
    vouchers: Dict[str, VoucherConfig] = Field(default_factory=dict)

    @field_validator("brands", "categories", "banks")
    @classmethod
    def validate_keys(cls, v: Dict) -> Dict:
        for key in v:
            if not validate_rule_key(key):
                raise ValueError(f"Invalid rule key: {key!r}")
        return v

    @field_validator("vouchers")
    @classmethod
    def validate_codes(cls, v: Dict) -> Dict:
        for code in v:
            if not validate_voucher_code(code):
                raise ValueError(f"Invalid voucher code: {code!r}")
        return v

    def to_snapshot(self) -> RuleSnapshot:
        """Convert to the immutable rule snapshot used by the pipeline."""
        return RuleSnapshot(
            brands={name: rule.to_rule() for name, rule in self.brands.items()},
            categories={name: rule.to_rule() for name, rule in self.categories.items()},
            banks={name: rule.to_rule() for name, rule in self.banks.items()},
            vouchers={code: rule.to_rule() for code, rule in self.vouchers.items()},
        )


DEFAULT_RULES = RulesConfig(
    brands={
        "PUMA": BrandRuleConfig(percentage=40, min_discount=40),
        "NIKE": BrandRuleConfig(percentage=35, min_discount=35),
        "ADIDAS": BrandRuleConfig(percentage=30, min_discount=30),
    },
    categories={
        "T-shirts": CategoryRuleConfig(percentage=10),
        "Shoes": CategoryRuleConfig(percentage=15),
        "Jeans": CategoryRuleConfig(percentage=12),
    },
    banks={
        "ICICI": BankOfferConfig(percentage=10, max_discount=2000),
        "HDFC": BankOfferConfig(percentage=8, max_discount=1500),
        "SBI": BankOfferConfig(percentage=5, max_discount=1000),
    },
    vouchers={
        "SUPER69": VoucherConfig(
            percentage=69,
            max_discount=5000,
            min_order_value=1000,
            valid_until=datetime(2027, 12, 31, tzinfo=timezone.utc),
        ),
        "WELCOME20": VoucherConfig(
            percentage=20,
            max_discount=500,
            min_order_value=500,
            valid_until=datetime(2027, 12, 31, tzinfo=timezone.utc),
        ),
    },
)


def load_rules_file(path: Union[str, Path]) -> RulesConfig:
    """
    Read and validate a JSON rule file.

    Args:
        path: Path to the rule file

    Returns:
        Validated RulesConfig

    Raises:
        RuleConfigError: If the file cannot be read or fails validation
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleConfigError(f"Cannot read rule file {path}: {e}", path=str(path)) from e

    try:
        config = RulesConfig.model_validate_json(raw)
    except ValidationError as e:
        raise RuleConfigError(f"Invalid rule file {path}: {e}", path=str(path)) from e

    logger.info(
        "Loaded rules from %s: %d brands, %d categories, %d banks, %d vouchers",
        path, len(config.brands), len(config.categories), len(config.banks), len(config.vouchers),
    )
    return config


def build_rule_tables(config: Optional[Settings] = None) -> RuleTables:
    """
    Build rule tables from the configured rule file, or the defaults.

    Args:
        config: Settings to read rules_file from (defaults to a fresh Settings())

    Returns:
        RuleTables ready for DiscountService
    """
    config = config or Settings()
    if config.rules_file is None:
        logger.debug("No rule file configured, using built-in rules")
        return RuleTables.from_config(DEFAULT_RULES)
    return RuleTables.from_config(load_rules_file(config.rules_file))


def reload_rule_tables(tables: RuleTables, path: Union[str, Path]) -> None:
    """
    Hot-reload a rule file into existing tables.

    The new rules are validated completely before the swap; on error the
    current rules stay in place.

    Raises:
        RuleConfigError: If the file cannot be read or fails validation
    """
    tables.replace(load_rules_file(path).to_snapshot())
