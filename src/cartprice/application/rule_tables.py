"""
Rule Tables - Read-Mostly Discount Rule Store

This module holds the four discount rule tables (brand, category, bank,
voucher). Lookups are exact, case-sensitive key matches; a missing key means
"no discount", never an error.

Readers never lock: they read the current RuleSnapshot, which is immutable.
Writers serialize on a lock, copy the affected table, and publish a new
snapshot in one attribute assignment (copy-on-write), so a calculation that
took a snapshot keeps seeing a consistent rule set while a reload happens.

Files that USE this module:
- cartprice.application.discount_service (reads a snapshot per calculation)
- cartprice.application.voucher_validator (voucher lookups)
- cartprice.config.rules (builds snapshots from configuration)

Files that this module USES:
- cartprice.domain.models (rule and offer records)
- cartprice.domain.errors (InvalidRule)
- cartprice.shared.validators (key and voucher code validation)
"""
from __future__ import annotations

import logging
import threading
import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from cartprice.domain.models import BankOffer, BrandRule, CategoryRule, VoucherOffer
from cartprice.domain.errors import InvalidRule
from cartprice.shared.validators import validate_rule_key, validate_voucher_code

logger = logging.getLogger(__name__)


def _freeze(table: Mapping) -> Mapping:
    return MappingProxyType(dict(table))


@dataclass(frozen=True)
class RuleSnapshot:
    """Immutable view of every rule table at one point in time."""
    brands: Mapping[str, BrandRule] = field(default_factory=dict)
    categories: Mapping[str, CategoryRule] = field(default_factory=dict)
    banks: Mapping[str, BankOffer] = field(default_factory=dict)
    vouchers: Mapping[str, VoucherOffer] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("brands", "categories", "banks", "vouchers"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    def brand_rule(self, brand: str) -> Optional[BrandRule]:
        return self.brands.get(brand)

    def category_rule(self, category: str) -> Optional[CategoryRule]:
        return self.categories.get(category)

    def bank_offer(self, bank_name: str) -> Optional[BankOffer]:
        return self.banks.get(bank_name)

    def voucher(self, code: str) -> Optional[VoucherOffer]:
        return self.vouchers.get(code)


class RuleTables:
    """
    Mutable handle over the current RuleSnapshot.

    The discount pipeline only reads by key, so adding a rule here never
    requires touching pipeline code.
    """

    def __init__(self, snapshot: Optional[RuleSnapshot] = None):
        self._lock = threading.Lock()
        self._snapshot = snapshot if snapshot is not None else RuleSnapshot()

    @classmethod
    def from_config(cls, config) -> RuleTables:
        """
        Build tables from a cartprice.config.rules.RulesConfig.

        Args:
            config: Validated RulesConfig instance

        Returns:
            New RuleTables holding the configured rules
        """
        return cls(config.to_snapshot())

    def snapshot(self) -> RuleSnapshot:
        """Return the current immutable snapshot."""
        return self._snapshot

    def replace(self, snapshot: RuleSnapshot) -> None:
        """Atomically swap in a complete new rule set (hot reload)."""
        with self._lock:
            self._snapshot = snapshot
        logger.info(
            "Rule tables reloaded: %d brands, %d categories, %d banks, %d vouchers",
            len(snapshot.brands), len(snapshot.categories),
            len(snapshot.banks), len(snapshot.vouchers),
        )

    def _update(self, table: str, key: str, value) -> None:
        if not validate_rule_key(key):
            raise InvalidRule(f"Rule key must be a non-empty string, got {key!r}")
        with self._lock:
            current = dict(getattr(self._snapshot, table))
            if value is None:
                current.pop(key, None)
            else:
                current[key] = value
            self._snapshot = dataclasses.replace(self._snapshot, **{table: current})
        logger.debug("Rule table %s updated: %s", table, key)

    # --- Insertion ---

    def add_brand_rule(self, brand: str, rule: BrandRule) -> None:
        self._update("brands", brand, rule)

    def add_category_rule(self, category: str, rule: CategoryRule) -> None:
        self._update("categories", category, rule)

    def add_bank_offer(self, bank_name: str, offer: BankOffer) -> None:
        self._update("banks", bank_name, offer)

    def add_voucher(self, code: str, offer: VoucherOffer) -> None:
        if not validate_voucher_code(code):
            raise InvalidRule(f"Invalid voucher code: {code!r}")
        self._update("vouchers", code, offer)

    # --- Removal ---

    def remove_brand_rule(self, brand: str) -> None:
        self._update("brands", brand, None)

    def remove_category_rule(self, category: str) -> None:
        self._update("categories", category, None)

    def remove_bank_offer(self, bank_name: str) -> None:
        self._update("banks", bank_name, None)

    def remove_voucher(self, code: str) -> None:
        self._update("vouchers", code, None)

    # --- Lookups against the current snapshot ---

    def brand_rule(self, brand: str) -> Optional[BrandRule]:
        return self._snapshot.brand_rule(brand)

    def category_rule(self, category: str) -> Optional[CategoryRule]:
        return self._snapshot.category_rule(category)

    def bank_offer(self, bank_name: str) -> Optional[BankOffer]:
        return self._snapshot.bank_offer(bank_name)

    def voucher(self, code: str) -> Optional[VoucherOffer]:
        return self._snapshot.voucher(code)
