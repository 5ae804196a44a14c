"""
Configuration Tests - Unit Tests for Settings and Rule Files

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cartprice.config.settings (Settings)
- cartprice.config.rules (RulesConfig, DEFAULT_RULES, loaders)
- cartprice.domain.errors (RuleConfigError)
- pytest (testing framework)
"""
import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest  # Testing framework for writing and running tests
from pydantic import ValidationError

from cartprice.application import RuleTables
from cartprice.config.rules import (
    DEFAULT_RULES,
    RulesConfig,
    build_rule_tables,
    load_rules_file,
    reload_rule_tables,
)
from cartprice.config.settings import Settings
from cartprice.domain.errors import InvalidRule, RuleConfigError
from cartprice.domain.money import Money

SAMPLE_RULES = {
    "brands": {"REEBOK": {"percentage": 25, "min_discount": 20}},
    "categories": {"Caps": {"percentage": "7.5"}},
    "banks": {"AXIS": {"percentage": 6, "max_discount": 600}},
    "vouchers": {
        "FEST10": {
            "percentage": 10,
            "max_discount": 250,
            "min_order_value": 999,
            "valid_until": "2026-03-31T18:30:00Z",
        }
    },
}


@pytest.fixture
def rules_path(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(SAMPLE_RULES), encoding="utf-8")
    return path


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("CARTPRICE_RULES_FILE", "CARTPRICE_CURRENCY_SYMBOL", "CARTPRICE_CARD_METHODS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        config = Settings()
        assert config.rules_file is None
        assert config.currency_symbol == "₹"
        assert config.narrative_separator == " | "
        assert config.card_methods == ["CARD"]
        assert config.log_level == "INFO"

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CARTPRICE_RULES_FILE", str(tmp_path / "rules.json"))
        monkeypatch.setenv("CARTPRICE_CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("CARTPRICE_CARD_METHODS", '["CARD", "EMI"]')
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = Settings()

        assert config.rules_file == tmp_path / "rules.json"
        assert config.currency_symbol == "$"
        assert config.card_methods == ["CARD", "EMI"]
        assert config.log_level == "DEBUG"

    def test_rejects_bad_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            Settings()

    def test_rejects_empty_card_methods(self, monkeypatch):
        monkeypatch.setenv("CARTPRICE_CARD_METHODS", "[]")
        with pytest.raises(ValidationError):
            Settings()

    def test_rejects_long_currency_symbol(self, monkeypatch):
        monkeypatch.setenv("CARTPRICE_CURRENCY_SYMBOL", "RUPEES")
        with pytest.raises(ValidationError):
            Settings()


class TestRulesConfig:
    def test_default_rules(self):
        snapshot = DEFAULT_RULES.to_snapshot()

        assert set(snapshot.brands) == {"PUMA", "NIKE", "ADIDAS"}
        assert set(snapshot.categories) == {"T-shirts", "Shoes", "Jeans"}
        assert snapshot.bank_offer("ICICI").max_discount == Money(2000)
        assert snapshot.bank_offer("HDFC").percentage == Decimal(8)
        assert snapshot.voucher("SUPER69").min_order_value == Money(1000)
        assert snapshot.voucher("WELCOME20").valid_until == datetime(2027, 12, 31, tzinfo=timezone.utc)

    def test_naive_expiry_read_as_utc(self):
        config = RulesConfig.model_validate(
            {"vouchers": {"FEST10": {"percentage": 10, "valid_until": "2026-03-31T00:00:00"}}}
        )
        assert config.vouchers["FEST10"].valid_until == datetime(2026, 3, 31, tzinfo=timezone.utc)

    def test_offset_expiry_normalized_to_utc(self):
        config = RulesConfig.model_validate(
            {"vouchers": {"FEST10": {"percentage": 10, "valid_until": "2026-04-01T05:30:00+05:30"}}}
        )
        voucher = config.to_snapshot().voucher("FEST10")
        assert voucher.valid_until == datetime(2026, 4, 1, tzinfo=timezone.utc)
        assert voucher.valid_until.utcoffset().total_seconds() == 0

    @pytest.mark.parametrize(
        "data",
        [
            {"brands": {"PUMA": {"percentage": 140}}},
            {"banks": {"ICICI": {"percentage": 10, "max_discount": -1}}},
            {"brands": {" PUMA": {"percentage": 10}}},
            {"vouchers": {"no spaces allowed": {"percentage": 10}}},
            {"categories": {"Shoes": {"percentage": 10, "colour": "red"}}},
            {"shipping": {}},
        ],
    )
    def test_rejects_invalid_rules(self, data):
        with pytest.raises(ValidationError):
            RulesConfig.model_validate(data)


class TestLoading:
    def test_load_rules_file(self, rules_path):
        config = load_rules_file(rules_path)
        snapshot = config.to_snapshot()

        assert snapshot.brand_rule("REEBOK").min_discount == Decimal(20)
        assert snapshot.category_rule("Caps").percentage == Decimal("7.5")
        assert snapshot.bank_offer("AXIS").max_discount == Money(600)
        assert snapshot.voucher("FEST10").valid_until == datetime(2026, 3, 31, 18, 30, tzinfo=timezone.utc)

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "missing.json"
        with pytest.raises(RuleConfigError) as exc_info:
            load_rules_file(missing)
        assert exc_info.value.path == str(missing)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RuleConfigError):
            load_rules_file(path)

    def test_config_error_is_invalid_rule(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"brands": {"PUMA": {"percentage": -5}}}), encoding="utf-8")
        with pytest.raises(InvalidRule):
            load_rules_file(path)

    def test_build_from_settings_file(self, monkeypatch, rules_path):
        monkeypatch.setenv("CARTPRICE_RULES_FILE", str(rules_path))

        tables = build_rule_tables()

        assert tables.brand_rule("REEBOK") is not None
        assert tables.brand_rule("PUMA") is None

    def test_build_defaults_without_file(self, monkeypatch):
        monkeypatch.delenv("CARTPRICE_RULES_FILE", raising=False)

        tables = build_rule_tables(Settings())

        assert tables.brand_rule("PUMA").percentage == Decimal(40)
        assert tables.voucher("SUPER69") is not None

    def test_reload_swaps_rules(self, rules_path):
        tables = RuleTables.from_config(DEFAULT_RULES)

        reload_rule_tables(tables, rules_path)

        assert tables.brand_rule("PUMA") is None
        assert tables.voucher("FEST10") is not None

    def test_failed_reload_keeps_current_rules(self, tmp_path):
        tables = RuleTables.from_config(DEFAULT_RULES)
        before = tables.snapshot()
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"brands": {"PUMA": {"percentage": 500}}}), encoding="utf-8")

        with pytest.raises(RuleConfigError):
            reload_rule_tables(tables, path)

        assert tables.snapshot() is before
        assert tables.brand_rule("PUMA").percentage == Decimal(40)
