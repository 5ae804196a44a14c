"""
Shared Test Fixtures - Carts, Customers, Rules and a Fixed Clock

Fixtures mirror the default rule set with explicit validity dates so voucher
tests do not depend on the current date.

Files that USE this module:
- pytest (fixtures are injected into every test module)

Files that this module USES:
- cartprice.application (RuleTables, DiscountService)
- cartprice.config (Settings)
- cartprice.domain (models and rules)
"""
from datetime import datetime, timezone

import pytest  # Testing framework for writing and running tests

from cartprice.application import DiscountService, RuleTables
from cartprice.config import Settings
from cartprice.domain import (
    BankOffer,
    BrandRule,
    BrandTier,
    CategoryRule,
    CustomerProfile,
    LineItem,
    PaymentInfo,
    PaymentMethod,
    Product,
    VoucherOffer,
)

VOUCHER_EXPIRY = datetime(2025, 12, 31, tzinfo=timezone.utc)
BEFORE_EXPIRY = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
AFTER_EXPIRY = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def rule_tables():
    tables = RuleTables()
    tables.add_brand_rule("PUMA", BrandRule(percentage=40, min_discount=40))
    tables.add_brand_rule("NIKE", BrandRule(percentage=35, min_discount=35))
    tables.add_brand_rule("ADIDAS", BrandRule(percentage=30, min_discount=30))
    tables.add_category_rule("T-shirts", CategoryRule(percentage=10))
    tables.add_category_rule("Shoes", CategoryRule(percentage=15))
    tables.add_category_rule("Jeans", CategoryRule(percentage=12))
    tables.add_bank_offer("ICICI", BankOffer(percentage=10, max_discount=2000))
    tables.add_bank_offer("HDFC", BankOffer(percentage=8, max_discount=1500))
    tables.add_bank_offer("SBI", BankOffer(percentage=5, max_discount=1000))
    tables.add_voucher(
        "SUPER69",
        VoucherOffer(percentage=69, max_discount=5000, min_order_value=1000, valid_until=VOUCHER_EXPIRY),
    )
    tables.add_voucher(
        "WELCOME20",
        VoucherOffer(percentage=20, max_discount=500, min_order_value=500, valid_until=VOUCHER_EXPIRY),
    )
    return tables


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def service(rule_tables, settings):
    return DiscountService(rule_tables=rule_tables, settings=settings, clock=lambda: BEFORE_EXPIRY)


@pytest.fixture
def expired_service(rule_tables, settings):
    """Service whose clock is past every voucher expiry."""
    return DiscountService(rule_tables=rule_tables, settings=settings, clock=lambda: AFTER_EXPIRY)


@pytest.fixture
def puma_cart():
    """Two PUMA T-shirt lines: ₹2000 x 2 and ₹1500 x 1."""
    return [
        LineItem(
            product=Product(
                id="PUMA-TSHIRT-001", brand="PUMA", brand_tier=BrandTier.PREMIUM,
                category="T-shirts", base_price=2000,
            ),
            quantity=2,
            size="L",
        ),
        LineItem(
            product=Product(
                id="PUMA-TSHIRT-002", brand="PUMA", brand_tier=BrandTier.REGULAR,
                category="T-shirts", base_price=1500,
            ),
            quantity=1,
            size="M",
        ),
    ]


@pytest.fixture
def unbranded_cart():
    """A single ₹5500 line with no brand or category rule."""
    return [
        LineItem(
            product=Product(id="ZARA-BAG-001", brand="ZARA", category="Bags", base_price=5500),
            quantity=1,
        ),
    ]


@pytest.fixture
def small_cart():
    """A single ₹500 line with no brand or category rule."""
    return [
        LineItem(
            product=Product(id="ZARA-SOCKS-001", brand="ZARA", category="Socks", base_price=500),
            quantity=1,
        ),
    ]


@pytest.fixture
def customer():
    return CustomerProfile(
        id="CUST-002",
        tier="regular",
        email="regular@example.com",
        phone="+91-9876543211",
    )


@pytest.fixture
def icici_card():
    return PaymentInfo(method=PaymentMethod.CARD, bank_name="ICICI", card_type="CREDIT")
