"""
CartPrice - Layered Cart Discount Calculation

Prices a shopping cart by stacking brand, category, voucher and bank-card
discounts in a fixed order, with exact decimal arithmetic and an auditable
breakdown of every amount removed.
"""

__version__ = "1.0.0"
