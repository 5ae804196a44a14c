"""
Adapters Layer - Presentation

Adapters sit at the edge of the system. Only text formatting lives here: the
core returns DiscountedPrice values and adapters render them.
"""
