"""
Checkout Pricing Package

Point-of-sale pricing: tiered bundle rules per article and unit, applied
greedily to a cart of scanned quantities, with exact decimal totals.
"""
from .engine import Checkout, MeasuredQuantity, PricingEngine, PricingRule, RuleSet, Sku, Unit
from .errors import (
    CheckoutError,
    InvalidArgument,
    MissingRule,
    MissingRuleForUnit,
    NoRuleForAmount,
    PriceCalculationError,
    RuleFileError,
)

__version__ = "1.0.0"

__all__ = [
    'Checkout', 'MeasuredQuantity', 'PricingEngine', 'PricingRule', 'RuleSet', 'Sku', 'Unit',
    'CheckoutError', 'InvalidArgument', 'MissingRule', 'MissingRuleForUnit',
    'NoRuleForAmount', 'PriceCalculationError', 'RuleFileError',
]
