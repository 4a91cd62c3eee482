"""Engine subpackage - value types, rule lookup and tier pricing."""
from .checkout import Checkout
from .cart import Cart
from .models import LineItem, MeasuredQuantity, PricingRule, Result, Sku, Unit
from .pricing_engine import PricingEngine
from .rule_matcher import RuleSet

__all__ = [
    'Cart', 'Checkout', 'LineItem', 'MeasuredQuantity', 'PricingEngine',
    'PricingRule', 'Result', 'RuleSet', 'Sku', 'Unit',
]
