import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from checkout_pricing.engine import Checkout, PricingRule, Unit


DEFAULT_PRICING_RULES = [
    PricingRule.for_quantity("A", 1, 50),
    PricingRule.for_quantity("A", 3, 130),

    PricingRule.for_quantity("B", 1, 30),
    PricingRule.for_quantity("B", 2, 45),

    PricingRule.for_quantity("C", 1, 20),

    PricingRule.for_quantity("D", 1, 15),

    PricingRule("A", Unit.WEIGHT_IN_KG, 1, "0.99"),
    PricingRule("A", Unit.WEIGHT_IN_KG, 5, "3.99"),
]


@pytest.fixture
def default_rules():
    return list(DEFAULT_PRICING_RULES)


@pytest.fixture
def checkout(default_rules):
    return Checkout(default_rules)


def price_codes(codes: str, rules=None):
    """Total for a string of one-letter article codes, e.g. "AAB"."""
    return Checkout(rules or DEFAULT_PRICING_RULES).record_all(list(codes)).total_price()
