"""
Checkout - a scanning session over a fixed set of pricing rules.
"""
import logging
from decimal import Decimal
from typing import Optional

from ..errors import InvalidArgument
from .cart import Cart
from .models import MeasuredQuantity, Result, Sku
from .pricing_engine import PricingEngine

logger = logging.getLogger(__name__)


class Checkout:
    """
    Totals a list of scanned articles based on a list of pricing rules.

    Rules may be based on different units (QUANTITY, WEIGHT_IN_KG, ...) and
    units can be mixed for the same article.

    A Checkout can be used from several threads. Scans never block a total
    calculation, and a total computed while another thread is scanning is
    based on a snapshot that may or may not contain that scan.
    """

    def __init__(self, pricing_rules):
        self.engine = PricingEngine(pricing_rules)
        self.cart = Cart()

    @property
    def rule_set(self):
        return self.engine.rule_set

    def record(self, sku, quantity: Optional[MeasuredQuantity] = None) -> 'Checkout':
        """
        Add an article to the cart.

        Args:
            sku: Sku or article code
            quantity: measured unit and amount, e.g. from a scale; defaults to one QUANTITY
        """
        sku = Sku.of(sku)
        if quantity is None:
            quantity = MeasuredQuantity.single()
        elif not isinstance(quantity, MeasuredQuantity):
            raise InvalidArgument(f"Expected a MeasuredQuantity, got {type(quantity).__name__}.")
        self.cart.add(sku, quantity)
        return self

    def record_all(self, skus) -> 'Checkout':
        """Add one QUANTITY of every article in `skus`, in order."""
        if skus is None:
            raise InvalidArgument("The provided SKU list cannot be None.")
        for sku in skus:
            self.record(sku)
        return self

    def total_price(self) -> Decimal:
        """Ready-to-pay total, rounded half up to 2 decimal places."""
        return self.engine.total_price(self.cart.snapshot())

    def calculate(self) -> Result:
        """Priced breakdown of the current cart."""
        return self.engine.calculate(self.cart.snapshot())

    def reset(self):
        """Empty the cart, e.g. after wrongly added scans."""
        self.cart.reset()
        logger.debug("Checkout cart reset")
