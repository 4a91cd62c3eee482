"""
Cart - running totals of scanned amounts per article and unit.
"""
import threading
from decimal import Decimal

from .models import MeasuredQuantity, Sku, Unit, exact_arithmetic


class Cart:
    """
    Thread-safe accumulator owned by a single checkout session.

    Every mutation and every snapshot happens under one private lock, so a
    reader sees either the whole map before a write or the whole map after
    it. There is no ordering between a scan and a concurrent snapshot.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._items: dict[Sku, dict[Unit, Decimal]] = {}

    def add(self, sku: Sku, quantity: MeasuredQuantity):
        """Merge `quantity` into the running total for (sku, unit)."""
        with self._lock, exact_arithmetic(f"Running total of SKU {sku}"):
            units = self._items.get(sku, {})
            total = units.get(quantity.unit, Decimal(0)) + quantity.amount
            self._items.setdefault(sku, units)[quantity.unit] = total

    def reset(self):
        with self._lock:
            self._items = {}

    def snapshot(self) -> dict[Sku, dict[Unit, Decimal]]:
        """Copy of the current totals, detached from later scans."""
        with self._lock:
            return {sku: dict(units) for sku, units in self._items.items()}

    def amount(self, sku: Sku, unit: Unit = Unit.QUANTITY) -> Decimal:
        with self._lock:
            return self._items.get(sku, {}).get(unit, Decimal(0))

    def is_empty(self) -> bool:
        with self._lock:
            return not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
