"""
Shared API state - the loaded rule set and the open checkout sessions.
"""
import threading
import uuid

from ..config.settings import get_settings
from ..engine import Checkout, RuleSet
from ..rules.load_rules import load_rules


class CheckoutRegistry:
    """In-memory checkout sessions keyed by id. Nothing survives a restart."""

    def __init__(self, rule_set: RuleSet):
        self.rule_set = RuleSet.of(rule_set)
        self._lock = threading.Lock()
        self._checkouts: dict[str, Checkout] = {}

    def create(self) -> str:
        checkout_id = uuid.uuid4().hex
        with self._lock:
            self._checkouts[checkout_id] = Checkout(self.rule_set)
        return checkout_id

    def get(self, checkout_id: str) -> Checkout:
        """Raises KeyError for unknown ids."""
        with self._lock:
            return self._checkouts[checkout_id]

    def remove(self, checkout_id: str):
        with self._lock:
            del self._checkouts[checkout_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._checkouts)


settings = get_settings()
registry = CheckoutRegistry(load_rules(settings.rules_csv))
