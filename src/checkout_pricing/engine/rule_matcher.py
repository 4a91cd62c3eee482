"""
Rule Matcher - Looks up the pricing tiers that apply to a cart line.

Used by the pricing engine to select the rules for an article and then
narrow them to the unit the article was measured in.
"""
from collections.abc import Iterable
from typing import Optional

from ..errors import InvalidArgument
from .models import PricingRule, Sku, Unit


class RuleSet:
    """
    Immutable, ordered collection of pricing rules.

    Lookups return tiers sorted by amount descending (largest bundle first).
    The sort is stable, so rules with equal amounts keep their registration
    order.
    """

    def __init__(self, rules: Optional[Iterable[PricingRule]]):
        if rules is None:
            raise InvalidArgument("At least one pricing rule is required.")
        rules = tuple(rules)
        if not rules:
            raise InvalidArgument("At least one pricing rule is required.")
        for rule in rules:
            if not isinstance(rule, PricingRule):
                raise InvalidArgument(f"Expected a PricingRule, got {type(rule).__name__}.")

        self._rules = rules
        by_sku: dict[Sku, list[PricingRule]] = {}
        for rule in rules:
            by_sku.setdefault(rule.sku, []).append(rule)
        self._by_sku = {
            sku: tuple(sorted(matched, key=lambda r: r.amount, reverse=True))
            for sku, matched in by_sku.items()
        }

    @classmethod
    def of(cls, rules) -> 'RuleSet':
        if isinstance(rules, RuleSet):
            return rules
        return cls(rules)

    @property
    def rules(self) -> tuple[PricingRule, ...]:
        return self._rules

    @property
    def skus(self) -> list[Sku]:
        return sorted(self._by_sku, key=lambda s: s.code)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({len(self._rules)} rules, {len(self._by_sku)} skus)"

    def find_matching_rules(self, sku: Sku) -> tuple[PricingRule, ...]:
        """All tiers for `sku`, largest amount first. Empty if none."""
        return self._by_sku.get(Sku.of(sku), ())

    @staticmethod
    def rules_for_unit(matched: Iterable[PricingRule], unit: Unit) -> list[PricingRule]:
        """Narrow already-sorted tiers to one unit, keeping their order."""
        return [rule for rule in matched if rule.unit is unit]

    def units_for(self, sku: Sku) -> list[Unit]:
        """Units that have at least one tier for `sku`."""
        seen = []
        for rule in self.find_matching_rules(sku):
            if rule.unit not in seen:
                seen.append(rule.unit)
        return seen
