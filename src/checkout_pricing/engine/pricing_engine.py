"""
Pricing Engine - greedy tier application over a cart snapshot.

For every article the tiers are applied largest bundle first, as many times
as they fit. A leftover on a divisible unit is priced at the smallest tier's
price per unit; a leftover on an indivisible unit cannot be priced.

All money is Decimal and the grand total is rounded exactly once, half up to
whole cents.
"""
import logging
from decimal import Decimal

from ..errors import MissingRule, MissingRuleForUnit, NoRuleForAmount
from .models import LineItem, Result, Sku, Unit, exact_arithmetic, round_to_cents
from .rule_matcher import RuleSet

logger = logging.getLogger(__name__)

_UNIT_ORDER = {unit: index for index, unit in enumerate(Unit)}


class PricingEngine:
    """
    Computes cart totals from a fixed rule set.

    Resolution order per article:
    1. Select the article's tiers (none: MissingRule)
    2. For each measured unit, narrow to that unit (none: MissingRuleForUnit)
    3. Apply tiers largest first while the remaining amount covers them
    4. Price a divisible leftover at the smallest tier, else NoRuleForAmount
    """

    def __init__(self, rules):
        self.rule_set = RuleSet.of(rules)

    def total_price(self, items: dict[Sku, dict[Unit, Decimal]]) -> Decimal:
        """Rounded total for a cart snapshot."""
        return self.calculate(items).total

    def calculate(self, items: dict[Sku, dict[Unit, Decimal]]) -> Result:
        """
        Price a cart snapshot with full traceability.

        Args:
            items: {Sku: {Unit: accumulated amount}}, as returned by Cart.snapshot()

        Returns:
            Result with the rounded total, unrounded subtotal and one line per (sku, unit)
        """
        with exact_arithmetic("Cart total"):
            result = self._calculate(items)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Cart priced:\n%s", result.get_trace_text())
        return result

    def _calculate(self, items: dict[Sku, dict[Unit, Decimal]]) -> Result:
        result = Result(total=Decimal(0), subtotal=Decimal(0))
        result.add_trace("Cart", "Articles in cart", str(len(items)))

        subtotal = Decimal(0)
        for sku in sorted(items, key=lambda s: s.code):
            matched = self.rule_set.find_matching_rules(sku)
            if not matched:
                raise MissingRule(sku)

            sku_subtotal = Decimal(0)
            units = items[sku]
            for unit in sorted(units, key=_UNIT_ORDER.get):
                line = self._calculate_line(sku, unit, units[unit], matched)
                result.lines.append(line)
                sku_subtotal += line.subtotal
                for warning in line.warnings:
                    result.add_warning(warning)

            result.add_trace("Article", f"Subtotal for SKU {sku}", str(sku_subtotal))
            subtotal += sku_subtotal

        result.subtotal = subtotal
        result.total = round_to_cents(subtotal)
        result.add_trace("Rounding", f"{subtotal} rounded half up to cents", str(result.total))
        return result

    def _calculate_line(self, sku: Sku, unit: Unit, amount: Decimal, matched) -> LineItem:
        """Apply the tiers of one article to the amount measured in one unit."""
        tiers = self.rule_set.rules_for_unit(matched, unit)
        if not tiers:
            raise MissingRuleForUnit(sku, unit)

        line = LineItem(sku=sku.code, unit=unit.value, amount=amount)
        line.add_trace("Tiers", f"{len(tiers)} tier(s) for {unit.value}",
                       ", ".join(rule.describe() for rule in tiers))

        remaining = amount
        for rule in tiers:
            while remaining >= rule.amount:
                applications = int(remaining // rule.amount)
                line.subtotal += rule.price * applications
                remaining -= rule.amount * applications
                line.rules_applied.append(f"{applications} x {rule.describe()}")
                line.add_trace("Tier Applied", f"{applications} x {rule.describe()}",
                               str(rule.price * applications))

        if remaining > 0:
            if not unit.divisible:
                raise NoRuleForAmount(sku, unit, remaining)

            smallest = tiers[-1]
            line.remainder = remaining
            line.subtotal += smallest.price * remaining
            line.add_trace("Remainder", f"{remaining} {unit.value} x {smallest.price}",
                           str(smallest.price * remaining))
            if smallest.amount != 1:
                line.add_warning(
                    f"Remainder of SKU {sku} priced at {smallest.price} per {unit.value}, "
                    f"but the smallest tier covers {smallest.amount}"
                )

        logger.debug("Priced %s %s %s: %s", sku, amount, unit.value, line.subtotal)
        return line
