from decimal import Decimal

import pytest

from checkout_pricing.engine import MeasuredQuantity, PricingRule, RuleSet, Sku, Unit
from checkout_pricing.errors import InvalidArgument


def test_sku_equality_is_by_value():
    assert Sku("A") == Sku("A")
    assert hash(Sku("A")) == hash(Sku("A"))
    assert Sku("A") != Sku("B")
    assert str(Sku("A")) == "A"
    assert Sku.of("A") == Sku("A")


@pytest.mark.parametrize("code", [None, "", "   ", 42])
def test_sku_rejects_invalid_codes(code):
    with pytest.raises(InvalidArgument):
        Sku(code)


def test_unit_divisibility():
    assert Unit.QUANTITY.divisible is False
    assert Unit.WEIGHT_IN_KG.divisible is True
    assert Unit.VOLUME_IN_L.divisible is True


def test_unit_parse_accepts_names():
    assert Unit.parse("weight_in_kg") is Unit.WEIGHT_IN_KG
    assert Unit.parse(Unit.VOLUME_IN_L) is Unit.VOLUME_IN_L
    with pytest.raises(InvalidArgument, match="unknown unit"):
        Unit.parse("PIECES")


def test_measured_quantity_normalizes_floats():
    quantity = MeasuredQuantity(Unit.WEIGHT_IN_KG, 0.234)
    assert quantity.amount == Decimal("0.234")
    assert MeasuredQuantity.single() == MeasuredQuantity(Unit.QUANTITY, 1)


@pytest.mark.parametrize("amount", [0, -1, "-0.5", float("nan"), float("inf"), None, True, "abc"])
def test_measured_quantity_rejects_invalid_amounts(amount):
    with pytest.raises(InvalidArgument):
        MeasuredQuantity(Unit.WEIGHT_IN_KG, amount)


def test_measured_quantity_requires_unit():
    with pytest.raises(InvalidArgument):
        MeasuredQuantity(None, 1)


def test_pricing_rule_defaults_to_quantity():
    rule = PricingRule.for_quantity("A", 3, 130)
    assert rule.sku == Sku("A")
    assert rule.unit is Unit.QUANTITY
    assert rule.amount == Decimal(3)
    assert rule.price == Decimal(130)


def test_pricing_rule_price_is_exact_decimal():
    rule = PricingRule("A", Unit.WEIGHT_IN_KG, 1, 0.99)
    assert rule.price == Decimal("0.99")
    assert rule.describe() == "1 WEIGHT_IN_KG @ 0.99"


@pytest.mark.parametrize("amount, price, message", [
    (0, 10, "Only positive amounts are accepted."),
    (-2, 10, "Only positive amounts are accepted."),
    (1, 0, "Only positive prices are accepted."),
    (1, "-0.01", "Only positive prices are accepted."),
])
def test_pricing_rule_rejects_non_positive_values(amount, price, message):
    with pytest.raises(InvalidArgument) as exc_info:
        PricingRule.for_quantity("A", amount, price)
    assert exc_info.value.explanation == message


def test_pricing_rule_is_immutable():
    rule = PricingRule.for_quantity("A", 1, 50)
    with pytest.raises(AttributeError):
        rule.price = Decimal(1)


def test_rule_set_sorts_tiers_largest_first():
    rule_set = RuleSet([
        PricingRule.for_quantity("A", 1, 50),
        PricingRule("A", Unit.WEIGHT_IN_KG, 5, "3.99"),
        PricingRule.for_quantity("A", 3, 130),
        PricingRule.for_quantity("B", 2, 45),
    ])
    matched = rule_set.find_matching_rules(Sku("A"))
    assert [r.amount for r in matched] == [5, 3, 1]
    assert [r.amount for r in rule_set.rules_for_unit(matched, Unit.QUANTITY)] == [3, 1]
    assert rule_set.find_matching_rules("Z") == ()
    assert rule_set.units_for(Sku("A")) == [Unit.WEIGHT_IN_KG, Unit.QUANTITY]
    assert [s.code for s in rule_set.skus] == ["A", "B"]
    assert len(rule_set) == 4


def test_rule_set_keeps_registration_order_for_equal_tiers():
    first = PricingRule.for_quantity("A", 2, 45)
    second = PricingRule.for_quantity("A", 2, 40)
    matched = RuleSet([first, second]).find_matching_rules(Sku("A"))
    assert matched == (first, second)


def test_rule_set_rejects_non_rules():
    with pytest.raises(InvalidArgument):
        RuleSet([("A", 1, 50)])
