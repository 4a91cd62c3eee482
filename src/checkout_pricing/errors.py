"""Structured error taxonomy for checkout pricing failures."""

from __future__ import annotations


class CheckoutError(Exception):
    """Base class for all checkout pricing exceptions."""

    def __init__(self, error_code: str, category: str, explanation: str):
        self.error_code = error_code
        self.category = category
        self.explanation = explanation
        super().__init__(f"[{self.category}:{self.error_code}] {self.explanation}")


class InvalidArgument(CheckoutError, ValueError):
    """A value type, rule set or cart input violated its invariants."""

    def __init__(self, explanation: str):
        super().__init__("INVALID_ARGUMENT", "INPUT", explanation)


class RuleFileError(InvalidArgument):
    """A pricing rule file contained one or more invalid rows."""

    def __init__(self, explanation: str, errors: list[str] | None = None):
        self.errors = list(errors or [])
        super().__init__(explanation)


class PriceCalculationError(CheckoutError):
    """Base for failures raised while pricing a cart."""

    def __init__(self, error_code: str, explanation: str):
        super().__init__(error_code, "PRICING", explanation)


class MissingRule(PriceCalculationError):
    def __init__(self, sku):
        self.sku = sku
        super().__init__(
            "MISSING_RULE",
            f"No pricing rule(s) found for SKU '{sku}', price calculation not possible.",
        )


class MissingRuleForUnit(PriceCalculationError):
    def __init__(self, sku, unit):
        self.sku = sku
        self.unit = unit
        super().__init__(
            "MISSING_RULE_FOR_UNIT",
            f"No pricing rule(s) found for SKU '{sku}' and unit '{unit.value}', "
            "price calculation not possible.",
        )


class NoRuleForAmount(PriceCalculationError):
    """An indivisible amount left a remainder no tier can cover."""

    def __init__(self, sku, unit, remaining):
        self.sku = sku
        self.unit = unit
        self.remaining = remaining
        super().__init__(
            "NO_RULE_FOR_AMOUNT",
            f"No pricing rule found for SKU '{sku}', unit {unit.value} and amount {remaining}, "
            "price calculation not possible.",
        )
