"""
Data models for the checkout pricing engine.

Value types (Sku, Unit, MeasuredQuantity, PricingRule) are frozen dataclasses
validated at construction. Result types (TraceStep, LineItem, Result) carry
the priced breakdown returned by the engine.
"""
from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import (
    ROUND_HALF_UP,
    Context,
    Decimal,
    DecimalException,
    DivisionByZero,
    Inexact,
    InvalidOperation,
    Overflow,
    localcontext,
)
from enum import Enum
from typing import Optional

from ..errors import InvalidArgument


CENT = Decimal("0.01")

# Significant digits available to cart and tier arithmetic. Anything that
# would need more is rejected instead of being rounded.
PRECISION = 1000

EXACT_CONTEXT = Context(
    prec=PRECISION,
    rounding=ROUND_HALF_UP,
    traps=[InvalidOperation, DivisionByZero, Overflow, Inexact],
)

# Rounding to cents may add two digits to an exact subtotal
MONEY_CONTEXT = Context(
    prec=PRECISION + 2,
    rounding=ROUND_HALF_UP,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


@contextmanager
def exact_arithmetic(what: str):
    """Run Decimal arithmetic without silent rounding; overflow becomes InvalidArgument."""
    with localcontext(EXACT_CONTEXT):
        try:
            yield
        except DecimalException as e:
            raise InvalidArgument(
                f"{what} cannot be computed exactly within {PRECISION} significant digits."
            ) from e


def round_to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)


def to_decimal(value, name: str) -> Decimal:
    """Convert a numeric input to Decimal; floats go through their shortest repr."""
    if value is None:
        raise InvalidArgument(f"{name} must not be None.")
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a number, got {value!r}.")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidArgument(f"{name} must be a number, got {value!r}.") from None
    else:
        raise InvalidArgument(f"{name} must be a number, got {type(value).__name__}.")

    if not result.is_finite():
        raise InvalidArgument(f"{name} must be finite, got {value!r}.")
    return result


@dataclass(frozen=True)
class Sku:
    """Identifies a distinct article."""
    code: str

    def __post_init__(self):
        if self.code is None:
            raise InvalidArgument("code must not be None.")
        if not isinstance(self.code, str):
            raise InvalidArgument(f"code must be a string, got {type(self.code).__name__}.")
        if not self.code.strip():
            raise InvalidArgument("code must not be empty.")

    @classmethod
    def of(cls, value) -> 'Sku':
        """Accept either a Sku or a plain code string."""
        if isinstance(value, Sku):
            return value
        if value is None:
            raise InvalidArgument("sku must not be None.")
        return cls(value)

    def __str__(self) -> str:
        return self.code


class Unit(str, Enum):
    """How an article is measured. Divisible units allow fractional leftovers."""
    QUANTITY = "QUANTITY"
    WEIGHT_IN_KG = "WEIGHT_IN_KG"
    VOLUME_IN_L = "VOLUME_IN_L"

    @property
    def divisible(self) -> bool:
        return self in _DIVISIBLE_UNITS

    @classmethod
    def parse(cls, value) -> 'Unit':
        """Resolve a Unit from an enum member or its (case-insensitive) name."""
        if isinstance(value, Unit):
            return value
        if value is None:
            raise InvalidArgument("unit must not be None.")
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            names = ", ".join(u.value for u in cls)
            raise InvalidArgument(f"unknown unit {value!r}, must be one of: {names}") from None


_DIVISIBLE_UNITS = frozenset({Unit.WEIGHT_IN_KG, Unit.VOLUME_IN_L})


@dataclass(frozen=True)
class MeasuredQuantity:
    """A unit and a positive amount, e.g. the reading of a scale."""
    unit: Unit
    amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'unit', Unit.parse(self.unit))
        amount = to_decimal(self.amount, "amount")
        if amount <= 0:
            raise InvalidArgument("Only positive amounts are accepted.")
        object.__setattr__(self, 'amount', amount)

    @classmethod
    def single(cls) -> 'MeasuredQuantity':
        """One discrete article."""
        return cls(Unit.QUANTITY, Decimal(1))


@dataclass(frozen=True)
class PricingRule:
    """
    `amount` of `sku` measured in `unit` costs `price` as a bundle.

    Several rules for the same (sku, unit) express tiers, e.g. 1 for 50 and
    3 for 130. For divisible units the smallest tier must be a true per-unit
    price: leftovers below it are priced as `leftover * price`.
    """
    sku: Sku
    unit: Unit
    amount: Decimal
    price: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'sku', Sku.of(self.sku))
        object.__setattr__(self, 'unit', Unit.parse(self.unit))

        amount = to_decimal(self.amount, "amount")
        if amount <= 0:
            raise InvalidArgument("Only positive amounts are accepted.")
        price = to_decimal(self.price, "price")
        if price <= 0:
            raise InvalidArgument("Only positive prices are accepted.")

        object.__setattr__(self, 'amount', amount)
        object.__setattr__(self, 'price', price)

    @classmethod
    def for_quantity(cls, sku, amount, price) -> 'PricingRule':
        """Rule priced per article count."""
        return cls(sku, Unit.QUANTITY, amount, price)

    def describe(self) -> str:
        return f"{self.amount} {self.unit.value} @ {self.price}"


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class LineItem:
    """Priced subtotal for one (sku, unit) pair of the cart."""
    sku: str
    unit: str
    amount: Decimal
    subtotal: Decimal = Decimal(0)
    remainder: Decimal = Decimal(0)
    rules_applied: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this line item."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "sku": self.sku,
            "unit": self.unit,
            "amount": str(self.amount),
            "subtotal": str(self.subtotal),
            "remainder": str(self.remainder),
            "rules_applied": list(self.rules_applied),
            "warnings": list(self.warnings),
        }


@dataclass
class Result:
    """Complete result of a cart calculation."""
    total: Decimal
    subtotal: Decimal
    lines: list[LineItem] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the result-level trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a result-level warning."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable result trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """JSON-safe view; decimals are rendered as strings."""
        return {
            "total": str(self.total),
            "subtotal": str(self.subtotal),
            "lines": [line.to_dict() for line in self.lines],
            "warnings": list(self.warnings),
            "trace": [
                {"step": t.step, "description": t.description, "value": t.value}
                for t in self.trace
            ],
        }
