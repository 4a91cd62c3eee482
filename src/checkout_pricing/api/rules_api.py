"""
Rules API - FastAPI router for inspecting and validating pricing rules.
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional

from ..engine import PricingRule, Sku
from ..errors import InvalidArgument
from ..rules.load_rules import rules_to_frame
from .state import registry

router = APIRouter(prefix="/api/rules", tags=["rules"])


class RuleCreate(BaseModel):
    """Request model for a candidate rule."""
    sku: str
    unit: str = "QUANTITY"
    amount: str
    price: str


class RuleResponse(BaseModel):
    """Response model for a rule."""
    sku: str
    unit: str
    amount: str
    price: str


class ValidationResponse(BaseModel):
    """Response model for validation."""
    valid: bool
    errors: list[str]
    warnings: list[str]


@router.get("", response_model=list[RuleResponse])
async def list_rules(sku: Optional[str] = None):
    """List the loaded pricing rules, optionally for one SKU (largest tier first)."""
    if sku:
        try:
            rules = registry.rule_set.find_matching_rules(Sku(sku))
        except InvalidArgument as e:
            raise HTTPException(status_code=422, detail=e.explanation)
    else:
        rules = registry.rule_set.rules
    return rules_to_frame(rules).to_dict(orient="records")


@router.post("/validate", response_model=ValidationResponse)
async def validate_rule(rule: RuleCreate):
    """Check a candidate rule against the value invariants and the loaded tiers."""
    try:
        candidate = PricingRule(rule.sku, rule.unit, rule.amount, rule.price)
    except InvalidArgument as e:
        return ValidationResponse(valid=False, errors=[e.explanation], warnings=[])

    warnings = []
    existing = registry.rule_set.find_matching_rules(candidate.sku)
    if not existing:
        warnings.append(f"SKU '{candidate.sku}' has no rules yet")
    else:
        units = registry.rule_set.units_for(candidate.sku)
        if candidate.unit not in units:
            priced_in = ", ".join(unit.value for unit in units)
            warnings.append(
                f"SKU '{candidate.sku}' is priced in {priced_in}; this adds {candidate.unit.value}"
            )

    same_unit = registry.rule_set.rules_for_unit(existing, candidate.unit)
    for current in same_unit:
        if current.amount == candidate.amount:
            warnings.append(
                f"A tier of {current.amount} {current.unit.value} already exists at {current.price}"
            )

    if candidate.unit.divisible:
        smallest = min([r.amount for r in same_unit] + [candidate.amount])
        if smallest != 1:
            warnings.append(
                f"Smallest {candidate.unit.value} tier is {smallest}; "
                "leftovers are priced at its price per unit"
            )

    return ValidationResponse(valid=True, errors=[], warnings=warnings)
