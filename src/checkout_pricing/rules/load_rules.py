"""
Rule Loader - Validates and loads pricing rules from CSV.

Expected columns: sku, unit, amount, price and optionally active, notes.
`unit` defaults to QUANTITY and `active` to true when the column or cell is
empty.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd

from ..errors import InvalidArgument, RuleFileError
from ..engine.models import PricingRule, Unit
from ..engine.rule_matcher import RuleSet

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('sku', 'amount', 'price')
RULE_COLUMNS = ['sku', 'unit', 'amount', 'price']


def parse_bool(value: str) -> bool:
    """Parse a boolean from CSV string."""
    return value.strip().lower() in ('true', '1', 'yes', 'on')


def parse_optional_str(value) -> Optional[str]:
    """Parse optional string (empty = None)."""
    if value is None or str(value).strip() == '':
        return None
    return str(value).strip()


def parse_rule_row(row: dict, line_num: int) -> tuple[Optional[PricingRule], list[str]]:
    """
    Validate and parse a pricing rule from a CSV row.

    Returns (rule, errors) - rule is None if validation failed or the row is inactive.
    """
    errors = []

    active = parse_optional_str(row.get('active'))
    if active is not None and not parse_bool(active):
        return None, []

    sku = parse_optional_str(row.get('sku'))
    if not sku:
        errors.append(f"Line {line_num}: sku is required")

    amount = parse_optional_str(row.get('amount'))
    if amount is None:
        errors.append(f"Line {line_num}: amount is required")

    price = parse_optional_str(row.get('price'))
    if price is None:
        errors.append(f"Line {line_num}: price is required")

    if errors:
        return None, errors

    unit = parse_optional_str(row.get('unit')) or Unit.QUANTITY.value
    try:
        rule = PricingRule(sku, unit, amount, price)
    except InvalidArgument as e:
        return None, [f"Line {line_num}: {e.explanation}"]

    return rule, []


def load_rules(rules_csv: Path) -> RuleSet:
    """
    Load every active rule of a CSV file into a RuleSet.

    Raises RuleFileError listing all invalid lines, or if no active rule is left.
    """
    rules_csv = Path(rules_csv)
    if not rules_csv.exists():
        raise RuleFileError(f"Rules file not found: {rules_csv}")

    try:
        df = pd.read_csv(rules_csv, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        raise RuleFileError(f"Rules file {rules_csv} is empty") from None
    df.columns = [str(c).strip().lower() for c in df.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise RuleFileError(
            f"Rules file {rules_csv} is missing column(s): {', '.join(missing)}",
            [f"missing column: {c}" for c in missing],
        )

    rules = []
    all_errors = []
    skipped = 0
    for index, row in enumerate(df.to_dict(orient='records')):
        rule, errors = parse_rule_row(row, index + 2)  # +2 for 1-indexed header row
        if errors:
            all_errors.extend(errors)
        elif rule:
            rules.append(rule)
        else:
            skipped += 1

    if all_errors:
        for err in all_errors:
            logger.warning("Invalid pricing rule in %s: %s", rules_csv, err)
        raise RuleFileError(
            f"Rules file {rules_csv} has {len(all_errors)} invalid entr{'y' if len(all_errors) == 1 else 'ies'}",
            all_errors,
        )

    if not rules:
        raise RuleFileError(f"Rules file {rules_csv} contains no active pricing rule")

    if skipped:
        logger.info("Skipped %d inactive rule(s) in %s", skipped, rules_csv)
    logger.info("Loaded %d pricing rule(s) from %s", len(rules), rules_csv)
    return RuleSet(rules)


def rules_to_frame(rules) -> pd.DataFrame:
    """Tabular view of a rule set, decimals rendered as strings."""
    return pd.DataFrame(
        [
            {
                'sku': rule.sku.code,
                'unit': rule.unit.value,
                'amount': str(rule.amount),
                'price': str(rule.price),
            }
            for rule in rules
        ],
        columns=RULE_COLUMNS,
    )


def main():
    """CLI entry point: validate a rules file."""
    from ..config.settings import get_settings

    rules_csv = Path(sys.argv[1]) if len(sys.argv) > 1 else get_settings().rules_csv

    print(f"Validating pricing rules in {rules_csv}...")
    try:
        rule_set = load_rules(rules_csv)
    except RuleFileError as e:
        print(f"\n❌ {e.explanation}")
        for err in e.errors:
            print(f"  ❌ {err}")
        sys.exit(1)

    print(f"✅ {len(rule_set)} rules for {len(rule_set.skus)} SKUs")
    print(rules_to_frame(rule_set).to_string(index=False))


if __name__ == "__main__":
    main()
