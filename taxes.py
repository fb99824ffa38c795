"""
Tax evaluator: one pure function per tax component.

Bracket bounds are used exactly as the rule records give them. An upper
bound is inclusive and the next bracket may start one unit higher, so
the slice between the two is never taxed by either bracket.
"""

import math
from typing import Iterable, List, Optional, Tuple

from tax_models import (
    AgeBandedPension,
    BracketTax,
    CountryTaxRules,
    FixedRatePension,
    FlatRateTax,
    PensionRule,
    TaxComponent,
)


class UnknownPensionRuleKind(Exception):
    """Raised when a pension rule is not a variant the evaluator knows."""

    def __init__(self, kind: str):
        super().__init__(f"Unknown pension rule type {kind!r}")
        self.kind = kind


def _flat(base: float, comp: FlatRateTax) -> float:
    return max(0.0, base - comp.threshold) * comp.rate


def _bracketed(base: float, comp: BracketTax) -> float:
    tax = 0.0
    for b in comp.brackets:
        if base > b.lower:
            top = base if b.upper is None else min(base, b.upper)
            tax += (top - b.lower) * b.rate
    return tax


def component_tax(base: float, comp: TaxComponent) -> float:
    if isinstance(comp, FlatRateTax):
        return _flat(base, comp)
    if isinstance(comp, BracketTax):
        return _bracketed(base, comp)
    raise TypeError(f"Unsupported tax component {type(comp).__name__}")


def income_taxes(income: float, rules: CountryTaxRules) -> List[Tuple[str, float]]:
    """Amount owed for each income-tax component, in rule order."""
    return [(comp.name, component_tax(income, comp)) for comp in rules.income_taxes]


def total_income_tax(income: float, rules: CountryTaxRules) -> float:
    return sum(amount for _, amount in income_taxes(income, rules))


def wealth_tax(wealth: float, rules: CountryTaxRules) -> float:
    rule = rules.wealth_tax
    if rule is None:
        return 0.0
    if isinstance(rule, FlatRateTax):
        return (wealth - rule.threshold) * rule.rate if wealth > rule.threshold else 0.0
    if isinstance(rule, BracketTax):
        tax = 0.0
        for b in rule.brackets:
            upper = math.inf if b.upper is None else b.upper
            if wealth > b.lower:
                tax += min(wealth - b.lower, upper - b.lower) * b.rate
            if wealth <= upper:
                break
        return tax
    raise TypeError(f"Unsupported wealth tax rule {type(rule).__name__}")


def capital_gains_tax(investments: Iterable, rules: CountryTaxRules) -> float:
    """Tax on this year's mark-to-market gains. Negative gains lower the total."""
    return sum(inv.gain * rules.capital_gains_rate(inv.asset_class) for inv in investments)


def pension_contribution(income: float, rule: Optional[PensionRule], age: int) -> float:
    if rule is None:
        return 0.0
    if isinstance(rule, FixedRatePension):
        return income * (rule.employee_rate + rule.employer_rate)
    if isinstance(rule, AgeBandedPension):
        # The last band is open-ended whatever max_age it carries
        rate = rule.bands[-1].rate
        for band in rule.bands[:-1]:
            if band.max_age is None or age <= band.max_age:
                rate = band.rate
                break
        return min(income * rate, rule.annual_cap)
    raise UnknownPensionRuleKind(getattr(rule, "kind", type(rule).__name__))
