from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union
import math
import pandas as pd

# ---------- Data structures ----------
@dataclass(frozen=True)
class Bracket:
    rate: float              # e.g., 0.20
    lower: float             # "from" in the JSON records
    upper: Optional[float]   # "to"; None for the open top bracket

@dataclass(frozen=True)
class BracketTax:
    name: str
    brackets: List[Bracket] = field(default_factory=list)

@dataclass(frozen=True)
class FlatRateTax:
    name: str
    rate: float
    threshold: float = 0.0

TaxComponent = Union[BracketTax, FlatRateTax]

@dataclass(frozen=True)
class FixedRatePension:
    employee_rate: float
    employer_rate: float

@dataclass(frozen=True)
class AgeBand:
    max_age: Optional[int]   # inclusive; None for the final open band
    rate: float

@dataclass(frozen=True)
class AgeBandedPension:
    bands: List[AgeBand]
    annual_cap: float

@dataclass(frozen=True)
class UnknownPensionRule:
    """Pension record whose type we do not know how to evaluate."""
    kind: str

PensionRule = Union[FixedRatePension, AgeBandedPension, UnknownPensionRule]

@dataclass(frozen=True)
class CountryTaxRules:
    country: str
    income_taxes: List[TaxComponent] = field(default_factory=list)
    wealth_tax: Optional[TaxComponent] = None
    capital_gains: Dict[str, float] = field(default_factory=dict)
    pension: Optional[PensionRule] = None

    def capital_gains_rate(self, asset_class: str) -> float:
        return self.capital_gains.get(asset_class, 0.0)

# ---------- Record parsing ----------
def _bound(value) -> Optional[float]:
    return None if value is None else float(value)

def _require_object(record, what: str) -> dict:
    if not isinstance(record, dict):
        raise ValueError(f"{what} record must be an object, got {type(record).__name__}")
    return record

def _bracket_from_dict(b: dict, name: str) -> Bracket:
    _require_object(b, f"{name} bracket")
    return Bracket(rate=float(b["rate"]), lower=float(b.get("from", 0.0)), upper=_bound(b.get("to")))

def _component_from_dict(record: dict, default_name: str) -> TaxComponent:
    _require_object(record, default_name)
    kind = record.get("type")
    name = record.get("name", default_name)
    if kind == "bracket":
        return BracketTax(
            name=name,
            brackets=[_bracket_from_dict(b, name) for b in record.get("brackets", [])],
        )
    if kind == "flatRate":
        return FlatRateTax(name=name, rate=float(record["rate"]), threshold=float(record.get("threshold", 0.0)))
    raise ValueError(f"Unknown tax component type {kind!r} for {name!r}")

def _band_from_dict(r: dict) -> AgeBand:
    _require_object(r, "Pension band")
    return AgeBand(max_age=(None if r.get("maxAge") is None else int(r["maxAge"])), rate=float(r["rate"]))

def _pension_from_dict(record: Optional[dict]) -> Optional[PensionRule]:
    if record is None:
        return None
    _require_object(record, "Pension")
    kind = record.get("type")
    if kind == "fixedRate":
        return FixedRatePension(
            employee_rate=float(record.get("employeeRate", 0.0)),
            employer_rate=float(record.get("employerRate", 0.0)),
        )
    if kind == "ageBasedPercentage":
        bands = [_band_from_dict(r) for r in record.get("rates", [])]
        if not bands:
            raise ValueError("Age-based pension rule needs at least one band")
        cap = record.get("annualCap")
        return AgeBandedPension(bands=bands, annual_cap=math.inf if cap is None else float(cap))
    return UnknownPensionRule(kind=str(kind))

def rules_from_dict(country: str, record: dict) -> CountryTaxRules:
    """Build CountryTaxRules from one per-country JSON record.

    `personalAssetsTax` wins over `wealthTax` when a record carries both.
    Raises ValueError (or KeyError for missing required fields) on malformed records,
    including any part of the record that is not a JSON object where one is expected.
    """
    _require_object(record, f"{country} tax rules")
    wealth = record.get("personalAssetsTax") or record.get("wealthTax")
    gains = _require_object(record.get("capitalGainsTax") or {}, "Capital gains")
    return CountryTaxRules(
        country=country,
        income_taxes=[_component_from_dict(t, f"Income tax {i + 1}")
                      for i, t in enumerate(record.get("incomeTaxes") or [])],
        wealth_tax=None if not wealth else _component_from_dict(wealth, "Wealth tax"),
        capital_gains={k: float(v) for k, v in gains.items()},
        pension=_pension_from_dict(record.get("pensionContribution")),
    )

# ---------- Streamlit helpers ----------
def brackets_to_df(component: TaxComponent) -> pd.DataFrame:
    if isinstance(component, FlatRateTax):
        return pd.DataFrame([{"from": component.threshold, "to": None, "rate_percent": component.rate * 100}])
    data = []
    for b in component.brackets:
        data.append({"from": b.lower, "to": b.upper, "rate_percent": b.rate * 100})
    return pd.DataFrame(data, columns=["from", "to", "rate_percent"])
