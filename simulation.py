import datetime
import logging
import numpy as np
import pandas as pd
from dataclasses import dataclass, field, replace
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from drawdown import PensionDrawdown
from market import PENSION, MarketModel, MarketParameters
from tax_repository import TaxRuleRepository
from taxes import (
    UnknownPensionRuleKind,
    capital_gains_tax,
    income_taxes,
    pension_contribution,
    wealth_tax,
)

logger = logging.getLogger(__name__)


class InvalidProfile(ValueError):
    pass


# ---------- Life events ----------
@dataclass(frozen=True)
class Retire:
    pass

@dataclass(frozen=True)
class MoveTo:
    country: str

EventKind = Union[Retire, MoveTo]

@dataclass(frozen=True)
class LifeEvent:
    year: int
    income: Optional[float] = None     # None = keep last year's income
    expenses: Optional[float] = None   # None = last year's expenses plus inflation
    event: Optional[EventKind] = None


# ---------- Profile & state ----------
@dataclass
class Investment:
    asset_class: str
    amount: float
    gain: float = 0.0   # this year's gain, overwritten every year

@dataclass
class Profile:
    birth_year: int
    initial_wealth: float
    initial_pension_pot: float
    initial_investments: List[Investment]
    initial_country: str
    target_year: int
    life_events: List[LifeEvent] = field(default_factory=list)
    start_year: Optional[int] = None   # defaults to the current calendar year

    def first_year(self) -> int:
        return self.start_year if self.start_year is not None else datetime.date.today().year

    def event_for(self, year: int) -> Optional[LifeEvent]:
        for ev in self.life_events:
            if ev.year == year:
                return ev
        return None

@dataclass
class SimulationState:
    wealth: float
    investments: List[Investment]
    pension_pot: float
    is_retired: bool
    country: str               # last country whose rules resolved
    previous_income: float
    previous_expenses: float

@dataclass(frozen=True)
class YearResult:
    year: int
    country: str
    income_taxes: Tuple[Tuple[str, float], ...]
    wealth_tax: float
    pension_income: float
    capital_gains_tax: float
    total_tax: float
    net_income: float
    expenses: float
    remaining_wealth: float
    # extra reporting
    age: int = 0
    income: float = 0.0
    pension_contribution: float = 0.0
    pension_pot: float = 0.0
    investment_gains: float = 0.0
    is_retired: bool = False

    @property
    def income_tax_total(self) -> float:
        return sum(amount for _, amount in self.income_taxes)


def validate_profile(profile: Profile, market: MarketModel) -> None:
    start = profile.first_year()
    if profile.target_year < start:
        raise InvalidProfile(f"target_year {profile.target_year} is before start year {start}")
    years = [ev.year for ev in profile.life_events]
    dupes = sorted({y for y in years if years.count(y) > 1})
    if dupes:
        raise InvalidProfile(f"More than one life event in year(s) {dupes}")
    for ev in profile.life_events:
        if isinstance(ev.event, MoveTo) and not ev.event.country:
            raise InvalidProfile(f"Move event in {ev.year} has no destination country")
    for inv in profile.initial_investments:
        if inv.amount < 0:
            raise InvalidProfile(f"Negative amount for {inv.asset_class} investment")
        if not market.knows(inv.asset_class):
            raise InvalidProfile(f"No market parameters for asset class {inv.asset_class!r}")


class Simulator:
    """
    Year-by-year projection of one profile.

    The engine holds only shared, read-only collaborators; everything that
    changes from one year to the next lives in SimulationState and is passed
    into and returned from `step`.
    """

    def __init__(self, repository: TaxRuleRepository, market: MarketModel,
                 drawdown: Optional[PensionDrawdown] = None):
        self.repository = repository
        self.market = market
        self.drawdown = drawdown or PensionDrawdown()

    def initial_state(self, profile: Profile) -> SimulationState:
        first = profile.life_events[0] if profile.life_events else None
        return SimulationState(
            wealth=profile.initial_wealth,
            investments=[Investment(inv.asset_class, inv.amount) for inv in profile.initial_investments],
            pension_pot=profile.initial_pension_pot,
            is_retired=False,
            country=profile.initial_country,
            previous_income=(first.income if first and first.income is not None else 0.0),
            previous_expenses=(first.expenses if first and first.expenses is not None else 0.0),
        )

    def step(self, state: SimulationState, year: int,
             profile: Profile) -> Tuple[SimulationState, Optional[YearResult]]:
        """Advance one year. Returns the new state and the year's result (None if skipped)."""
        ev = profile.event_for(year)
        income = ev.income if ev and ev.income is not None else state.previous_income
        expenses = ev.expenses if ev and ev.expenses is not None else self.market.adjust_for_inflation(state.previous_expenses)

        kind = ev.event if ev else None
        is_retired = state.is_retired or isinstance(kind, Retire)
        country = kind.country if isinstance(kind, MoveTo) else state.country

        carried = replace(state, is_retired=is_retired, previous_income=income, previous_expenses=expenses)
        rules = self.repository.lookup(country)
        if rules is None:
            logger.warning("Failed to load tax rules for %s. Skipping year %d.", country, year)
            return carried, None

        # Market returns: gains overwritten, principal untouched
        investments = [Investment(inv.asset_class, inv.amount) for inv in state.investments]
        for inv in investments:
            inv.gain = inv.amount * self.market.sample_return(inv.asset_class)

        age = year - profile.birth_year
        pension_pot = state.pension_pot * (1 + self.market.sample_return(PENSION))
        try:
            contribution = pension_contribution(income, rules.pension, age)
        except UnknownPensionRuleKind as e:
            logger.warning("%s for %s; no pension contribution in %d", e, country, year)
            contribution = 0.0
        pension_pot += contribution

        pension_income = self.drawdown.income(pension_pot, is_retired)
        pension_pot = self.drawdown.pot_after_withdrawal(pension_pot, pension_income)

        itaxes = tuple(income_taxes(income + pension_income, rules))
        wtax = wealth_tax(state.wealth, rules)
        cgtax = capital_gains_tax(investments, rules)
        total_tax = sum(a for _, a in itaxes) + wtax + cgtax

        gains = sum(inv.gain for inv in investments)
        net_income = income + pension_income + gains - total_tax

        wealth = state.wealth
        if net_income < expenses:
            wealth -= expenses - net_income
        else:
            surplus = net_income - expenses
            wealth += surplus
            # Each position gets surplus * amount / wealth, wealth already including the surplus
            if wealth != 0:
                for inv in investments:
                    inv.amount += surplus * (inv.amount / wealth)

        new_state = replace(carried, wealth=wealth, investments=investments,
                            pension_pot=pension_pot, country=country)
        result = YearResult(
            year=year,
            country=country,
            income_taxes=itaxes,
            wealth_tax=wtax,
            pension_income=pension_income,
            capital_gains_tax=cgtax,
            total_tax=total_tax,
            net_income=net_income,
            expenses=expenses,
            remaining_wealth=wealth,
            age=age,
            income=income,
            pension_contribution=contribution,
            pension_pot=pension_pot,
            investment_gains=gains,
            is_retired=is_retired,
        )
        return new_state, result

    def run(self, profile: Profile) -> List[YearResult]:
        validate_profile(profile, self.market)
        state = self.initial_state(profile)
        results = []
        for year in range(profile.first_year(), profile.target_year + 1):
            state, result = self.step(state, year, profile)
            if result is not None:
                results.append(result)
        logger.debug("Simulated %d of %d years for %s", len(results),
                     profile.target_year - profile.first_year() + 1, profile.initial_country)
        return results


# ---------- Tabular views ----------
BASE_COLUMNS = [
    "year", "age", "country", "is_retired", "income", "pension_income", "investment_gains",
    "income_tax", "wealth_tax", "capital_gains_tax", "total_tax", "net_income",
    "expenses", "pension_contribution", "pension_pot", "remaining_wealth",
]

def results_to_frame(results: Sequence[YearResult]) -> pd.DataFrame:
    """One row per year; each income-tax component also gets its own `tax:<name>` column."""
    rows = []
    components = []
    for r in results:
        row = {c: getattr(r, c) for c in BASE_COLUMNS if c != "income_tax"}
        row["income_tax"] = r.income_tax_total
        for name, amount in r.income_taxes:
            col = f"tax:{name}"
            row[col] = amount
            if col not in components:
                components.append(col)
        rows.append(row)
    df = pd.DataFrame(rows, columns=BASE_COLUMNS + components)
    if components:
        df[components] = df[components].fillna(0.0)
    return df

def run_monte_carlo(profile: Profile, repository: TaxRuleRepository,
                    parameters: Mapping[str, MarketParameters], num_paths: int = 200,
                    seed: Optional[int] = None, drawdown: Optional[PensionDrawdown] = None):
    """
    Run independent paths and summarise them per year.
    Returns (summary DataFrame indexed by year, list of per-path frames).
    """
    if num_paths < 1:
        raise ValueError("num_paths must be at least 1")
    rng = np.random.default_rng(seed)
    series = []
    for i in range(num_paths):
        # jitter seed per path to avoid identical paths
        market = MarketModel(parameters, seed=int(rng.integers(0, 2**31 - 1)))
        df = results_to_frame(Simulator(repository, market, drawdown).run(profile))
        df["path"] = i
        series.append(df)

    stacked = pd.concat(series, ignore_index=True)
    by_year = stacked.groupby("year")
    pct = lambda col, q: by_year[col].quantile(q)
    summary = pd.DataFrame({
        "wealth_p5": pct("remaining_wealth", 0.05),
        "wealth_p50": pct("remaining_wealth", 0.50),
        "wealth_p95": pct("remaining_wealth", 0.95),
        "net_income_p5": pct("net_income", 0.05),
        "net_income_p50": pct("net_income", 0.50),
        "net_income_p95": pct("net_income", 0.95),
        "total_tax_p50": pct("total_tax", 0.50),
    })
    return summary, series


# ---------- Profile records ----------
def _event_from_dict(d: Mapping) -> LifeEvent:
    kind = d.get("event")
    if kind == "retire":
        ev = Retire()
    elif kind == "move":
        ev = MoveTo(d.get("newCountry") or "")
    elif kind is None:
        ev = None
    else:
        raise InvalidProfile(f"Unknown life event {kind!r} in {d.get('year')}")
    return LifeEvent(year=int(d["year"]), income=d.get("income"), expenses=d.get("expenses"), event=ev)

def profile_from_dict(d: Mapping) -> Profile:
    """Profile from the JSON shape (birthYear, initialInvestments with type/amount, ...)."""
    try:
        return Profile(
            birth_year=int(d["birthYear"]),
            initial_wealth=float(d["initialWealth"]),
            initial_pension_pot=float(d.get("initialPensionPot", 0.0)),
            initial_investments=[Investment(i["type"], float(i["amount"]))
                                 for i in d.get("initialInvestments", [])],
            initial_country=d["initialCountry"],
            target_year=int(d["targetYear"]),
            life_events=[_event_from_dict(e) for e in d.get("lifeEvents", [])],
            start_year=None if d.get("startYear") is None else int(d["startYear"]),
        )
    except KeyError as e:
        raise InvalidProfile(f"Missing profile field {e}") from None
