# exporters.py
import json
import numpy as np
import pandas as pd

from simulation import MoveTo, Profile, Retire, results_to_frame

def export_results(results) -> tuple[str, bytes]:
    df = results_to_frame(results)
    return "year_results.csv", df.to_csv(index=False).encode()

def export_summary(summary: pd.DataFrame) -> tuple[str, bytes]:
    return "percentile_summary.csv", summary.reset_index().to_csv(index=False).encode()

def _json_default(o):
    # Handle numpy arrays & scalars cleanly for JSON
    if isinstance(o, np.ndarray):
        return o.tolist()
    if isinstance(o, (np.float32, np.float64, np.int32, np.int64)):
        return o.item()
    # Let json raise for anything else unexpected
    raise TypeError(f"Object of type {o.__class__.__name__} is not JSON serializable")

def profile_to_dict(profile: Profile) -> dict:
    """Same keys `simulation.profile_from_dict` reads."""
    events = []
    for ev in profile.life_events:
        d = {"year": ev.year}
        if ev.income is not None:
            d["income"] = ev.income
        if ev.expenses is not None:
            d["expenses"] = ev.expenses
        if isinstance(ev.event, Retire):
            d["event"] = "retire"
        elif isinstance(ev.event, MoveTo):
            d["event"] = "move"
            d["newCountry"] = ev.event.country
        events.append(d)
    out = {
        "birthYear": profile.birth_year,
        "initialWealth": profile.initial_wealth,
        "initialPensionPot": profile.initial_pension_pot,
        "initialInvestments": [{"type": i.asset_class, "amount": i.amount} for i in profile.initial_investments],
        "initialCountry": profile.initial_country,
        "targetYear": profile.target_year,
        "lifeEvents": events,
    }
    if profile.start_year is not None:
        out["startYear"] = profile.start_year
    return out

def export_profile(profile: Profile) -> tuple[str, bytes]:
    blob = json.dumps(profile_to_dict(profile), indent=2, default=_json_default)
    return "profile.json", blob.encode()
