from dataclasses import replace
from simulation import LifeEvent, Profile, run_monte_carlo

def clone_profile(profile: Profile, **overrides) -> Profile:
    return replace(profile, **overrides)

def with_event(profile: Profile, event: LifeEvent) -> Profile:
    """Copy of the profile with `event` replacing whatever was scheduled that year."""
    events = [ev for ev in profile.life_events if ev.year != event.year] + [event]
    return clone_profile(profile, life_events=sorted(events, key=lambda ev: ev.year))

def compare(profile: Profile, variants: list[tuple[str, dict]], repository, parameters,
            num_paths: int = 200, seed=None, drawdown=None):
    """
    variants: list of (name, overrides-dict)
    returns: dict name -> per-year summary DataFrame

    Every variant reuses the same seed so differences come from the edits, not the draws.
    """
    res = {}
    for name, edits in variants:
        prof_v = clone_profile(profile, **edits)
        res[name] = run_monte_carlo(prof_v, repository, parameters,
                                    num_paths=num_paths, seed=seed, drawdown=drawdown)[0]
    return res
