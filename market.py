import numpy as np
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from returns_presets import PRESETS

INFLATION = "inflation"
PENSION = "pension"

@dataclass(frozen=True)
class MarketParameters:
    expected_return: float
    volatility: float

    @classmethod
    def from_dict(cls, d: Mapping) -> "MarketParameters":
        # inflation entries carry "rate" instead of "expected_return"
        mu = d["expected_return"] if "expected_return" in d else d["rate"]
        return cls(expected_return=float(mu), volatility=float(d.get("volatility", 0.0)))

def parameters_from_presets(presets: Optional[Mapping] = None) -> Dict[str, MarketParameters]:
    presets = PRESETS if presets is None else presets
    return {name: MarketParameters.from_dict(p) for name, p in presets.items()}

class MarketModel:
    """
    Independent yearly draws per asset class: expected return plus a uniform
    shock in [-volatility, +volatility]. No correlation across classes or years.
    """

    def __init__(self, parameters: Mapping[str, MarketParameters],
                 rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        self.parameters = dict(parameters)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def knows(self, asset_class: str) -> bool:
        return asset_class in self.parameters

    def sample_return(self, asset_class: str) -> float:
        try:
            p = self.parameters[asset_class]
        except KeyError:
            raise KeyError(f"No market parameters for asset class {asset_class!r}") from None
        shock = self.rng.uniform(-1.0, 1.0) * p.volatility
        return p.expected_return + float(shock)

    def adjust_for_inflation(self, amount: float) -> float:
        return amount * (1 + self.sample_return(INFLATION))
