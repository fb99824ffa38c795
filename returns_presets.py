# Nominal long-run estimates per asset class. Vol = half-width of the yearly
# uniform shock around the expected return, not a standard deviation.
# "pension" drives pension-pot growth; "inflation" drives expense indexing.
# These are not promises, just sane defaults users can override.

PRESETS = {
    "indexFunds": {"expected_return": 0.07, "volatility": 0.10},
    "etfs": {"expected_return": 0.08, "volatility": 0.15},
    "investmentTrusts": {"expected_return": 0.06, "volatility": 0.12},
    "individualShares": {"expected_return": 0.10, "volatility": 0.25},
    "bonds": {"expected_return": 0.04, "volatility": 0.05},
    "pension": {"expected_return": 0.05, "volatility": 0.02},
    "inflation": {"rate": 0.02, "volatility": 0.005},
}
