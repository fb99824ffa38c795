import unittest

from market import INFLATION, MarketModel, MarketParameters, parameters_from_presets
from returns_presets import PRESETS


class FixedDraw:
    """Stands in for numpy's Generator: every uniform draw returns `value`."""

    def __init__(self, value):
        self.value = value

    def uniform(self, low, high):
        return self.value


class TestMarketModel(unittest.TestCase):
    def test_shock_scaled_by_volatility(self):
        market = MarketModel({"indexFunds": MarketParameters(0.07, 0.10)}, rng=FixedDraw(0.5))
        self.assertAlmostEqual(market.sample_return("indexFunds"), 0.12)

    def test_zero_volatility_is_deterministic(self):
        market = MarketModel({"bonds": MarketParameters(0.04, 0.0)}, seed=3)
        self.assertEqual({market.sample_return("bonds") for _ in range(20)}, {0.04})

    def test_draws_stay_within_band(self):
        market = MarketModel(parameters_from_presets(), seed=11)
        for _ in range(500):
            r = market.sample_return("individualShares")
            self.assertGreaterEqual(r, 0.10 - 0.25)
            self.assertLessEqual(r, 0.10 + 0.25)

    def test_same_seed_same_draws(self):
        a = MarketModel(parameters_from_presets(), seed=7)
        b = MarketModel(parameters_from_presets(), seed=7)
        self.assertEqual([a.sample_return("etfs") for _ in range(10)],
                         [b.sample_return("etfs") for _ in range(10)])

    def test_unknown_class(self):
        market = MarketModel(parameters_from_presets(), seed=1)
        self.assertFalse(market.knows("crypto"))
        with self.assertRaises(KeyError):
            market.sample_return("crypto")

    def test_adjust_for_inflation(self):
        market = MarketModel({INFLATION: MarketParameters(0.02, 0.0)})
        self.assertAlmostEqual(market.adjust_for_inflation(42_000), 42_840)

    def test_presets_accept_rate_key(self):
        params = parameters_from_presets(PRESETS)
        self.assertEqual(params[INFLATION], MarketParameters(0.02, 0.005))
        self.assertEqual(params["pension"], MarketParameters(0.05, 0.02))


if __name__ == "__main__":
    unittest.main()
