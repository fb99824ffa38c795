import json
import math
import os
import tempfile
import threading
import unittest

from tax_models import (
    AgeBandedPension,
    BracketTax,
    FixedRatePension,
    FlatRateTax,
    UnknownPensionRule,
    brackets_to_df,
    rules_from_dict,
)
from tax_presets import PRESET_RECORDS
from tax_repository import TaxRuleRepository


class TestRulesFromDict(unittest.TestCase):
    def test_germany_components(self):
        rules = rules_from_dict("Germany", PRESET_RECORDS["Germany"])
        self.assertEqual(rules.country, "Germany")
        self.assertIsInstance(rules.income_taxes[0], BracketTax)
        self.assertIsInstance(rules.income_taxes[1], FlatRateTax)
        self.assertIsNone(rules.wealth_tax)
        self.assertIsInstance(rules.pension, FixedRatePension)

    def test_missing_upper_bound_is_unbounded(self):
        rules = rules_from_dict("USA", PRESET_RECORDS["USA"])
        top = rules.income_taxes[0].brackets[-1]
        self.assertIsNone(top.upper)
        self.assertEqual(top.lower, 578126)

    def test_age_banded_pension(self):
        rules = rules_from_dict("Ireland", PRESET_RECORDS["Ireland"])
        self.assertIsInstance(rules.pension, AgeBandedPension)
        self.assertIsNone(rules.pension.bands[-1].max_age)
        self.assertEqual(rules.pension.annual_cap, 46000)

    def test_age_banded_without_cap(self):
        rules = rules_from_dict("X", {"pensionContribution": {
            "type": "ageBasedPercentage", "rates": [{"maxAge": None, "rate": 0.1}]}})
        self.assertEqual(rules.pension.annual_cap, math.inf)

    def test_personal_assets_tax_wins(self):
        record = {
            "wealthTax": {"type": "flatRate", "rate": 0.01, "threshold": 0},
            "personalAssetsTax": {"type": "flatRate", "rate": 0.02, "threshold": 100},
        }
        rules = rules_from_dict("X", record)
        self.assertEqual(rules.wealth_tax.rate, 0.02)

    def test_missing_sections_default_to_nothing(self):
        rules = rules_from_dict("Empty", {})
        self.assertEqual(rules.income_taxes, [])
        self.assertIsNone(rules.wealth_tax)
        self.assertIsNone(rules.pension)
        self.assertEqual(rules.capital_gains_rate("indexFunds"), 0.0)

    def test_unknown_income_component_is_malformed(self):
        with self.assertRaises(ValueError):
            rules_from_dict("X", {"incomeTaxes": [{"name": "Odd", "type": "lottery"}]})

    def test_non_object_records_are_malformed(self):
        for record in ([1, 2, 3], {"incomeTaxes": ["oops"]}, {"wealthTax": "high"},
                       {"capitalGainsTax": [0.2]}, {"pensionContribution": {"type": "ageBasedPercentage", "rates": [5]}}):
            with self.subTest(record=record):
                with self.assertRaises(ValueError):
                    rules_from_dict("X", record)

    def test_unknown_pension_type_is_kept_as_unknown(self):
        rules = rules_from_dict("X", {"pensionContribution": {"type": "lumpSum"}})
        self.assertEqual(rules.pension, UnknownPensionRule("lumpSum"))

    def test_brackets_to_df(self):
        rules = rules_from_dict("Germany", PRESET_RECORDS["Germany"])
        df = brackets_to_df(rules.income_taxes[0])
        self.assertEqual(list(df.columns), ["from", "to", "rate_percent"])
        self.assertEqual(len(df), 4)
        self.assertAlmostEqual(df["rate_percent"].iloc[1], 24.0)
        flat = brackets_to_df(rules.income_taxes[1])
        self.assertEqual(flat["from"].iloc[0], 62000)


class TestTaxRuleRepository(unittest.TestCase):
    def test_presets_lookup(self):
        repo = TaxRuleRepository.from_presets()
        for country in PRESET_RECORDS:
            self.assertEqual(repo.lookup(country).country, country)

    def test_unknown_country_is_not_found(self):
        repo = TaxRuleRepository.from_presets()
        with self.assertLogs("tax_repository", level="WARNING"):
            self.assertIsNone(repo.lookup("Atlantis"))
        self.assertFalse(repo.is_cached("Atlantis"))

    def test_successful_lookups_are_cached(self):
        calls = []

        def loader(country):
            calls.append(country)
            return PRESET_RECORDS[country]

        repo = TaxRuleRepository(loader)
        first = repo.lookup("Germany")
        second = repo.lookup("Germany")
        self.assertIs(first, second)
        self.assertEqual(calls, ["Germany"])
        self.assertTrue(repo.is_cached("Germany"))

    def test_failures_are_retried(self):
        answers = [None, PRESET_RECORDS["Spain"]]
        repo = TaxRuleRepository(lambda country: answers.pop(0))
        with self.assertLogs("tax_repository", level="WARNING"):
            self.assertIsNone(repo.lookup("Spain"))
        self.assertEqual(repo.lookup("Spain").country, "Spain")

    def test_loader_errors_are_soft(self):
        def broken(country):
            raise OSError("network down")

        repo = TaxRuleRepository(broken)
        with self.assertLogs("tax_repository", level="WARNING") as logs:
            self.assertIsNone(repo.lookup("Germany"))
        self.assertIn("network down", logs.output[0])

    def test_malformed_record_is_not_found(self):
        repo = TaxRuleRepository.from_presets({"Odd": {"incomeTaxes": [{"type": "lottery"}]}})
        with self.assertLogs("tax_repository", level="WARNING"):
            self.assertIsNone(repo.lookup("Odd"))

    def test_from_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, "Germany.json"), "w", encoding="utf-8") as f:
                json.dump(PRESET_RECORDS["Germany"], f)
            repo = TaxRuleRepository.from_directory(tmp)
            rules = repo.lookup("Germany")
            self.assertEqual(len(rules.income_taxes), 2)
            with self.assertLogs("tax_repository", level="WARNING"):
                self.assertIsNone(repo.lookup("Atlantis"))

    def test_loader_may_return_rules_directly(self):
        rules = rules_from_dict("Norway", PRESET_RECORDS["Norway"])
        repo = TaxRuleRepository(lambda country: rules)
        self.assertIs(repo.lookup("Norway"), rules)

    def test_non_object_income_tax_is_not_found(self):
        repo = TaxRuleRepository.from_presets({"X": {"incomeTaxes": ["oops"]}})
        with self.assertLogs("tax_repository", level="WARNING") as logs:
            self.assertIsNone(repo.lookup("X"))
        self.assertIn("must be an object", logs.output[0])
        self.assertFalse(repo.is_cached("X"))

    def test_from_directory_with_list_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, "Germany.json"), "w", encoding="utf-8") as f:
                json.dump(PRESET_RECORDS["Germany"], f)
            with open(os.path.join(tmp, "USA.json"), "w", encoding="utf-8") as f:
                json.dump([1, 2, 3], f)
            repo = TaxRuleRepository.from_directory(tmp)
            with self.assertLogs("tax_repository", level="WARNING"):
                self.assertIsNone(repo.lookup("USA"))
            self.assertEqual(repo.lookup("Germany").country, "Germany")

    def test_concurrent_lookups_load_once(self):
        calls = []
        started = threading.Event()
        release = threading.Event()

        def slow_loader(country):
            calls.append(country)
            started.set()
            release.wait(5)
            return PRESET_RECORDS[country]

        repo = TaxRuleRepository(slow_loader)
        found = []
        threads = [threading.Thread(target=lambda: found.append(repo.lookup("Spain"))) for _ in range(2)]
        threads[0].start()
        self.assertTrue(started.wait(5))
        threads[1].start()
        release.set()
        for t in threads:
            t.join(5)
        self.assertEqual(calls, ["Spain"])
        self.assertEqual(len(found), 2)
        self.assertIs(found[0], found[1])

    def test_other_countries_load_while_one_is_slow(self):
        release = threading.Event()

        def loader(country):
            if country == "Spain":
                release.wait(5)
            return PRESET_RECORDS[country]

        repo = TaxRuleRepository(loader)
        slow = threading.Thread(target=repo.lookup, args=("Spain",))
        slow.start()
        try:
            self.assertEqual(repo.lookup("Norway").country, "Norway")
        finally:
            release.set()
            slow.join(5)
        self.assertTrue(repo.is_cached("Spain"))


if __name__ == "__main__":
    unittest.main()
