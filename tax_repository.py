"""
Country rule lookup with a per-repository cache.

The repository owns the cache, so nothing global is shared between
simulations unless the caller hands the same repository to each of them.
"""

import json
import logging
import os
import threading
from typing import Callable, Dict, Optional, Union

from tax_models import CountryTaxRules, rules_from_dict
from tax_presets import PRESET_RECORDS

logger = logging.getLogger(__name__)

RuleLoader = Callable[[str], Union[dict, CountryTaxRules, None]]


class TaxRuleRepository:
    def __init__(self, loader: RuleLoader):
        self._loader = loader
        self._cache: Dict[str, CountryTaxRules] = {}
        self._lock = threading.Lock()
        self._loading: Dict[str, threading.Lock] = {}

    @classmethod
    def from_presets(cls, records: Optional[Dict[str, dict]] = None) -> "TaxRuleRepository":
        records = PRESET_RECORDS if records is None else records
        return cls(records.get)

    @classmethod
    def from_directory(cls, path: str) -> "TaxRuleRepository":
        """One `<country>.json` file per country, e.g. taxRules/Germany.json."""
        def load(country: str) -> dict:
            with open(os.path.join(path, f"{country}.json"), "r", encoding="utf-8") as f:
                return json.load(f)
        return cls(load)

    def lookup(self, country: str) -> Optional[CountryTaxRules]:
        """Rules for `country`, or None when they cannot be loaded.

        Only successful loads are cached; a failed country is retried on the next lookup.
        Concurrent lookups of the same country share one load.
        """
        with self._lock:
            cached = self._cache.get(country)
            if cached is not None:
                return cached
            country_lock = self._loading.setdefault(country, threading.Lock())

        with country_lock:
            with self._lock:
                cached = self._cache.get(country)
            if cached is not None:
                return cached
            rules = self._load(country)
            if rules is not None:
                with self._lock:
                    self._cache[country] = rules
            return rules

    def _load(self, country: str) -> Optional[CountryTaxRules]:
        try:
            loaded = self._loader(country)
            if loaded is None:
                logger.warning("No tax rules available for %s", country)
                return None
            rules = loaded if isinstance(loaded, CountryTaxRules) else rules_from_dict(country, loaded)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Error loading tax rules for %s: %s", country, e)
            return None
        return rules

    def is_cached(self, country: str) -> bool:
        with self._lock:
            return country in self._cache
