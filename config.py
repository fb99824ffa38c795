import logging

APP_NAME = "WealthPath: Cross-Border Net Worth Planner"

# Share of the pension pot paid out each year once retired
PENSION_WITHDRAWAL_RATE = 0.04

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Default profile for the front end (nominal euros)
DEFAULTS = {
    "birth_year": 1985,
    "initial_wealth": 1_200_000,
    "initial_pension_pot": 100_000,
    "initial_investments": {
        "indexFunds": 50_000,
        "individualShares": 30_000,
    },
    "country": "Germany",
    "target_year": 2050,

    # First life event (start year)
    "income": 80_000,
    "expenses": 42_000,

    # Later events
    "move_to": "USA",
    "move_year": 2030,
    "retire_year": 2045,

    # Drawdown
    "withdrawal_rate": PENSION_WITHDRAWAL_RATE,
    "deplete_pension_pot": False,

    # Sims
    "num_paths": 200,
    "seed": 123,

    "log_level": "INFO",
}

def configure_logging(level=None):
    """Attach one stream handler to the root logger (idempotent)."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level or DEFAULTS["log_level"])
