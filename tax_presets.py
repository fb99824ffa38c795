"""
Simplified per-country tax records, in the same JSON layout a rules
directory would hold (one record per country).
Goal: realistic ballpark figures, not current law.
"""

def _de():
    # Stepwise approximation of the continuous German curve
    return {
        "incomeTaxes": [
            {"name": "Income Tax", "type": "bracket", "brackets": [
                {"from": 0, "to": 10000, "rate": 0.0},
                {"from": 10000, "to": 58000, "rate": 0.24},
                {"from": 58000, "to": 277000, "rate": 0.42},
                {"from": 277000, "to": None, "rate": 0.45},
            ]},
            {"name": "Solidarity Surcharge", "type": "flatRate", "rate": 0.055, "threshold": 62000},
        ],
        "capitalGainsTax": {
            "indexFunds": 0.26375, "etfs": 0.26375, "investmentTrusts": 0.26375,
            "individualShares": 0.26375, "bonds": 0.26375,
        },
        "pensionContribution": {"type": "fixedRate", "employeeRate": 0.093, "employerRate": 0.093},
    }

def _us():
    # Federal single filer; bounds as published, upper inclusive
    return {
        "incomeTaxes": [
            {"name": "Federal Income Tax", "type": "bracket", "brackets": [
                {"from": 0, "to": 11000, "rate": 0.10},
                {"from": 11001, "to": 44725, "rate": 0.12},
                {"from": 44726, "to": 95375, "rate": 0.22},
                {"from": 95376, "to": 182100, "rate": 0.24},
                {"from": 182101, "to": 231250, "rate": 0.32},
                {"from": 231251, "to": 578125, "rate": 0.35},
                {"from": 578126, "rate": 0.37},
            ]},
            {"name": "Medicare", "type": "flatRate", "rate": 0.0145, "threshold": 0},
        ],
        "capitalGainsTax": {
            "indexFunds": 0.15, "etfs": 0.15, "investmentTrusts": 0.15,
            "individualShares": 0.15, "bonds": 0.22,
        },
        "pensionContribution": {"type": "fixedRate", "employeeRate": 0.06, "employerRate": 0.03},
    }

def _ie():
    return {
        "incomeTaxes": [
            {"name": "Income Tax", "type": "bracket", "brackets": [
                {"from": 0, "to": 42000, "rate": 0.20},
                {"from": 42000, "to": None, "rate": 0.40},
            ]},
            {"name": "USC", "type": "bracket", "brackets": [
                {"from": 0, "to": 12012, "rate": 0.005},
                {"from": 12012, "to": 25760, "rate": 0.02},
                {"from": 25760, "to": 70044, "rate": 0.04},
                {"from": 70044, "to": None, "rate": 0.08},
            ]},
            {"name": "PRSI", "type": "flatRate", "rate": 0.041, "threshold": 18304},
        ],
        "capitalGainsTax": {
            "indexFunds": 0.41, "etfs": 0.41, "investmentTrusts": 0.33,
            "individualShares": 0.33, "bonds": 0.33,
        },
        "pensionContribution": {
            "type": "ageBasedPercentage",
            "rates": [
                {"maxAge": 29, "rate": 0.15},
                {"maxAge": 39, "rate": 0.20},
                {"maxAge": 49, "rate": 0.25},
                {"maxAge": 54, "rate": 0.30},
                {"maxAge": 59, "rate": 0.35},
                {"maxAge": None, "rate": 0.40},
            ],
            "annualCap": 46000,
        },
    }

def _es():
    return {
        "incomeTaxes": [
            {"name": "IRPF", "type": "bracket", "brackets": [
                {"from": 0, "to": 12450, "rate": 0.19},
                {"from": 12450, "to": 20200, "rate": 0.24},
                {"from": 20200, "to": 35200, "rate": 0.30},
                {"from": 35200, "to": 60000, "rate": 0.37},
                {"from": 60000, "to": 300000, "rate": 0.45},
                {"from": 300000, "to": None, "rate": 0.47},
            ]},
        ],
        # Impuesto sobre el Patrimonio with the general exemption folded into a 0% band
        "wealthTax": {"type": "bracket", "brackets": [
            {"from": 0, "to": 700000, "rate": 0.0},
            {"from": 700000, "to": 867000, "rate": 0.002},
            {"from": 867000, "to": 1034000, "rate": 0.003},
            {"from": 1034000, "to": 1701000, "rate": 0.005},
            {"from": 1701000, "to": 3034000, "rate": 0.009},
            {"from": 3034000, "to": 6068000, "rate": 0.013},
            {"from": 6068000, "to": 10700000, "rate": 0.017},
            {"from": 10700000, "to": None, "rate": 0.035},
        ]},
        "capitalGainsTax": {
            "indexFunds": 0.23, "etfs": 0.23, "investmentTrusts": 0.23,
            "individualShares": 0.23, "bonds": 0.21,
        },
        "pensionContribution": {"type": "fixedRate", "employeeRate": 0.0635, "employerRate": 0.236},
    }

def _no():
    return {
        "incomeTaxes": [
            {"name": "Tax on General Income", "type": "flatRate", "rate": 0.22, "threshold": 0},
            {"name": "Bracket Tax", "type": "bracket", "brackets": [
                {"from": 0, "to": 208050, "rate": 0.0},
                {"from": 208050, "to": 292850, "rate": 0.017},
                {"from": 292850, "to": 670000, "rate": 0.04},
                {"from": 670000, "to": 937900, "rate": 0.136},
                {"from": 937900, "to": 1350000, "rate": 0.166},
                {"from": 1350000, "to": None, "rate": 0.176},
            ]},
        ],
        "wealthTax": {"type": "flatRate", "rate": 0.01, "threshold": 1700000},
        "capitalGainsTax": {
            "indexFunds": 0.3784, "etfs": 0.3784, "investmentTrusts": 0.3784,
            "individualShares": 0.3784, "bonds": 0.22,
        },
        "pensionContribution": {"type": "fixedRate", "employeeRate": 0.0, "employerRate": 0.02},
    }

def _uk():
    return {
        "incomeTaxes": [
            {"name": "Income Tax", "type": "bracket", "brackets": [
                {"from": 0, "to": 12570, "rate": 0.0},
                {"from": 12570, "to": 50270, "rate": 0.20},
                {"from": 50270, "to": 125140, "rate": 0.40},
                {"from": 125140, "to": None, "rate": 0.45},
            ]},
            {"name": "National Insurance", "type": "flatRate", "rate": 0.08, "threshold": 12570},
        ],
        "capitalGainsTax": {
            "indexFunds": 0.20, "etfs": 0.20, "investmentTrusts": 0.20,
            "individualShares": 0.20, "bonds": 0.0,
        },
        "pensionContribution": {"type": "fixedRate", "employeeRate": 0.05, "employerRate": 0.03},
    }

PRESET_RECORDS = {
    "Germany": _de(),
    "USA": _us(),
    "Ireland": _ie(),
    "Spain": _es(),
    "Norway": _no(),
    "United Kingdom": _uk(),
}
