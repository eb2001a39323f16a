import pytest


@pytest.fixture
def pension_raw():
    """Two years to retirement, zero growth/inflation so every figure is exact."""
    return {
        "currentAge": 60,
        "retirementAge": 62,
        "horizonEndAge": 65,
        "currentSalary": 100_000,
        "currentPot": 100_000,
        "personalPct": 0.10,
        "employerPct": 0.05,
        "growthRate": 0.0,
        "inflationRate": 0.0,
        "wageGrowthRate": 0.0,
        "targetIncomeToday": 20_000,
        "currentYear": 2026,
        "minDrawdownMode": False,
    }


@pytest.fixture
def typical_pension_raw():
    return {
        "currentAge": 40,
        "retirementAge": 65,
        "currentSalary": 80_000,
        "currentPot": 150_000,
        "personalPct": 0.08,
        "employerPct": 0.06,
        "growthRate": 0.05,
        "targetIncomePctOfSalary": 0.5,
        "currentYear": 2026,
    }


@pytest.fixture
def loan_raw():
    return {
        "loanKind": "mortgage",
        "currentBalance": 100_000,
        "annualInterestRate": 0.06,
        "startDateIso": "2026-01-01",
        "remainingTermYears": 30,
        "repaymentType": "repayment",
    }
