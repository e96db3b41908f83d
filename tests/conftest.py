"""Pytest fixtures for testing"""

from datetime import date
from typing import Any, Dict, List

import pytest

from vibescore_income.domain.models import ScoreOptions
from vibescore_income.domain.scoring import resolve_options


@pytest.fixture
def options() -> ScoreOptions:
    """Engine options with configured defaults"""
    return resolve_options()


@pytest.fixture
def youth_supportive() -> Dict[str, Any]:
    """15-year-old with a part-time job, savings in the bank and steady habits"""
    return {
        "age": 15,
        "youthHasIncome": True,
        "youthPrimaryIncomeSource": "part-time-job",
        "youthIncomeFrequency": "biweekly",
        "youthTypicalMonthlyIncome": 420,
        "youthHeldPartTimeJob": True,
        "youthHasCheckingAccount": True,
        "youthHasSavingsAccount": True,
        "youthHasDebitCard": True,
        "youthBalanceCheckFrequency": "weekly",
        "youthHasCurrentSavings": True,
        "youthSavingsAmount": 650,
        "youthSavingsLocation": "bank",
        "youthSavingsContributionFrequency": "weekly",
        "youthHasSavingsGoal": True,
        "youthWeeklySpendingAmount": 40,
        "youthPaysRecurringExpenses": False,
        "youthRanOutOfMoney": False,
        "youthSpendingApproach": "plan-ahead",
        "youthTracksSpending": True,
        "youthHasEmergencyBuffer": True,
        "youthMoneyConfidence": "somewhat-confident",
    }


@pytest.fixture
def youth_stressed(youth_supportive: Dict[str, Any]) -> Dict[str, Any]:
    """Same questionnaire with low income, no accounts and a recent cash crunch"""
    profile = dict(youth_supportive)
    profile.update(
        {
            "youthTypicalMonthlyIncome": 120,
            "youthIncomeFrequency": "occasionally",
            "youthHeldPartTimeJob": False,
            "youthHasCheckingAccount": False,
            "youthHasSavingsAccount": False,
            "youthHasDebitCard": False,
            "youthBalanceCheckFrequency": "rarely",
            "youthHasCurrentSavings": False,
            "youthSavingsAmount": 0,
            "youthSavingsLocation": None,
            "youthSavingsContributionFrequency": "never",
            "youthHasSavingsGoal": False,
            "youthWeeklySpendingAmount": 30,
            "youthPaysRecurringExpenses": True,
            "youthRanOutOfMoney": True,
            "youthSpendingApproach": "as-needed",
            "youthTracksSpending": False,
            "youthHasEmergencyBuffer": False,
            "youthMoneyConfidence": "not-yet-confident",
        }
    )
    return profile


def _monthly_history(amounts: List[float], start_year: int = 2024) -> List[Dict[str, Any]]:
    """History entries one calendar month apart starting in January"""
    history = []
    for index, amount in enumerate(amounts):
        year = start_year + index // 12
        month = index % 12 + 1
        history.append({"month": date(year, month, 1).isoformat(), "amount": amount})
    return history


@pytest.fixture
def adult_profile() -> Dict[str, Any]:
    """Salaried 32-year-old with a bonus, some rental income and a year of history"""
    return {
        "age": 32,
        "primaryIncome": 5200,
        "bonusIncome": 600,
        "rentalIncome": 400,
        "averageMonthlyExpenses": 4300,
        "essentialExpenses": 2800,
        "savingsRate": 12,
        "emergencyFundMonths": 4,
        "debtToIncome": 0.22,
        "employmentType": "W2",
        "tenureMonths": 30,
        "industryRisk": "low",
        "bonusReliability": "medium",
        "payFrequency": "biweekly",
        "skillDemand": "strong",
        "industryHiringTrend": "steady",
        "regionCostIndex": 100,
        "incomeHistory": _monthly_history([5600, 5650, 5700, 5700, 5800, 5850, 5900, 6000, 6050, 6100, 6150, 6200]),
    }


@pytest.fixture
def monthly_history():
    """Factory building month-by-month history entries"""
    return _monthly_history
