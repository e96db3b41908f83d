"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "vibescore-income"
    log_level: str = "INFO"

    # Earning power reference points (monthly, overridden by age bracket when resolvable)
    baseline_monthly_income: float = 6500.0
    strong_income_cap: float = 14500.0

    # Expense fallbacks when the profile omits them
    essential_expense_fallback_ratio: float = 0.65
    expense_fallback_ratio: float = 0.82

    # Resilience targets
    desired_savings_rate: float = 0.20
    ideal_emergency_months: float = 6.0

    # Diversity
    max_streams_considered: int = 6


settings = Settings()
