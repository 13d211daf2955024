from decimal import Decimal
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field("sqlite+aiosqlite:///./school_fees.db", alias="DATABASE_URL")

    app_title: str = Field("School Fee Engine", alias="APP_TITLE")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")

    # Seed values for the late fee rule until an admin saves one
    default_due_day_of_month: int = Field(15, alias="DEFAULT_DUE_DAY_OF_MONTH")
    default_late_fee_rule_type: str = Field("Fixed", alias="DEFAULT_LATE_FEE_RULE_TYPE")
    default_late_fee_value: Decimal = Field(Decimal("100"), alias="DEFAULT_LATE_FEE_VALUE")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
