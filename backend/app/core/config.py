"""
Configuration settings for the Party Ledger Backend.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Party Ledger Backend"
    api_version: str = "v1"
    debug: bool = True
    log_level: str = "INFO"
    log_format: str = "console"  # console | json

    # Ledger Configuration
    currency_decimal_places: int = 2
    commission_account_name: str = "Commission"
    settlement_remarks: str = "Settlement carry-forward"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
