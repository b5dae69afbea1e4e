"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./zero_budget.db"

    # Snapshot row holding the persisted budget document
    storage_key: str = "zeroBudget_MVP_v1"

    # Service
    service_name: str = "zero-budget"
    log_level: str = "INFO"

    # Appended to a template name when a month opens
    recurring_description_suffix: str = "(Recurring)"


settings = Settings()
