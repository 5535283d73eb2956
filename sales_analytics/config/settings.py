"""
Sales Analytics Core
Centralized Configuration Management

Pydantic settings with environment variable support, validation, and type safety.
"""

from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatasetSettings(BaseSettings):
    """Dataset and default filter configuration"""

    model_config = SettingsConfigDict(env_prefix="DATASET_")

    default_window_days: int = Field(default=30, ge=0, description="Default filter window in days, ending now")
    sample_path: Optional[str] = Field(default=None, description="CSV file loaded when the API starts")
    load_sample_on_startup: bool = Field(default=True, description="Load the canonical sample when no sample_path is set")


class ChartSettings(BaseSettings):
    """Chart series configuration"""

    model_config = SettingsConfigDict(env_prefix="CHART_")

    max_points: int = Field(default=1000, ge=1, description="Downsampling threshold for chart series")


class FetchSettings(BaseSettings):
    """Remote CSV source configuration"""

    model_config = SettingsConfigDict(env_prefix="FETCH_")

    timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP timeout for remote CSV sources")


class MonitoringSettings(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="sales-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    dataset: DatasetSettings = Field(default_factory=DatasetSettings)
    chart: ChartSettings = Field(default_factory=ChartSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
