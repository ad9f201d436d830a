"""
Configuration settings using Pydantic BaseSettings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = "Vibration Test Planner"
    app_version: str = "1.0.0"
    debug: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite:///./vibration_wizard.db"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000"
    ]

    # File Upload
    max_upload_size: int = 10 * 1024 * 1024  # 10MB

    # Equivalency
    fatigue_exponent: float = 7.5
    energy_cap_gamma: float = 2.0
    combine_grid_points: int = 64

    # Octave view
    octave_fraction: int = 3
    octave_tolerance: float = 0.05

    # Reliability
    sample_size_cap: int = 100_000

    # Thermal
    thermal_min_cycles: int = 3
    thermal_min_segment_min: float = 1.0

    # Export
    ack_min_reason_length: int = 5


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
