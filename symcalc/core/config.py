"""
Engine configuration.

Centralized configuration management with environment variables
(prefix ``SYMCALC_``) and an optional ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings"""

    model_config = SettingsConfigDict(
        env_prefix="SYMCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Numeric evaluation
    DEFAULT_PRECISION: int = Field(default=1024, ge=1)  # bits

    # Evolutionary integrator
    POPULATION_SIZE: int = Field(default=1000, ge=1)
    MUTATION_RATE: float = Field(default=1 / 3, gt=0, le=1)
    MAX_MUTATIONS: int = Field(default=3, ge=1)
    MAX_GENERATIONS: Optional[int] = Field(default=10000, ge=1)
    RANDOM_SEED: Optional[int] = None

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "text"  # json or text
    LOG_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
