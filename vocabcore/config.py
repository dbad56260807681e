"""
Centralized configuration management for vocabcore.
"""
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_EASE_FACTOR,
    DEFAULT_KNOW_QUALITY,
    DEFAULT_STILL_LEARNING_QUALITY,
    MAX_QUALITY,
    MIN_QUALITY,
    MINIMUM_EASE_FACTOR,
)
from .scheduler import SM2SchedulerConfig


class Settings(BaseSettings):
    """
    Defines application settings, loaded from environment variables or .env files.
    """

    model_config = SettingsConfigDict(
        env_prefix="VOCABCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Scheduler ---
    # Overridable via VOCABCORE_DEFAULT_EASE_FACTOR / VOCABCORE_MINIMUM_EASE_FACTOR.
    default_ease_factor: float = Field(
        default=DEFAULT_EASE_FACTOR, ge=MINIMUM_EASE_FACTOR
    )
    minimum_ease_factor: float = Field(
        default=MINIMUM_EASE_FACTOR, ge=MINIMUM_EASE_FACTOR
    )

    # --- Session ---
    # Qualities fed to the scheduler when a judgment carries no explicit rating.
    know_quality: int = Field(
        default=DEFAULT_KNOW_QUALITY, ge=MIN_QUALITY, le=MAX_QUALITY
    )
    still_learning_quality: int = Field(
        default=DEFAULT_STILL_LEARNING_QUALITY, ge=MIN_QUALITY, le=MAX_QUALITY
    )
    # Decks smaller than this are re-provisioned before a session starts.
    expected_deck_size: Optional[int] = Field(default=None, ge=1)

    # --- Logging ---
    log_level: str = "WARNING"

    @model_validator(mode="after")
    def check_default_above_minimum(self) -> "Settings":
        if self.default_ease_factor < self.minimum_ease_factor:
            raise ValueError(
                f"default_ease_factor ({self.default_ease_factor}) must not be "
                f"below minimum_ease_factor ({self.minimum_ease_factor})."
            )
        return self

    def scheduler_config(self) -> SM2SchedulerConfig:
        """Builds the scheduler configuration from these settings."""
        return SM2SchedulerConfig(minimum_ease_factor=self.minimum_ease_factor)


def get_settings() -> Settings:
    """Loads settings from the current environment."""
    return Settings()
