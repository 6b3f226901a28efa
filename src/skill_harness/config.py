"""
Configuration management for the skill harness.

This module provides a Settings class that loads configuration from environment
variables, so the skill under test can be switched without code changes.
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Harness settings loaded from environment variables."""

    # Skill under test
    skill_id: str = ""  # required to build a simulator
    stage: str = "development"  # development, live
    locale: str = "en-US"
    profile: str = "default"  # ask cli credential profile

    # Simulator invocation
    simulator_command: str = "ask simulate"
    timeout: float = 120.0  # seconds, 0 disables
    quote_text: bool = True  # wrap --text in literal quotes

    # Fixtures
    fixtures_dir: Path = Path("tests/fixtures/suites")
    duplicate_policy: Literal["error", "replace"] = "error"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SKILL_HARNESS_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


def get_settings() -> Settings:
    """Get the harness settings instance."""
    return Settings()
