"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_config_dir() -> Path:
    """Find the config directory by walking up from the package location.

    Falls back to relative Path("config") if not found.
    """
    # Project root is 4 levels up: config.py -> core/ -> rowfold/ -> src/ -> root/
    package_dir = Path(__file__).resolve().parent.parent.parent.parent
    candidate = package_dir / "config"
    if candidate.is_dir():
        return candidate

    # Fallback: relative path (works when CWD is project root)
    return Path("config")


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: ROWFOLD_
    """

    model_config = SettingsConfigDict(
        env_prefix="ROWFOLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Configuration paths
    config_path: Path = Field(
        default_factory=_find_config_dir,
        description="Directory holding window configuration YAML files",
    )

    # Reduction
    concat_delimiter: str = Field(
        default=",",
        description="Delimiter used by the CONCAT column reduction",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")  # 'json' or 'console'


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
