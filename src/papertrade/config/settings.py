"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".papertrade"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAPERTRADE_",
    )

    app_name: str = "Paper Trading Simulator"
    app_version: str = "0.1.0"

    # Data directory (SQLite database lives here unless database_url is set)
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Trading
    starting_cash_balance: Decimal = Field(default=Decimal("100000.00"), ge=0)

    # Price oracle
    quote_provider: Literal["stub", "yahoo"] = "stub"
    quote_timeout_seconds: float = Field(default=10.0, gt=0)
    quote_fetch_workers: int = Field(default=8, ge=1)
    quote_fanout_workers: int = Field(default=8, ge=1)

    # Transaction log append policy
    log_append_retries: int = Field(default=3, ge=1)
    log_append_backoff_seconds: float = Field(default=0.05, ge=0)

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "papertrade.db"
        return f"sqlite:///{db_path}"


# Global settings instance, loaded on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
