"""Application configuration using pydantic-settings.

All environment variables should be accessed through the settings object
rather than using os.getenv() directly. This ensures:
1. Type validation at startup
2. Centralized configuration
3. Documentation of available settings
4. Proper defaults
"""

from decimal import Decimal
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    app_name: str = "Atlantic Front Desk"

    # Local persistent store - one SQLite file per install
    local_store_url: str = "sqlite:///./data/frontdesk_local.db"
    local_store_namespace: str = "atlantic_hotel"

    # ==========================================================================
    # Remote data service (PostgREST / Supabase REST endpoint)
    # ==========================================================================
    remote_url: Optional[str] = None
    remote_api_key: Optional[str] = None
    remote_timeout_seconds: float = 10.0

    # CORS - comma-separated origins or "*" for development only
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    # ==========================================================================
    # Receipts and billing
    # ==========================================================================
    serial_prefix: str = "AH"
    serial_start: int = 1000  # first issued serial is serial_start + 1
    bill_prefix: str = "REST"
    currency_name: str = "Naira"

    vat_rate: Decimal = Decimal("0.075")
    consumption_tax_rate: Decimal = Decimal("0.05")  # Lagos consumption tax
    vat_number: str = "VIVI4002500868"
    service_charge_rate: Decimal = Decimal("0.10")

    # ==========================================================================
    # Sync
    # ==========================================================================
    sync_poll_interval_seconds: float = 30.0
    connectivity_probe_enabled: bool = True

    # Server
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"
    rate_limit_enabled: bool = True

    # Local staff accounts
    bcrypt_rounds: int = 12

    @field_validator("vat_rate", "consumption_tax_rate", "service_charge_rate")
    @classmethod
    def validate_rate(cls, v: Decimal) -> Decimal:
        if v < 0 or v >= 1:
            raise ValueError(f"Rate must be between 0 and 1, got {v}")
        return v

    @model_validator(mode="after")
    def validate_remote_settings(self) -> "Settings":
        """Warn when the remote service is half configured."""
        import warnings

        if self.remote_url and not self.remote_api_key:
            warnings.warn(
                "REMOTE_URL is set without REMOTE_API_KEY; remote calls will be rejected.",
                UserWarning,
                stacklevel=2,
            )
        return self

    @property
    def remote_configured(self) -> bool:
        return bool(self.remote_url and self.remote_api_key)

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
