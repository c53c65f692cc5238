"""
Configuration management for the KAMPYN ordering client
"""

import logging
import threading

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kampyn.infrastructure.utilities.constants import (
    BusinessSettings,
    ConfigValidation,
    FileSettings,
    SyncSettings,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Backend configuration
    backend_url: str = Field(default="", description="Base URL of the KAMPYN backend API")
    http_timeout_seconds: float = Field(
        default=10.0, description="Timeout applied to every backend request", gt=0
    )

    # Payment provider
    razorpay_key_id: str = Field(
        default="", description="Fallback Razorpay key id when the backend key lookup is skipped"
    )
    currency: str = Field(default=BusinessSettings.DEFAULT_CURRENCY, description="Currency code")

    # Charges used when the university charges lookup fails
    default_packing_charge: float = Field(
        default=BusinessSettings.DEFAULT_PACKING_CHARGE, description="Packing charge per produce item"
    )
    default_delivery_charge: float = Field(
        default=BusinessSettings.DEFAULT_DELIVERY_CHARGE, description="Flat delivery charge"
    )

    # Polling intervals
    active_orders_refresh_seconds: float = Field(
        default=SyncSettings.ACTIVE_ORDERS_REFRESH_SECONDS,
        description="Refresh interval for active and delivery order lists",
    )
    past_orders_refresh_seconds: float = Field(
        default=SyncSettings.PAST_ORDERS_REFRESH_SECONDS,
        description="Refresh interval for past orders",
    )
    rate_limit_refresh_seconds: float = Field(
        default=SyncSettings.RATE_LIMIT_REFRESH_SECONDS,
        description="Refresh interval for the blocked IP list",
    )

    # Session persistence
    session_file: str = Field(
        default=FileSettings.DEFAULT_SESSION_FILE, description="Where the auth token is kept"
    )

    # Application settings
    app_name: str = Field(default="KAMPYN", description="Application name")
    log_level: str = Field(default="INFO", description="Logging level")
    environment: str = Field(default="development", description="Application environment")


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None


class ConfigValidator:
    """Validates configuration before the client talks to the backend"""

    def __init__(self, config: Settings | None = None):
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.config: Settings | None = config

    def validate_all(self) -> bool:
        """Run all validation checks and collect results"""
        if self.config is None:
            try:
                self.config = get_config()
            except (ValueError, TypeError) as exc:
                self.errors.append(f"Failed to load configuration: {exc}")
                return False

        self._validate_backend_configuration()
        self._validate_payment_configuration()
        self._validate_business_rules()
        self._validate_polling_intervals()
        self._validate_environment_settings()

        self._log_validation_results()
        return not self.errors

    def get_validation_report(self) -> dict[str, object]:
        """Return detailed report after running `validate_all()`."""
        return {
            "valid": not self.errors,
            "errors": self.errors,
            "warnings": self.warnings,
            "config_summary": {
                "environment": self.config.environment if self.config else None,
                "backend_configured": bool(self.config and self.config.backend_url),
                "razorpay_key_configured": bool(self.config and self.config.razorpay_key_id),
            },
        }

    def _validate_backend_configuration(self):
        if not self.config.backend_url:
            self.errors.append("BACKEND_URL not set - API calls will fail")
        elif not self.config.backend_url.startswith(ConfigValidation.URL_SCHEMES):
            self.errors.append(f"BACKEND_URL must be an http(s) URL: {self.config.backend_url}")

    def _validate_payment_configuration(self):
        if not self.config.razorpay_key_id:
            self.warnings.append("RAZORPAY_KEY_ID not set - relying on the backend key endpoint")
        if self.config.currency not in ConfigValidation.VALID_CURRENCIES:
            self.warnings.append(f"Unusual currency: {self.config.currency}")

    def _validate_business_rules(self):
        if self.config.default_packing_charge < 0:
            self.errors.append("Packing charge cannot be negative")
        if self.config.default_delivery_charge < 0:
            self.errors.append("Delivery charge cannot be negative")

    def _validate_polling_intervals(self):
        intervals = {
            "ACTIVE_ORDERS_REFRESH_SECONDS": self.config.active_orders_refresh_seconds,
            "PAST_ORDERS_REFRESH_SECONDS": self.config.past_orders_refresh_seconds,
            "RATE_LIMIT_REFRESH_SECONDS": self.config.rate_limit_refresh_seconds,
        }
        for name, value in intervals.items():
            if value <= 0:
                self.errors.append(f"{name} must be positive")

    def _validate_environment_settings(self):
        if self.config.environment not in ConfigValidation.VALID_ENVIRONMENTS:
            self.warnings.append(f"Unknown environment: {self.config.environment}")
        if self.config.environment == "production":
            if self.config.log_level.upper() == "DEBUG":
                self.warnings.append("DEBUG logging in production may impact performance")

    def _log_validation_results(self):
        if self.errors:
            logger.error("Configuration validation failed", extra={"errors": self.errors, "warnings": self.warnings})
        elif self.warnings:
            logger.warning("Configuration validation passed with warnings", extra={"warnings": self.warnings})
        else:
            logger.info("Configuration validation passed successfully")
