"""
Application constants for the KAMPYN ordering client

Centralizes magic numbers and hard-coded values shared across layers.
"""

from typing import Final


# Order list polling
class SyncSettings:
    """Refresh intervals and paging for order list views"""

    ACTIVE_ORDERS_REFRESH_SECONDS: Final[int] = 30
    PAST_ORDERS_REFRESH_SECONDS: Final[int] = 60
    RATE_LIMIT_REFRESH_SECONDS: Final[int] = 300
    PAGE_SIZE: Final[int] = 5


# Logging configuration constants
class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10
    SLOW_REQUEST_THRESHOLD_SECONDS: Final[float] = 2.0


# Validation constants
class ValidationSettings:
    """Input validation limits and constraints"""

    MIN_COLLECTOR_NAME_LENGTH: Final[int] = 2
    MAX_COLLECTOR_NAME_LENGTH: Final[int] = 100
    OTP_LENGTH: Final[int] = 6
    MIN_PASSWORD_LENGTH: Final[int] = 8
    PASSWORD_SPECIAL_CHARACTERS: Final[str] = "@$!%*?&"


# Business logic constants
class BusinessSettings:
    """Business rules and default values"""

    DEFAULT_PACKING_CHARGE: Final[float] = 5.00
    DEFAULT_DELIVERY_CHARGE: Final[float] = 50.00
    DEFAULT_UNIVERSITY_NAME: Final[str] = "University"
    DEFAULT_CURRENCY: Final[str] = "INR"


# Payment widget constants
class PaymentSettings:
    """Checkout widget presentation and retry settings"""

    MERCHANT_NAME: Final[str] = "KAMPYN"
    DESCRIPTION: Final[str] = "Complete your payment"
    PREFILL_EMAIL: Final[str] = "customer@kiitbites.com"
    THEME_COLOR: Final[str] = "#01796f"
    NOTES_ADDRESS: Final[str] = "KAMPYN Food Order"
    WIDGET_RETRY_ENABLED: Final[bool] = True
    WIDGET_RETRY_MAX_COUNT: Final[int] = 3


# Error codes and messages
class ErrorCodes:
    """Standardized error codes and messages"""

    GENERAL_ERROR: Final[str] = "GENERAL_ERROR"
    NETWORK_ERROR: Final[str] = "NETWORK_ERROR"
    VALIDATION_ERROR: Final[str] = "VALIDATION_ERROR"
    BACKEND_ERROR: Final[str] = "BACKEND_ERROR"
    AUTHENTICATION_ERROR: Final[str] = "AUTHENTICATION_ERROR"
    PAYMENT_ERROR: Final[str] = "PAYMENT_ERROR"

    # User-friendly messages
    GENERIC_ERROR_MESSAGE: Final[str] = "An error occurred. Please try again."
    NETWORK_ERROR_MESSAGE: Final[
        str
    ] = "Network error. Please check your connection and try again."
    PAYMENT_FAILED_MESSAGE: Final[str] = "Payment failed. Please try again."


# File and directory constants
class FileSettings:
    """File paths and directory settings"""

    LOGS_DIRECTORY: Final[str] = "logs"
    DEFAULT_SESSION_FILE: Final[str] = "data/session.json"

    # Log file names
    MAIN_LOG_FILE: Final[str] = "kampyn.json.log"
    ERROR_LOG_FILE: Final[str] = "errors.log"


# Configuration validation
class ConfigValidation:
    """Allowed values checked by the configuration validator"""

    VALID_ENVIRONMENTS: Final[list] = ["development", "test", "staging", "production"]
    VALID_CURRENCIES: Final[list] = ["INR"]
    URL_SCHEMES: Final[tuple] = ("http://", "https://")
