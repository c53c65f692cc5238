"""
Custom exceptions for the KAMPYN ordering client
"""

import logging
import traceback
from typing import Any, Optional

from kampyn.infrastructure.utilities.constants import ErrorCodes

logger = logging.getLogger(__name__)


class KampynError(Exception):
    """Base exception for the KAMPYN client"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or ErrorCodes.GENERIC_ERROR_MESSAGE
        self.error_code = error_code or ErrorCodes.GENERAL_ERROR


class NetworkError(KampynError):
    """Connectivity failures and non-2xx responses without a backend message"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            message, ErrorCodes.NETWORK_ERROR_MESSAGE, ErrorCodes.NETWORK_ERROR
        )
        self.status_code = status_code


class ValidationError(KampynError):
    """Input validation errors, raised before any request is sent"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, ErrorCodes.VALIDATION_ERROR  # Validation errors are user-friendly
        )
        self.field = field


class BackendError(KampynError):
    """Business error reported by the backend as ``{success: false, message}``"""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: dict = None):
        # The backend's message is shown to the user verbatim
        super().__init__(message, message, ErrorCodes.BACKEND_ERROR)
        self.status_code = status_code
        self.payload = payload or {}


class AuthenticationError(BackendError):
    """Session expired or credentials rejected"""

    def __init__(self, message: str = "Session expired. Please log in again.", status_code: int = 401):
        super().__init__(message, status_code)
        self.error_code = ErrorCodes.AUTHENTICATION_ERROR


class UnverifiedAccountError(AuthenticationError):
    """Login attempted on an account that still needs OTP verification"""

    def __init__(self, redirect_to: str):
        super().__init__("Account not verified. OTP sent to email.", 400)
        self.redirect_to = redirect_to


class PaymentError(KampynError):
    """Payment flow failure; no charge retry is attempted"""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(
            message,
            user_message or ErrorCodes.PAYMENT_FAILED_MESSAGE,
            ErrorCodes.PAYMENT_ERROR,
        )


class AmountMismatchError(PaymentError):
    """Provider order amount differs from the client-computed total"""

    def __init__(self, expected_minor_units: int, provider_minor_units: Any):
        super().__init__(
            f"Provider order amount {provider_minor_units} does not match "
            f"computed amount {expected_minor_units}",
            "The order total changed. Please review your cart and try again.",
        )
        self.expected_minor_units = expected_minor_units
        self.provider_minor_units = provider_minor_units


class PaymentVerificationError(PaymentError):
    """Backend rejected the signed payment response"""

    def __init__(self, reason: str = None):
        super().__init__(
            f"Payment verification failed: {reason}",
            reason or "Payment verification failed",
        )


class CheckoutInProgressError(PaymentError):
    """A checkout attempt is already running"""

    def __init__(self, state: str):
        super().__init__(
            f"Checkout already in progress (state={state})",
            "A payment is already in progress.",
        )
        self.state = state


class OrderNotFoundError(KampynError):
    """Order not present in the local view"""

    def __init__(self, order_id: str):
        super().__init__(
            f"Order not found: {order_id}", f"Order {order_id} not found."
        )
        self.order_id = order_id


class ErrorReporter:
    """Error reporting helpers"""

    @staticmethod
    def report_critical_error(error: Exception):
        """Report unexpected errors with their traceback"""
        logger.critical(
            "CRITICAL ERROR: %s",
            error,
            extra={
                "error_type": type(error).__name__,
                "traceback": traceback.format_exc(),
            },
        )

    @staticmethod
    def report_user_error(error: KampynError, operation: str):
        """Report errors that were converted to user notifications"""
        logger.info(
            "User-facing error: %s - %s",
            error.error_code,
            error,
            extra={
                "error_code": error.error_code,
                "operation": operation,
                "error_type": type(error).__name__,
            },
        )


def validate_and_raise(condition: bool, error_class: type, *args, **kwargs):
    """Helper function to validate condition and raise specific error"""
    if not condition:
        raise error_class(*args, **kwargs)
