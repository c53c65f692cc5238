"""
Account repository interface

Defines the contract for the account endpoints owned by the backend.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..entities.vendor_entity import College


class AccountRepository(ABC):
    """Repository interface for account lifecycle operations"""

    @abstractmethod
    async def login(self, identifier: str, password: str) -> Dict[str, Any]:
        """Log in; the result carries the session token"""
        pass

    @abstractmethod
    async def signup(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Register a new account"""
        pass

    @abstractmethod
    async def verify_otp(self, email: str, otp: str) -> Dict[str, Any]:
        """Confirm an emailed one-time password"""
        pass

    @abstractmethod
    async def refresh(self) -> Dict[str, Any]:
        """Exchange the current token for a fresh one"""
        pass

    @abstractmethod
    async def forgot_password(self, identifier: str) -> Dict[str, Any]:
        """Request a password reset OTP"""
        pass

    @abstractmethod
    async def reset_password(self, email: str, password: str) -> Dict[str, Any]:
        """Set a new password after OTP verification"""
        pass

    @abstractmethod
    async def get_current_user(self) -> Dict[str, Any]:
        """Get the user behind the current token"""
        pass

    @abstractmethod
    async def list_colleges(self) -> List[College]:
        """Get the college directory"""
        pass
