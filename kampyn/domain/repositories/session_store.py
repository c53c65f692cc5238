"""
Session store interface

The backend owns authentication; the client only keeps the token it was given.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SessionStore(ABC):
    """Storage for the bearer token issued by the backend"""

    @abstractmethod
    def get(self) -> Optional[str]:
        """Current token, or None when logged out"""
        pass

    @abstractmethod
    def set(self, token: str) -> None:
        """Store a new token"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Forget the token"""
        pass
