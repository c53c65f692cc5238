"""
Phone Number value object

Represents a validated collector phone number.
"""

import re
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class PhoneNumber:
    """
    Phone number value object with Indian mobile number validation
    """

    value: str

    INDIAN_MOBILE_PATTERN: ClassVar[str] = r"^\+91[6-9][0-9]{9}$"

    def __post_init__(self):
        """Validate phone number on creation"""
        if not self.value or not str(self.value).strip():
            raise ValueError("Phone number cannot be empty")

        normalized = self._normalize_phone_number(str(self.value))
        if not re.match(self.INDIAN_MOBILE_PATTERN, normalized):
            raise ValueError(f"Invalid Indian mobile number: {self.value}")

        # Use object.__setattr__ because the class is frozen
        object.__setattr__(self, "value", normalized)

    @staticmethod
    def _normalize_phone_number(phone: str) -> str:
        """Normalize phone number to +91XXXXXXXXXX"""
        cleaned = re.sub(r"[^\d+]", "", phone)

        if cleaned.startswith("+91"):
            return cleaned
        if len(cleaned) == 12 and cleaned.startswith("91"):
            return f"+{cleaned}"
        if len(cleaned) == 11 and cleaned.startswith("0"):
            return f"+91{cleaned[1:]}"
        if len(cleaned) == 10:
            return f"+91{cleaned}"
        return cleaned

    @property
    def national_number(self) -> str:
        """The 10-digit number without country code, as the backend stores it"""
        return self.value[3:]

    def display_format(self) -> str:
        """Return phone number in display format"""
        national = self.national_number
        return f"+91 {national[:5]} {national[5:]}"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"PhoneNumber('{self.value}')"
