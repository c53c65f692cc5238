"""
Money value object

Represents monetary amounts in major units with conversion to the integer
minor units (paise) that payment providers expect.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

MINOR_UNIT_EXPONENT = Decimal("0.01")
MINOR_UNITS_PER_MAJOR = 100


@dataclass(frozen=True)
class Money:
    """
    Money value object that handles currency amounts properly
    """

    amount: Decimal
    currency: str = "INR"

    def __post_init__(self):
        """Validate money object on creation"""
        if not isinstance(self.amount, Decimal):
            # Go through str so floats like 0.1 keep their printed value
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

        if not self.amount.is_finite():
            raise ValueError("Money amount must be a finite number")

        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

        if not self.currency or len(self.currency) != 3:
            raise ValueError("Currency must be a 3-letter code")

        rounded_amount = self.amount.quantize(MINOR_UNIT_EXPONENT, rounding=ROUND_HALF_UP)
        object.__setattr__(self, "amount", rounded_amount)
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def of(cls, amount: Union[int, float, str, Decimal], currency: str = "INR") -> "Money":
        """Create Money from any numeric representation"""
        return cls(Decimal(str(amount)), currency)

    @classmethod
    def zero(cls, currency: str = "INR") -> "Money":
        """Create zero money amount"""
        return cls(Decimal("0"), currency)

    @classmethod
    def from_minor_units(cls, minor_units: int, currency: str = "INR") -> "Money":
        """Create Money from an integer amount of paise"""
        return cls(Decimal(int(minor_units)) / MINOR_UNITS_PER_MAJOR, currency)

    def to_minor_units(self) -> int:
        """Integer amount in minor units, as sent to the payment provider"""
        return int(self.amount * MINOR_UNITS_PER_MAJOR)

    def add(self, other: "Money") -> "Money":
        """Add two money amounts"""
        self._check_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def multiply(self, factor: Union[int, float, Decimal]) -> "Money":
        """Multiply money by a factor"""
        if not isinstance(factor, Decimal):
            factor = Decimal(str(factor))
        if factor < 0:
            raise ValueError("Cannot multiply money by negative factor")
        return Money(self.amount * factor, self.currency)

    def is_zero(self) -> bool:
        """Check if amount is zero"""
        return self.amount == Decimal("0")

    def format_display(self) -> str:
        """Format for display to users"""
        if self.currency == "INR":
            return f"₹{self.amount:.2f}"
        return f"{self.amount:.2f} {self.currency}"

    def _check_currency(self, other: "Money", operation: str):
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {operation} different currencies: {self.currency} and {other.currency}"
            )

    def __str__(self) -> str:
        return self.format_display()

    def __repr__(self) -> str:
        return f"Money(amount={self.amount}, currency='{self.currency}')"

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __add__(self, other: "Money") -> "Money":
        """Add two money amounts using + operator"""
        return self.add(other)

    def __mul__(self, factor: Union[int, float, Decimal]) -> "Money":
        """Multiply money by a factor using * operator"""
        return self.multiply(factor)

    def __rmul__(self, factor: Union[int, float, Decimal]) -> "Money":
        """Reverse multiply for factor * money"""
        return self.multiply(factor)
