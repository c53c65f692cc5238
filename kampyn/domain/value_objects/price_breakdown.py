"""
Price breakdown value object

Derived totals for a set of cart lines. Never stored; recomputed from the
lines and the university charges whenever needed.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Union

from .money import Money
from .order_enums import ItemKind, OrderType

Amount = Union[int, float, str, Decimal, Money]


def _as_decimal(value: Amount) -> Decimal:
    """Exact amount; rounding to paise happens once per total"""
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class PriceBreakdown:
    """
    Item, packing and delivery totals for one checkout

    Each total is summed from exact line amounts and rounded half-up to paise
    once. The grand total is the sum of the three rounded totals, so the
    displayed breakdown always adds up to the amount charged.
    """

    item_total: Money
    packing_total: Money
    delivery_total: Money

    @property
    def grand_total(self) -> Money:
        return self.item_total + self.packing_total + self.delivery_total

    @property
    def amount_minor_units(self) -> int:
        """Grand total in paise, the amount the payment provider is given"""
        return self.grand_total.to_minor_units()

    @property
    def currency(self) -> str:
        return self.item_total.currency

    @classmethod
    def calculate(
        cls,
        lines: Iterable,
        packing_charge: Amount,
        delivery_charge: Amount,
        order_type: Union[OrderType, str],
        currency: str = "INR",
    ) -> "PriceBreakdown":
        """
        Compute the breakdown for ``lines``.

        Each line needs ``price``, ``quantity`` and ``kind``. Packing applies
        per unit of Produce lines only; delivery applies only to delivery
        orders.
        """
        order_type = OrderType(order_type)
        packing = _as_decimal(packing_charge)

        item_sum = Decimal("0")
        packing_sum = Decimal("0")
        for line in lines:
            item_sum += _as_decimal(line.price) * line.quantity
            if ItemKind.infer(line.kind).incurs_packing_charge:
                packing_sum += packing * line.quantity

        if order_type is OrderType.DELIVERY:
            delivery_sum = _as_decimal(delivery_charge)
        else:
            delivery_sum = Decimal("0")

        return cls(
            Money(item_sum, currency),
            Money(packing_sum, currency),
            Money(delivery_sum, currency),
        )

    def to_dict(self) -> dict:
        return {
            "itemTotal": float(self.item_total.amount),
            "packingTotal": float(self.packing_total.amount),
            "deliveryTotal": float(self.delivery_total.amount),
            "grandTotal": float(self.grand_total.amount),
        }
