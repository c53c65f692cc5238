"""
Cart Entity - selected lines for the active vendor checkout
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from kampyn.domain.value_objects.order_enums import ItemKind

LineKey = Tuple[str, ItemKind]


def _flag(value: Any) -> Optional[bool]:
    """Backend availability flags arrive as "Y"/"N" strings or booleans"""
    if value is None:
        return None
    if isinstance(value, str):
        return value.upper() == "Y"
    return bool(value)


def _yn(value: Optional[bool]) -> Optional[str]:
    if value is None:
        return None
    return "Y" if value else "N"


@dataclass(frozen=True)
class CatalogItem:
    """An item a vendor offers, as listed by the catalog endpoints"""

    item_id: str
    name: str
    price: float
    kind: ItemKind
    type: str = ""
    is_available: Optional[bool] = None
    is_special: Optional[bool] = None
    quantity: Optional[int] = None

    @property
    def in_stock(self) -> bool:
        """Retail stock is counted; produce is flagged available or not"""
        if self.kind is ItemKind.RETAIL and self.quantity is not None:
            return self.quantity > 0
        return self.is_available is not False

    @property
    def key(self) -> LineKey:
        return (self.item_id, self.kind)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], kind: Optional[ItemKind] = None) -> "CatalogItem":
        return cls(
            item_id=str(data.get("itemId") or data.get("_id")),
            name=data.get("name", ""),
            price=float(data.get("price", 0)),
            kind=kind or ItemKind.infer(data.get("kind"), data.get("type")),
            type=data.get("type", ""),
            is_available=_flag(data.get("isAvailable")),
            is_special=_flag(data.get("isSpecial")),
            quantity=data.get("quantity"),
        )


@dataclass
class CartLine:
    """One selected item; quantity is always at least 1 while in a cart"""

    item_id: str
    name: str
    price: float
    quantity: int
    kind: ItemKind
    type: str = ""
    is_special: Optional[bool] = None
    is_available: Optional[bool] = None

    def __post_init__(self):
        self.kind = ItemKind.infer(self.kind, self.type)
        if self.quantity <= 0:
            raise ValueError("Cart line quantity must be positive")
        if self.price < 0:
            raise ValueError("Cart line price cannot be negative")

    @property
    def key(self) -> LineKey:
        return (self.item_id, self.kind)

    @classmethod
    def from_catalog_item(cls, item: CatalogItem) -> "CartLine":
        return cls(
            item_id=item.item_id,
            name=item.name,
            price=item.price,
            quantity=1,
            kind=item.kind,
            type=item.type,
            is_special=item.is_special,
            is_available=item.is_available,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        return cls(
            item_id=str(data["itemId"]),
            name=data.get("name", ""),
            price=float(data.get("price", 0)),
            quantity=int(data.get("quantity", 1)),
            kind=ItemKind.infer(data.get("kind"), data.get("type")),
            type=data.get("type", ""),
            is_special=_flag(data.get("isSpecial")),
            is_available=_flag(data.get("isAvailable")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "itemId": self.item_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "kind": self.kind.value,
            "type": self.type,
        }
        if self.is_special is not None:
            data["isSpecial"] = _yn(self.is_special)
        if self.is_available is not None:
            data["isAvailable"] = _yn(self.is_available)
        return data


@dataclass
class Cart:
    """
    Cart domain entity

    Lines are unique per ``(item_id, kind)`` and never hold a zero quantity.
    """

    vendor_id: str
    lines: List[CartLine] = field(default_factory=list)

    def find(self, key: LineKey) -> Optional[CartLine]:
        for line in self.lines:
            if line.key == key:
                return line
        return None

    def contains(self, key: LineKey) -> bool:
        return self.find(key) is not None

    def quantity_of(self, key: LineKey) -> int:
        line = self.find(key)
        return line.quantity if line else 0

    def add(self, item: CatalogItem) -> bool:
        """Insert a quantity-1 line; returns False if the item is already present"""
        if self.contains(item.key):
            return False
        self.lines.append(CartLine.from_catalog_item(item))
        return True

    def increase(self, key: LineKey) -> CartLine:
        line = self._require(key)
        line.quantity += 1
        return line

    def decrease(self, key: LineKey) -> Optional[CartLine]:
        """Decrement; the line is removed when it reaches zero and None is returned"""
        line = self._require(key)
        if line.quantity <= 1:
            self.lines.remove(line)
            return None
        line.quantity -= 1
        return line

    def remove(self, key: LineKey) -> bool:
        line = self.find(key)
        if line is None:
            return False
        self.lines.remove(line)
        return True

    def clear(self):
        self.lines.clear()

    def snapshot(self) -> "Cart":
        """Independent copy, used to restore state after a failed round trip"""
        return Cart(self.vendor_id, [replace(line) for line in self.lines])

    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def _require(self, key: LineKey) -> CartLine:
        line = self.find(key)
        if line is None:
            raise KeyError(f"Item {key[0]} ({key[1].value}) is not in the cart")
        return line

    @classmethod
    def from_dict(cls, vendor_id: str, data: Dict[str, Any]) -> "Cart":
        """Build from the backend cart representation, merging duplicate keys"""
        cart = cls(vendor_id)
        for raw in data.get("items") or []:
            if int(raw.get("quantity", 1)) <= 0:
                continue
            line = CartLine.from_dict(raw)
            existing = cart.find(line.key)
            if existing:
                existing.quantity += line.quantity
            else:
                cart.lines.append(line)
        return cart

    def to_dict(self) -> Dict[str, Any]:
        return {"vendorId": self.vendor_id, "items": [line.to_dict() for line in self.lines]}
