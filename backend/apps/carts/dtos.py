from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class LineItemDTO:
    item_id: str
    qty: int
    price: int
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def subtotal(self) -> int:
        return self.qty * self.price


@dataclass
class CartDTO:
    items: Dict[str, LineItemDTO] = field(default_factory=dict)
    total_qty: int = 0
    total_cents: int = 0
