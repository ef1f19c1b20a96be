from typing import Any, Dict, Mapping

from .dtos import CartDTO
from .mappers import CartMapper


def empty_cart() -> Dict[str, Any]:
    return {"items": {}, "totalQty": 0, "totalCents": 0}


def recalculate_totals(cart: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``cart`` whose totals are derived from its line items."""
    mapper = CartMapper()
    dto = mapper.to_dto(cart)
    totals = CartDTO(
        items=dto.items,
        total_qty=sum(item.qty for item in dto.items.values()),
        total_cents=sum(item.subtotal for item in dto.items.values()),
    )
    return mapper.to_payload(totals)
