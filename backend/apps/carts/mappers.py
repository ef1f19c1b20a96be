"""Conversion between the JSON cart payload and the typed DTOs."""
from typing import Any, Dict, Mapping

from .dtos import CartDTO, LineItemDTO

_LINE_ITEM_KEYS = ("qty", "price")


class LineItemMapper:
    def to_dto(self, item_id: str, data: Mapping[str, Any]) -> LineItemDTO:
        extra = {k: v for k, v in data.items() if k not in _LINE_ITEM_KEYS}
        return LineItemDTO(
            item_id=str(item_id),
            qty=int(data.get("qty", 0)),
            price=int(data.get("price", 0)),
            extra=extra,
        )

    def to_payload(self, dto: LineItemDTO) -> Dict[str, Any]:
        return {**dto.extra, "qty": dto.qty, "price": dto.price}


class CartMapper:
    def __init__(self, line_item_mapper: LineItemMapper = None) -> None:
        self.line_item_mapper = line_item_mapper or LineItemMapper()

    def to_dto(self, payload: Mapping[str, Any]) -> CartDTO:
        items = payload.get("items") or {}
        return CartDTO(
            items={
                str(key): self.line_item_mapper.to_dto(key, value)
                for key, value in items.items()
            },
            total_qty=int(payload.get("totalQty", 0)),
            total_cents=int(payload.get("totalCents", 0)),
        )

    def to_payload(self, dto: CartDTO) -> Dict[str, Any]:
        return {
            "items": {
                key: self.line_item_mapper.to_payload(item)
                for key, item in dto.items.items()
            },
            "totalQty": dto.total_qty,
            "totalCents": dto.total_cents,
        }
