from __future__ import annotations

from typing import Any, Dict, Optional, Protocol


class CartStoreProtocol(Protocol):
    def table_exists(self) -> bool:
        ...

    def ensure_table(self) -> bool:
        ...

    def load(self, user_id: Optional[int]) -> Optional[Dict[str, Any]]:
        ...

    def save(self, user_id: Optional[int], cart: Optional[Dict[str, Any]]) -> bool:
        ...

    def clear(self, user_id: Optional[int]) -> bool:
        ...
