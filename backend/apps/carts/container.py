from __future__ import annotations

from django.db import DEFAULT_DB_ALIAS, connections

from .store import CartStore


def build_cart_store(alias: str = DEFAULT_DB_ALIAS) -> CartStore:
    return CartStore(connections[alias])
