from __future__ import annotations

import functools
import json
from typing import Any, Callable, Dict, Optional

from django.db import DatabaseError, transaction

from apps.common import get_logger

from .schema import (
    CART_TABLE,
    create_statements,
    is_duplicate_object,
    is_undefined_table,
    json_placeholder,
)
from .serializers import validate_cart_payload
from .exceptions import CartPayloadError

logger = get_logger(__name__).bind(component="carts", layer="store")


def provision_on_missing_table(action: str, fallback: Any = None) -> Callable:
    """Run a storage call, creating the carts table and retrying once if absent.

    Each attempt runs inside its own savepoint so a failed statement never
    poisons the caller's transaction. Any storage error left after the retry
    is logged and ``fallback`` is returned instead.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self: "CartStore", *args, **kwargs):
            log = self.log.bind(action=action)
            try:
                return self._attempt(func, *args, **kwargs)
            except DatabaseError as exc:
                if not is_undefined_table(exc):
                    log.error("Cart storage call failed", error=str(exc))
                    return fallback
                log.warning("Carts table missing, provisioning before retry")
            if not self.ensure_table():
                log.error("Cart storage unavailable after provisioning attempt")
                return fallback
            try:
                return self._attempt(func, *args, **kwargs)
            except DatabaseError as exc:
                log.error("Cart storage call failed after provisioning", error=str(exc))
                return fallback

        return wrapper

    return decorator


class CartStore:
    """Durable per-user cart storage on top of a Django database connection.

    The table is created on first use. ``load`` and ``save`` never raise for
    storage failures; they log and degrade to "no cart" and "not saved".
    """

    def __init__(self, connection):
        self.connection = connection
        self.log = logger.bind(alias=connection.alias)

    @property
    def vendor(self) -> str:
        return self.connection.vendor

    def _attempt(self, func: Callable, *args, **kwargs):
        with transaction.atomic(using=self.connection.alias):
            return func(self, *args, **kwargs)

    def table_exists(self) -> bool:
        with self.connection.cursor() as cursor:
            return CART_TABLE in self.connection.introspection.table_names(cursor)

    def ensure_table(self) -> bool:
        """Create the carts table and its user index if they are missing.

        Returns True when the table is usable afterwards. Losing a creation
        race to another process counts as success.
        """
        try:
            if self.table_exists():
                return True
            statements = create_statements(self.vendor)
            with transaction.atomic(using=self.connection.alias):
                with self.connection.cursor() as cursor:
                    for statement in statements:
                        cursor.execute(statement)
        except DatabaseError as exc:
            if is_duplicate_object(exc):
                self.log.debug("Carts table created concurrently", error=str(exc))
                return True
            self.log.error("Could not create carts table", error=str(exc))
            return False
        self.log.info("Carts table created", vendor=self.vendor)
        return True

    def load(self, user_id: Optional[int]) -> Optional[Dict[str, Any]]:
        """Return the stored cart for ``user_id`` or None.

        Raises CartPayloadError when the stored payload is not a valid cart.
        """
        if not user_id:
            return None
        raw = self._select(user_id)
        if raw is None:
            return None
        if isinstance(raw, (bytes, bytearray, memoryview)):
            raw = bytes(raw).decode("utf-8")
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except ValueError as exc:
                raise CartPayloadError(
                    "Stored cart is not valid JSON", {"cart_data": [str(exc)]}
                ) from exc
        cart = validate_cart_payload(raw)
        self.log.debug("Cart loaded", user_id=user_id, items=len(cart["items"]))
        return cart

    def save(self, user_id: Optional[int], cart: Optional[Dict[str, Any]]) -> bool:
        """Upsert ``cart`` as the single stored cart of ``user_id``.

        Returns whether the row was written. Raises CartPayloadError for a
        malformed cart before touching the database.
        """
        if not user_id or cart is None:
            return False
        payload = validate_cart_payload(cart)
        saved = bool(self._upsert(user_id, json.dumps(payload)))
        if saved:
            self.log.debug("Cart saved", user_id=user_id, items=len(payload["items"]))
        return saved

    def clear(self, user_id: Optional[int]) -> bool:
        if not user_id:
            return False
        return bool(self._delete(user_id))

    @provision_on_missing_table(action="load")
    def _select(self, user_id: int):
        with self.connection.cursor() as cursor:
            cursor.execute(
                f"SELECT cart_data FROM {CART_TABLE} WHERE user_id = %s",
                [user_id],
            )
            row = cursor.fetchone()
        return row[0] if row else None

    @provision_on_missing_table(action="save", fallback=False)
    def _upsert(self, user_id: int, data: str) -> bool:
        placeholder = json_placeholder(self.vendor)
        with self.connection.cursor() as cursor:
            cursor.execute(
                f"INSERT INTO {CART_TABLE} (user_id, cart_data, created_at, updated_at) "
                f"VALUES (%s, {placeholder}, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP) "
                "ON CONFLICT (user_id) DO UPDATE "
                "SET cart_data = EXCLUDED.cart_data, updated_at = CURRENT_TIMESTAMP",
                [user_id, data],
            )
        return True

    @provision_on_missing_table(action="clear", fallback=False)
    def _delete(self, user_id: int) -> bool:
        with self.connection.cursor() as cursor:
            cursor.execute(f"DELETE FROM {CART_TABLE} WHERE user_id = %s", [user_id])
        return True
