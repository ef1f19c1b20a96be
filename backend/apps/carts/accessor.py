"""Resolve the cart for the current request.

Authenticated users read through to the cart store and the session holds a
mirror of the stored cart. Anonymous visitors only ever have a session cart.
"""
from __future__ import annotations

from numbers import Number
from typing import Any, Dict, Optional

from django.conf import settings

from apps.common import get_logger

from .exceptions import CartPayloadError
from .protocols import CartStoreProtocol
from .utils import empty_cart

logger = get_logger(__name__).bind(component="carts", layer="accessor")


def _session_key() -> str:
    return getattr(settings, "CART_SESSION_KEY", "cart")


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def authenticated_user_id(request) -> Optional[int]:
    """Return the id of the logged in user behind ``request``, if any."""
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_authenticated", False):
        return getattr(user, "pk", None)
    session = getattr(request, "session", None)
    if session is None:
        return None
    mirror = session.get(getattr(settings, "USER_SESSION_KEY", "user"))
    if isinstance(mirror, dict) and mirror.get("id"):
        return mirror["id"]
    return None


def _normalize_session_cart(session) -> Dict[str, Any]:
    key = _session_key()
    cart = session.get(key)
    if not isinstance(cart, dict):
        cart = empty_cart()
        session[key] = cart
        session.modified = True
        return cart
    defaults = empty_cart()
    if not isinstance(cart.get("items"), dict):
        cart["items"] = defaults["items"]
        session.modified = True
    for field in ("totalQty", "totalCents"):
        if not _is_number(cart.get(field)):
            cart[field] = defaults[field]
            session.modified = True
    return cart


def get_cart(request, store: CartStoreProtocol) -> Dict[str, Any]:
    """Return the active cart for ``request``.

    A stored cart wins over the session copy for logged in users and is
    mirrored into the session. When there is no stored cart, or loading it
    fails, the session cart is returned with missing fields defaulted.
    Requests without a session get a fresh empty cart that is not kept.
    """
    session = getattr(request, "session", None)
    if session is None:
        return empty_cart()

    user_id = authenticated_user_id(request)
    if user_id:
        log = logger.bind(user_id=user_id)
        try:
            stored = store.load(user_id)
        except CartPayloadError as exc:
            log.warning("Stored cart rejected, using session cart", errors=exc.errors)
        except Exception:
            log.exception("Loading stored cart failed, using session cart")
        else:
            if stored is not None:
                session[_session_key()] = stored
                session.modified = True
                return stored

    return _normalize_session_cart(session)


def persist_cart(request, cart: Dict[str, Any], store: CartStoreProtocol) -> Dict[str, Any]:
    """Write ``cart`` to the session and, for logged in users, to the store."""
    session = getattr(request, "session", None)
    if session is not None:
        session[_session_key()] = cart
        session.modified = True
    user_id = authenticated_user_id(request)
    if user_id and not store.save(user_id, cart):
        logger.warning("Cart kept in session only", user_id=user_id)
    return cart


def reset_cart(request, store: CartStoreProtocol) -> Dict[str, Any]:
    cart = empty_cart()
    session = getattr(request, "session", None)
    if session is not None:
        session[_session_key()] = cart
        session.modified = True
    user_id = authenticated_user_id(request)
    if user_id:
        store.clear(user_id)
    return cart
