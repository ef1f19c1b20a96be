from typing import Any, Dict

from django.conf import settings


def session_identity(user) -> Dict[str, Any]:
    """Identity snapshot kept in the session for templates and the cart accessor."""
    return {
        "id": user.pk,
        "name": user.name or user.get_username(),
        "email": user.email,
        "role": user.role,
        "avatar": user.avatar or None,
    }


def mirror_user(session, user) -> None:
    session[getattr(settings, "USER_SESSION_KEY", "user")] = session_identity(user)
    session.modified = True
