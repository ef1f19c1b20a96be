from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

from django.contrib.auth import authenticate as django_authenticate

from apps.common import get_logger

logger = get_logger(__name__).bind(component="auth", layer="service")

ServiceError = Tuple[str, str, Optional[Any]]


class SessionService:
    def __init__(self, authenticate: Callable[..., Any] = django_authenticate):
        self.authenticate = authenticate
        self.logger = logger.bind(service="SessionService")

    def check_credentials(
        self, username: str, password: str, *, request=None
    ) -> Tuple[Optional[Any], Optional[ServiceError]]:
        username = username.strip()
        user = self.authenticate(request, username=username, password=password)
        if user is None:
            self.logger.info("Login rejected: bad credentials", username=username)
            return None, (
                "UNAUTHORIZED",
                "Invalid username or password",
                {"hint": "Check your credentials and try again"},
            )
        if not getattr(user, "activated", True):
            self.logger.warning("Login rejected: account deactivated", user_id=user.pk)
            return None, ("FORBIDDEN", "This account has been deactivated", None)
        self.logger.info("Credentials accepted", user_id=user.pk)
        return user, None
