from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

from apps.common import get_logger

from .session import mirror_user

logger = get_logger(__name__).bind(component="users", layer="signal")


@receiver(user_logged_in, dispatch_uid="users.mirror_session_identity")
def mirror_identity_on_login(sender, request, user, **kwargs):
    session = getattr(request, "session", None)
    if session is None:
        return
    mirror_user(session, user)
    logger.debug("Session identity written", user_id=user.pk)
