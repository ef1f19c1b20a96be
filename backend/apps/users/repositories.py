from django.utils import timezone

from apps.common.repository import GenericRepository
from .models import User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def update_profile(self, user: User, **fields) -> User:
        return self.update(user, updated_at=timezone.now(), **fields)

    def set_password(self, user: User, raw_password: str) -> User:
        user.set_password(raw_password)
        user.updated_at = timezone.now()
        user.save(update_fields=["password", "updated_at"])
        return user
