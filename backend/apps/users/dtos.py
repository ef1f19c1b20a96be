from dataclasses import dataclass
from typing import Optional

from .models import User


@dataclass
class ProfileDTO:
    id: int
    username: str
    email: str
    name: str
    phone: Optional[str]
    address: Optional[str]
    avatar: Optional[str]
    avatar_exists: bool
    can_change_password: bool


def user_to_profile_dto(u: User, *, avatar_exists: bool) -> ProfileDTO:
    return ProfileDTO(
        id=u.id,
        username=u.username,
        email=u.email,
        name=u.name,
        phone=u.phone,
        address=u.address,
        avatar=u.avatar,
        avatar_exists=avatar_exists,
        can_change_password=u.can_change_password,
    )
