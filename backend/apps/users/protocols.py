from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile
    from apps.users.models import User


class UserRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["User"]: ...

    def update_profile(self, user: "User", **fields) -> "User": ...

    def set_password(self, user: "User", raw_password: str) -> "User": ...


class AvatarStorageProtocol(Protocol):
    def save(self, upload: "UploadedFile") -> str: ...

    def exists(self, avatar: Optional[str]) -> bool: ...

    def is_local(self, avatar: Optional[str]) -> bool: ...

    def delete(self, avatar: Optional[str]) -> bool: ...
