from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from django.db import transaction
from rest_framework.exceptions import ValidationError as DRFValidationError

from apps.common import get_logger
from .dtos import ProfileDTO, user_to_profile_dto
from .models import User
from .protocols import AvatarStorageProtocol, UserRepositoryProtocol
from .serializers import PasswordChangeSerializer, ProfileUpdateSerializer

logger = get_logger(__name__).bind(component="users", layer="service")

ServiceError = Tuple[str, str, Optional[Any]]


class ProfileService:
    def __init__(self, users: UserRepositoryProtocol, avatars: AvatarStorageProtocol):
        self.users = users
        self.avatars = avatars
        self.logger = logger.bind(service="ProfileService")

    @staticmethod
    def _not_found(user_id: int) -> ServiceError:
        return ("NOT_FOUND", "User not found", {"id": str(user_id)})

    def describe(self, user: User) -> ProfileDTO:
        avatar_exists = self.avatars.exists(user.avatar)
        if self.avatars.is_local(user.avatar) and not avatar_exists:
            self.logger.warning(
                "Avatar file missing", user_id=user.id, avatar=user.avatar
            )
        return user_to_profile_dto(user, avatar_exists=avatar_exists)

    def get_profile(self, user_id: int) -> Tuple[Optional[ProfileDTO], Optional[ServiceError]]:
        self.logger.debug("Fetching profile", user_id=user_id)
        user = self.users.get(id=user_id)
        if not user:
            self.logger.info("Profile requested for missing user", user_id=user_id)
            return None, self._not_found(user_id)
        return self.describe(user), None

    def _changed_fields(self, validated: Dict[str, Any], *, partial: bool) -> Dict[str, Any]:
        if partial:
            return {k: validated[k] for k in ("name", "phone", "address") if k in validated}
        return {
            "name": validated["name"],
            "phone": validated.get("phone"),
            "address": validated.get("address"),
        }

    def update_profile(
        self, user_id: int, data: Dict[str, Any], *, partial: bool
    ) -> Tuple[Optional[User], Optional[ServiceError]]:
        """Validate and apply a profile update, replacing the avatar when one is uploaded.

        A new avatar file is written only after validation succeeds and is
        removed again if the row update fails. The previous local avatar is
        deleted once the row points at the new one.
        """
        serializer = ProfileUpdateSerializer(data=data, partial=partial)
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as exc:
            self.logger.warning(
                "Profile update validation failed", user_id=user_id, errors=exc.detail
            )
            return None, ("VALIDATION_ERROR", "Invalid input", exc.detail)

        user = self.users.get(id=user_id)
        if not user:
            self.logger.warning("Profile update failed: not found", user_id=user_id)
            return None, self._not_found(user_id)

        validated = dict(serializer.validated_data)
        upload = validated.pop("avatar", None)
        fields = self._changed_fields(validated, partial=partial)
        previous_avatar = user.avatar
        new_avatar = None
        try:
            if upload is not None:
                new_avatar = self.avatars.save(upload)
                fields["avatar"] = new_avatar
            with transaction.atomic():
                self.users.update_profile(user, **fields)
        except Exception:
            self.logger.exception("Profile update failed", user_id=user_id)
            if new_avatar:
                self.avatars.delete(new_avatar)
            raise

        if new_avatar and self.avatars.is_local(previous_avatar) and previous_avatar != new_avatar:
            self.avatars.delete(previous_avatar)
        self.logger.info(
            "Profile updated",
            user_id=user_id,
            fields=sorted(fields),
            avatar_replaced=bool(new_avatar),
        )
        return user, None

    def change_password(
        self, user_id: int, data: Dict[str, Any]
    ) -> Tuple[Optional[User], Optional[ServiceError]]:
        serializer = PasswordChangeSerializer(data=data)
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as exc:
            return None, ("VALIDATION_ERROR", "Invalid input", exc.detail)

        user = self.users.get(id=user_id)
        if not user:
            return None, self._not_found(user_id)
        if not user.can_change_password:
            self.logger.info("Password change rejected for Google account", user_id=user_id)
            return None, (
                "VALIDATION_ERROR",
                "Accounts signed in with Google cannot change password",
                None,
            )
        if not user.check_password(serializer.validated_data["current_password"]):
            self.logger.info("Password change rejected: wrong current password", user_id=user_id)
            return None, (
                "VALIDATION_ERROR",
                "Current password is incorrect",
                {"current_password": ["Current password is incorrect."]},
            )
        self.users.set_password(user, serializer.validated_data["new_password"])
        self.logger.info("Password changed", user_id=user_id)
        return user, None
