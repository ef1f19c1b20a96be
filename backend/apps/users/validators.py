import re

from django.conf import settings
from rest_framework import serializers

_PHONE_PATTERN = re.compile(r"^[0-9]{10,11}$")

NAME_MAX_LENGTH = 100
ADDRESS_MAX_LENGTH = 500


def validate_name(value: str) -> str:
    """Name is required, trimmed, and at most 100 characters."""
    trimmed = (value or "").strip()
    if not trimmed or len(trimmed) > NAME_MAX_LENGTH:
        raise serializers.ValidationError(
            f"Name must not be empty and may be at most {NAME_MAX_LENGTH} characters."
        )
    return trimmed


def validate_phone(value):
    """Blank phone numbers are stored as null; others must be 10-11 digits."""
    trimmed = (value or "").strip()
    if not trimmed:
        return None
    if not _PHONE_PATTERN.match(trimmed):
        raise serializers.ValidationError("Phone number must have 10-11 digits.")
    return trimmed


def validate_address(value):
    trimmed = (value or "").strip()
    if not trimmed:
        return None
    if len(trimmed) > ADDRESS_MAX_LENGTH:
        raise serializers.ValidationError(
            f"Address may be at most {ADDRESS_MAX_LENGTH} characters."
        )
    return trimmed


def validate_avatar(upload):
    if upload is None:
        return None
    max_bytes = settings.AVATAR_MAX_UPLOAD_BYTES
    if upload.size > max_bytes:
        raise serializers.ValidationError(
            f"Image is too large. The maximum size is {max_bytes // (1024 * 1024)}MB."
        )
    content_type = getattr(upload, "content_type", None) or ""
    if content_type not in settings.AVATAR_ALLOWED_CONTENT_TYPES:
        raise serializers.ValidationError("Only image files are allowed.")
    return upload
