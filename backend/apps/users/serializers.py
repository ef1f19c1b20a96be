from rest_framework import serializers

from . import validators


class ProfileSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(read_only=True)
    phone = serializers.CharField(read_only=True, allow_null=True)
    address = serializers.CharField(read_only=True, allow_null=True)
    avatar = serializers.CharField(read_only=True, allow_null=True)
    avatarExists = serializers.BooleanField(source="avatar_exists", read_only=True)
    canChangePassword = serializers.BooleanField(
        source="can_change_password", read_only=True
    )


class ProfileUpdateSerializer(serializers.Serializer):
    # Blank values reach the field validators so they can normalize them.
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    phone = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    address = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    avatar = serializers.FileField(required=False, allow_null=True, allow_empty_file=False)

    def validate_name(self, value):
        return validators.validate_name(value)

    def validate_phone(self, value):
        return validators.validate_phone(value)

    def validate_address(self, value):
        return validators.validate_address(value)

    def validate_avatar(self, value):
        return validators.validate_avatar(value)


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(
        trim_whitespace=False,
        error_messages={"blank": "Please enter your current password."},
    )
    new_password = serializers.CharField(
        min_length=6,
        trim_whitespace=False,
        error_messages={"min_length": "New password must be at least 6 characters."},
    )
    confirm_password = serializers.CharField(trim_whitespace=False, allow_blank=True)

    def validate(self, attrs):
        if attrs.get("confirm_password") != attrs.get("new_password"):
            raise serializers.ValidationError(
                {"confirm_password": "Password confirmation does not match."}
            )
        return attrs
