from django.contrib.auth import update_session_auth_hash
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import DetailResponseSerializer, ErrorResponseSerializer
from apps.api.utils import service_error_response
from apps.common import get_logger
from .container import build_profile_service
from .serializers import (
    PasswordChangeSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
)
from .session import mirror_user

logger = get_logger(__name__).bind(component="users", layer="view")


@extend_schema(tags=["Profile"])
class ProfileView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, FormParser, MultiPartParser]
    service = build_profile_service()
    log = logger.bind(view="ProfileView")

    @extend_schema(
        summary="Get current user's profile",
        responses={
            200: ProfileSerializer,
            401: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        dto, error = self.service.get_profile(request.user.id)
        if error:
            return service_error_response(error)
        return Response(ProfileSerializer(dto).data)

    def _update(self, request, *, partial: bool):
        user, error = self.service.update_profile(
            request.user.id, request.data, partial=partial
        )
        if error:
            return service_error_response(error)
        mirror_user(request.session, user)
        self.log.info("Profile updated via API", user_id=user.id, partial=partial)
        return Response(ProfileSerializer(self.service.describe(user)).data)

    @extend_schema(
        summary="Update profile",
        description=(
            "Accepts JSON or multipart/form-data. Send an `avatar` image file to "
            "replace the current avatar; omit it to keep the existing one."
        ),
        request={
            "multipart/form-data": ProfileUpdateSerializer,
            "application/json": ProfileUpdateSerializer,
        },
        responses={
            200: ProfileSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        return self._update(request, partial=False)

    @extend_schema(
        summary="Partially update profile",
        request={
            "multipart/form-data": ProfileUpdateSerializer,
            "application/json": ProfileUpdateSerializer,
        },
        responses={
            200: ProfileSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request):
        return self._update(request, partial=True)


@extend_schema(tags=["Profile"])
class PasswordChangeView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_profile_service()
    log = logger.bind(view="PasswordChangeView")

    @extend_schema(
        summary="Change password",
        request=PasswordChangeSerializer,
        responses={
            200: DetailResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        user, error = self.service.change_password(request.user.id, request.data)
        if error:
            return service_error_response(error)
        # Keep the current session valid after the hash change.
        update_session_auth_hash(request, user)
        self.log.info("Password changed via API", user_id=user.id)
        return Response({"detail": "Password changed"})
