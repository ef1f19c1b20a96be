from django.contrib.auth import login, logout
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import DetailResponseSerializer, ErrorResponseSerializer
from apps.api.utils import service_error_response
from apps.common import get_logger
from apps.users.session import session_identity
from .container import build_session_service
from .serializers import LoginRequestSerializer, MeResponseSerializer

logger = get_logger(__name__).bind(component="auth", layer="view")


def _me_payload(user):
    return {**session_identity(user), "username": user.get_username()}


@extend_schema(tags=["Auth"])
class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    service = build_session_service()
    log = logger.bind(view="LoginView")

    @extend_schema(
        summary="Log in with a session cookie",
        request=LoginRequestSerializer,
        responses={
            200: MeResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, error = self.service.check_credentials(
            serializer.validated_data["username"],
            serializer.validated_data["password"],
            request=request,
        )
        if error:
            return service_error_response(error)
        login(request, user)
        self.log.info("User logged in", user_id=user.pk)
        return Response(MeResponseSerializer(_me_payload(user)).data)


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="LogoutView")

    @extend_schema(
        summary="Log out and discard the session",
        request=None,
        responses={200: DetailResponseSerializer},
    )
    def post(self, request):
        user_id = request.user.pk
        logout(request)
        self.log.info("User logged out", user_id=user_id)
        return Response({"detail": "Logged out"}, status=status.HTTP_200_OK)


@extend_schema(
    tags=["Auth"], summary="Get current user", responses={200: MeResponseSerializer}
)
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="MeView")

    def get(self, request):
        self.log.debug("Returning current user", user_id=request.user.pk)
        return Response(MeResponseSerializer(_me_payload(request.user)).data)
