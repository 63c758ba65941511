"""Account API views: registration, login and the current user."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from modules.accounts.dtos import RegisterUserDTO
from modules.accounts.exceptions import InvalidRegistration
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import (
    EmailTokenObtainPairSerializer,
    RegisterSerializer,
    UserSerializer,
)
from modules.accounts.services import AccountService


class RegisterView(APIView):
    """POST /api/v1/auth/register/"""

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_scope = "registration"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AccountService(user_repository=UserDjangoRepository())

    def post(self, request: Request) -> Response:
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = RegisterUserDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise InvalidRegistration(exc.errors()[0]["msg"]) from exc

        registration = self._service.register(dto)
        return Response(
            {
                "user": UserSerializer(registration.user).data,
                "access": registration.access,
                "refresh": registration.refresh,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(TokenObtainPairView):
    """POST /api/v1/auth/token/ with ``{"email", "password"}``."""

    serializer_class = EmailTokenObtainPairSerializer


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(UserSerializer(request.user).data)
