# users/views.py
"""
USER AUTH VIEWS

Security hardening:
- Targeted throttling for high-risk endpoints:
  - Register (anon)
  - Login (anon)
  - Me (user)
- No csrf_exempt for JWT login (JWT uses the Authorization header).
"""

from __future__ import annotations

from django.contrib.auth import authenticate
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import LoginSerializer, RegisterSerializer, UserSerializer, VerifyPinSerializer
from .services.pin import verify_manager_pin


# ---------------- THROTTLES (TARGETED) ----------------
class RegisterAnonThrottle(AnonRateThrottle):
    scope = "anon"


class LoginAnonThrottle(AnonRateThrottle):
    scope = "anon"


class MeUserThrottle(UserRateThrottle):
    scope = "user"


# ---------------- REGISTER ----------------
class RegisterView(generics.GenericAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [RegisterAnonThrottle]

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response(
            {
                "message": "User registered successfully",
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


# ---------------- LOGIN (JWT + EMAIL/USERNAME) ----------------
class LoginView(generics.GenericAPIView):
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [LoginAnonThrottle]

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request=request,
            username=serializer.validated_data["identifier"],
            password=serializer.validated_data["password"],
        )

        if not user:
            return Response(
                {"detail": "Invalid credentials"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        refresh = RefreshToken.for_user(user)

        return Response(
            {
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )


# ---------------- CURRENT USER ----------------
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [MeUserThrottle]

    @extend_schema(responses={200: UserSerializer})
    def get(self, request):
        return Response(
            {
                "authenticated": True,
                "user": UserSerializer(request.user).data,
            },
            status=status.HTTP_200_OK,
        )


# ---------------- MANAGER PIN CHECK ----------------
class ManagerPinThrottle(UserRateThrottle):
    scope = "manager_pin"


class VerifyPinView(generics.GenericAPIView):
    """
    Lets the till confirm a manager PIN before submitting a large refund.
    Only reports success + the approving user id; never echoes the PIN.
    """

    serializer_class = VerifyPinSerializer
    permission_classes = [IsAuthenticated]
    throttle_classes = [ManagerPinThrottle]

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = verify_manager_pin(serializer.validated_data["pin"])
        return Response(
            {"success": result.success, "user_id": result.user_id},
            status=status.HTTP_200_OK if result.success else status.HTTP_403_FORBIDDEN,
        )
