import logging
from django.contrib.auth import get_user_model, logout
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.authtoken.views import ObtainAuthToken
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from core.responses import send_response
from admin_panel.permissions import IsAdminRole
from .serializers import (
    UserRegistrationSerializer, UserProfileSerializer, EmailAuthTokenSerializer,
    ChangeRoleSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"New account registered: {user.email}")
        return send_response(
            UserRegistrationSerializer(user).data,
            "User registered successfully",
            status.HTTP_201_CREATED,
        )


class CustomAuthToken(ObtainAuthToken):
    serializer_class = EmailAuthTokenSerializer
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.serializer_class(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']
        if not user.is_active:
            raise PermissionDenied("User is not active")
        token, _ = Token.objects.get_or_create(user=user)
        return send_response({
            'token': token.key,
            'user_id': user.id,
            'role': user.role,
        }, "Logged in successfully")


class UserProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = UserProfileSerializer(request.user)
        return send_response(serializer.data, "Profile fetched")

    def put(self, request):
        """Allow authenticated users to update their own profile"""
        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return send_response(serializer.data, "Profile updated")


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        Token.objects.filter(user=request.user).delete()
        logout(request)
        return send_response(None, "Logged out successfully")


class ChangeRoleView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request):
        serializer = ChangeRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = User.objects.get(id=serializer.validated_data['user_id'])
        except User.DoesNotExist:
            raise NotFound("User not found.")

        user.role = serializer.validated_data['role']
        user.save(update_fields=['role'])
        logger.info(f"{request.user.email} changed role of {user.email} to {user.role}")
        return send_response(UserProfileSerializer(user).data, "Role updated")
