"""Authentication and user management views."""

import logging

from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView

from ..permissions import IsSuperAdmin
from ..serializers import (
    ChangePasswordSerializer,
    RegisterUserSerializer,
    RoleTokenObtainPairSerializer,
    UserProfileSerializer,
)

logger = logging.getLogger(__name__)


class LoginView(TokenObtainPairView):
    """Exchange username and password for a JWT pair carrying the user's role."""

    serializer_class = RoleTokenObtainPairSerializer
    permission_classes = [AllowAny]


class RegisterUserView(generics.GenericAPIView):
    """Allow super admins to create staff users with a role."""

    serializer_class = RegisterUserSerializer
    permission_classes = [IsAuthenticated, IsSuperAdmin]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User %s registered %s as %s", request.user.username, user.username, serializer.validated_data['role'])
        payload = dict(serializer.data)
        payload['detail'] = 'User registered successfully.'
        return Response(payload, status=status.HTTP_201_CREATED)


class CurrentUserView(generics.RetrieveUpdateAPIView):
    """Retrieve or update the authenticated user's profile information."""

    serializer_class = UserProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user


class ChangePasswordView(generics.GenericAPIView):
    """Allow the authenticated user to update their password."""

    serializer_class = ChangePasswordSerializer
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({'detail': 'Password updated successfully.'}, status=status.HTTP_200_OK)
