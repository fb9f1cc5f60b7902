import logging

from rest_framework import generics, permissions
from rest_framework_simplejwt.views import TokenObtainPairView

from .models import UserSettings
from .serializers import (
    CustomTokenObtainPairSerializer,
    UserSerializer,
    UserSettingsSerializer,
)

logger = logging.getLogger(__name__)


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    JWT token obtain view with additional user information.
    """
    serializer_class = CustomTokenObtainPairSerializer


class UserProfileView(generics.RetrieveUpdateAPIView):
    """
    GET/PUT/PATCH /api/accounts/me/

    Retrieve or update the signed-in user's profile.
    """
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


class UserSettingsView(generics.RetrieveUpdateAPIView):
    """
    GET/PUT/PATCH /api/accounts/settings/

    Alert thresholds, units and fiscal year start for the signed-in user.
    Settings are created with defaults on first read.
    """
    serializer_class = UserSettingsSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return UserSettings.for_user(self.request.user)

    def perform_update(self, serializer):
        settings = serializer.save()
        logger.info(f"Updated settings for user {self.request.user.id}")
        return settings
