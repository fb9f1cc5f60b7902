from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from core.serializers import CleanModelSerializer

from .models import UserSettings

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for user details.
    Used for retrieving and updating the signed-in user's profile.
    """
    full_name = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = User
        fields = (
            'id', 'username', 'email', 'phone', 'first_name', 'last_name',
            'full_name', 'is_staff', 'created_at'
        )
        read_only_fields = ('id', 'username', 'is_staff', 'created_at')


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT token serializer that includes basic user information.
    """
    def validate(self, attrs):
        data = super().validate(attrs)

        data['user'] = {
            'id': str(self.user.id),
            'username': self.user.username,
            'email': self.user.email,
            'full_name': self.user.get_full_name(),
        }
        return data


class UserSettingsSerializer(CleanModelSerializer):
    """Serializer for alert thresholds, units and fiscal year preferences."""

    class Meta:
        model = UserSettings
        fields = [
            'currency_code', 'currency_symbol', 'currency_decimals',
            'date_format', 'weight_unit',
            'low_stock_threshold_percent', 'mortality_alert_percent',
            'mortality_alert_quantity', 'fiscal_year_start_month',
            'default_payment_terms_days', 'updated_at'
        ]
        read_only_fields = ['updated_at']

    def get_fields(self):
        fields = super().get_fields()
        # Validated in UserSettings.clean()
        for name in ('date_format', 'weight_unit'):
            fields[name] = serializers.CharField(max_length=10, required=False)
        return fields

