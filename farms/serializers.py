"""
Serializers for farms and farm memberships.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Farm, FarmMembership

User = get_user_model()


class FarmSerializer(serializers.ModelSerializer):
    """Farm with the requesting user's role on it"""
    farm_type_display = serializers.CharField(source='get_farm_type_display', read_only=True)
    owner_name = serializers.CharField(source='owner.get_full_name', read_only=True)
    my_role = serializers.SerializerMethodField()

    class Meta:
        model = Farm
        fields = [
            'id', 'name', 'location', 'farm_type', 'farm_type_display',
            'owner', 'owner_name', 'my_role', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'owner', 'created_at', 'updated_at']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Farm name is required')
        return value.strip()

    def get_my_role(self, obj):
        request = self.context.get('request')
        if request is None:
            return None
        for membership in obj.memberships.all():
            if membership.user_id == request.user.id:
                return membership.role
        return None


class FarmMembershipSerializer(serializers.ModelSerializer):
    """Membership row; new members are looked up by email"""
    email = serializers.EmailField(write_only=True, required=False)
    user_email = serializers.EmailField(source='user.email', read_only=True)
    user_name = serializers.CharField(source='user.get_full_name', read_only=True)

    class Meta:
        model = FarmMembership
        fields = ['id', 'user', 'user_email', 'user_name', 'email', 'role', 'created_at']
        read_only_fields = ['id', 'user', 'created_at']

    def validate(self, attrs):
        if self.instance is None:
            email = attrs.pop('email', None)
            if not email:
                raise serializers.ValidationError({'email': 'Email is required'})
            try:
                attrs['user'] = User.objects.get(email__iexact=email)
            except User.DoesNotExist:
                raise serializers.ValidationError({'email': 'User not found'})
        else:
            attrs.pop('email', None)
        return attrs
