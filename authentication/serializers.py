from rest_framework import serializers
from .models import CustomUser

# ------------------------------------------------------
# BASE USER SERIALIZER
# ------------------------------------------------------
class UserBaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = [
            'uuid',
            'email',
            'full_name',
            'role',
            'created_at',
        ]
        read_only_fields = fields


# ------------------------------------------------------
# TOKEN SERIALIZERS
# ------------------------------------------------------
class TokenSerializer(serializers.Serializer):
    access_token = serializers.CharField(help_text="JWT access token for API requests")
    refresh_token = serializers.CharField(help_text="JWT refresh token for obtaining new access tokens")
    token_type = serializers.CharField(help_text="Always 'Bearer'")
    expires_in = serializers.IntegerField(help_text="Access token lifetime in seconds")
    refresh_expires_in = serializers.IntegerField(help_text="Refresh token lifetime in seconds")


class AuthDataSerializer(serializers.Serializer):
    user = UserBaseSerializer(help_text="User profile information")
    tokens = TokenSerializer(help_text="JWT tokens for authentication")


# ------------------------------------------------------
# AUTH SERIALIZERS
# ------------------------------------------------------
class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(help_text="Admin email address")
    password = serializers.CharField(write_only=True, help_text="Admin password")


class LogoutSerializer(serializers.Serializer):
    refresh_token = serializers.CharField(help_text="JWT refresh token to revoke")


class AuthResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(help_text="Whether the operation was successful")
    message = serializers.CharField(required=False, help_text="Human-readable message")
    data = AuthDataSerializer(required=False, help_text="Response data containing user and tokens")
    error = serializers.CharField(required=False, help_text="Error message if operation failed")
