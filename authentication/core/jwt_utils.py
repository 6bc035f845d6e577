from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from datetime import timedelta
from django.conf import settings
import logging
import time

logger = logging.getLogger(__name__)


class TokenManager:
    """Issues and revokes the JWT pair that represents an admin session"""

    @staticmethod
    def generate_tokens(user):
        """Generate access and refresh tokens carrying the user's uuid and role"""
        try:
            refresh = RefreshToken.for_user(user)
            refresh['email'] = user.email
            refresh['role'] = user.role

            access_token = refresh.access_token
            access_token['role'] = user.role

            access_expiry = settings.SIMPLE_JWT.get('ACCESS_TOKEN_LIFETIME', timedelta(hours=8))
            refresh_expiry = settings.SIMPLE_JWT.get('REFRESH_TOKEN_LIFETIME', timedelta(days=7))

            return {
                'access_token': str(access_token),
                'refresh_token': str(refresh),
                'token_type': 'Bearer',
                'expires_in': int(access_expiry.total_seconds()),
                'refresh_expires_in': int(refresh_expiry.total_seconds()),
                'user_uuid': str(user.uuid),
                'issued_at': int(time.time())
            }

        except Exception as e:
            logger.error(f"Failed to generate tokens for user {user.email}: {str(e)}")
            raise

    @staticmethod
    def blacklist(refresh_token):
        """Blacklist a refresh token. Returns False when the token is invalid or already revoked."""
        if not refresh_token:
            return False
        try:
            RefreshToken(refresh_token).blacklist()
            return True
        except TokenError as e:
            logger.warning(f"Refresh token could not be blacklisted: {str(e)}")
            return False
