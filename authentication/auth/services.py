import logging
import traceback
from django.utils import timezone
from django.core.cache import cache
from django.contrib.auth import authenticate

from authentication.models import CustomUser
from authentication.serializers import UserBaseSerializer
from authentication.core.jwt_utils import TokenManager

logger = logging.getLogger(__name__)

MAX_FAILED_LOGINS = 5
FAILED_LOGIN_WINDOW = 1800
LOCKOUT_SECONDS = 900


class AuthenticationService:
    """Service class to handle admin login and logout"""

    @staticmethod
    def _client_ip(request_meta):
        forwarded = request_meta.get('HTTP_X_FORWARDED_FOR')
        if forwarded:
            return forwarded.split(',')[0].strip()
        return request_meta.get('REMOTE_ADDR')

    @staticmethod
    def _record_failure(email):
        failed_attempts = cache.get(f"failed_logins:{email}", 0) + 1
        cache.set(f"failed_logins:{email}", failed_attempts, timeout=FAILED_LOGIN_WINDOW)
        if failed_attempts >= MAX_FAILED_LOGINS:
            cache.set(f"account_lockout:{email}", True, timeout=LOCKOUT_SECONDS)
            logger.warning(f"Account locked due to failed attempts: {email}")
        return failed_attempts

    @staticmethod
    def login(email, password, request_meta=None, request=None):
        """
        Verify an email/password pair against the stored bcrypt hash.

        Returns (success, payload, status_code). The payload carries the
        user and a JWT pair; the caller keeps that pair as its session.
        """
        if not email or not password:
            return False, {"success": False, "error": "Email and password are required."}, 400

        if request_meta:
            logger.info(f"Login attempt from IP: {AuthenticationService._client_ip(request_meta)}")

        try:
            if cache.get(f"account_lockout:{email}"):
                logger.warning(f"Login attempt for locked account: {email}")
                return False, {
                    "success": False,
                    "error": "Account temporarily locked due to multiple failed attempts. Try again later.",
                }, 403

            user = authenticate(request=request, username=email, password=password)
            if not user:
                existing = CustomUser.objects.filter(email=email).first()
                if existing is not None and not existing.is_active and existing.check_password(password):
                    logger.warning(f"Login attempt for disabled account: {email}")
                    return False, {"success": False, "error": "Account is disabled. Please contact support."}, 403

                AuthenticationService._record_failure(email)
                logger.warning(f"Failed login attempt for email: {email}")
                return False, {"success": False, "error": "Invalid credentials"}, 401

            cache.delete(f"failed_logins:{email}")

            context = {'request': request} if request else {}
            serializer = UserBaseSerializer(user, context=context)
            tokens = TokenManager.generate_tokens(user)

            user.last_login = timezone.now()
            user.save(update_fields=['last_login'])

            logger.info(f"Login successful for user: {user.email}")
            return True, {
                "success": True,
                "data": {
                    'user': serializer.data,
                    'tokens': tokens,
                }
            }, 200

        except Exception as e:
            logger.error(f"Unexpected login error {str(e)}")
            logger.error(f"Login error traceback: {traceback.format_exc()}")
            return False, {"success": False, "error": "Internal server error"}, 500

    @staticmethod
    def logout(user, refresh_token=None):
        """End an admin session by revoking its refresh token"""
        revoked = TokenManager.blacklist(refresh_token)
        logger.info(f"User logged out: {user.pk} (refresh token revoked: {revoked})")
        return True, {
            "success": True,
            "message": "Successfully logged out",
            "data": {"token_revoked": revoked},
        }, 200
