import logging
import traceback

from rest_framework import status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.throttling import AnonRateThrottle
from drf_spectacular.utils import extend_schema

from authentication.core.base_view import BaseAPIView
from authentication.core.response import standardized_response
from .services import AuthenticationService
from authentication.serializers import (
    UserBaseSerializer,
    UserLoginSerializer,
    LogoutSerializer,
    AuthResponseSerializer
)

logger = logging.getLogger(__name__)


class UserLoginView(BaseAPIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AnonRateThrottle]

    @extend_schema(
        tags=["Auth"],
        request=UserLoginSerializer,
        responses={200: AuthResponseSerializer, 400: AuthResponseSerializer, 401: AuthResponseSerializer},
        description="Log in to the admin dashboard with email and password."
    )
    def post(self, request):
        try:
            success, response_data, status_code = AuthenticationService.login(
                email=request.data.get('email'),
                password=request.data.get('password'),
                request_meta=request.META,
                request=request
            )
            return Response(standardized_response(**response_data), status=status_code)

        except Exception as e:
            logger.error(f"Login error: {str(e)}")
            logger.error(traceback.format_exc())
            return Response(
                standardized_response(success=False, error="Internal server error"),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )


class UserLogoutView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Auth"],
        request=LogoutSerializer,
        responses={200: AuthResponseSerializer},
        description="Revoke the refresh token of the current admin session."
    )
    def post(self, request):
        success, response_data, status_code = AuthenticationService.logout(
            request.user,
            refresh_token=request.data.get('refresh_token'),
        )
        return Response(standardized_response(**response_data), status=status_code)


class CurrentUserView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Auth"], responses={200: UserBaseSerializer})
    def get(self, request):
        return Response(standardized_response(data=UserBaseSerializer(request.user).data))
