import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiExample
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.core.base_view import BaseAPIView
from authentication.core.permissions import IsAdminOrReadOnly
from authentication.core.response import standardized_response
from .models import SiteSettings, Video
from .serializers import SiteSettingsSerializer, SiteSettingsWriteSerializer, VideoSerializer
from .services.settings_service import SettingsService

logger = logging.getLogger(__name__)


# ---------------------------
# Videos
# ---------------------------
class VideoListCreateView(BaseAPIView, generics.ListAPIView):
    permission_classes = [IsAdminOrReadOnly]
    serializer_class = VideoSerializer
    queryset = Video.objects.all()

    @extend_schema(tags=["Videos"], responses={200: VideoSerializer(many=True)}, description="List guide videos, newest first")
    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response(standardized_response(data=serializer.data))

    @extend_schema(
        tags=["Videos"],
        request=VideoSerializer,
        examples=[
            OpenApiExample(
                "Add video example",
                value={
                    "title": "Installing your dispenser",
                    "description": "Step by step setup",
                    "videoUrl": "https://youtu.be/dQw4w9WgXcQ",
                }
            )
        ],
        responses={201: VideoSerializer, 400: {"description": "Invalid input"}},
        description="Add a video (admin only). YouTube links are stored as embed URLs."
    )
    def post(self, request):
        serializer = VideoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        video = serializer.save()
        logger.info(f"Video created: {video.id} ({video.video_url})")
        return Response(
            standardized_response(message="Video created successfully", data=VideoSerializer(video).data),
            status=status.HTTP_201_CREATED
        )


class VideoDetailView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(tags=["Videos"], responses={200: VideoSerializer, 404: {"description": "Video not found"}})
    def get(self, request, pk):
        video = get_object_or_404(Video, pk=pk)
        return Response(standardized_response(data=VideoSerializer(video).data))

    @extend_schema(
        tags=["Videos"],
        request=VideoSerializer,
        responses={200: VideoSerializer, 400: {"description": "Invalid input"}, 404: {"description": "Video not found"}},
        description="Update a video (admin only)"
    )
    def put(self, request, pk):
        video = get_object_or_404(Video, pk=pk)
        serializer = VideoSerializer(video, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        video = serializer.save()
        return Response(standardized_response(message="Video updated successfully", data=VideoSerializer(video).data))

    @extend_schema(tags=["Videos"], responses={200: {"description": "Video deleted"}, 404: {"description": "Video not found"}})
    def delete(self, request, pk):
        video = get_object_or_404(Video, pk=pk)
        video.delete()
        logger.info(f"Video deleted: {pk}")
        return Response(standardized_response(message="Video deleted"))


# ---------------------------
# Site Settings
# ---------------------------
class SiteSettingsView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(tags=["Settings"], responses={200: SiteSettingsSerializer}, description="Storefront contact details and banners")
    def get(self, request):
        return Response(standardized_response(data=SiteSettingsSerializer(SiteSettings.load()).data))

    @extend_schema(
        tags=["Settings"],
        request={'multipart/form-data': SiteSettingsWriteSerializer, 'application/json': SiteSettingsWriteSerializer},
        responses={200: SiteSettingsSerializer, 400: {"description": "Invalid input"}},
        description=(
            "Update the site settings (admin only). A pasted map `<iframe>` is reduced to its src. "
            "`banners` is the new ordered banner list; a `banner_<index>` file replaces that banner's image."
        )
    )
    def put(self, request):
        site_settings = SettingsService.update_settings(request.data, request.FILES)
        return Response(
            standardized_response(message="Settings updated successfully", data=SiteSettingsSerializer(site_settings).data)
        )


# ---------------------------
# Health
# ---------------------------
class HealthCheckView(APIView):
    """Liveness probe. Returns a bare object rather than the response envelope"""
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Health"], responses={200: {"description": "Service is up"}})
    def get(self, request):
        return Response({
            "status": "ok",
            "mode": "development" if settings.DEBUG else "production",
            "timestamp": timezone.now().isoformat(),
        })
