from rest_framework import serializers

from .models import SiteSettings, Video
from .normalizers import classify_map_url, extract_map_src, normalize_video_url


# ---------------------------
# Video Serializer
# ---------------------------
class VideoSerializer(serializers.ModelSerializer):
    videoUrl = serializers.CharField(source='video_url', max_length=500)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Video
        fields = ['id', 'title', 'description', 'videoUrl', 'thumbnail', 'date', 'createdAt']
        read_only_fields = ['id', 'createdAt']
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
            'thumbnail': {'required': False, 'allow_blank': True, 'allow_null': True},
            'date': {'required': False, 'allow_null': True},
        }

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required")
        return value.strip()

    def validate_videoUrl(self, value):
        normalized = normalize_video_url(value)
        if not normalized:
            raise serializers.ValidationError("Video URL is required")
        return normalized


# ---------------------------
# Site Settings Serializers
# ---------------------------
class BannerSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    banner_image = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True, default=None)


class SiteSettingsSerializer(serializers.ModelSerializer):
    mapUrl = serializers.CharField(source='map_url', read_only=True)
    mapUrlWarning = serializers.SerializerMethodField()
    facebookUrl = serializers.CharField(source='facebook_url', read_only=True)
    youtubeUrl = serializers.CharField(source='youtube_url', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = SiteSettings
        fields = [
            'phone', 'email', 'address', 'mapUrl', 'mapUrlWarning',
            'facebookUrl', 'youtubeUrl', 'banners', 'updatedAt'
        ]
        read_only_fields = fields

    def get_mapUrlWarning(self, obj):
        return classify_map_url(obj.map_url)


class SiteSettingsWriteSerializer(serializers.Serializer):
    """Scalar settings fields; `banners` is decoded separately since it may arrive as JSON text"""
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.CharField(max_length=255, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    mapUrl = serializers.CharField(source='map_url', required=False, allow_blank=True)
    facebookUrl = serializers.CharField(source='facebook_url', max_length=500, required=False, allow_blank=True)
    youtubeUrl = serializers.CharField(source='youtube_url', max_length=500, required=False, allow_blank=True)

    def validate_mapUrl(self, value):
        return extract_map_src(value)
