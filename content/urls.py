from django.urls import path

from .views import SiteSettingsView, VideoDetailView, VideoListCreateView

urlpatterns = [
    # Videos
    path('videos/', VideoListCreateView.as_view(), name='video-list'),
    path('videos/<int:pk>/', VideoDetailView.as_view(), name='video-detail'),

    # Settings
    path('settings/', SiteSettingsView.as_view(), name='site-settings'),
]
