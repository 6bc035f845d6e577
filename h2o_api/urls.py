from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView

from content.views import HealthCheckView


urlpatterns = [
    path('admin/', admin.site.urls),

    # App URLs
    path('api/health/', HealthCheckView.as_view(), name='health'),
    path('api/', include('authentication.urls')),
    path('api/', include('store.urls')),
    path('api/', include('content.urls')),

    # API docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
