"""
URL configuration for the FocusFlow project.
"""

from django.conf import settings
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

from common import views as common_views

handler404 = 'common.views.endpoint_not_found'

urlpatterns = [
    path('health', common_views.health, name='health'),
    path('api/v1', common_views.api_index, name='api-index'),
    path('api/v1/', include('accounts.urls')),
    path('api/v1/', include('tasks.urls')),
    path('api/v1/', include('goals.urls')),
    path('api/v1/', include('categories.urls')),
]

if settings.FOCUSFLOW.enable_swagger:
    # OpenAPI/Swagger Documentation
    urlpatterns += [
        path('api/v1/schema/', SpectacularAPIView.as_view(), name='schema'),
        path('api/v1/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
        path('api/v1/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
    ]
