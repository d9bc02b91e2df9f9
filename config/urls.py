"""URL configuration for the hotel car service.

The `urlpatterns` list routes URLs to the application-level routers provided
by Django Rest Framework and each app, plus the OpenAPI schema and docs.
"""
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/fleet/', include('apps.fleet.urls')),
    path('api/v1/notifications/', include('apps.notifications.urls')),
    # API docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
