"""
Root URL configuration.

REST endpoints live under `/api/` (auth under `/api/auth/`); the OpenAPI
schema and its Swagger/Redoc renderers are served next to them.
"""

from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

api_docs = [
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", RedirectView.as_view(pattern_name="swagger-ui", permanent=False)),
    path("api/", include(api_docs)),
    path("api/auth/", include("users.urls")),
    path("api/", include("groups.urls")),
    path("api/", include("events.urls")),
]
