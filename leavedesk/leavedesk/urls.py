"""
URL configuration for leavedesk project.

    /admin/          Django admin (divisions, positions, employees, quotas)
    /api/leave/      leave workflow API (leaves.urls)
    /api/schema/     OpenAPI schema (drf-spectacular)
    /api/docs/       Swagger UI
"""
# leavedesk/urls.py
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/leave/", include("leaves.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
