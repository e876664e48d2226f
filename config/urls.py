# config/urls.py
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),

    # OpenAPI
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # ✅ Versioned API
    path("api/v1/", include("hc_core.api.urls")),

    # ✅ Unversioned alias: /api/patients/, /api/auth/login/, ...
    # Keep AFTER schema/docs so those explicit routes win.
    path("api/", include("hc_core.api.urls")),
]

if settings.DEBUG:
    # uploaded record attachments
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
