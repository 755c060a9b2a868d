# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from . import views

# -------------------------------------------------------------------
# URL CONFIGURATION
# -------------------------------------------------------------------

urlpatterns = [
    # ----------------------------------------------------------------
    # Public routes
    # ----------------------------------------------------------------
    path("", views.home_view, name="home"),

    # ----------------------------------------------------------------
    # Health & diagnostics
    # ----------------------------------------------------------------
    path("health/", views.health_check_view, name="health_check"),

    # ----------------------------------------------------------------
    # Authentication (django-allauth)
    # ----------------------------------------------------------------
    path("accounts/", include("allauth.urls")),

    # ----------------------------------------------------------------
    # Academy module (tenant-scoped)
    # ----------------------------------------------------------------
    path("academia/<slug:tenant_slug>/", include(("billing.urls", "billing"), namespace="billing")),
    path("academia/<slug:tenant_slug>/", include(("students.urls", "students"), namespace="students")),

    # ----------------------------------------------------------------
    # Platform administration (super admins)
    # ----------------------------------------------------------------
    path("platform/", include(("core.urls", "platform"), namespace="platform")),
    path("platform/", include(("users.urls", "users"), namespace="users")),

    # ----------------------------------------------------------------
    # Admin
    # ----------------------------------------------------------------
    path("admin/", admin.site.urls),
]

# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------

handler400 = "config.views.handler400"
handler403 = "config.views.handler403"
handler404 = "config.views.handler404"
handler500 = "config.views.handler500"

# -------------------------------------------------------------------
# Static & media (development only)
# -------------------------------------------------------------------

if settings.DEBUG:
    urlpatterns += static(
        settings.MEDIA_URL,
        document_root=settings.MEDIA_ROOT,
    )
