# backend/urls.py
"""
PROJECT URLS

Everything is served under /api/:

- /api/accounting/...  ledger: events, manual journals, periods, mappings, reports
- /api/inventory/...   product variants + stock movement history
- /api/health/         liveness + database reachability (public)

The Django admin mounts at settings.ADMIN_PATH (env ADMIN_PATH).
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import admin
from django.db import connection
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from accounting.models.account import Account

logger = logging.getLogger(__name__)


@extend_schema(responses={200: dict})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(
        {
            "service": "operations-ledger",
            "currency": settings.ACCOUNTING_DEFAULT_CURRENCY,
            "auth": {
                "jwt_create": "/api/auth/jwt/create/",
                "jwt_refresh": "/api/auth/jwt/refresh/",
            },
            "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
            "modules": {
                "accounting": "/api/accounting/",
                "inventory": "/api/inventory/",
            },
        }
    )


@extend_schema(responses={200: dict, 503: dict})
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    200 when the database answers; `chart_seeded` tells operators whether
    `manage.py seed_chart` has been run.
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        chart_seeded = Account.objects.exists()
    except OperationalError as exc:
        logger.error("Health check failed", extra={"error": str(exc)})
        return Response(
            {"status": "degraded", "db": "down", "error": str(exc)},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return Response({"status": "ok", "db": "ok", "chart_seeded": chart_seeded})


ADMIN_PATH = settings.ADMIN_PATH.strip("/") + "/"

api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("accounting/", include("accounting.api.urls")),
    path("inventory/", include("inventory.api.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
