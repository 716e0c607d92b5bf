# inventory/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from inventory.api.views import ProductVariantViewSet, StockMovementViewSet

router = DefaultRouter()
router.register("variants", ProductVariantViewSet, basename="product-variant")
router.register("movements", StockMovementViewSet, basename="stock-movement")

urlpatterns = [
    path("", include(router.urls)),
]
