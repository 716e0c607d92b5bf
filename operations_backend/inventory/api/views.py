# inventory/api/views.py

"""
INVENTORY API

- variants/: product variant CRUD (cost + quantity read-only)
- movements/: immutable stock ledger, read-only

Deleting a variant with movement history is refused (movements PROTECT it).
"""

from __future__ import annotations

import django_filters
from django.db.models import ProtectedError
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.permissions import HasActionPermission
from inventory.api.serializers import ProductVariantSerializer, StockMovementSerializer
from inventory.models import ProductVariant, StockMovement


class StockMovementFilter(django_filters.FilterSet):
    created_at = django_filters.DateFromToRangeFilter()
    sku = django_filters.CharFilter(field_name="variant__sku")

    class Meta:
        model = StockMovement
        fields = [
            "variant",
            "sku",
            "movement_type",
            "reference_type",
            "reference_id",
            "journal_entry",
            "created_at",
        ]


@extend_schema(tags=["inventory"])
class ProductVariantViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = ProductVariantSerializer
    queryset = ProductVariant.objects.all().order_by("sku")
    filterset_fields = ["sku", "is_active"]

    required_permissions = {
        "list": "inventory.view_productvariant",
        "retrieve": "inventory.view_productvariant",
        "create": "inventory.add_productvariant",
        "update": "inventory.change_productvariant",
        "partial_update": "inventory.change_productvariant",
        "destroy": "inventory.delete_productvariant",
    }

    def destroy(self, request, *args, **kwargs):
        variant = self.get_object()
        try:
            variant.delete()
        except ProtectedError:
            return Response(
                {"detail": "Variant has stock movements; deactivate it instead."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["inventory"])
class StockMovementViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = StockMovementSerializer
    filterset_class = StockMovementFilter
    queryset = StockMovement.objects.select_related("variant").order_by("-created_at", "-id")

    required_permissions = {
        "list": "inventory.view_stockmovement",
        "retrieve": "inventory.view_stockmovement",
    }
