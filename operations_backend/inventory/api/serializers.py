# inventory/api/serializers.py

"""
======================================================
PATH: inventory/api/serializers.py
======================================================
INVENTORY SERIALIZERS

IMPORTANT:
- quantity_on_hand and unit_cost are NEVER writable via API.
  They move only through posted events (posting engine -> costing service),
  so the ledger and the stock records cannot drift apart.
"""

from django.db import transaction
from rest_framework import serializers

from accounting.api.serializers.base import CleanModelSerializer
from inventory.models import ProductVariant, StockMovement


class ProductVariantSerializer(CleanModelSerializer):
    stock_value = serializers.DecimalField(max_digits=24, decimal_places=4, read_only=True)

    class Meta:
        model = ProductVariant
        fields = (
            "id",
            "sku",
            "name",
            "quantity_on_hand",
            "unit_cost",
            "stock_value",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "quantity_on_hand",
            "unit_cost",
            "stock_value",
            "created_at",
            "updated_at",
        )

    @transaction.atomic
    def update(self, instance, validated_data):
        # Stock columns may have moved since the row was read; edit the locked current row.
        current = ProductVariant.objects.select_for_update().get(pk=instance.pk)
        return super().update(current, validated_data)


class StockMovementSerializer(serializers.ModelSerializer):
    sku = serializers.CharField(source="variant.sku", read_only=True)
    total_cost = serializers.DecimalField(max_digits=24, decimal_places=4, read_only=True)

    class Meta:
        model = StockMovement
        fields = (
            "id",
            "variant",
            "sku",
            "movement_type",
            "quantity",
            "unit_cost_snapshot",
            "total_cost",
            "quantity_after",
            "unit_cost_after",
            "reference_type",
            "reference_id",
            "journal_entry",
            "created_at",
        )
        read_only_fields = fields
