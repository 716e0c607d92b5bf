# inventory/admin.py

from django.contrib import admin

from inventory.models import ProductVariant, StockMovement


@admin.register(ProductVariant)
class ProductVariantAdmin(admin.ModelAdmin):
    list_display = ("sku", "name", "quantity_on_hand", "unit_cost", "is_active")
    list_filter = ("is_active",)
    search_fields = ("sku", "name")
    ordering = ("sku",)

    # Service-managed (posting engine only)
    readonly_fields = ("quantity_on_hand", "unit_cost", "created_at", "updated_at")


# ============================================================
# STOCK MOVEMENT (STRICTLY IMMUTABLE)
# ============================================================


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "variant",
        "movement_type",
        "quantity",
        "unit_cost_snapshot",
        "quantity_after",
        "unit_cost_after",
        "journal_entry",
        "created_at",
    )
    list_filter = ("movement_type",)
    search_fields = ("variant__sku", "reference_type", "reference_id")
    ordering = ("-created_at",)

    readonly_fields = (
        "variant",
        "movement_type",
        "quantity",
        "unit_cost_snapshot",
        "quantity_after",
        "unit_cost_after",
        "reference_type",
        "reference_id",
        "journal_entry",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
