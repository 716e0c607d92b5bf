# inventory/models/variant.py

"""
PRODUCT VARIANT (STOCK-KEEPING UNIT + COST RECORD)

STOCK MODEL (IMPORTANT):
- quantity_on_hand and unit_cost are SERVICE-MANAGED only
  (inventory.services.costing, under a row lock)
- unit_cost is the running weighted-average cost (4dp)
- Receipts recompute unit_cost; outbound movements consume at it
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class ProductVariant(models.Model):
    sku = models.CharField(max_length=128, unique=True, db_index=True)
    name = models.CharField(max_length=255, db_index=True)

    quantity_on_hand = models.IntegerField(default=0)

    unit_cost = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal("0.0000"),
        help_text="Running weighted-average unit cost (HPP).",
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sku"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_on_hand__gte=0),
                name="chk_variant_qty_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(unit_cost__gte=0),
                name="chk_variant_cost_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.sku} – {self.name}"

    @property
    def stock_value(self) -> Decimal:
        return (self.unit_cost or Decimal("0")) * Decimal(int(self.quantity_on_hand or 0))

    def clean(self):
        self.sku = (self.sku or "").strip()
        self.name = (self.name or "").strip()
        if not self.sku:
            raise ValidationError({"sku": "SKU is required"})
        if not self.name:
            raise ValidationError({"name": "Name is required"})
        if self.quantity_on_hand is not None and self.quantity_on_hand < 0:
            raise ValidationError({"quantity_on_hand": "Stock cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
