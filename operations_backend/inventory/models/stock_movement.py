# inventory/models/stock_movement.py

"""
CANONICAL INVENTORY LEDGER

Immutable inventory ledger entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- quantity is signed: positive = into stock, negative = out of stock
- Sign is validated against movement_type
- unit_cost_snapshot is the cost the movement was valued at
- Movements written by the posting engine link to their journal entry
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from .variant import ProductVariant


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"
        ADJUSTMENT = "ADJUSTMENT", "Adjustment / Count"
        RETURN = "RETURN", "Customer Return"
        SALE = "SALE", "Sale"

    INBOUND_TYPES = (MovementType.IN, MovementType.RETURN)
    OUTBOUND_TYPES = (MovementType.OUT, MovementType.SALE)

    variant = models.ForeignKey(
        ProductVariant,
        on_delete=models.PROTECT,
        related_name="stock_movements",
    )

    movement_type = models.CharField(max_length=12, choices=MovementType.choices)

    quantity = models.IntegerField()

    reference_type = models.CharField(max_length=50, blank=True, default="")
    reference_id = models.CharField(max_length=100, blank=True, default="")

    unit_cost_snapshot = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        help_text="Unit cost the movement was valued at (immutable).",
    )

    quantity_after = models.IntegerField(help_text="Variant quantity after this movement.")
    unit_cost_after = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        help_text="Variant weighted-average cost after this movement.",
    )

    journal_entry = models.ForeignKey(
        "accounting.JournalEntry",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["created_at"], name="idx_movement_created_at"),
            models.Index(fields=["movement_type"], name="idx_movement_type"),
            models.Index(fields=["variant", "created_at"], name="idx_movement_variant_created"),
            models.Index(fields=["reference_type", "reference_id"], name="idx_movement_reference"),
        ]

    def clean(self):
        if not self.quantity:
            raise ValidationError("quantity cannot be zero")

        if self.movement_type in self.INBOUND_TYPES and self.quantity < 0:
            raise ValidationError(f"{self.movement_type} movements must be positive")
        if self.movement_type in self.OUTBOUND_TYPES and self.quantity > 0:
            raise ValidationError(f"{self.movement_type} movements must be negative")

        if self.unit_cost_snapshot is not None and self.unit_cost_snapshot < 0:
            raise ValidationError("unit_cost_snapshot cannot be negative")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    @property
    def total_cost(self) -> Decimal:
        return (self.unit_cost_snapshot or Decimal("0")) * Decimal(int(self.quantity or 0))

    def __str__(self):
        return f"{self.variant_id} | {self.movement_type} | {self.quantity}"
