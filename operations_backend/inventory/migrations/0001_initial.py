"""
======================================================
PATH: inventory/migrations/0001_initial.py
======================================================
MIGRATION: VARIANT COST RECORDS + STOCK LEDGER
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ProductVariant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sku", models.CharField(db_index=True, max_length=128, unique=True)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("quantity_on_hand", models.IntegerField(default=0)),
                (
                    "unit_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0.0000"),
                        help_text="Running weighted-average unit cost (HPP).",
                        max_digits=18,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["sku"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity_on_hand__gte=0),
                        name="chk_variant_qty_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(unit_cost__gte=0),
                        name="chk_variant_cost_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "movement_type",
                    models.CharField(
                        choices=[
                            ("IN", "Stock In"),
                            ("OUT", "Stock Out"),
                            ("ADJUSTMENT", "Adjustment / Count"),
                            ("RETURN", "Customer Return"),
                            ("SALE", "Sale"),
                        ],
                        max_length=12,
                    ),
                ),
                ("quantity", models.IntegerField()),
                ("reference_type", models.CharField(blank=True, default="", max_length=50)),
                ("reference_id", models.CharField(blank=True, default="", max_length=100)),
                (
                    "unit_cost_snapshot",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Unit cost the movement was valued at (immutable).",
                        max_digits=18,
                    ),
                ),
                ("quantity_after", models.IntegerField(help_text="Variant quantity after this movement.")),
                (
                    "unit_cost_after",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Variant weighted-average cost after this movement.",
                        max_digits=18,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "journal_entry",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="accounting.journalentry",
                    ),
                ),
                (
                    "variant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="inventory.productvariant",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["created_at"], name="idx_movement_created_at"),
                    models.Index(fields=["movement_type"], name="idx_movement_type"),
                    models.Index(fields=["variant", "created_at"], name="idx_movement_variant_created"),
                    models.Index(fields=["reference_type", "reference_id"], name="idx_movement_reference"),
                ],
            },
        ),
    ]
