# inventory/tests/test_api.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from accounting.models.mapping import EventType
from accounting.services.chart_service import seed_default_chart
from accounting.services.posting_engine import PostingEvent, post_event
from inventory.api.serializers import ProductVariantSerializer
from inventory.models import ProductVariant

User = get_user_model()


class InventoryApiTests(TestCase):
    def setUp(self):
        seed_default_chart()
        self.client = APIClient()
        self.admin = User.objects.create_superuser(
            username="admin", password="password123", email="admin@example.com"
        )
        self.client.force_authenticate(user=self.admin)

    def test_cost_fields_are_read_only(self):
        res = self.client.post(
            "/api/inventory/variants/",
            {"sku": "WID-001", "name": "Widget", "quantity_on_hand": 50, "unit_cost": "999"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        variant = ProductVariant.objects.get(sku="WID-001")
        self.assertEqual(variant.quantity_on_hand, 0)
        self.assertEqual(variant.unit_cost, 0)

    def test_variant_with_movements_cannot_be_deleted(self):
        variant = ProductVariant.objects.create(sku="WID-002", name="Widget")
        post_event(
            PostingEvent(
                event_type=EventType.CONFIRM_PURCHASE,
                entry_date=date(2024, 3, 5),
                reference_type="purchase",
                reference_id="PO-1",
                stock_lines=[{"variant_id": variant.id, "quantity": 3, "unit_cost": "10"}],
            )
        )

        res = self.client.delete(f"/api/inventory/variants/{variant.id}/")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(ProductVariant.objects.filter(pk=variant.pk).exists())

        movements = self.client.get("/api/inventory/movements/", {"variant": variant.id})
        self.assertEqual(movements.status_code, status.HTTP_200_OK)
        self.assertEqual(movements.data["count"], 1)
        self.assertEqual(movements.data["results"][0]["sku"], "WID-002")

    def test_plain_user_cannot_list_variants(self):
        user = User.objects.create_user(username="clerk", password="password123")
        self.client.force_authenticate(user=user)

        res = self.client.get("/api/inventory/variants/")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_edit_on_stale_variant_keeps_posted_stock(self):
        variant = ProductVariant.objects.create(sku="WID-003", name="Widget")
        stale = ProductVariant.objects.get(pk=variant.pk)

        post_event(
            PostingEvent(
                event_type=EventType.CONFIRM_PURCHASE,
                entry_date=date(2024, 3, 5),
                reference_type="purchase",
                reference_id="PO-2",
                stock_lines=[{"variant_id": variant.id, "quantity": 10, "unit_cost": "100"}],
            )
        )

        serializer = ProductVariantSerializer(stale, data={"name": "Widget v2"}, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        variant.refresh_from_db()
        self.assertEqual(variant.name, "Widget v2")
        self.assertEqual(variant.quantity_on_hand, 10)
        self.assertEqual(variant.unit_cost, Decimal("100.0000"))

    def test_patch_renames_without_touching_stock(self):
        variant = ProductVariant.objects.create(sku="WID-004", name="Widget")
        post_event(
            PostingEvent(
                event_type=EventType.CONFIRM_PURCHASE,
                entry_date=date(2024, 3, 5),
                reference_type="purchase",
                reference_id="PO-3",
                stock_lines=[{"variant_id": variant.id, "quantity": 4, "unit_cost": "25"}],
            )
        )

        res = self.client.patch(
            f"/api/inventory/variants/{variant.id}/",
            {"name": "Widget Pro", "quantity_on_hand": 0},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["name"], "Widget Pro")
        self.assertEqual(res.data["quantity_on_hand"], 4)
