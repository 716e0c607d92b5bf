# inventory/tests/test_costing.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from accounting.services.exceptions import InsufficientStockError, PostingEventError
from inventory.models import ProductVariant, StockMovement
from inventory.services import costing


class WeightedAverageTests(SimpleTestCase):
    def test_blends_old_and_received_cost(self):
        self.assertEqual(
            costing.weighted_average(10, Decimal("100"), 10, Decimal("200")),
            Decimal("150.0000"),
        )

    def test_empty_stock_takes_received_cost(self):
        self.assertEqual(costing.weighted_average(0, Decimal("0"), 5, Decimal("12.5")), Decimal("12.5000"))

    def test_rounds_half_up_to_four_places(self):
        # (1 * 1 + 2 * 2) / 3 = 1.66666...
        self.assertEqual(costing.weighted_average(1, Decimal("1"), 2, Decimal("2")), Decimal("1.6667"))


class CostingServiceTests(TestCase):
    """
    GUARANTEES:
    - Receipts recompute the running average cost
    - Issues keep the cost and never drive stock negative
    - Counts post the difference against the book quantity
    """

    def setUp(self):
        self.variant = ProductVariant.objects.create(sku="WID-001", name="Widget")

    def test_receive_then_issue_keeps_average(self):
        costing.apply_receipt(self.variant, 10, "100")
        costing.apply_receipt(self.variant, 10, "200")
        self.assertEqual(self.variant.unit_cost, Decimal("150.0000"))

        draft = costing.apply_issue(self.variant, 5)

        self.assertEqual(draft.quantity, -5)
        self.assertEqual(draft.unit_cost, Decimal("150.0000"))
        self.assertEqual(draft.value, Decimal("750.0000"))
        self.assertEqual(self.variant.quantity_on_hand, 15)
        self.assertEqual(self.variant.unit_cost, Decimal("150.0000"))

    def test_issue_beyond_stock_is_refused(self):
        costing.apply_receipt(self.variant, 2, "10")

        with self.assertRaises(InsufficientStockError):
            costing.apply_issue(self.variant, 3)
        self.assertEqual(self.variant.quantity_on_hand, 2)

    def test_quantities_must_be_positive_integers(self):
        for bad in (0, -1, "abc", None, True):
            with self.assertRaises(PostingEventError):
                costing.apply_receipt(self.variant, bad, "10")

    def test_negative_unit_cost_is_refused(self):
        with self.assertRaises(PostingEventError):
            costing.apply_receipt(self.variant, 1, "-1")

    def test_count_and_delta(self):
        costing.apply_receipt(self.variant, 10, "20")

        self.assertIsNone(costing.apply_count(self.variant, 10))

        surplus = costing.apply_count(self.variant, 12)
        self.assertEqual(surplus.quantity, 2)
        self.assertEqual(surplus.movement_type, StockMovement.MovementType.ADJUSTMENT)

        shortage = costing.apply_delta(self.variant, -4)
        self.assertEqual(shortage.quantity, -4)
        self.assertEqual(self.variant.quantity_on_hand, 8)

        self.assertIsNone(costing.apply_delta(self.variant, 0))

        with self.assertRaises(InsufficientStockError):
            costing.apply_delta(self.variant, -9)
        with self.assertRaises(PostingEventError):
            costing.apply_count(self.variant, -1)

    def test_record_movements_persists_variant_state(self):
        drafts = [costing.apply_receipt(self.variant, 4, "25")]

        movements = costing.record_movements(drafts, reference_type="purchase", reference_id="PO-1")

        self.variant.refresh_from_db()
        self.assertEqual(self.variant.quantity_on_hand, 4)
        self.assertEqual(self.variant.unit_cost, Decimal("25.0000"))
        self.assertEqual(len(movements), 1)
        self.assertEqual(movements[0].quantity_after, 4)
        self.assertEqual(movements[0].total_cost, Decimal("100.0000"))

    def test_lock_variants_rejects_unknown_and_inactive(self):
        with self.assertRaises(PostingEventError):
            costing.lock_variants([self.variant.id, 987654])

        self.variant.is_active = False
        self.variant.save()
        with self.assertRaises(PostingEventError):
            costing.lock_variants([self.variant.id])

    def test_movements_are_immutable(self):
        movement = costing.record_movements([costing.apply_receipt(self.variant, 1, "5")])[0]

        movement.quantity = 2
        with self.assertRaises(ValidationError):
            movement.save()
        with self.assertRaises(ValidationError):
            movement.delete()
