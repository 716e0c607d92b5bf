# inventory/services/costing.py

"""
WEIGHTED-AVERAGE COSTING SERVICE

Purpose:
- Serialize cost updates per variant (row lock on the variant cost record)
- Apply receipts / issues / counts / adjustments to locked variants
- Persist immutable StockMovement rows linked to the journal entry

Rules:
- Receipt:   new_cost = (old_qty*old_cost + qty*unit_cost) / (old_qty + qty)
- Issue:     consumes at the CURRENT cost; cost is unchanged
- Count:     quantity := counted; value delta = (counted - system) * cost
- Stock can never go below zero

Callers MUST run inside transaction.atomic (the posting engine does).
Variants are locked in primary-key order to avoid deadlocks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import OperationalError, connection

from accounting.services.exceptions import (
    InsufficientStockError,
    PostingEventError,
    VariantCostLockTimeoutError,
)
from inventory.models import ProductVariant, StockMovement

logger = logging.getLogger(__name__)

FOURPLACES = Decimal("0.0001")

# DecimalField(max_digits=18, decimal_places=4)
MAX_COST_INTEGER_DIGITS = 14


def _q4(value: Decimal) -> Decimal:
    return Decimal(value).quantize(FOURPLACES, rounding=ROUND_HALF_UP)


@dataclass
class MovementDraft:
    variant: ProductVariant
    movement_type: str
    quantity: int
    unit_cost: Decimal
    quantity_after: int
    unit_cost_after: Decimal

    @property
    def value(self) -> Decimal:
        """Unsigned monetary value of the movement (unrounded)."""
        return abs(Decimal(self.quantity)) * self.unit_cost


def weighted_average(old_qty: int, old_cost: Decimal, recv_qty: int, recv_cost: Decimal) -> Decimal:
    old_qty = int(old_qty or 0)
    recv_qty = int(recv_qty or 0)
    total_qty = old_qty + recv_qty

    if total_qty <= 0:
        return _q4(recv_cost or Decimal("0"))

    total_value = Decimal(old_qty) * Decimal(old_cost or 0) + Decimal(recv_qty) * Decimal(recv_cost or 0)
    return _q4(total_value / Decimal(total_qty))


def _set_lock_timeout() -> None:
    if connection.vendor != "postgresql":
        return
    timeout_ms = int(getattr(settings, "ACCOUNTING_VARIANT_LOCK_TIMEOUT_MS", 5000))
    with connection.cursor() as cursor:
        cursor.execute("SELECT set_config('lock_timeout', %s, true)", [f"{timeout_ms}ms"])


def lock_variants(variant_ids) -> dict[int, ProductVariant]:
    """
    Lock the cost records of the given variants for the rest of the
    current transaction.
    """
    ids = sorted({int(v) for v in variant_ids})
    if not ids:
        return {}

    try:
        _set_lock_timeout()
        locked = list(
            ProductVariant.objects.select_for_update().filter(pk__in=ids).order_by("pk")
        )
    except OperationalError as exc:
        logger.warning("Variant cost lock timeout", extra={"variant_ids": ids})
        raise VariantCostLockTimeoutError(
            f"Timed out waiting for the cost lock on variants {ids}."
        ) from exc

    by_id = {v.pk: v for v in locked}
    missing = [i for i in ids if i not in by_id]
    if missing:
        raise PostingEventError(f"Unknown product variant(s): {missing}")

    inactive = [v.sku for v in locked if not v.is_active]
    if inactive:
        raise PostingEventError(f"Inactive product variant(s): {inactive}")

    return by_id


def _positive_qty(quantity, *, sku: str) -> int:
    if isinstance(quantity, bool):
        raise PostingEventError(f"quantity for {sku} must be an integer")
    try:
        qty = int(quantity)
    except (TypeError, ValueError) as exc:
        raise PostingEventError(f"quantity for {sku} must be an integer") from exc
    if qty <= 0:
        raise PostingEventError(f"quantity for {sku} must be greater than zero")
    return qty


def apply_receipt(
    variant: ProductVariant,
    quantity,
    unit_cost,
    *,
    movement_type: str = StockMovement.MovementType.IN,
) -> MovementDraft:
    qty = _positive_qty(quantity, sku=variant.sku)

    try:
        cost = _q4(Decimal(str(unit_cost)))
    except (ArithmeticError, ValueError, TypeError) as exc:
        raise PostingEventError(f"unit_cost for {variant.sku} is invalid: {unit_cost!r}") from exc
    if cost < 0:
        raise PostingEventError(f"unit_cost for {variant.sku} cannot be negative")
    if cost and cost.adjusted() >= MAX_COST_INTEGER_DIGITS:
        raise PostingEventError(f"unit_cost for {variant.sku} is too large: {unit_cost!r}")

    new_cost = weighted_average(variant.quantity_on_hand, variant.unit_cost, qty, cost)

    variant.quantity_on_hand = int(variant.quantity_on_hand or 0) + qty
    variant.unit_cost = new_cost

    return MovementDraft(
        variant=variant,
        movement_type=movement_type,
        quantity=qty,
        unit_cost=cost,
        quantity_after=variant.quantity_on_hand,
        unit_cost_after=new_cost,
    )


def apply_issue(
    variant: ProductVariant,
    quantity,
    *,
    movement_type: str = StockMovement.MovementType.SALE,
) -> MovementDraft:
    qty = _positive_qty(quantity, sku=variant.sku)
    on_hand = int(variant.quantity_on_hand or 0)

    if qty > on_hand:
        raise InsufficientStockError(
            f"Insufficient stock for {variant.sku}: on hand {on_hand}, requested {qty}"
        )

    cost = _q4(variant.unit_cost or Decimal("0"))
    variant.quantity_on_hand = on_hand - qty

    return MovementDraft(
        variant=variant,
        movement_type=movement_type,
        quantity=-qty,
        unit_cost=cost,
        quantity_after=variant.quantity_on_hand,
        unit_cost_after=cost,
    )


def apply_delta(variant: ProductVariant, delta) -> MovementDraft | None:
    if isinstance(delta, bool):
        raise PostingEventError(f"quantity_delta for {variant.sku} must be an integer")
    try:
        d = int(delta)
    except (TypeError, ValueError) as exc:
        raise PostingEventError(f"quantity_delta for {variant.sku} must be an integer") from exc

    if d == 0:
        return None

    on_hand = int(variant.quantity_on_hand or 0)
    if on_hand + d < 0:
        raise InsufficientStockError(
            f"Cannot reduce stock of {variant.sku} below zero. On hand: {on_hand}, delta: {d}"
        )

    cost = _q4(variant.unit_cost or Decimal("0"))
    variant.quantity_on_hand = on_hand + d

    return MovementDraft(
        variant=variant,
        movement_type=StockMovement.MovementType.ADJUSTMENT,
        quantity=d,
        unit_cost=cost,
        quantity_after=variant.quantity_on_hand,
        unit_cost_after=cost,
    )


def apply_count(variant: ProductVariant, counted) -> MovementDraft | None:
    if isinstance(counted, bool):
        raise PostingEventError(f"counted_quantity for {variant.sku} must be an integer")
    try:
        physical = int(counted)
    except (TypeError, ValueError) as exc:
        raise PostingEventError(f"counted_quantity for {variant.sku} must be an integer") from exc
    if physical < 0:
        raise PostingEventError(f"counted_quantity for {variant.sku} cannot be negative")

    return apply_delta(variant, physical - int(variant.quantity_on_hand or 0))


def record_movements(
    drafts: list[MovementDraft],
    *,
    journal_entry=None,
    reference_type: str = "",
    reference_id: str = "",
) -> list[StockMovement]:
    """
    Persist variant state + one immutable movement per draft.
    """
    touched: dict[int, ProductVariant] = {}
    movements: list[StockMovement] = []

    for draft in drafts:
        touched[draft.variant.pk] = draft.variant
        movements.append(
            StockMovement.objects.create(
                variant=draft.variant,
                movement_type=draft.movement_type,
                quantity=draft.quantity,
                unit_cost_snapshot=draft.unit_cost,
                quantity_after=draft.quantity_after,
                unit_cost_after=draft.unit_cost_after,
                reference_type=reference_type or "",
                reference_id=reference_id or "",
                journal_entry=journal_entry,
            )
        )

    for variant in touched.values():
        variant.save(update_fields=["quantity_on_hand", "unit_cost", "updated_at"])

    return movements
