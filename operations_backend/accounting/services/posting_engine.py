# accounting/services/posting_engine.py

"""
======================================================
PATH: accounting/services/posting_engine.py
======================================================
JOURNAL POSTING ENGINE

Turns one business event into one balanced journal entry (and, where the
event moves goods, the matching stock movements + weighted-average cost
update), all inside ONE transaction.

Flow (post_event):
1) Period gate: assert_open_for(entry_date) with the period row locked
2) Mapping resolution: which accounts / sides / amount weights
3) Stock effect: lock variant cost rows (pk order), apply movements
4) Amount computation per event type (net, derived cost, derived gross)
5) Line building + exact balance check
6) Persist entry + lines (idempotent on the reference key)
7) Persist stock movements + variant cost/quantity

Any failure rolls the whole unit back: no partial entry, no orphan movement.

Retries are the caller's responsibility; a repeat of an already-posted
reference raises AlreadyPostedError carrying the existing entry id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Sequence

from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from accounting.models.account import Account
from accounting.models.mapping import AccountMapping, AmountWeight, EventContext, EventType
from accounting.services import posting_rules as rules
from accounting.services.exceptions import (
    MappingNotFoundError,
    NothingToPostError,
    PostingEventError,
)
from accounting.services.journal_entry_service import (
    already_posted_error,
    create_journal_entry,
    find_posted,
)
from accounting.services.mapping_resolver import ResolvedMapping, normalize_context, resolve
from accounting.services.money import ZERO, q2
from accounting.services.period_service import assert_open_for
from inventory.models import StockMovement
from inventory.services import costing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostingEvent:
    event_type: str
    entry_date: date
    reference_type: str
    reference_id: str
    description: str = ""
    event_context: str | None = None
    amounts: Mapping[str, Any] = field(default_factory=dict)
    stock_lines: Sequence[Mapping[str, Any]] = ()
    posted_by: str = ""


def _as_date(value) -> date:
    if isinstance(value, datetime):
        if timezone.is_naive(value):
            value = timezone.make_aware(value, timezone.get_current_timezone())
        return timezone.localtime(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            d = parse_date(value.strip())
        except ValueError:
            # well-formed but impossible, e.g. 2024-02-30
            d = None
        if d is not None:
            return d
    raise PostingEventError(f"Invalid entry_date: {value!r} (expected YYYY-MM-DD)")


def _default_description(event_type: str, reference_type: str, reference_id: str) -> str:
    label = EventType(event_type).label
    return f"{label} {reference_type}:{reference_id}"


# ------------------------------------------------------
# Stock effect
# ------------------------------------------------------


def _line_variant_id(line: Mapping) -> int:
    raw = line.get("variant_id", line.get("variant"))
    if raw is None or isinstance(raw, bool):
        raise PostingEventError("Each stock line requires variant_id")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise PostingEventError(f"Invalid variant_id: {raw!r}") from exc


def _apply_stock(rule: rules.EventRule, stock_lines: Sequence[Mapping]) -> list[costing.MovementDraft]:
    """
    Lock every variant touched by the event and apply its lines in order.
    """
    variant_ids = [_line_variant_id(ln) for ln in stock_lines]

    if rule.stock == rules.STOCK_COUNT and len(set(variant_ids)) != len(variant_ids):
        raise PostingEventError("A stock count may list each variant only once")

    variants = costing.lock_variants(variant_ids)
    drafts: list[costing.MovementDraft] = []

    for vid, line in zip(variant_ids, stock_lines):
        variant = variants[vid]

        if rule.stock == rules.STOCK_RECEIPT:
            if line.get("unit_cost") in (None, ""):
                raise PostingEventError(f"unit_cost is required for received variant {variant.sku}")
            draft = costing.apply_receipt(variant, line.get("quantity"), line.get("unit_cost"))

        elif rule.stock == rules.STOCK_RETURN_IN:
            unit_cost = line.get("unit_cost")
            if unit_cost in (None, ""):
                unit_cost = variant.unit_cost
            draft = costing.apply_receipt(
                variant,
                line.get("quantity"),
                unit_cost,
                movement_type=StockMovement.MovementType.RETURN,
            )

        elif rule.stock == rules.STOCK_ISSUE:
            draft = costing.apply_issue(variant, line.get("quantity"))

        elif rule.stock == rules.STOCK_RETURN_OUT:
            draft = costing.apply_issue(
                variant,
                line.get("quantity"),
                movement_type=StockMovement.MovementType.OUT,
            )

        elif rule.stock == rules.STOCK_COUNT:
            draft = costing.apply_count(variant, line.get("counted_quantity"))

        elif rule.stock == rules.STOCK_DELTA:
            draft = costing.apply_delta(variant, line.get("quantity_delta"))

        else:
            raise PostingEventError(f"{rule.event_type} has no stock effect")

        if draft is not None:
            drafts.append(draft)

    return drafts


# ------------------------------------------------------
# Line building
# ------------------------------------------------------


def _lines_for(resolved: ResolvedMapping, values: dict[str, Decimal]) -> list[dict]:
    """
    One line per resolved mapping, amount from its weight; zero legs are skipped.
    Lines hitting the same account on the same side are merged.
    """
    merged: dict[tuple[int, str], dict] = {}

    for ln in resolved.lines:
        amount = q2(values.get(ln.amount_weight, ZERO))
        if amount == ZERO:
            continue

        key = (ln.account.pk, ln.side)
        label = AmountWeight(ln.amount_weight).label
        if key not in merged:
            merged[key] = {
                "account": ln.account,
                "debit": ZERO,
                "credit": ZERO,
                "description": label,
            }
        else:
            merged[key]["description"] = f"{merged[key]['description']}; {label}"

        if ln.side == AccountMapping.DEBIT:
            merged[key]["debit"] += amount
        else:
            merged[key]["credit"] += amount

    return list(merged.values())


def _check_coverage(resolved: ResolvedMapping, values: dict[str, Decimal]) -> None:
    missing = rules.uncovered_weights(values, resolved.weights())
    if missing:
        logger.error(
            "Event amounts without mapping",
            extra={"event_type": resolved.event_type, "event_context": resolved.event_context, "weights": missing},
        )
        raise MappingNotFoundError(
            f"No active mapping carries {', '.join(missing)} for {resolved.event_type}/"
            f"{resolved.event_context or '*'}."
        )


def _directional_lines(rule: rules.EventRule, drafts: list[costing.MovementDraft]) -> list[dict]:
    """
    Count/adjustment events: surplus valued under context `increase`,
    shortage under `decrease`, each resolved on its own.
    """
    surplus = q2(sum((d.value for d in drafts if d.quantity > 0), ZERO))
    shortage = q2(sum((d.value for d in drafts if d.quantity < 0), ZERO))

    lines: list[dict] = []
    for ctx, value in ((EventContext.INCREASE.value, surplus), (EventContext.DECREASE.value, shortage)):
        if value == ZERO:
            continue
        resolved = resolve(rule.event_type, ctx)
        values = {w: ZERO for w in rules.INPUT_WEIGHTS}
        values[rules.C] = value
        values[rules.N] = ZERO
        _check_coverage(resolved, values)
        lines.extend(_lines_for(resolved, values))

    return lines


# ------------------------------------------------------
# Public API
# ------------------------------------------------------


@transaction.atomic
def post_event(event: PostingEvent):
    """
    Post one business event.

    Returns the created JournalEntry (lines + stock movements persisted).

    Raises (all leave nothing persisted):
        PeriodClosedError / PeriodMissingError
        MappingNotFoundError / MappingAmbiguousError
        UnbalancedEntryError
        AlreadyPostedError (with .entry_id)
        VariantCostLockTimeoutError / InsufficientStockError
        PostingEventError / NothingToPostError
    """
    rule = rules.get_rule(event.event_type)
    event_type = rule.event_type.value
    ctx = normalize_context(event.event_context)
    rule.check_context(ctx)

    entry_date = _as_date(event.entry_date)
    reference_type = (event.reference_type or "").strip()
    reference_id = str(event.reference_id or "").strip()
    if not reference_type or not reference_id:
        raise PostingEventError("reference_type and reference_id are required")

    stock_lines = list(event.stock_lines or ())
    if stock_lines and not rule.has_stock_effect:
        raise PostingEventError(f"{event_type} does not accept stock lines")
    if rule.stock_required and not stock_lines:
        raise PostingEventError(f"{event_type} requires stock lines")

    amounts = rules.normalize_amounts(rule, event.amounts)

    # Retries of a posted reference short-circuit before any lock is taken
    existing = find_posted(
        event_type=event_type,
        event_context=ctx or "",
        reference_type=reference_type,
        reference_id=reference_id,
    )
    if existing is not None:
        logger.warning(
            "Duplicate event rejected",
            extra={"event_type": event_type, "reference_id": reference_id, "entry_id": existing.id},
        )
        raise already_posted_error(existing, (event_type, ctx or "", reference_type, reference_id))

    # 1) Period gate (row lock held until commit)
    assert_open_for(entry_date, lock=True)

    # 2) Mapping resolution (direction-derived events resolve after the stock effect)
    resolved = None if rule.derives_context else resolve(event_type, ctx)

    # 3) Stock effect under variant locks
    drafts: list[costing.MovementDraft] = []
    if stock_lines:
        drafts = _apply_stock(rule, stock_lines)

    # 4) + 5) Amounts and lines
    if rule.derives_context:
        lines = _directional_lines(rule, drafts)
    else:
        stock_value = sum((d.value for d in drafts), ZERO) if stock_lines else None
        values = rules.compute_amounts(rule, amounts, stock_value=stock_value)
        _check_coverage(resolved, values)
        lines = _lines_for(resolved, values)

    if not lines:
        raise NothingToPostError(f"{event_type} {reference_type}:{reference_id} has no non-zero amounts")

    description = (event.description or "").strip() or _default_description(
        event_type, reference_type, reference_id
    )

    # 6) Entry + lines (balance check, idempotency, period re-check inside)
    entry = create_journal_entry(
        entry_date=entry_date,
        description=description,
        lines=lines,
        event_type=event_type,
        event_context=ctx,
        reference_type=reference_type,
        reference_id=reference_id,
        posted_by=event.posted_by,
    )

    # 7) Stock movements + variant cost state
    if drafts:
        costing.record_movements(
            drafts,
            journal_entry=entry,
            reference_type=reference_type,
            reference_id=reference_id,
        )

    return entry


def _resolve_line_account(line: Mapping) -> Account:
    account = line.get("account")
    if isinstance(account, Account):
        return account

    account_id = line.get("account_id")
    code = str(line.get("account_code") or "").strip()

    try:
        if account_id not in (None, ""):
            return Account.objects.get(pk=account_id)
        if code:
            return Account.objects.get(code=code)
    except (Account.DoesNotExist, ValueError, TypeError) as exc:
        raise PostingEventError(f"Account not found: {account_id or code!r}") from exc

    raise PostingEventError("Each manual line requires account_id or account_code")


@transaction.atomic
def post_manual_entry(
    *,
    entry_date,
    description: str,
    lines: Sequence[Mapping[str, Any]],
    reference_type: str = "",
    reference_id: str = "",
    posted_by: str = "",
):
    """
    Post an explicit balanced journal (no mapping resolution).

    Same period, balance and idempotency rules as post_event.
    """
    d = _as_date(entry_date)
    assert_open_for(d, lock=True)

    prepared = [
        {
            "account": _resolve_line_account(line),
            "debit": line.get("debit"),
            "credit": line.get("credit"),
            "description": line.get("description") or "",
        }
        for line in (lines or ())
    ]

    return create_journal_entry(
        entry_date=d,
        description=description,
        lines=prepared,
        event_type=EventType.MANUAL_JOURNAL.value,
        event_context="",
        reference_type=reference_type,
        reference_id=reference_id,
        posted_by=posted_by,
    )
