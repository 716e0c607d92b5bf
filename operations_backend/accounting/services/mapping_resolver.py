# accounting/services/mapping_resolver.py

"""
======================================================
PATH: accounting/services/mapping_resolver.py
======================================================
ACCOUNT MAPPING RESOLVER

Given (event_type, event_context) returns WHICH accounts an event touches,
on which side, and which amount weight each line carries. It never decides
HOW MUCH; the posting engine owns the arithmetic per event type.

Selection rules:
- Only active rows pointing at active accounts are candidates
- Rows are grouped by (side, amount_weight)
- Inside a group, rows with the exact event_context beat NULL-context rows
- Highest priority wins; a tie at the top raises MappingAmbiguousError
- A required side with no candidates raises MappingNotFoundError

Pure read: no writes, no caching (mappings are read fresh on every post).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db.models import Q

from accounting.models.account import Account
from accounting.models.mapping import AccountMapping, EventType
from accounting.services.exceptions import (
    MappingAmbiguousError,
    MappingNotFoundError,
    PostingEventError,
)

logger = logging.getLogger(__name__)

SIDES = (AccountMapping.DEBIT, AccountMapping.CREDIT)


@dataclass(frozen=True)
class ResolvedLine:
    account: Account
    side: str
    amount_weight: str
    priority: int
    mapping_id: int


@dataclass(frozen=True)
class ResolvedMapping:
    event_type: str
    event_context: str | None
    debit: tuple[ResolvedLine, ...] = field(default_factory=tuple)
    credit: tuple[ResolvedLine, ...] = field(default_factory=tuple)

    @property
    def lines(self) -> tuple[ResolvedLine, ...]:
        return self.debit + self.credit

    def weights(self, side: str | None = None) -> set[str]:
        return {ln.amount_weight for ln in self.lines if side is None or ln.side == side}

    def as_dict(self) -> dict:
        return {
            "debit": [(ln.account, ln.amount_weight) for ln in self.debit],
            "credit": [(ln.account, ln.amount_weight) for ln in self.credit],
        }


def normalize_context(event_context: str | None) -> str | None:
    if event_context is None:
        return None
    ctx = str(event_context).strip().lower()
    return ctx or None


def _pick_top(event_type: str, ctx: str | None, side: str, weight: str, rows: list[AccountMapping]) -> AccountMapping:
    specific = [r for r in rows if ctx is not None and r.event_context == ctx]
    pool = specific or [r for r in rows if r.event_context is None]

    pool.sort(key=lambda r: (-r.priority, r.id))
    top = pool[0]

    if len(pool) > 1 and pool[1].priority == top.priority:
        tied = [r.id for r in pool if r.priority == top.priority]
        logger.error(
            "Mapping ambiguity",
            extra={
                "event_type": event_type,
                "event_context": ctx,
                "side": side,
                "amount_weight": weight,
                "mapping_ids": tied,
            },
        )
        raise MappingAmbiguousError(
            f"Ambiguous mapping for {event_type}/{ctx or '*'} {side} {weight}: "
            f"mappings {tied} share priority {top.priority}."
        )

    return top


def resolve(
    event_type: str,
    event_context: str | None = None,
    *,
    required_sides: tuple[str, ...] = SIDES,
) -> ResolvedMapping:
    """
    Resolve the mapping rules for one event.

    Raises:
        PostingEventError for an unknown event_type
        MappingNotFoundError when a required side has zero candidates
        MappingAmbiguousError when the top priority is tied
    """
    if event_type not in EventType.values or event_type == EventType.MANUAL_JOURNAL:
        raise PostingEventError(f"Unknown or unmapped event_type: {event_type!r}")

    ctx = normalize_context(event_context)

    context_q = Q(event_context__isnull=True)
    if ctx is not None:
        context_q |= Q(event_context=ctx)

    rows = list(
        AccountMapping.objects.filter(
            context_q,
            event_type=event_type,
            is_active=True,
            account__is_active=True,
        ).select_related("account")
    )

    grouped: dict[tuple[str, str], list[AccountMapping]] = {}
    for row in rows:
        grouped.setdefault((row.side, row.amount_weight), []).append(row)

    chosen: dict[str, list[ResolvedLine]] = {s: [] for s in SIDES}
    for (side, weight), group in sorted(grouped.items()):
        top = _pick_top(event_type, ctx, side, weight, group)
        chosen[side].append(
            ResolvedLine(
                account=top.account,
                side=side,
                amount_weight=weight,
                priority=top.priority,
                mapping_id=top.id,
            )
        )

    for side in required_sides:
        if not chosen[side]:
            logger.error(
                "Mapping not found",
                extra={"event_type": event_type, "event_context": ctx, "side": side},
            )
            raise MappingNotFoundError(
                f"No active {side} mapping for event {event_type}/{ctx or '*'}."
            )

    return ResolvedMapping(
        event_type=event_type,
        event_context=ctx,
        debit=tuple(chosen[AccountMapping.DEBIT]),
        credit=tuple(chosen[AccountMapping.CREDIT]),
    )
