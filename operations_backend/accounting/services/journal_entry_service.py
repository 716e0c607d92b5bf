# accounting/services/journal_entry_service.py

"""
======================================================
PATH: accounting/services/journal_entry_service.py
======================================================
JOURNAL ENTRY SERVICE (LEDGER WRITER)

This module is the ONLY place allowed to:
- Create JournalEntry
- Create JournalLine
- Enforce debit == credit (exact decimal comparison)
- Guarantee atomicity of header + lines
- Enforce idempotency via (event_type, event_context, reference_type, reference_id)
- Enforce period locks (no posting into closed periods)

The posting engine and manual journals both pass through here.
"""

from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.services.exceptions import (
    AlreadyPostedError,
    PostingEventError,
    UnbalancedEntryError,
)
from accounting.services.money import ZERO, check_magnitude, money, q2
from accounting.services.period_service import assert_open_for

logger = logging.getLogger(__name__)

MIN_LINE_AMOUNT = money("0.01")


def find_posted(*, event_type: str, event_context: str, reference_type: str, reference_id: str):
    if not reference_id:
        return None
    return (
        JournalEntry.objects.filter(
            event_type=event_type,
            event_context=event_context or "",
            reference_type=reference_type or "",
            reference_id=reference_id,
        )
        .only("id")
        .first()
    )


def already_posted_error(existing, key: tuple) -> AlreadyPostedError:
    return AlreadyPostedError(
        f"Journal entry #{existing.id} already posted for {':'.join(k or '*' for k in key)}",
        entry_id=existing.id,
    )


def _normalize_lines(lines: list) -> tuple[list[dict], object, object]:
    total_debits = ZERO
    total_credits = ZERO
    normalized: list[dict] = []

    for line in lines:
        if not isinstance(line, dict):
            raise PostingEventError("Each journal line must be an object/dict")

        account = line.get("account")
        if account is None:
            raise PostingEventError("Journal line missing account")

        if not getattr(account, "is_active", True):
            raise PostingEventError(
                f"Account {getattr(account, 'code', 'UNKNOWN')} is inactive"
            )

        debit = money(line.get("debit"), field="debit")
        credit = money(line.get("credit"), field="credit")

        if debit < 0 or credit < 0:
            raise PostingEventError("Debit or credit cannot be negative")

        if debit > 0 and credit > 0:
            raise PostingEventError("A journal line cannot have both debit and credit")

        if debit == 0 and credit == 0:
            raise PostingEventError("A journal line must have either debit or credit")

        if 0 < debit < MIN_LINE_AMOUNT or 0 < credit < MIN_LINE_AMOUNT:
            raise PostingEventError(f"Line amount too small: {debit or credit}")

        total_debits += debit
        total_credits += credit

        normalized.append(
            {
                "account": account,
                "debit": debit,
                "credit": credit,
                "description": str(line.get("description") or "")[:255],
            }
        )

    return normalized, q2(total_debits), q2(total_credits)


@transaction.atomic
def create_journal_entry(
    *,
    entry_date: date,
    description: str,
    lines: list,
    event_type: str,
    event_context: str | None = None,
    reference_type: str | None = None,
    reference_id: str | None = None,
    posted_by: str = "",
) -> JournalEntry:
    if not lines:
        raise PostingEventError("Journal entry must contain at least one line")

    description = (description or "").strip()
    if not description:
        raise PostingEventError("Journal entry description is required")

    if entry_date is None:
        raise PostingEventError("entry_date is required")

    ctx = (event_context or "").strip().lower()
    ref_type = (reference_type or "").strip()
    ref_id = str(reference_id or "").strip()
    key = (event_type, ctx, ref_type, ref_id)

    normalized, total_debits, total_credits = _normalize_lines(lines)
    check_magnitude(total_debits, field="total_debit")
    check_magnitude(total_credits, field="total_credit")

    if total_debits != total_credits:
        logger.error(
            "Unbalanced journal entry rejected",
            extra={
                "event_type": event_type,
                "reference_id": ref_id,
                "debits": str(total_debits),
                "credits": str(total_credits),
            },
        )
        raise UnbalancedEntryError(
            f"Journal entry not balanced: debits={total_debits} credits={total_credits}"
        )

    # Period lock enforcement (writer choke-point, same transaction as the insert)
    assert_open_for(entry_date, lock=True)

    # Clear error before DB constraint race handling
    existing = find_posted(
        event_type=event_type, event_context=ctx, reference_type=ref_type, reference_id=ref_id
    )
    if existing is not None:
        raise already_posted_error(existing, key)

    try:
        with transaction.atomic():
            journal_entry = JournalEntry.objects.create(
                entry_date=entry_date,
                description=description,
                event_type=event_type,
                event_context=ctx,
                reference_type=ref_type,
                reference_id=ref_id,
                total_debit=total_debits,
                total_credit=total_credits,
                posted_by=str(posted_by or "")[:150],
            )
    except (IntegrityError, ValidationError) as exc:
        existing = find_posted(
            event_type=event_type, event_context=ctx, reference_type=ref_type, reference_id=ref_id
        )
        if existing is not None:
            logger.warning("Concurrent duplicate posting lost the race", extra={"entry_id": existing.id})
            raise already_posted_error(existing, key) from exc
        if isinstance(exc, ValidationError):
            raise PostingEventError(f"Invalid journal entry: {'; '.join(exc.messages)}") from exc
        raise

    JournalLine.objects.bulk_create(
        [
            JournalLine(
                journal_entry=journal_entry,
                account=line["account"],
                debit=line["debit"],
                credit=line["credit"],
                description=line["description"],
            )
            for line in normalized
        ]
    )

    logger.info(
        "Journal entry posted",
        extra={
            "entry_id": journal_entry.id,
            "event_type": event_type,
            "event_context": ctx,
            "reference_type": ref_type,
            "reference_id": ref_id,
            "total": str(total_debits),
        },
    )
    return journal_entry
