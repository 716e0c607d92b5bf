# accounting/services/period_service.py

"""
======================================================
PATH: accounting/services/period_service.py
======================================================
ACCOUNTING PERIOD MANAGER

Purpose:
- Gate posting by calendar period (open / closed)
- Open/create monthly periods, close them, reopen them

Rules:
- No period record for a date => posting allowed (opt-in control),
  unless settings.ACCOUNTING_REQUIRE_PERIOD is true
- Closed period => PeriodClosedError for any date inside its range
- close() on a closed period => PeriodStateError
- reopen() requires the hashed administrative credential (LedgerSettings)

Concurrency:
- The posting engine calls assert_open_for(..., lock=True) INSIDE its
  transaction; close_period() takes the same row lock, so a close cannot
  complete while a posting into that range is mid-flight.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, datetime

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from accounting.models.ledger_settings import LedgerSettings
from accounting.models.period import AccountingPeriod
from accounting.services.exceptions import (
    PeriodClosedError,
    PeriodMissingError,
    PeriodStateError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)


def _to_date(value: datetime | date | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        if timezone.is_naive(value):
            value = timezone.make_aware(value, timezone.get_current_timezone())
        return timezone.localtime(value).date()
    return value


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise PeriodStateError(f"Invalid month: {month}")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def period_for(day: datetime | date, *, lock: bool = False) -> AccountingPeriod | None:
    d = _to_date(day)
    qs = AccountingPeriod.objects.filter(start_date__lte=d, end_date__gte=d)
    if lock:
        qs = qs.select_for_update()
    return qs.first()


def assert_open_for(entry_date: datetime | date, *, lock: bool = False) -> AccountingPeriod | None:
    """
    Assert that entry_date may receive postings.

    With lock=True (posting path) the covering period row is locked until
    the surrounding transaction ends.

    Raises:
        PeriodClosedError if the covering period is closed
        PeriodMissingError if periods are mandatory and none covers the date
    """
    d = _to_date(entry_date)
    if d is None:
        raise PeriodMissingError("entry_date is required")

    period = period_for(d, lock=lock)

    if period is None:
        if getattr(settings, "ACCOUNTING_REQUIRE_PERIOD", False):
            raise PeriodMissingError(f"No accounting period covers {d}.")
        return None

    if period.is_closed:
        raise PeriodClosedError(
            f"Posting blocked: {d} falls inside closed period {period.name}."
        )

    return period


def period_status(day: datetime | date) -> dict:
    d = _to_date(day)
    period = period_for(d)

    if period is None:
        required = bool(getattr(settings, "ACCOUNTING_REQUIRE_PERIOD", False))
        return {
            "date": d.isoformat(),
            "is_open": not required,
            "period": None,
            "message": (
                f"No accounting period covers {d}."
                if required
                else f"No accounting period covers {d}; posting is allowed."
            ),
        }

    return {
        "date": d.isoformat(),
        "is_open": not period.is_closed,
        "period": {"id": period.id, "name": period.name, "status": period.status},
        "message": (
            f"Period {period.name} is closed."
            if period.is_closed
            else f"Period {period.name} is open."
        ),
    }


@transaction.atomic
def open_or_create_period(*, year: int, month: int) -> tuple[AccountingPeriod, bool]:
    start, end = month_bounds(year, month)

    period, created = AccountingPeriod.objects.get_or_create(
        start_date=start,
        defaults={
            "end_date": end,
            "name": start.strftime("%B %Y"),
            "status": AccountingPeriod.Status.OPEN,
        },
    )

    if created:
        logger.info("Accounting period created", extra={"period_id": period.id, "period": period.name})

    return period, created


@transaction.atomic
def close_period(*, period_id, actor_id) -> AccountingPeriod:
    try:
        period = AccountingPeriod.objects.select_for_update().get(pk=period_id)
    except AccountingPeriod.DoesNotExist as exc:
        raise PeriodStateError(f"Accounting period {period_id} not found") from exc

    if period.is_closed:
        raise PeriodStateError(f"Period {period.name} is already closed.")

    period.status = AccountingPeriod.Status.CLOSED
    period.closed_at = timezone.now()
    period.closed_by = str(actor_id or "").strip()
    period.save()

    logger.info(
        "Accounting period closed",
        extra={"period_id": period.id, "period": period.name, "closed_by": period.closed_by},
    )
    return period


@transaction.atomic
def reopen_period(*, period_id, credential: str | None, actor_id=None) -> AccountingPeriod:
    """
    Reopen a closed period.

    Reopening does not re-validate entries already posted; it only
    re-enables future posting into the range.
    """
    try:
        period = AccountingPeriod.objects.select_for_update().get(pk=period_id)
    except AccountingPeriod.DoesNotExist as exc:
        raise PeriodStateError(f"Accounting period {period_id} not found") from exc

    ledger_settings = LedgerSettings.load()
    if not ledger_settings.verify_reopen_credential(credential):
        logger.warning(
            "Period reopen rejected: wrong credential",
            extra={"period_id": period.id, "actor_id": actor_id},
        )
        raise UnauthorizedError("Wrong reopen credential.")

    if not period.is_closed:
        raise PeriodStateError(f"Period {period.name} is not closed.")

    reopened_at = timezone.now()
    note = f"Reopened at {reopened_at.isoformat()}"
    if actor_id:
        note = f"{note} by {actor_id}"

    period.status = AccountingPeriod.Status.OPEN
    period.closed_at = None
    period.closed_by = ""
    period.notes = f"{period.notes}\n{note}".strip()
    period.save()

    logger.info("Accounting period reopened", extra={"period_id": period.id, "actor_id": actor_id})
    return period
