# accounting/tests/test_periods.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from accounting.models.journal import JournalEntry
from accounting.models.ledger_settings import LedgerSettings
from accounting.models.period import AccountingPeriod
from accounting.services.chart_service import seed_default_chart
from accounting.services.exceptions import (
    PeriodClosedError,
    PeriodMissingError,
    PeriodStateError,
    UnauthorizedError,
)
from accounting.services.period_service import (
    close_period,
    month_bounds,
    open_or_create_period,
    period_status,
    reopen_period,
)
from accounting.services.posting_engine import post_manual_entry


def _cash_sale(day: date, ref: str = ""):
    return post_manual_entry(
        entry_date=day,
        description="Cash sale",
        lines=[
            {"account_code": "1000", "debit": "150.00"},
            {"account_code": "4000", "credit": "150.00"},
        ],
        reference_type="receipt" if ref else "",
        reference_id=ref,
    )


class AccountingPeriodTests(TestCase):
    """
    GUARANTEES:
    - Periods are calendar months, created idempotently
    - Closed periods refuse postings
    - Reopening requires the configured credential
    """

    def setUp(self):
        seed_default_chart()
        self.period, _ = open_or_create_period(year=2024, month=2)

    def test_month_bounds_handle_leap_years(self):
        self.assertEqual(month_bounds(2024, 2), (date(2024, 2, 1), date(2024, 2, 29)))
        self.assertEqual(month_bounds(2023, 12), (date(2023, 12, 1), date(2023, 12, 31)))
        with self.assertRaises(PeriodStateError):
            month_bounds(2024, 13)

    def test_open_or_create_is_idempotent(self):
        again, created = open_or_create_period(year=2024, month=2)

        self.assertFalse(created)
        self.assertEqual(again.pk, self.period.pk)
        self.assertEqual(self.period.name, "February 2024")
        self.assertEqual(self.period.status, AccountingPeriod.Status.OPEN)
        self.assertEqual(AccountingPeriod.objects.count(), 1)

    def test_overlapping_periods_are_rejected(self):
        with self.assertRaises(ValidationError):
            AccountingPeriod.objects.create(
                name="Overlap",
                start_date=date(2024, 2, 15),
                end_date=date(2024, 3, 15),
            )

    def test_close_blocks_posting(self):
        _cash_sale(date(2024, 2, 10))

        closed = close_period(period_id=self.period.id, actor_id="controller")
        self.assertEqual(closed.status, AccountingPeriod.Status.CLOSED)
        self.assertIsNotNone(closed.closed_at)
        self.assertEqual(closed.closed_by, "controller")

        with self.assertRaises(PeriodClosedError):
            _cash_sale(date(2024, 2, 20))

        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_closing_twice_is_an_error(self):
        close_period(period_id=self.period.id, actor_id="controller")

        with self.assertRaises(PeriodStateError):
            close_period(period_id=self.period.id, actor_id="controller")

    def test_close_unknown_period(self):
        with self.assertRaises(PeriodStateError):
            close_period(period_id=999999, actor_id="controller")

    def test_reopen_requires_the_credential(self):
        settings = LedgerSettings.load()
        settings.set_reopen_credential("s3cret")
        settings.save()

        close_period(period_id=self.period.id, actor_id="controller")

        with self.assertRaises(UnauthorizedError):
            reopen_period(period_id=self.period.id, credential="wrong", actor_id="clerk")
        with self.assertRaises(UnauthorizedError):
            reopen_period(period_id=self.period.id, credential=None, actor_id="clerk")

        self.period.refresh_from_db()
        self.assertTrue(self.period.is_closed)

        reopened = reopen_period(period_id=self.period.id, credential="s3cret", actor_id="controller")
        self.assertEqual(reopened.status, AccountingPeriod.Status.OPEN)
        self.assertIsNone(reopened.closed_at)
        self.assertIn("Reopened at", reopened.notes)

        entry = _cash_sale(date(2024, 2, 21))
        self.assertEqual(entry.total_debit, Decimal("150.00"))

    def test_reopen_without_configured_credential_is_refused(self):
        close_period(period_id=self.period.id, actor_id="controller")

        with self.assertRaises(UnauthorizedError):
            reopen_period(period_id=self.period.id, credential="anything")

    def test_reopen_open_period_is_an_error(self):
        settings = LedgerSettings.load()
        settings.set_reopen_credential("s3cret")
        settings.save()

        with self.assertRaises(PeriodStateError):
            reopen_period(period_id=self.period.id, credential="s3cret")

    def test_credential_is_stored_hashed(self):
        settings = LedgerSettings.load()
        settings.set_reopen_credential("s3cret")
        settings.save()

        stored = LedgerSettings.load()
        self.assertNotEqual(stored.reopen_credential_hash, "s3cret")
        self.assertTrue(stored.verify_reopen_credential("s3cret"))
        self.assertFalse(stored.verify_reopen_credential("S3CRET"))

        with self.assertRaises(ValidationError):
            stored.set_reopen_credential("   ")

    def test_credential_whitespace_is_handled_alike(self):
        settings = LedgerSettings.load()
        settings.set_reopen_credential(" s3cret ")
        settings.save()

        stored = LedgerSettings.load()
        self.assertTrue(stored.verify_reopen_credential(" s3cret "))
        self.assertTrue(stored.verify_reopen_credential("s3cret"))
        self.assertFalse(stored.verify_reopen_credential("   "))

    def test_period_status(self):
        status = period_status(date(2024, 2, 5))
        self.assertTrue(status["is_open"])
        self.assertEqual(status["period"]["id"], self.period.id)

        close_period(period_id=self.period.id, actor_id="controller")
        self.assertFalse(period_status(date(2024, 2, 5))["is_open"])

        uncovered = period_status(date(2024, 5, 1))
        self.assertIsNone(uncovered["period"])
        self.assertTrue(uncovered["is_open"])

    @override_settings(ACCOUNTING_REQUIRE_PERIOD=True)
    def test_required_period_blocks_uncovered_dates(self):
        self.assertFalse(period_status(date(2024, 5, 1))["is_open"])

        with self.assertRaises(PeriodMissingError):
            _cash_sale(date(2024, 5, 1))

        entry = _cash_sale(date(2024, 2, 1))
        self.assertEqual(entry.entry_date, date(2024, 2, 1))

    def test_uncovered_dates_post_by_default(self):
        entry = _cash_sale(date(2030, 1, 1))
        self.assertEqual(entry.lines.count(), 2)

    def test_period_boundaries_are_inclusive(self):
        close_period(period_id=self.period.id, actor_id="controller")

        for day in (date(2024, 2, 1), date(2024, 2, 29)):
            with self.assertRaises(PeriodClosedError):
                _cash_sale(day)

        _cash_sale(date(2024, 3, 1))
        _cash_sale(date(2024, 1, 31))

    def test_periods_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.period.delete()
