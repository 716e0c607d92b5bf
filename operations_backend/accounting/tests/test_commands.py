# accounting/tests/test_commands.py

from __future__ import annotations

from datetime import date
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from accounting.models.account import Account
from accounting.models.ledger_settings import LedgerSettings
from accounting.models.mapping import AccountMapping
from accounting.services.chart_service import DEFAULT_ACCOUNTS, DEFAULT_MAPPINGS
from accounting.services.posting_engine import post_manual_entry
from inventory.models import ProductVariant


class SeedChartCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command("seed_chart", "--company", "Acme Trading", stdout=out)
        call_command("seed_chart", stdout=StringIO())

        self.assertIn("Chart ready", out.getvalue())
        self.assertEqual(Account.objects.count(), len(DEFAULT_ACCOUNTS))
        self.assertEqual(AccountMapping.objects.count(), len(DEFAULT_MAPPINGS))
        self.assertEqual(Account.objects.get(code="1110").parent.code, "1100")
        self.assertEqual(LedgerSettings.load().company_name, "Acme Trading")


class ReopenCredentialCommandTests(TestCase):
    def test_stores_hashed_credential(self):
        call_command("set_reopen_credential", "--credential", "s3cret", stdout=StringIO())

        self.assertTrue(LedgerSettings.load().verify_reopen_credential("s3cret"))

    def test_blank_credential_is_refused(self):
        with self.assertRaises(CommandError):
            call_command("set_reopen_credential", "--credential", "  ", stdout=StringIO())


class ValidateLedgerCommandTests(TestCase):
    def setUp(self):
        call_command("seed_chart", stdout=StringIO())

    def test_clean_ledger_passes(self):
        post_manual_entry(
            entry_date=date(2024, 3, 1),
            description="Owner contribution",
            lines=[
                {"account_code": "1000", "debit": "100"},
                {"account_code": "3000", "credit": "100"},
            ],
        )
        out = StringIO()

        call_command("validate_ledger", "--strict", stdout=out, stderr=StringIO())

        self.assertIn("VALIDATION PASSED", out.getvalue())

    def test_stock_drift_fails_strict_run(self):
        ProductVariant.objects.create(sku="WID-001", name="Widget", quantity_on_hand=5)
        err = StringIO()

        with self.assertRaises(SystemExit):
            call_command("validate_ledger", "--strict", stdout=StringIO(), stderr=err)

        self.assertIn("sku=WID-001", err.getvalue())
