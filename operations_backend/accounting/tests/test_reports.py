# accounting/tests/test_reports.py

from __future__ import annotations

from datetime import date

from django.conf import settings
from django.test import TestCase

from accounting.models.account import Account
from accounting.models.ledger_settings import LedgerSettings
from accounting.models.mapping import EventType
from accounting.services.balance_sheet_service import CURRENT_EARNINGS_CODE, generate_balance_sheet
from accounting.services.chart_service import seed_default_chart
from accounting.services.exceptions import AccountingServiceError
from accounting.services.posting_engine import PostingEvent, post_event, post_manual_entry
from accounting.services.profit_and_loss_service import generate_income_statement
from accounting.services.report_service import query_report
from accounting.services.trial_balance_service import TrialBalanceService
from inventory.models import ProductVariant


def _rows_by_code(rows, key="code"):
    return {row[key]: row for row in rows}


class EmptyLedgerReportTests(TestCase):
    def setUp(self):
        seed_default_chart()

    def test_empty_ledger_reports_are_zeroed_and_balanced(self):
        tb = TrialBalanceService().generate()
        self.assertEqual(tb["accounts"], [])
        self.assertEqual(tb["totals"]["debit"], 0.0)
        self.assertTrue(tb["totals"]["balanced"])

        pl = generate_income_statement()
        self.assertEqual(pl["totals"]["net_income"], 0.0)

        bs = generate_balance_sheet()
        self.assertEqual(bs["assets"], [])
        self.assertTrue(bs["totals"]["balanced"])


class LedgerReportTests(TestCase):
    """
    GUARANTEES:
    - Trial balance debits equal credits
    - Income statement nets revenue against expenses
    - Balance sheet balances once current earnings are folded into equity
    """

    def setUp(self):
        seed_default_chart()
        widget = ProductVariant.objects.create(sku="WID-001", name="Widget")

        post_manual_entry(
            entry_date=date(2024, 1, 10),
            description="Owner contribution",
            lines=[
                {"account_code": "1000", "debit": "5000000"},
                {"account_code": "3000", "credit": "5000000"},
            ],
        )
        post_event(
            PostingEvent(
                event_type=EventType.CONFIRM_PURCHASE,
                entry_date=date(2024, 3, 5),
                reference_type="purchase",
                reference_id="PO-1",
                stock_lines=[{"variant_id": widget.id, "quantity": 10, "unit_cost": "100000"}],
            )
        )
        post_event(
            PostingEvent(
                event_type=EventType.CONFIRM_SALES_ORDER,
                entry_date=date(2024, 3, 6),
                reference_type="sales_order",
                reference_id="SO-1",
                amounts={"gross": "300000", "discount": "20000", "paid": "280000"},
                stock_lines=[{"variant_id": widget.id, "quantity": 2}],
            )
        )
        post_manual_entry(
            entry_date=date(2024, 3, 7),
            description="Shop rent",
            lines=[
                {"account_code": "6000", "debit": "50000"},
                {"account_code": "1000", "credit": "50000"},
            ],
        )

    def test_trial_balance_is_balanced(self):
        tb = TrialBalanceService().generate()

        self.assertTrue(tb["totals"]["balanced"])
        self.assertEqual(tb["totals"]["debit"], tb["totals"]["credit"])
        self.assertEqual(tb["totals"]["debit_minor"], tb["totals"]["credit_minor"])

        rows = _rows_by_code(tb["accounts"], key="account_code")
        self.assertEqual(rows["1000"]["balance"], 5230000.0)
        self.assertEqual(rows["1000"]["normal_side"], "debit")
        self.assertEqual(rows["2000"]["balance"], 1000000.0)
        self.assertEqual(rows["2000"]["normal_side"], "credit")
        self.assertEqual(rows["1100"]["balance"], 0.0)

    def test_trial_balance_respects_the_date_range(self):
        tb = TrialBalanceService().generate(start_date=date(2024, 3, 1), end_date=date(2024, 3, 31))

        self.assertEqual(tb["totals"]["debit"], 1850000.0)
        self.assertNotIn("3000", _rows_by_code(tb["accounts"], key="account_code"))
        self.assertEqual(tb["start_date"], "2024-03-01")

    def test_inverted_range_is_rejected(self):
        with self.assertRaises(AccountingServiceError):
            TrialBalanceService().generate(start_date=date(2024, 3, 31), end_date=date(2024, 3, 1))

    def test_income_statement(self):
        pl = generate_income_statement(start_date=date(2024, 3, 1), end_date=date(2024, 3, 31))

        revenue = _rows_by_code(pl["revenue"])
        expenses = _rows_by_code(pl["expenses"])

        self.assertEqual(revenue["4000"]["amount"], 300000.0)
        self.assertEqual(revenue["4050"]["amount"], -20000.0)
        self.assertEqual(expenses["5000"]["amount"], 200000.0)
        self.assertEqual(expenses["6000"]["amount"], 50000.0)

        self.assertEqual(pl["totals"]["revenue"], 280000.0)
        self.assertEqual(pl["totals"]["expenses"], 250000.0)
        self.assertEqual(pl["totals"]["net_income"], 30000.0)
        self.assertEqual(pl["totals"]["net_income_minor"], 3000000)

    def test_income_statement_outside_activity_is_zero(self):
        pl = generate_income_statement(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))

        self.assertEqual(pl["revenue"], [])
        self.assertEqual(pl["expenses"], [])
        self.assertEqual(pl["totals"]["net_income"], 0.0)

    def test_balance_sheet_balances_with_current_earnings(self):
        bs = generate_balance_sheet(as_of=date(2024, 3, 31))

        self.assertTrue(bs["totals"]["balanced"])
        self.assertEqual(bs["totals"]["assets"], 6030000.0)
        self.assertEqual(bs["totals"]["liabilities"], 1000000.0)
        self.assertEqual(bs["totals"]["current_earnings"], 30000.0)
        self.assertEqual(bs["totals"]["liabilities_plus_equity"], 6030000.0)

        equity = _rows_by_code(bs["equity"])
        self.assertEqual(equity[CURRENT_EARNINGS_CODE]["balance"], 30000.0)
        self.assertEqual(equity["3000"]["balance"], 5000000.0)

        # Zero-balance receivable is omitted
        self.assertNotIn("1100", _rows_by_code(bs["assets"]))

    def test_balance_sheet_is_point_in_time(self):
        bs = generate_balance_sheet(as_of=date(2024, 2, 1))

        self.assertEqual(bs["totals"]["assets"], 5000000.0)
        self.assertEqual(bs["totals"]["current_earnings"], 0.0)
        self.assertNotIn(CURRENT_EARNINGS_CODE, _rows_by_code(bs["equity"]))

    def test_inactive_accounts_with_activity_still_report(self):
        Account.objects.filter(code="6000").update(is_active=False)

        pl = generate_income_statement()
        self.assertIn("6000", _rows_by_code(pl["expenses"]))

    def test_query_report_wraps_metadata(self):
        ledger = LedgerSettings.load()
        ledger.company_name = "Acme Trading"
        ledger.save()

        data = query_report(report="Trial_Balance")

        self.assertEqual(data["report"], "trial_balance")
        self.assertEqual(data["company"], "Acme Trading")
        self.assertEqual(data["currency"], settings.ACCOUNTING_DEFAULT_CURRENCY)
        self.assertTrue(data["totals"]["balanced"])

        bs = query_report(report="balance_sheet", end_date=date(2024, 2, 1))
        self.assertEqual(bs["as_of"], "2024-02-01")

    def test_query_report_rejects_unknown_report(self):
        with self.assertRaises(AccountingServiceError):
            query_report(report="cash_flow")
