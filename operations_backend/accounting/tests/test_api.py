# accounting/tests/test_api.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from accounting.models.journal import JournalEntry
from accounting.models.ledger_settings import LedgerSettings
from accounting.models.mapping import AccountMapping, EventType
from accounting.services.chart_service import seed_default_chart
from accounting.services.period_service import open_or_create_period
from inventory.models import ProductVariant

User = get_user_model()

BASE = "/api/accounting"


def _grant(user, *codenames):
    for codename in codenames:
        user.user_permissions.add(Permission.objects.get(codename=codename))
    # has_perm caches per instance
    return User.objects.get(pk=user.pk)


class AccountingApiTestCase(TestCase):
    def setUp(self):
        seed_default_chart()
        self.client = APIClient()
        self.user = User.objects.create_user(username="clerk", password="password123")
        self.variant = ProductVariant.objects.create(sku="WID-001", name="Widget")

    def _login(self, *codenames):
        self.user = _grant(self.user, *codenames)
        self.client.force_authenticate(user=self.user)

    def _purchase_payload(self, ref="PO-1", day="2024-03-05"):
        return {
            "event_type": EventType.CONFIRM_PURCHASE,
            "entry_date": day,
            "reference_type": "purchase",
            "reference_id": ref,
            "stock_lines": [{"variant_id": self.variant.id, "quantity": 10, "unit_cost": "100000"}],
        }


class PostEventApiTests(AccountingApiTestCase):
    """
    GUARANTEES:
    - 201 on first post, 200 + existing id on retry
    - Missing permission is 403 and posts nothing
    - Closed periods answer 409
    """

    def test_anonymous_is_rejected(self):
        res = self.client.post(f"{BASE}/events/", self._purchase_payload(), format="json")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_missing_permission_is_forbidden(self):
        self._login()

        res = self.client.post(f"{BASE}/events/", self._purchase_payload(), format="json")

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(JournalEntry.objects.exists())

    def test_post_then_retry(self):
        self._login("add_journalentry")

        res = self.client.post(f"{BASE}/events/", self._purchase_payload(), format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertFalse(res.data["already_posted"])
        entry_id = res.data["entry_id"]
        self.assertEqual(res.data["entry"]["posted_by"], "clerk")
        self.assertEqual(len(res.data["entry"]["lines"]), 2)

        retry = self.client.post(f"{BASE}/events/", self._purchase_payload(), format="json")
        self.assertEqual(retry.status_code, status.HTTP_200_OK)
        self.assertTrue(retry.data["already_posted"])
        self.assertEqual(retry.data["entry_id"], entry_id)
        self.assertEqual(retry.data["code"], "already_posted")

        self.variant.refresh_from_db()
        self.assertEqual(self.variant.quantity_on_hand, 10)

    def test_closed_period_is_a_conflict(self):
        self._login("add_journalentry")
        period, _ = open_or_create_period(year=2024, month=3)
        period.status = period.Status.CLOSED
        period.closed_at = period.created_at
        period.save()

        res = self.client.post(f"{BASE}/events/", self._purchase_payload(), format="json")

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["code"], "period_closed")

    def test_domain_errors_carry_a_code(self):
        self._login("add_journalentry")
        AccountMapping.objects.filter(event_type=EventType.CONFIRM_PURCHASE).update(is_active=False)

        res = self.client.post(f"{BASE}/events/", self._purchase_payload(), format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "mapping_not_found")

    def test_oversized_amount_is_a_bad_request(self):
        self._login("add_journalentry")
        payload = {
            "event_type": EventType.CREDIT_NOTE,
            "entry_date": "2024-03-05",
            "reference_type": "credit_note",
            "reference_id": "CN-1",
            "amounts": {"gross": "100000000000000000"},
        }

        res = self.client.post(f"{BASE}/events/", payload, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "invalid_event")
        self.assertFalse(JournalEntry.objects.exists())

    def test_manual_journal_is_not_an_event_type(self):
        self._login("add_journalentry")
        payload = self._purchase_payload()
        payload["event_type"] = EventType.MANUAL_JOURNAL

        res = self.client.post(f"{BASE}/events/", payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("event_type", res.data)

    def test_manual_entry_endpoint(self):
        self._login("add_journalentry")
        payload = {
            "entry_date": "2024-03-01",
            "description": "Owner contribution",
            "lines": [
                {"account_code": "1000", "debit": "1000.00"},
                {"account_code": "3000", "credit": "1000.00"},
            ],
        }

        res = self.client.post(f"{BASE}/manual-entries/", payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["entry"]["event_type"], EventType.MANUAL_JOURNAL)

        payload["lines"][1]["credit"] = "999.00"
        res = self.client.post(f"{BASE}/manual-entries/", payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "unbalanced_entry")

    def test_manual_entry_needs_two_lines(self):
        self._login("add_journalentry")
        res = self.client.post(
            f"{BASE}/manual-entries/",
            {
                "entry_date": "2024-03-01",
                "description": "One-legged",
                "lines": [{"account_code": "1000", "debit": "1.00"}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


class PeriodApiTests(AccountingApiTestCase):
    def test_open_close_and_reopen(self):
        self._login("add_accountingperiod", "change_accountingperiod", "view_accountingperiod")
        ledger = LedgerSettings.load()
        ledger.set_reopen_credential("s3cret")
        ledger.save()

        res = self.client.post(f"{BASE}/periods/open-or-create/", {"year": 2024, "month": 3}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        period_id = res.data["id"]
        self.assertEqual(res.data["name"], "March 2024")

        again = self.client.post(f"{BASE}/periods/open-or-create/", {"year": 2024, "month": 3}, format="json")
        self.assertEqual(again.status_code, status.HTTP_200_OK)
        self.assertEqual(again.data["id"], period_id)

        closed = self.client.post(f"{BASE}/periods/{period_id}/close/")
        self.assertEqual(closed.status_code, status.HTTP_200_OK)
        self.assertEqual(closed.data["status"], "closed")
        self.assertEqual(closed.data["closed_by"], "clerk")

        twice = self.client.post(f"{BASE}/periods/{period_id}/close/")
        self.assertEqual(twice.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(twice.data["code"], "period_state")

        status_res = self.client.get(f"{BASE}/periods/status/", {"date": "2024-03-15"})
        self.assertEqual(status_res.status_code, status.HTTP_200_OK)
        self.assertFalse(status_res.data["is_open"])

        wrong = self.client.post(f"{BASE}/periods/{period_id}/reopen/", {"credential": "nope"}, format="json")
        self.assertEqual(wrong.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(wrong.data["code"], "unauthorized")

        right = self.client.post(f"{BASE}/periods/{period_id}/reopen/", {"credential": "s3cret"}, format="json")
        self.assertEqual(right.status_code, status.HTTP_200_OK)
        self.assertEqual(right.data["status"], "open")

    def test_close_requires_change_permission(self):
        period, _ = open_or_create_period(year=2024, month=3)
        self._login("view_accountingperiod")

        res = self.client.post(f"{BASE}/periods/{period.id}/close/")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_status_rejects_bad_dates(self):
        self._login("view_accountingperiod")

        res = self.client.get(f"{BASE}/periods/status/", {"date": "15/03/2024"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.get(f"{BASE}/periods/status/", {"date": "2024-02-30"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


class ReportApiTests(AccountingApiTestCase):
    def setUp(self):
        super().setUp()
        self._login("add_journalentry", "view_journalline", "view_account")
        res = self.client.post(f"{BASE}/events/", self._purchase_payload(), format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)

    def test_trial_balance(self):
        res = self.client.get(f"{BASE}/trial-balance/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["totals"]["balanced"])
        self.assertEqual(res.data["totals"]["debit"], 1000000.0)

    def test_income_statement_and_balance_sheet(self):
        pl = self.client.get(f"{BASE}/income-statement/", {"start_date": "2024-03-01", "end_date": "2024-03-31"})
        self.assertEqual(pl.status_code, status.HTTP_200_OK)
        self.assertEqual(pl.data["totals"]["net_income"], 0.0)

        bs = self.client.get(f"{BASE}/balance-sheet/", {"as_of": "2024-03-31"})
        self.assertEqual(bs.status_code, status.HTTP_200_OK)
        self.assertTrue(bs.data["totals"]["balanced"])
        self.assertEqual(bs.data["totals"]["assets"], 1000000.0)

    def test_report_query(self):
        res = self.client.get(f"{BASE}/reports/", {"report": "balance_sheet", "as_of": "2024-03-31"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["report"], "balance_sheet")
        self.assertIn("currency", res.data)

        missing = self.client.get(f"{BASE}/reports/")
        self.assertEqual(missing.status_code, status.HTTP_400_BAD_REQUEST)

        unknown = self.client.get(f"{BASE}/reports/", {"report": "cash_flow"})
        self.assertEqual(unknown.status_code, status.HTTP_400_BAD_REQUEST)

        bad_date = self.client.get(f"{BASE}/trial-balance/", {"start_date": "yesterday"})
        self.assertEqual(bad_date.status_code, status.HTTP_400_BAD_REQUEST)

        for path, params in (
            ("reports/", {"report": "trial_balance", "start_date": "2024-02-30"}),
            ("trial-balance/", {"end_date": "2024-13-01"}),
            ("income-statement/", {"start_date": "2023-02-29"}),
            ("balance-sheet/", {"as_of": "2024-04-31"}),
        ):
            with self.subTest(path=path):
                res = self.client.get(f"{BASE}/{path}", params)
                self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reports_require_permission(self):
        other = User.objects.create_user(username="viewer", password="password123")
        self.client.force_authenticate(user=other)

        res = self.client.get(f"{BASE}/trial-balance/")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_accounts_tree(self):
        res = self.client.get(f"{BASE}/accounts/tree/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        roots = {node["code"]: node for node in res.data}
        self.assertNotIn("1110", roots)
        self.assertEqual([c["code"] for c in roots["1100"]["children"]], ["1110"])


class SuperuserApiTests(TestCase):
    def test_superuser_can_manage_mappings(self):
        seed_default_chart()
        admin = User.objects.create_superuser(username="admin", password="password123", email="a@example.com")
        client = APIClient()
        client.force_authenticate(user=admin)

        accounts = client.get(f"{BASE}/accounts/")
        self.assertEqual(accounts.status_code, status.HTTP_200_OK)

        cash_id = next(a["id"] for a in accounts.data["results"] if a["code"] == "1000")
        res = client.post(
            f"{BASE}/mappings/",
            {
                "event_type": EventType.CUSTOMER_PAYMENT,
                "event_context": " CASH ",
                "side": "debit",
                "amount_weight": "paid",
                "account": cash_id,
                "priority": 20,
            },
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["event_context"], "cash")
