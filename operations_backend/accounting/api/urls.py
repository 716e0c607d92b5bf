# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

# Read-only audit ViewSets live in accounting/api/view.py (singular).
from accounting.api.view import JournalEntryViewSet, JournalLineViewSet
from accounting.api.views.accounts import AccountViewSet
from accounting.api.views.balance_sheet import BalanceSheetView
from accounting.api.views.events import PostEventView
from accounting.api.views.income_statement import IncomeStatementView
from accounting.api.views.manual_entries import ManualEntryView
from accounting.api.views.mappings import AccountMappingViewSet
from accounting.api.views.periods import AccountingPeriodViewSet
from accounting.api.views.reports import ReportQueryView
from accounting.api.views.trial_balance import TrialBalanceView

router = DefaultRouter()
router.register("accounts", AccountViewSet, basename="account")
router.register("mappings", AccountMappingViewSet, basename="account-mapping")
router.register("periods", AccountingPeriodViewSet, basename="accounting-period")
router.register("journal-entries", JournalEntryViewSet, basename="journal-entry")
router.register("journal-lines", JournalLineViewSet, basename="journal-line")

urlpatterns = [
    # Router endpoints
    path("", include(router.urls)),
    # Posting actions
    path("events/", PostEventView.as_view(), name="post-event"),
    path("manual-entries/", ManualEntryView.as_view(), name="manual-entries"),
    # Reports
    path("reports/", ReportQueryView.as_view(), name="reports"),
    path("trial-balance/", TrialBalanceView.as_view(), name="trial-balance"),
    path("income-statement/", IncomeStatementView.as_view(), name="income-statement"),
    path("balance-sheet/", BalanceSheetView.as_view(), name="balance-sheet"),
]
