# accounting/api/views/__init__.py

"""
accounting.api.views package

Important:
- Read-only audit ViewSets are defined in accounting.api.view (singular).
- Do NOT import accounting.api.urls from here to avoid circular imports.
"""

# Posting actions
from accounting.api.views.events import PostEventView
from accounting.api.views.manual_entries import ManualEntryView

# Read-only reports
from accounting.api.views.reports import ReportQueryView
from accounting.api.views.trial_balance import TrialBalanceView
from accounting.api.views.income_statement import IncomeStatementView
from accounting.api.views.balance_sheet import BalanceSheetView

# Master data / period control
from accounting.api.views.accounts import AccountViewSet
from accounting.api.views.mappings import AccountMappingViewSet
from accounting.api.views.periods import AccountingPeriodViewSet

__all__ = [
    "PostEventView",
    "ManualEntryView",
    "ReportQueryView",
    "TrialBalanceView",
    "IncomeStatementView",
    "BalanceSheetView",
    "AccountViewSet",
    "AccountMappingViewSet",
    "AccountingPeriodViewSet",
]
