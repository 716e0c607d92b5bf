# accounting/services/report_service.py

"""
REPORT QUERY SERVICE

Single entrypoint for the report-query contract:

    query_report(report="trial_balance" | "income_statement" | "balance_sheet",
                 start_date=None, end_date=None, as_of=None)

Read-only; never mutates. Empty ledgers yield zeroed totals.
"""

from __future__ import annotations

from datetime import date

from django.conf import settings

from accounting.models.ledger_settings import LedgerSettings
from accounting.services.balance_sheet_service import generate_balance_sheet
from accounting.services.exceptions import AccountingServiceError
from accounting.services.profit_and_loss_service import generate_income_statement
from accounting.services.trial_balance_service import TrialBalanceService

TRIAL_BALANCE = "trial_balance"
INCOME_STATEMENT = "income_statement"
BALANCE_SHEET = "balance_sheet"

REPORTS = (TRIAL_BALANCE, INCOME_STATEMENT, BALANCE_SHEET)


def query_report(
    *,
    report: str,
    start_date: date | None = None,
    end_date: date | None = None,
    as_of: date | None = None,
) -> dict:
    report = (report or "").strip().lower()

    if report == TRIAL_BALANCE:
        data = TrialBalanceService().generate(start_date=start_date, end_date=end_date)
    elif report == INCOME_STATEMENT:
        data = generate_income_statement(start_date=start_date, end_date=end_date)
    elif report == BALANCE_SHEET:
        data = generate_balance_sheet(as_of=as_of or end_date)
    else:
        raise AccountingServiceError(
            f"Unknown report {report!r}. Use one of: {', '.join(REPORTS)}"
        )

    return {
        "report": report,
        "company": LedgerSettings.objects.values_list("company_name", flat=True).first() or "",
        "currency": getattr(settings, "ACCOUNTING_DEFAULT_CURRENCY", ""),
        **data,
    }
