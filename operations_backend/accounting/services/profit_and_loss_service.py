# accounting/services/profit_and_loss_service.py

"""
INCOME STATEMENT (PROFIT & LOSS) SERVICE

Pure accounting read service.

- Revenue and expense accounts only, over [start_date, end_date]
- Both sides taken as magnitudes of their natural-side balances
- net_income = total revenue - total expenses
"""

from __future__ import annotations

from datetime import date

from accounting.models.account import Account
from accounting.services.money import ZERO, q2, to_major_number, to_minor_int
from accounting.services.trial_balance_service import account_totals, natural_balance


def generate_income_statement(
    *, start_date: date | None = None, end_date: date | None = None
) -> dict:
    totals_by_account = account_totals(start_date=start_date, end_date=end_date)

    accounts = list(
        Account.objects.filter(
            id__in=list(totals_by_account.keys()),
            account_type__in=(Account.REVENUE, Account.EXPENSE),
        )
        .only("id", "code", "name", "account_type")
        .order_by("code")
    )

    revenue = []
    expenses = []
    total_revenue = ZERO
    total_expenses = ZERO

    for acc in accounts:
        debit, credit = totals_by_account[acc.id]
        bal = natural_balance(acc, debit, credit)
        if bal == ZERO:
            continue

        row = {
            "account_id": acc.id,
            "code": acc.code,
            "name": acc.name,
            "amount": to_major_number(bal),
            "amount_minor": to_minor_int(bal),
        }

        if acc.account_type == Account.REVENUE:
            revenue.append(row)
            total_revenue += bal
        else:
            expenses.append(row)
            total_expenses += bal

    total_revenue = q2(total_revenue)
    total_expenses = q2(total_expenses)
    net_income = q2(total_revenue - total_expenses)

    return {
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
        "revenue": revenue,
        "expenses": expenses,
        "totals": {
            "revenue": to_major_number(total_revenue),
            "expenses": to_major_number(total_expenses),
            "net_income": to_major_number(net_income),
            "revenue_minor": to_minor_int(total_revenue),
            "expenses_minor": to_minor_int(total_expenses),
            "net_income_minor": to_minor_int(net_income),
        },
    }
