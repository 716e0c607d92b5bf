# accounting/services/trial_balance_service.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db.models import Q, Sum
from django.db.models.functions import Coalesce

from accounting.models.account import Account
from accounting.models.journal_line import JournalLine
from accounting.services.exceptions import AccountingServiceError
from accounting.services.money import ZERO, q2, to_major_number, to_minor_int


def account_totals(
    *, start_date: date | None = None, end_date: date | None = None
) -> dict[int, tuple[Decimal, Decimal]]:
    """
    {account_id: (total_debit, total_credit)} over journal lines whose
    entry_date falls in [start_date, end_date] (either bound optional).
    """
    if start_date and end_date and start_date > end_date:
        raise AccountingServiceError("start_date must be <= end_date")

    line_q = Q()
    if start_date is not None:
        line_q &= Q(journal_entry__entry_date__gte=start_date)
    if end_date is not None:
        line_q &= Q(journal_entry__entry_date__lte=end_date)

    rows = (
        JournalLine.objects.filter(line_q)
        .values("account_id")
        .annotate(
            debit=Coalesce(Sum("debit"), Decimal("0.00")),
            credit=Coalesce(Sum("credit"), Decimal("0.00")),
        )
    )

    return {r["account_id"]: (q2(r["debit"]), q2(r["credit"])) for r in rows}


def natural_balance(account: Account, debit: Decimal, credit: Decimal) -> Decimal:
    if account.account_type in Account.DEBIT_NORMAL_TYPES:
        return q2(debit - credit)
    return q2(credit - debit)


class TrialBalanceService:
    """
    Trial Balance computation service.

    Guarantees:
    - Uses journal_entry.entry_date as accounting timeline
    - Includes every account with activity in range (active or not)
    - Avoids N+1 queries by aggregating in bulk
    - balance is reported on the account's natural side (positive = normal)
    - Returns JSON-safe numeric values (no Decimals)
    - Empty ledger => zeroed totals, balanced
    """

    def __init__(self, account_model=Account):
        self.Account = account_model

    def generate(self, *, start_date: date | None = None, end_date: date | None = None):
        totals_by_account = account_totals(start_date=start_date, end_date=end_date)

        accounts = list(
            self.Account.objects.filter(id__in=list(totals_by_account.keys()))
            .only("id", "code", "name", "account_type", "parent_id")
            .order_by("code")
        )

        accounts_output = []
        total_debit = ZERO
        total_credit = ZERO

        for acc in accounts:
            debit, credit = totals_by_account.get(acc.id, (ZERO, ZERO))

            if debit == ZERO and credit == ZERO:
                continue

            balance = natural_balance(acc, debit, credit)

            accounts_output.append(
                {
                    "account_id": acc.id,
                    "account_code": acc.code,
                    "account_name": acc.name,
                    "account_type": acc.account_type,
                    "parent_id": acc.parent_id,
                    "normal_side": "debit" if acc.is_debit_normal else "credit",
                    "debit": to_major_number(debit),
                    "credit": to_major_number(credit),
                    "balance": to_major_number(balance),
                    "debit_minor": to_minor_int(debit),
                    "credit_minor": to_minor_int(credit),
                    "balance_minor": to_minor_int(balance),
                }
            )

            total_debit += debit
            total_credit += credit

        total_debit = q2(total_debit)
        total_credit = q2(total_credit)

        balanced = to_minor_int(total_debit) == to_minor_int(total_credit)

        return {
            "start_date": start_date.isoformat() if start_date else None,
            "end_date": end_date.isoformat() if end_date else None,
            "accounts": accounts_output,
            "totals": {
                "debit": to_major_number(total_debit),
                "credit": to_major_number(total_credit),
                "debit_minor": to_minor_int(total_debit),
                "credit_minor": to_minor_int(total_credit),
                "balanced": balanced,
            },
        }
