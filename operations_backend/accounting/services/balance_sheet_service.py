# accounting/services/balance_sheet_service.py

"""
BALANCE SHEET SERVICE

Pure accounting read service.

Responsibilities:
- Compute balances per account as at a given date (inclusive)
- Classify balances into Assets, Liabilities, Equity
- Enforce accounting correctness (Assets = Liabilities + Equity)

Important:
- Revenue/Expense activity is not closed into a stored equity account.
  It is represented as a derived "Current Period Earnings" equity line
  to keep the balance sheet correct.

Contract:
- API emits numeric JSON values (not strings)
- Provide both major-unit numbers (floats, 2dp) and minor-unit ints (exact)
- Provide liabilities_plus_equity in totals for frontend convenience
"""

from __future__ import annotations

import logging
from datetime import date

from accounting.models.account import Account
from accounting.services.exceptions import AccountingServiceError
from accounting.services.money import ZERO, q2, to_major_number, to_minor_int
from accounting.services.trial_balance_service import account_totals, natural_balance

logger = logging.getLogger(__name__)

CURRENT_EARNINGS_CODE = "E-CURR"


def generate_balance_sheet(*, as_of: date | None = None) -> dict:
    """
    Args:
        as_of: Optional date (inclusive). Defaults to all postings.

    Returns:
        {
            "as_of": "YYYY-MM-DD" | None,
            "assets": [{"code","name","balance","balance_minor"}...],
            "liabilities": [...],
            "equity": [...],
            "totals": {
                "assets", "liabilities", "equity", "liabilities_plus_equity",
                "assets_minor", ..., "current_earnings", "balanced"
            }
        }
    """
    totals_by_account = account_totals(end_date=as_of)

    accounts = list(
        Account.objects.filter(id__in=list(totals_by_account.keys()))
        .only("id", "code", "name", "account_type")
    )

    # Deterministic ordering for UI
    accounts.sort(key=lambda a: (a.account_type, a.code))

    sections = {"assets": [], "liabilities": [], "equity": []}
    totals = {"assets": ZERO, "liabilities": ZERO, "equity": ZERO}

    revenue_total = ZERO
    expense_total = ZERO

    for acc in accounts:
        debit, credit = totals_by_account[acc.id]
        bal = natural_balance(acc, debit, credit)
        if bal == ZERO:
            continue

        if acc.account_type == Account.REVENUE:
            revenue_total += bal
            continue

        if acc.account_type == Account.EXPENSE:
            expense_total += bal
            continue

        entry = {
            "account_id": acc.id,
            "code": acc.code,
            "name": acc.name,
            "balance": to_major_number(bal),
            "balance_minor": to_minor_int(bal),
        }

        if acc.account_type == Account.ASSET:
            sections["assets"].append(entry)
            totals["assets"] += bal
        elif acc.account_type == Account.LIABILITY:
            sections["liabilities"].append(entry)
            totals["liabilities"] += bal
        elif acc.account_type == Account.EQUITY:
            sections["equity"].append(entry)
            totals["equity"] += bal

    current_earnings = q2(revenue_total - expense_total)
    if current_earnings != ZERO:
        sections["equity"].append(
            {
                "account_id": None,
                "code": CURRENT_EARNINGS_CODE,
                "name": "Current Period Earnings",
                "balance": to_major_number(current_earnings),
                "balance_minor": to_minor_int(current_earnings),
            }
        )
        totals["equity"] += current_earnings

    assets_q = q2(totals["assets"])
    liabilities_plus_equity_q = q2(totals["liabilities"] + totals["equity"])

    balanced = to_minor_int(assets_q) == to_minor_int(liabilities_plus_equity_q)
    if not balanced:
        logger.error(
            "Balance sheet unbalanced",
            extra={"assets": str(assets_q), "liabilities_plus_equity": str(liabilities_plus_equity_q)},
        )
        raise AccountingServiceError(
            "Balance Sheet is unbalanced "
            f"(Assets={assets_q} Liabilities+Equity={liabilities_plus_equity_q})"
        )

    return {
        "as_of": as_of.isoformat() if as_of else None,
        **sections,
        "totals": {
            "assets": to_major_number(totals["assets"]),
            "liabilities": to_major_number(totals["liabilities"]),
            "equity": to_major_number(totals["equity"]),
            "liabilities_plus_equity": to_major_number(liabilities_plus_equity_q),
            "current_earnings": to_major_number(current_earnings),
            "assets_minor": to_minor_int(totals["assets"]),
            "liabilities_minor": to_minor_int(totals["liabilities"]),
            "equity_minor": to_minor_int(totals["equity"]),
            "liabilities_plus_equity_minor": to_minor_int(liabilities_plus_equity_q),
            "current_earnings_minor": to_minor_int(current_earnings),
            "balanced": balanced,
        },
    }
