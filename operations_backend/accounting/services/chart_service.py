# accounting/services/chart_service.py

"""
CHART OF ACCOUNTS SERVICE

- account_tree(): parent-linked accounts rendered as nested JSON
- seed_default_chart(): idempotent default chart + event mappings
  (used by `manage.py seed_chart` and by tests)
"""

from __future__ import annotations

import logging

from django.db import transaction

from accounting.models.account import Account
from accounting.models.mapping import AccountMapping, AmountWeight, EventContext, EventType

logger = logging.getLogger(__name__)

# (code, name, type, parent_code)
DEFAULT_ACCOUNTS = [
    ("1000", "Cash", Account.ASSET, None),
    ("1010", "Bank", Account.ASSET, None),
    ("1100", "Accounts Receivable", Account.ASSET, None),
    ("1110", "Marketplace Receivable", Account.ASSET, "1100"),
    ("1200", "Inventory", Account.ASSET, None),
    ("2000", "Accounts Payable", Account.LIABILITY, None),
    ("3000", "Owner's Equity", Account.EQUITY, None),
    ("3100", "Retained Earnings", Account.EQUITY, None),
    ("4000", "Sales Revenue", Account.REVENUE, None),
    ("4010", "Marketplace Sales", Account.REVENUE, "4000"),
    ("4050", "Sales Discounts", Account.REVENUE, None),
    ("4060", "Sales Returns", Account.REVENUE, None),
    ("4100", "Inventory Gain", Account.REVENUE, None),
    ("5000", "Cost of Goods Sold", Account.EXPENSE, None),
    ("6000", "Operating Expenses", Account.EXPENSE, None),
    ("6100", "Marketplace Fees", Account.EXPENSE, "6000"),
    ("6200", "Inventory Loss", Account.EXPENSE, None),
]

DR = AccountMapping.DEBIT
CR = AccountMapping.CREDIT

_G = AmountWeight.GROSS
_N = AmountWeight.NET
_D = AmountWeight.DISCOUNT
_F = AmountWeight.FEE
_P = AmountWeight.PAID
_C = AmountWeight.COST

_MKT = EventContext.MARKETPLACE
_BANK = EventContext.BANK

# (event_type, event_context, side, amount_weight, account_code)
DEFAULT_MAPPINGS = [
    # Goods received on credit
    (EventType.CONFIRM_PURCHASE, None, DR, _G, "1200"),
    (EventType.CONFIRM_PURCHASE, None, CR, _G, "2000"),
    # Supplier payment (cash default, bank by context)
    (EventType.PURCHASE_PAYMENT, None, DR, _P, "2000"),
    (EventType.PURCHASE_PAYMENT, None, CR, _P, "1000"),
    (EventType.PURCHASE_PAYMENT, _BANK, CR, _P, "1010"),
    # Goods returned to supplier at current cost
    (EventType.CONFIRM_RETURN_PURCHASE, None, DR, _C, "2000"),
    (EventType.CONFIRM_RETURN_PURCHASE, None, CR, _C, "1200"),
    # Sales order, gross receivable method
    (EventType.CONFIRM_SALES_ORDER, None, DR, _G, "1100"),
    (EventType.CONFIRM_SALES_ORDER, None, CR, _G, "4000"),
    (EventType.CONFIRM_SALES_ORDER, None, DR, _D, "4050"),
    (EventType.CONFIRM_SALES_ORDER, None, CR, _D, "1100"),
    (EventType.CONFIRM_SALES_ORDER, None, DR, _F, "6100"),
    (EventType.CONFIRM_SALES_ORDER, None, CR, _F, "1100"),
    (EventType.CONFIRM_SALES_ORDER, None, DR, _P, "1000"),
    (EventType.CONFIRM_SALES_ORDER, None, CR, _P, "1100"),
    (EventType.CONFIRM_SALES_ORDER, None, DR, _C, "5000"),
    (EventType.CONFIRM_SALES_ORDER, None, CR, _C, "1200"),
    (EventType.CONFIRM_SALES_ORDER, _MKT, DR, _G, "1110"),
    (EventType.CONFIRM_SALES_ORDER, _MKT, CR, _G, "4010"),
    (EventType.CONFIRM_SALES_ORDER, _MKT, CR, _D, "1110"),
    (EventType.CONFIRM_SALES_ORDER, _MKT, CR, _F, "1110"),
    (EventType.CONFIRM_SALES_ORDER, _MKT, DR, _P, "1010"),
    (EventType.CONFIRM_SALES_ORDER, _MKT, CR, _P, "1110"),
    # Customer return (goods back at cost)
    (EventType.SALES_RETURN, None, DR, _G, "4060"),
    (EventType.SALES_RETURN, None, CR, _G, "1100"),
    (EventType.SALES_RETURN, None, DR, _C, "1200"),
    (EventType.SALES_RETURN, None, CR, _C, "5000"),
    (EventType.SALES_RETURN, _MKT, CR, _G, "1110"),
    # Financial-only credit note
    (EventType.CREDIT_NOTE, None, DR, _G, "4060"),
    (EventType.CREDIT_NOTE, None, CR, _G, "1100"),
    (EventType.CREDIT_NOTE, _MKT, CR, _G, "1110"),
    # Customer payment
    (EventType.CUSTOMER_PAYMENT, None, DR, _P, "1000"),
    (EventType.CUSTOMER_PAYMENT, _BANK, DR, _P, "1010"),
    (EventType.CUSTOMER_PAYMENT, None, CR, _P, "1100"),
    # Marketplace payout: net to bank, fee expensed, gross receivable cleared
    (EventType.MARKETPLACE_PAYOUT, None, DR, _N, "1010"),
    (EventType.MARKETPLACE_PAYOUT, None, DR, _F, "6100"),
    (EventType.MARKETPLACE_PAYOUT, None, CR, _G, "1110"),
    # Stock count / adjustment
    (EventType.STOCK_OPNAME, EventContext.INCREASE, DR, _C, "1200"),
    (EventType.STOCK_OPNAME, EventContext.INCREASE, CR, _C, "4100"),
    (EventType.STOCK_OPNAME, EventContext.DECREASE, DR, _C, "6200"),
    (EventType.STOCK_OPNAME, EventContext.DECREASE, CR, _C, "1200"),
    (EventType.STOCK_ADJUSTMENT, EventContext.INCREASE, DR, _C, "1200"),
    (EventType.STOCK_ADJUSTMENT, EventContext.INCREASE, CR, _C, "4100"),
    (EventType.STOCK_ADJUSTMENT, EventContext.DECREASE, DR, _C, "6200"),
    (EventType.STOCK_ADJUSTMENT, EventContext.DECREASE, CR, _C, "1200"),
]

DEFAULT_PRIORITY = 10


def account_tree(*, include_inactive: bool = False) -> list[dict]:
    qs = Account.objects.all().order_by("code")
    if not include_inactive:
        qs = qs.filter(is_active=True)

    nodes = {
        acc.id: {
            "id": acc.id,
            "code": acc.code,
            "name": acc.name,
            "account_type": acc.account_type,
            "is_active": acc.is_active,
            "parent_id": acc.parent_id,
            "children": [],
        }
        for acc in qs
    }

    roots = []
    for node in nodes.values():
        parent = nodes.get(node["parent_id"])
        if parent is None:
            roots.append(node)
        else:
            parent["children"].append(node)

    return roots


@transaction.atomic
def seed_default_chart() -> dict:
    created_accounts = 0
    updated_accounts = 0
    by_code: dict[str, Account] = {}

    for code, name, account_type, parent_code in DEFAULT_ACCOUNTS:
        parent = by_code.get(parent_code) if parent_code else None
        acc, created = Account.objects.get_or_create(
            code=code,
            defaults={
                "name": name,
                "account_type": account_type,
                "parent": parent,
                "is_active": True,
            },
        )

        if created:
            created_accounts += 1
        elif acc.name != name or not acc.is_active or acc.parent_id != (parent.id if parent else None):
            acc.name = name
            acc.is_active = True
            acc.parent = parent
            acc.save()
            updated_accounts += 1

        by_code[code] = acc

    created_mappings = 0
    for event_type, ctx, side, weight, code in DEFAULT_MAPPINGS:
        _, created = AccountMapping.objects.get_or_create(
            event_type=event_type,
            event_context=ctx,
            side=side,
            amount_weight=weight,
            account=by_code[code],
            defaults={"priority": DEFAULT_PRIORITY, "is_active": True},
        )
        if created:
            created_mappings += 1

    logger.info(
        "Default chart seeded",
        extra={
            "accounts_created": created_accounts,
            "accounts_updated": updated_accounts,
            "mappings_created": created_mappings,
        },
    )

    return {
        "accounts_created": created_accounts,
        "accounts_updated": updated_accounts,
        "mappings_created": created_mappings,
    }
