# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.models.ledger_settings import LedgerSettings
from accounting.models.mapping import AccountMapping, AmountWeight, EventContext, EventType
from accounting.models.period import AccountingPeriod

__all__ = [
    "Account",
    "AccountMapping",
    "AccountingPeriod",
    "AmountWeight",
    "EventContext",
    "EventType",
    "JournalEntry",
    "JournalLine",
    "LedgerSettings",
]
