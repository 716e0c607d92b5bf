# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import AccountSerializer
from accounting.api.serializers.events import PostEventSerializer, StockLineSerializer
from accounting.api.serializers.journal_entries import (
    JournalEntrySerializer,
    JournalLineSerializer,
)
from accounting.api.serializers.manual_entries import (
    ManualEntryLineSerializer,
    ManualEntrySerializer,
)
from accounting.api.serializers.mappings import AccountMappingSerializer
from accounting.api.serializers.periods import (
    AccountingPeriodSerializer,
    OpenOrCreatePeriodSerializer,
    ReopenPeriodSerializer,
)

__all__ = [
    "AccountSerializer",
    "AccountMappingSerializer",
    "AccountingPeriodSerializer",
    "OpenOrCreatePeriodSerializer",
    "ReopenPeriodSerializer",
    "PostEventSerializer",
    "StockLineSerializer",
    "ManualEntrySerializer",
    "ManualEntryLineSerializer",
    "JournalEntrySerializer",
    "JournalLineSerializer",
]
