# PATH: accounting/api/view.py

"""
PATH: accounting/api/view.py

ACCOUNTING API VIEWSETS (READ-ONLY / AUDIT SAFE)

- Journal entries and lines are never written through these endpoints;
  posting goes through events/ and manual-entries/
- Permission-gated via Django model permissions (no role hardcoding)
- Filtering via django-filter:
    /api/accounting/journal-entries/?event_type=confirm_purchase&reference_id=PO-1
    /api/accounting/journal-entries/?entry_date_after=2024-01-01&entry_date_before=2024-01-31
    /api/accounting/journal-lines/?journal_entry=30&account=28

Security rules:
- JournalEntry list requires accounting.view_journalentry
- JournalLine list requires accounting.view_journalline
"""

import django_filters
from drf_spectacular.utils import extend_schema
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import ReadOnlyModelViewSet

from accounting.api.serializers import JournalEntrySerializer, JournalLineSerializer
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine


class JournalEntryFilter(django_filters.FilterSet):
    entry_date = django_filters.DateFromToRangeFilter()

    class Meta:
        model = JournalEntry
        fields = ["event_type", "event_context", "reference_type", "reference_id", "entry_date"]


class JournalLineFilter(django_filters.FilterSet):
    entry_date = django_filters.DateFromToRangeFilter(field_name="journal_entry__entry_date")
    account_code = django_filters.CharFilter(field_name="account__code")

    class Meta:
        model = JournalLine
        fields = ["journal_entry", "account", "account_code", "entry_date"]


@extend_schema(tags=["accounting"])
class JournalEntryViewSet(ReadOnlyModelViewSet):
    """
    Read-only access to journal entries (audit-safe).
    """

    permission_classes = [IsAuthenticated]
    serializer_class = JournalEntrySerializer
    filterset_class = JournalEntryFilter
    http_method_names = ["get", "head", "options"]

    queryset = JournalEntry.objects.prefetch_related("lines__account").order_by(
        "-entry_date", "-id"
    )

    def get_queryset(self):
        if not self.request.user.has_perm("accounting.view_journalentry"):
            raise PermissionDenied(
                "You do not have permission to view journal entries."
            )
        return super().get_queryset()


@extend_schema(tags=["accounting"])
class JournalLineViewSet(ReadOnlyModelViewSet):
    """
    Read-only access to journal lines, newest first.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = JournalLineSerializer
    filterset_class = JournalLineFilter
    http_method_names = ["get", "head", "options"]

    queryset = JournalLine.objects.select_related("journal_entry", "account").order_by("-id")

    def get_queryset(self):
        if not self.request.user.has_perm("accounting.view_journalline"):
            raise PermissionDenied("You do not have permission to view journal lines.")
        return super().get_queryset()
