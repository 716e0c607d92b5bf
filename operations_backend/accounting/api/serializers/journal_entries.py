# accounting/api/serializers/journal_entries.py

from rest_framework import serializers

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine


class JournalLineSerializer(serializers.ModelSerializer):
    account_code = serializers.CharField(source="account.code", read_only=True)
    account_name = serializers.CharField(source="account.name", read_only=True)
    entry_date = serializers.DateField(source="journal_entry.entry_date", read_only=True)

    class Meta:
        model = JournalLine
        fields = (
            "id",
            "journal_entry",
            "entry_date",
            "account",
            "account_code",
            "account_name",
            "debit",
            "credit",
            "description",
            "created_at",
        )
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    lines = JournalLineSerializer(many=True, read_only=True)

    class Meta:
        model = JournalEntry
        fields = (
            "id",
            "entry_date",
            "description",
            "event_type",
            "event_context",
            "reference_type",
            "reference_id",
            "total_debit",
            "total_credit",
            "posted_by",
            "created_at",
            "lines",
        )
        read_only_fields = fields
