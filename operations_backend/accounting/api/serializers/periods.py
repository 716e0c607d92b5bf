# accounting/api/serializers/periods.py

"""
======================================================
PATH: accounting/api/serializers/periods.py
======================================================
ACCOUNTING PERIOD SERIALIZERS

- AccountingPeriodSerializer: list/detail/create (status fields read-only;
  state changes go through close/reopen actions only)
- OpenOrCreatePeriodSerializer: calendar month selector
- ReopenPeriodSerializer: administrative credential (write-only)
"""

from rest_framework import serializers

from accounting.api.serializers.base import CleanModelSerializer
from accounting.models.period import AccountingPeriod


class AccountingPeriodSerializer(CleanModelSerializer):
    class Meta:
        model = AccountingPeriod
        fields = (
            "id",
            "name",
            "start_date",
            "end_date",
            "status",
            "closed_at",
            "closed_by",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "status", "closed_at", "closed_by", "created_at", "updated_at")

    def validate(self, attrs):
        start = attrs.get("start_date")
        end = attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError({"end_date": "end_date must be >= start_date"})
        return attrs


class OpenOrCreatePeriodSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1900, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)


class ReopenPeriodSerializer(serializers.Serializer):
    credential = serializers.CharField(write_only=True, trim_whitespace=False)
