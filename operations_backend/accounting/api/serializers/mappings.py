# accounting/api/serializers/mappings.py

from rest_framework import serializers

from accounting.api.serializers.base import CleanModelSerializer
from accounting.models.account import Account
from accounting.models.mapping import AccountMapping


class AccountMappingSerializer(CleanModelSerializer):
    account = serializers.PrimaryKeyRelatedField(queryset=Account.objects.all())
    account_code = serializers.CharField(source="account.code", read_only=True)
    account_name = serializers.CharField(source="account.name", read_only=True)

    class Meta:
        model = AccountMapping
        fields = (
            "id",
            "event_type",
            "event_context",
            "side",
            "amount_weight",
            "account",
            "account_code",
            "account_name",
            "priority",
            "is_active",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "account_code", "account_name", "created_at", "updated_at")

    def validate_event_context(self, value):
        if value is None:
            return None
        value = str(value).strip().lower()
        return value or None
