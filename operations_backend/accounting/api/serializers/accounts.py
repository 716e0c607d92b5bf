# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.api.serializers.base import CleanModelSerializer
from accounting.models.account import Account


class AccountSerializer(CleanModelSerializer):
    """
    Chart of accounts row.

    parent is addressed by id; normal_side is derived from account_type.
    """

    normal_side = serializers.SerializerMethodField()
    parent_code = serializers.SerializerMethodField()

    class Meta:
        model = Account
        fields = (
            "id",
            "code",
            "name",
            "account_type",
            "normal_side",
            "parent",
            "parent_code",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "normal_side", "parent_code", "created_at", "updated_at")

    def get_normal_side(self, obj) -> str:
        return "debit" if obj.is_debit_normal else "credit"

    def get_parent_code(self, obj):
        return obj.parent.code if obj.parent_id else None
