# accounting/api/serializers/manual_entries.py

from decimal import Decimal

from rest_framework import serializers


class ManualEntryLineSerializer(serializers.Serializer):
    account_id = serializers.IntegerField(required=False, allow_null=True)
    account_code = serializers.CharField(required=False, allow_blank=True)
    debit = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=Decimal("0"))
    credit = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=Decimal("0"))
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs.get("account_id") is None and not (attrs.get("account_code") or "").strip():
            raise serializers.ValidationError("account_id or account_code is required")
        return attrs


class ManualEntrySerializer(serializers.Serializer):
    entry_date = serializers.DateField()
    description = serializers.CharField()
    reference_type = serializers.CharField(required=False, allow_blank=True, default="")
    reference_id = serializers.CharField(required=False, allow_blank=True, default="")
    lines = ManualEntryLineSerializer(many=True)

    def validate(self, attrs):
        if len(attrs["lines"]) < 2:
            raise serializers.ValidationError({"lines": "A journal needs at least two lines"})
        if (attrs.get("reference_id") or "").strip() and not (attrs.get("reference_type") or "").strip():
            raise serializers.ValidationError(
                {"reference_type": "reference_type is required when reference_id is set"}
            )
        return attrs
