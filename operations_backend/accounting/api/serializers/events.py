# accounting/api/serializers/events.py

"""
======================================================
PATH: accounting/api/serializers/events.py
======================================================
POST EVENT SERIALIZER

Shape checks only. Business validation (weights accepted per event type,
context rules, stock line rules) belongs to the posting engine so that
API and service callers get the same errors.
"""

from rest_framework import serializers

from accounting.models.mapping import EventType
from accounting.services.posting_engine import PostingEvent

POSTABLE_EVENT_TYPES = [c for c in EventType.choices if c[0] != EventType.MANUAL_JOURNAL]


class StockLineSerializer(serializers.Serializer):
    variant_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(required=False)
    unit_cost = serializers.DecimalField(
        max_digits=18, decimal_places=4, required=False, allow_null=True
    )
    counted_quantity = serializers.IntegerField(required=False, min_value=0)
    quantity_delta = serializers.IntegerField(required=False)


class PostEventSerializer(serializers.Serializer):
    event_type = serializers.ChoiceField(choices=POSTABLE_EVENT_TYPES)
    entry_date = serializers.DateField()
    event_context = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    reference_type = serializers.CharField(max_length=50)
    reference_id = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    amounts = serializers.DictField(required=False, default=dict)
    stock_lines = StockLineSerializer(many=True, required=False, default=list)

    def to_event(self, *, posted_by: str = "") -> PostingEvent:
        data = self.validated_data
        return PostingEvent(
            event_type=data["event_type"],
            entry_date=data["entry_date"],
            event_context=data.get("event_context") or None,
            reference_type=data["reference_type"],
            reference_id=data["reference_id"],
            description=data.get("description") or "",
            amounts=data.get("amounts") or {},
            stock_lines=[dict(line) for line in data.get("stock_lines") or []],
            posted_by=posted_by,
        )
