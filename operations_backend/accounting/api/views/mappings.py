"""
PATH: accounting/api/views/mappings.py

ACCOUNT MAPPING ADMINISTRATION

Rows are read fresh by the resolver on every post; edits here take effect
on the next event without a restart.

Filtering (django-filter):
    ?event_type=confirm_sales_order&event_context=marketplace&side=debit
    ?amount_weight=cost&account=12&is_active=true
    ?wildcard=true   (rows with no event_context)
"""

from __future__ import annotations

import django_filters
from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from accounting.api.permissions import HasActionPermission
from accounting.api.serializers import AccountMappingSerializer
from accounting.models.mapping import AccountMapping


class AccountMappingFilter(django_filters.FilterSet):
    event_context = django_filters.CharFilter(field_name="event_context", lookup_expr="iexact")
    wildcard = django_filters.BooleanFilter(field_name="event_context", lookup_expr="isnull")

    class Meta:
        model = AccountMapping
        fields = ["event_type", "event_context", "side", "amount_weight", "account", "is_active"]


@extend_schema(tags=["accounting"])
class AccountMappingViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = AccountMappingSerializer
    filterset_class = AccountMappingFilter
    queryset = AccountMapping.objects.select_related("account").order_by(
        "event_type", "side", "-priority", "id"
    )

    required_permissions = {
        "list": "accounting.view_accountmapping",
        "retrieve": "accounting.view_accountmapping",
        "create": "accounting.add_accountmapping",
        "update": "accounting.change_accountmapping",
        "partial_update": "accounting.change_accountmapping",
        "destroy": "accounting.delete_accountmapping",
    }
