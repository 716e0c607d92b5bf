"""
PATH: accounting/api/views/accounts.py

CHART OF ACCOUNTS API

- list / detail / create / update (no delete: deactivate instead)
- tree: parent-linked accounts as nested JSON

Filtering:
    ?account_type=ASSET&is_active=true&parent=3
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.permissions import HasActionPermission
from accounting.api.serializers import AccountSerializer
from accounting.models.account import Account
from accounting.services.chart_service import account_tree


@extend_schema(tags=["accounting"])
class AccountViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = AccountSerializer
    queryset = Account.objects.select_related("parent").order_by("code")
    filterset_fields = ["account_type", "is_active", "parent"]

    required_permissions = {
        "list": "accounting.view_account",
        "retrieve": "accounting.view_account",
        "tree": "accounting.view_account",
        "create": "accounting.add_account",
        "update": "accounting.change_account",
        "partial_update": "accounting.change_account",
    }

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="include_inactive",
                type=bool,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Include deactivated accounts (default false).",
            )
        ],
        responses={200: dict},
    )
    @action(detail=False, methods=["get"], url_path="tree")
    def tree(self, request):
        include_inactive = str(request.query_params.get("include_inactive", "")).lower() in (
            "1",
            "true",
            "yes",
        )
        return Response(account_tree(include_inactive=include_inactive), status=status.HTTP_200_OK)
