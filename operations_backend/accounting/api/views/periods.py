"""
======================================================
PATH: accounting/api/views/periods.py
======================================================
ACCOUNTING PERIOD API

GET    periods/                  list
POST   periods/                  create an explicit range
GET    periods/{id}/             detail
POST   periods/open-or-create/   month period (idempotent)
POST   periods/{id}/close/       close (blocks posting into the range)
POST   periods/{id}/reopen/      reopen (administrative credential)
GET    periods/status/?date=     is a date open for posting?

Security (Django model permissions):
- view_accountingperiod: list / detail / status
- add_accountingperiod: create / open-or-create
- change_accountingperiod: close / reopen
"""

from __future__ import annotations

from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import domain_error_response
from accounting.api.params import InvalidQueryParam, date_param, date_parameter
from accounting.api.permissions import HasActionPermission
from accounting.api.serializers import (
    AccountingPeriodSerializer,
    OpenOrCreatePeriodSerializer,
    ReopenPeriodSerializer,
)
from accounting.models.period import AccountingPeriod
from accounting.services.exceptions import AccountingServiceError
from accounting.services.period_service import (
    close_period,
    open_or_create_period,
    period_status,
    reopen_period,
)


@extend_schema(tags=["accounting"])
class AccountingPeriodViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = AccountingPeriodSerializer
    queryset = AccountingPeriod.objects.all().order_by("-start_date")
    filterset_fields = ["status"]

    required_permissions = {
        "list": "accounting.view_accountingperiod",
        "retrieve": "accounting.view_accountingperiod",
        "status_for_date": "accounting.view_accountingperiod",
        "create": "accounting.add_accountingperiod",
        "open_or_create": "accounting.add_accountingperiod",
        "close": "accounting.change_accountingperiod",
        "reopen": "accounting.change_accountingperiod",
    }

    @extend_schema(request=OpenOrCreatePeriodSerializer, responses={200: AccountingPeriodSerializer, 201: AccountingPeriodSerializer})
    @action(detail=False, methods=["post"], url_path="open-or-create")
    def open_or_create(self, request):
        s = OpenOrCreatePeriodSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            period, created = open_or_create_period(
                year=s.validated_data["year"], month=s.validated_data["month"]
            )
        except AccountingServiceError as exc:
            return domain_error_response(exc)

        return Response(
            AccountingPeriodSerializer(period).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(request=None, responses={200: AccountingPeriodSerializer})
    @action(detail=True, methods=["post"], url_path="close")
    def close(self, request, pk=None):
        period = self.get_object()
        try:
            period = close_period(period_id=period.pk, actor_id=request.user.get_username())
        except AccountingServiceError as exc:
            return domain_error_response(exc)
        return Response(AccountingPeriodSerializer(period).data, status=status.HTTP_200_OK)

    @extend_schema(request=ReopenPeriodSerializer, responses={200: AccountingPeriodSerializer})
    @action(detail=True, methods=["post"], url_path="reopen")
    def reopen(self, request, pk=None):
        period = self.get_object()
        s = ReopenPeriodSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            period = reopen_period(
                period_id=period.pk,
                credential=s.validated_data["credential"],
                actor_id=request.user.get_username(),
            )
        except AccountingServiceError as exc:
            return domain_error_response(exc)
        return Response(AccountingPeriodSerializer(period).data, status=status.HTTP_200_OK)

    @extend_schema(
        parameters=[date_parameter("date", "Date to check (YYYY-MM-DD). Defaults to today.")],
        responses={200: dict},
    )
    @action(detail=False, methods=["get"], url_path="status")
    def status_for_date(self, request):
        try:
            day = date_param(request, "date") or timezone.localdate()
        except InvalidQueryParam as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(period_status(day), status=status.HTTP_200_OK)
