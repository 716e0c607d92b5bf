"""
PATH: accounting/api/views/trial_balance.py

TRIAL BALANCE API VIEW (READ-ONLY)

- Permission-gated: requires accounting.view_journalline
- Optional [start_date, end_date] range on entry_date
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import domain_error_response, forbidden
from accounting.api.params import END_DATE, START_DATE, InvalidQueryParam, date_param
from accounting.services.exceptions import AccountingServiceError
from accounting.services.report_service import TRIAL_BALANCE, query_report

REPORT_PERMISSION = "accounting.view_journalline"


@extend_schema(
    tags=["accounting"],
    parameters=[START_DATE, END_DATE],
    responses={200: dict},
)
class TrialBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm(REPORT_PERMISSION):
            return forbidden("You do not have permission to view trial balance.")

        try:
            start_date = date_param(request, "start_date")
            end_date = date_param(request, "end_date")
        except InvalidQueryParam as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            data = query_report(report=TRIAL_BALANCE, start_date=start_date, end_date=end_date)
        except AccountingServiceError as exc:
            return domain_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)
