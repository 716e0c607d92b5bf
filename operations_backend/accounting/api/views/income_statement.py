"""
PATH: accounting/api/views/income_statement.py

INCOME STATEMENT (PROFIT & LOSS) API VIEW

Read-only; same permission as the trial balance.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import domain_error_response, forbidden
from accounting.api.params import END_DATE, START_DATE, InvalidQueryParam, date_param
from accounting.api.views.trial_balance import REPORT_PERMISSION
from accounting.services.exceptions import AccountingServiceError
from accounting.services.report_service import INCOME_STATEMENT, query_report


@extend_schema(
    tags=["accounting"],
    parameters=[START_DATE, END_DATE],
    responses={200: dict},
)
class IncomeStatementView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm(REPORT_PERMISSION):
            return forbidden("You do not have permission to view the income statement.")

        try:
            start_date = date_param(request, "start_date")
            end_date = date_param(request, "end_date")
        except InvalidQueryParam as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            data = query_report(report=INCOME_STATEMENT, start_date=start_date, end_date=end_date)
        except AccountingServiceError as exc:
            return domain_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)
