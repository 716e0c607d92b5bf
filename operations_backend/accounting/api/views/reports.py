"""
PATH: accounting/api/views/reports.py

REPORT QUERY API (SINGLE ENTRYPOINT)

GET /api/accounting/reports/?report=trial_balance|income_statement|balance_sheet
    &start_date=YYYY-MM-DD&end_date=YYYY-MM-DD&as_of=YYYY-MM-DD
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import domain_error_response, forbidden
from accounting.api.params import AS_OF, END_DATE, START_DATE, InvalidQueryParam, date_param
from accounting.api.views.trial_balance import REPORT_PERMISSION
from accounting.services.exceptions import AccountingServiceError
from accounting.services.report_service import REPORTS, query_report


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(
            name="report",
            type=str,
            location=OpenApiParameter.QUERY,
            required=True,
            enum=list(REPORTS),
            description="Which report to compute.",
        ),
        START_DATE,
        END_DATE,
        AS_OF,
    ],
    responses={200: dict},
)
class ReportQueryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm(REPORT_PERMISSION):
            return forbidden("You do not have permission to view accounting reports.")

        report = (request.query_params.get("report") or "").strip()
        if not report:
            return Response(
                {"detail": f"report is required ({', '.join(REPORTS)})"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            start_date = date_param(request, "start_date")
            end_date = date_param(request, "end_date")
            as_of = date_param(request, "as_of")
        except InvalidQueryParam as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            data = query_report(
                report=report, start_date=start_date, end_date=end_date, as_of=as_of
            )
        except AccountingServiceError as exc:
            return domain_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)
