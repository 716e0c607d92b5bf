# accounting/api/views/balance_sheet.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import domain_error_response, forbidden
from accounting.api.params import AS_OF, InvalidQueryParam, date_param
from accounting.api.views.trial_balance import REPORT_PERMISSION
from accounting.services.exceptions import AccountingServiceError
from accounting.services.report_service import BALANCE_SHEET, query_report


@extend_schema(
    tags=["accounting"],
    parameters=[AS_OF],
    responses={200: dict},
)
class BalanceSheetView(APIView):
    """
    Assets / Liabilities / Equity as at `as_of` (inclusive), with the
    derived current-period earnings line.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm(REPORT_PERMISSION):
            return forbidden("You do not have permission to view balance sheet.")

        try:
            as_of = date_param(request, "as_of")
        except InvalidQueryParam as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            data = query_report(report=BALANCE_SHEET, as_of=as_of)
        except AccountingServiceError as exc:
            return domain_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)
