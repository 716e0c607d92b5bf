# accounting/api/views/manual_entries.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated

from accounting.api.errors import domain_error_response, forbidden
from accounting.api.serializers import ManualEntrySerializer
from accounting.api.views.events import (
    POST_PERMISSION,
    already_posted_response,
    created_response,
)
from accounting.services.exceptions import AccountingServiceError, AlreadyPostedError
from accounting.services.posting_engine import post_manual_entry


class ManualEntryView(GenericAPIView):
    """
    Explicit balanced journal (adjustments, opening balances, accruals).

    No mapping resolution; period, balance and idempotency rules apply.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ManualEntrySerializer

    @extend_schema(
        tags=["accounting"],
        request=ManualEntrySerializer,
        responses={201: dict, 200: dict, 400: dict, 403: dict, 409: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(POST_PERMISSION):
            return forbidden("You do not have permission to post manual journals.")

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            entry = post_manual_entry(
                entry_date=data["entry_date"],
                description=data["description"],
                lines=[dict(line) for line in data["lines"]],
                reference_type=data.get("reference_type") or "",
                reference_id=data.get("reference_id") or "",
                posted_by=request.user.get_username(),
            )
        except AlreadyPostedError as exc:
            return already_posted_response(exc)
        except AccountingServiceError as exc:
            return domain_error_response(exc)

        return created_response(entry)
