"""
PATH: accounting/api/views/events.py

POST BUSINESS EVENT API

POST /api/accounting/events/

- 201: journal entry created (lines + stock movements in the same commit)
- 200: reference already posted; body carries the existing entry id
  (callers retry safely)
- 4xx/503: domain error {"detail", "code"}, nothing persisted

Security:
- Authenticated
- Requires accounting.add_journalentry
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import domain_error_response, forbidden
from accounting.api.serializers import JournalEntrySerializer, PostEventSerializer
from accounting.models.journal import JournalEntry
from accounting.services.exceptions import AccountingServiceError, AlreadyPostedError
from accounting.services.posting_engine import post_event

POST_PERMISSION = "accounting.add_journalentry"


def already_posted_response(exc: AlreadyPostedError) -> Response:
    return Response(
        {
            "already_posted": True,
            "entry_id": exc.entry_id,
            "detail": str(exc),
            "code": exc.code,
        },
        status=status.HTTP_200_OK,
    )


def created_response(entry) -> Response:
    entry = JournalEntry.objects.prefetch_related("lines__account").get(pk=entry.pk)
    return Response(
        {
            "already_posted": False,
            "entry_id": entry.id,
            "entry": JournalEntrySerializer(entry).data,
        },
        status=status.HTTP_201_CREATED,
    )


class PostEventView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PostEventSerializer

    @extend_schema(
        tags=["accounting"],
        request=PostEventSerializer,
        responses={201: dict, 200: dict, 400: dict, 403: dict, 409: dict, 503: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(POST_PERMISSION):
            return forbidden("You do not have permission to post accounting events.")

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = post_event(serializer.to_event(posted_by=request.user.get_username()))
        except AlreadyPostedError as exc:
            return already_posted_response(exc)
        except AccountingServiceError as exc:
            return domain_error_response(exc)

        return created_response(entry)
