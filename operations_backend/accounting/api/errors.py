# accounting/api/errors.py

"""
DOMAIN ERROR -> HTTP RESPONSE

Views catch AccountingServiceError and hand it here; the body is always
{"detail": <message>, "code": <stable code>}.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import (
    AccountingServiceError,
    PeriodClosedError,
    PeriodMissingError,
    UnauthorizedError,
    VariantCostLockTimeoutError,
)

STATUS_BY_ERROR = {
    PeriodClosedError: status.HTTP_409_CONFLICT,
    PeriodMissingError: status.HTTP_409_CONFLICT,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    VariantCostLockTimeoutError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: AccountingServiceError) -> int:
    for error_class, http_status in STATUS_BY_ERROR.items():
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def domain_error_response(exc: AccountingServiceError) -> Response:
    return Response({"detail": str(exc), "code": exc.code}, status=status_for(exc))


def forbidden(detail: str) -> Response:
    return Response({"detail": detail}, status=status.HTTP_403_FORBIDDEN)
