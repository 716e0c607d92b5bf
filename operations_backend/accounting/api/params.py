# accounting/api/params.py

from __future__ import annotations

from datetime import date

from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter


class InvalidQueryParam(ValueError):
    pass


def date_param(request, name: str) -> date | None:
    raw = request.query_params.get(name)
    if raw is None or str(raw).strip() == "":
        return None
    try:
        d = parse_date(str(raw).strip())
    except ValueError:
        d = None
    if d is None:
        raise InvalidQueryParam(f"Invalid {name} (expected YYYY-MM-DD)")
    return d


def date_parameter(name: str, description: str) -> OpenApiParameter:
    return OpenApiParameter(
        name=name,
        type=str,
        location=OpenApiParameter.QUERY,
        required=False,
        description=description,
    )


START_DATE = date_parameter("start_date", "Inclusive lower bound on entry_date (YYYY-MM-DD).")
END_DATE = date_parameter("end_date", "Inclusive upper bound on entry_date (YYYY-MM-DD).")
AS_OF = date_parameter("as_of", "Balance sheet date, inclusive (YYYY-MM-DD). Defaults to end_date.")
