"""Utility helpers shared across API view modules."""

from django.utils import timezone
from django.utils.dateparse import parse_date

from ..services.errors import InvalidArgument


def _parse(value, name):
    parsed = parse_date(value)
    if parsed is None:
        raise InvalidArgument(f"{name} must be a date in YYYY-MM-DD format.")
    return parsed


def get_date_range(request, default_today=True):
    """Return ``(from_date, to_date)`` from the ``from_date``/``to_date`` query params.

    With ``default_today`` a missing ``from_date`` means today and a missing
    ``to_date`` means today as well; otherwise missing bounds are ``None``.
    """

    raw_from = request.query_params.get('from_date')
    raw_to = request.query_params.get('to_date')
    today = timezone.localdate()

    from_date = _parse(raw_from, 'from_date') if raw_from else (today if default_today else None)
    to_date = _parse(raw_to, 'to_date') if raw_to else (today if default_today else None)
    if from_date and to_date and from_date > to_date:
        raise InvalidArgument("from_date must not be after to_date.")
    return from_date, to_date


def get_export_format(request):
    export_format = request.query_params.get('export_format')
    if not export_format:
        export_format = request.query_params.get('format')
    return (export_format or '').lower()
