"""Sales and return reports with Excel and PDF exports."""

from decimal import Decimal

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, Sum
from django.db.models.functions import Coalesce
from django.http import HttpResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import ReturnTransaction, SaleItem, SaleTransaction
from ..permissions import is_super_admin
from ..report_exports import (
    generate_returns_report_workbook,
    generate_sales_report_pdf,
    generate_sales_report_workbook,
)
from ..serializers import ReturnReadSerializer, SaleReadSerializer
from ..services.errors import InvalidArgument
from .utils import get_date_range, get_export_format

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
GST_FILTERS = ('all', 'with_gst', 'without_gst')
MONEY = DecimalField(max_digits=18, decimal_places=2)
ZERO = Decimal('0')


def _sum(field):
    return Coalesce(Sum(field), ZERO, output_field=MONEY)


def _attachment(content, content_type, filename):
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def summarize_sales(sales_queryset, include_profit):
    summary = sales_queryset.aggregate(
        total_sales=_sum('total_amount'),
        total_tax=_sum('tax_amount'),
        total_discount=_sum('discount'),
        total_paid=_sum('paid_amount'),
        total_balance=_sum('balance_amount'),
        total_transactions=Count('id'),
        with_gst_count=Count('id', filter=Q(with_gst=True)),
        without_gst_count=Count('id', filter=Q(with_gst=False)),
    )
    summary['total_profit'] = None
    if include_profit:
        # Margin against the item's current purchase cost.
        margin = ExpressionWrapper(
            (F('sale_rate') - F('item__purchase_rate')) * F('quantity'),
            output_field=MONEY,
        )
        summary['total_profit'] = SaleItem.objects.filter(sale__in=sales_queryset).aggregate(
            total=Coalesce(Sum(margin), ZERO, output_field=MONEY)
        )['total']
    return summary


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_report(request):
    """Sales between two dates (today by default), optionally filtered by GST mode."""

    from_date, to_date = get_date_range(request)
    gst_filter = (request.query_params.get('gst_filter') or 'all').lower()
    if gst_filter not in GST_FILTERS:
        raise InvalidArgument("gst_filter must be one of 'all', 'with_gst' or 'without_gst'.")

    queryset = SaleTransaction.objects.filter(
        transaction_date__date__gte=from_date,
        transaction_date__date__lte=to_date,
    )
    if gst_filter == 'with_gst':
        queryset = queryset.filter(with_gst=True)
    elif gst_filter == 'without_gst':
        queryset = queryset.filter(with_gst=False)

    include_profit = is_super_admin(request.user)
    summary = summarize_sales(queryset, include_profit)
    sales = list(
        queryset.select_related('seller_party', 'created_by')
        .prefetch_related('items__item')
        .order_by('-transaction_date', '-id')
    )

    export_format = get_export_format(request)
    filename_stub = f"sales-report-{from_date}-to-{to_date}"

    if export_format in {'xlsx', 'excel'}:
        workbook_bytes = generate_sales_report_workbook(sales, summary, str(from_date), str(to_date))
        return _attachment(workbook_bytes, XLSX_CONTENT_TYPE, f"{filename_stub}.xlsx")

    if export_format == 'pdf':
        pdf_bytes = generate_sales_report_pdf(sales, summary, str(from_date), str(to_date))
        return _attachment(pdf_bytes, 'application/pdf', f"{filename_stub}.pdf")

    serializer = SaleReadSerializer(sales, many=True)
    return Response({
        'from_date': str(from_date),
        'to_date': str(to_date),
        'gst_filter': gst_filter,
        'transactions': serializer.data,
        'summary': summary,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def returns_report(request):
    """Returns between two dates (today by default), optionally for one party type."""

    from_date, to_date = get_date_range(request)
    party_type = request.query_params.get('party_type')

    queryset = ReturnTransaction.objects.filter(
        return_date__date__gte=from_date,
        return_date__date__lte=to_date,
    )
    if party_type:
        if party_type not in dict(ReturnTransaction.PARTY_TYPE_CHOICES):
            raise InvalidArgument("party_type must be either 'seller' or 'buyer'.")
        queryset = queryset.filter(party_type=party_type)

    summary = queryset.aggregate(
        total_returns=_sum('return_amount'),
        total_quantity=Coalesce(Sum('quantity'), 0),
        total_transactions=Count('id'),
    )
    returns = list(
        queryset.select_related('seller_party', 'buyer_party', 'item').order_by('-return_date', '-id')
    )

    if get_export_format(request) in {'xlsx', 'excel'}:
        workbook_bytes = generate_returns_report_workbook(returns, str(from_date), str(to_date))
        return _attachment(
            workbook_bytes,
            XLSX_CONTENT_TYPE,
            f"returns-report-{from_date}-to-{to_date}.xlsx",
        )

    serializer = ReturnReadSerializer(returns, many=True)
    return Response({
        'from_date': str(from_date),
        'to_date': str(to_date),
        'transactions': serializer.data,
        'summary': summary,
    })
