"""Sales API views."""

from django.http import FileResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..invoice_pdf import generate_invoice_pdf
from ..models import SaleTransaction
from ..serializers import SaleReadSerializer, SaleWriteSerializer
from ..services.sales import post_sale
from .utils import get_date_range


class SaleViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Post and browse sales.  Posted sales are immutable."""

    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.action == 'create':
            return SaleWriteSerializer
        return SaleReadSerializer

    def get_queryset(self):
        queryset = (
            SaleTransaction.objects.select_related('seller_party', 'created_by')
            .prefetch_related('items__item')
        )
        if self.action == 'list':
            from_date, to_date = get_date_range(self.request, default_today=False)
            if from_date:
                queryset = queryset.filter(transaction_date__date__gte=from_date)
            if to_date:
                queryset = queryset.filter(transaction_date__date__lte=to_date)
            seller_party_id = self.request.query_params.get('seller_party_id')
            if seller_party_id:
                queryset = queryset.filter(seller_party_id=seller_party_id)
        return queryset.order_by('-transaction_date', '-id')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        sale = post_sale(
            seller_party_id=data['seller_party_id'],
            lines=data['items'],
            payment_status=data['payment_status'],
            paid_amount=data.get('paid_amount'),
            with_gst=data['with_gst'],
            previous_balance_paid=data.get('previous_balance_paid'),
            transaction_date=data.get('transaction_date'),
            user=request.user,
        )
        log_activity(request.user, 'created', sale, f"Sale {sale.bill_number} was created.")
        read_serializer = SaleReadSerializer(sale, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=['get'], url_path='invoice-pdf')
    def invoice_pdf(self, request, pk=None):
        """Return a PDF representation of the sale invoice."""

        sale = self.get_object()
        pdf_buffer = generate_invoice_pdf(sale)
        filename = f"invoice_{sale.bill_number}.pdf"

        response = FileResponse(pdf_buffer, content_type='application/pdf')
        response['Content-Disposition'] = f'inline; filename="{filename}"'
        response['Content-Length'] = str(len(pdf_buffer.getbuffer()))
        return response
