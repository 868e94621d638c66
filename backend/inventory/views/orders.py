"""Order sheet (reorder list) API views."""

import logging

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import OrderSheetEntry
from ..report_exports import generate_order_sheet_workbook
from ..serializers import OrderSheetEntrySerializer
from ..services.reorder import sync_order_sheet

logger = logging.getLogger(__name__)


class OrderSheetViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Items waiting to be reordered."""

    serializer_class = OrderSheetEntrySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        queryset = OrderSheetEntry.objects.select_related('item')
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset.order_by('-created_at', '-id')

    def list(self, request, *args, **kwargs):
        # Catch up with catalog edits made outside the posting services.
        sync_order_sheet()
        return super().list(request, *args, **kwargs)

    @action(detail=True, methods=['post', 'put'])
    def complete(self, request, pk=None):
        """Drop an entry once the reorder has been placed."""

        entry = self.get_object()
        item_name = entry.item.product_name
        entry.delete()
        logger.info('Order sheet entry for %s completed by %s', item_name, request.user.username)
        return Response({'detail': 'Order marked as completed.'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def export(self, request):
        sync_order_sheet()
        entries = list(self.get_queryset())
        workbook_bytes = generate_order_sheet_workbook(entries)
        filename = f"order-sheet-{timezone.localdate():%Y-%m-%d}.xlsx"
        response = HttpResponse(
            workbook_bytes,
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response
