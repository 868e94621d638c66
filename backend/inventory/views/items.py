"""Item catalog API views."""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import DecimalField, ExpressionWrapper, F, Q, Sum
from django.db.models.deletion import ProtectedError
from django.db.models.functions import Coalesce
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..models import Item, ItemHistory
from ..permissions import IsAdminOrSuperAdmin, IsSuperAdmin
from ..serializers import AdvancedSearchSerializer, ItemHistorySerializer, ItemSerializer
from ..services.errors import Conflict
from ..services.reorder import refresh_reorder_entry

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ('product_name', 'brand', 'product_code', 'remarks')
SUGGESTION_LIMIT = 10


class ItemPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'limit'
    max_page_size = 10000

    def paginate_queryset(self, queryset, request, view=None):
        if request.query_params.get('limit') == 'all' or request.query_params.get('page') == 'all':
            return None
        return super().paginate_queryset(queryset, request, view)


class ItemViewSet(viewsets.ModelViewSet):
    """CRUD operations for catalog items."""

    serializer_class = ItemSerializer
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    pagination_class = ItemPagination

    def get_permissions(self):
        if self.action in ('create', 'update', 'partial_update'):
            return [IsAuthenticated(), IsAdminOrSuperAdmin()]
        if self.action in ('destroy', 'stock_total'):
            return [IsAuthenticated(), IsSuperAdmin()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = Item.objects.all()
        search = (self.request.query_params.get('search') or '').strip()
        if search:
            search_field = self.request.query_params.get('search_field')
            if search_field in SEARCH_FIELDS:
                queryset = queryset.filter(**{f'{search_field}__icontains': search})
            else:
                query = Q()
                for field in SEARCH_FIELDS:
                    query |= Q(**{f'{field}__icontains': search})
                queryset = queryset.filter(query)
        if self.request.query_params.get('low_stock') in ('1', 'true'):
            queryset = queryset.filter(alert_quantity__gt=0, quantity__lte=F('alert_quantity'))
        return queryset.order_by('product_name', 'id')

    @transaction.atomic
    def perform_create(self, serializer):
        instance = serializer.save(created_by=self.request.user, updated_by=self.request.user)
        ItemHistory.record(instance, 'created', self.request.user)
        refresh_reorder_entry(instance)
        log_activity(self.request.user, 'created', instance)

    @transaction.atomic
    def perform_update(self, serializer):
        instance = serializer.save(updated_by=self.request.user)
        ItemHistory.record(instance, 'updated', self.request.user)
        refresh_reorder_entry(instance)
        log_activity(self.request.user, 'updated', instance)

    def perform_destroy(self, instance):
        try:
            with transaction.atomic():
                ItemHistory.record(instance, 'deleted', self.request.user)
                log_activity(self.request.user, 'deleted', instance)
                instance.delete()
        except ProtectedError:
            raise Conflict(
                f'{instance.product_name} has posted transactions and cannot be deleted.'
            )
        logger.info('Item %s deleted by %s', instance.product_name, self.request.user.username)

    @action(detail=False, methods=['get'])
    def search(self, request):
        """Autocomplete suggestions for the sale and purchase screens."""

        term = (request.query_params.get('q') or '').strip()
        if len(term) < 2:
            return Response([])
        queryset = Item.objects.filter(
            Q(product_name__icontains=term) | Q(product_code__icontains=term) | Q(brand__icontains=term)
        ).order_by('product_name', 'id')[:SUGGESTION_LIMIT]
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['post'], url_path='advanced-search')
    def advanced_search(self, request):
        """Match every supplied field as a case-insensitive substring."""

        criteria = AdvancedSearchSerializer(data=request.data)
        criteria.is_valid(raise_exception=True)
        filters = {
            f'{field}__icontains': value.strip()
            for field, value in criteria.validated_data.items()
            if value and value.strip()
        }
        queryset = Item.objects.filter(**filters).order_by('product_name', 'id')
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'], url_path='stock-total')
    def stock_total(self, request):
        """Value of stock on hand at purchase cost."""

        value = ExpressionWrapper(
            F('purchase_rate') * F('quantity'),
            output_field=DecimalField(max_digits=18, decimal_places=2),
        )
        total = Item.objects.aggregate(
            total=Coalesce(Sum(value), Decimal('0'), output_field=DecimalField(max_digits=18, decimal_places=2))
        )['total']
        return Response({'total_stock_amount': str(Decimal(total).quantize(Decimal('0.01')))})

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        item = self.get_object()
        entries = ItemHistory.objects.filter(item_id=item.pk)
        serializer = ItemHistorySerializer(entries, many=True, context=self.get_serializer_context())
        return Response(serializer.data, status=status.HTTP_200_OK)
