"""Purchase API views."""

from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..models import PurchaseTransaction
from ..permissions import IsAdminOrSuperAdmin
from ..serializers import PurchaseReadSerializer, PurchaseWriteSerializer
from ..services.purchases import post_purchase
from .utils import get_date_range


class PurchaseViewSet(mixins.CreateModelMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    """Receive stock from buyer parties."""

    permission_classes = [IsAuthenticated, IsAdminOrSuperAdmin]

    def get_serializer_class(self):
        if self.action == 'create':
            return PurchaseWriteSerializer
        return PurchaseReadSerializer

    def get_queryset(self):
        queryset = PurchaseTransaction.objects.select_related('buyer_party', 'item')
        from_date, to_date = get_date_range(self.request, default_today=False)
        if from_date:
            queryset = queryset.filter(transaction_date__date__gte=from_date)
        if to_date:
            queryset = queryset.filter(transaction_date__date__lte=to_date)
        buyer_party_id = self.request.query_params.get('buyer_party_id')
        if buyer_party_id:
            queryset = queryset.filter(buyer_party_id=buyer_party_id)
        return queryset.order_by('-transaction_date', '-id')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        purchases = post_purchase(
            buyer_party_id=data['buyer_party_id'],
            lines=data['items'],
            transaction_date=data.get('transaction_date'),
            user=request.user,
        )
        for purchase in purchases:
            log_activity(request.user, 'created', purchase)
        read_serializer = PurchaseReadSerializer(purchases, many=True, context=self.get_serializer_context())
        return Response(
            {'detail': 'Items added successfully.', 'purchases': read_serializer.data},
            status=status.HTTP_201_CREATED,
        )
