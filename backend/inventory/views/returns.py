"""Return API views."""

from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..models import ReturnTransaction
from ..serializers import ReturnReadSerializer, ReturnWriteSerializer
from ..services.returns import post_return
from .utils import get_date_range


class ReturnViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Post and browse buyer and seller returns."""

    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.action == 'create':
            return ReturnWriteSerializer
        return ReturnReadSerializer

    def get_queryset(self):
        queryset = ReturnTransaction.objects.select_related('seller_party', 'buyer_party', 'item')
        if self.action == 'list':
            params = self.request.query_params
            from_date, to_date = get_date_range(self.request, default_today=False)
            if from_date:
                queryset = queryset.filter(return_date__date__gte=from_date)
            if to_date:
                queryset = queryset.filter(return_date__date__lte=to_date)
            if params.get('party_type'):
                queryset = queryset.filter(party_type=params['party_type'])
            if params.get('seller_party_id'):
                queryset = queryset.filter(seller_party_id=params['seller_party_id'])
            if params.get('buyer_party_id'):
                queryset = queryset.filter(buyer_party_id=params['buyer_party_id'])
        return queryset.order_by('-return_date', '-id')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        returns = post_return(
            party_type=data['party_type'],
            party_id=data['party_id'],
            lines=data['items'],
            reason=data.get('reason', ''),
            adjust_balance=data['adjust_balance'],
            return_date=data.get('return_date'),
            user=request.user,
        )
        for entry in returns:
            log_activity(request.user, 'created', entry)
        read_serializer = ReturnReadSerializer(returns, many=True, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_201_CREATED)
