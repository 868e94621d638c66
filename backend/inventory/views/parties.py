"""Buyer and seller party API views."""

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from ..activity_logger import log_activity
from ..models import BuyerParty, PurchaseTransaction, SaleTransaction, SellerParty
from ..permissions import IsAdminOrSuperAdmin
from ..serializers import (
    BuyerPartySerializer,
    PurchaseReadSerializer,
    SaleReadSerializer,
    SellerPartySerializer,
)


class PartyViewSet(viewsets.ModelViewSet):
    """Shared behaviour for buyer and seller parties.

    Parties are never deleted; their balances are history.
    """

    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'post', 'put', 'patch', 'head', 'options']
    model = None

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), IsAdminOrSuperAdmin()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = self.model.objects.all()
        search = (self.request.query_params.get('search') or '').strip()
        if search:
            queryset = queryset.filter(party_name__icontains=search)
        return queryset.order_by('party_name', 'id')

    def perform_create(self, serializer):
        instance = serializer.save()
        log_activity(self.request.user, 'created', instance)

    def perform_update(self, serializer):
        instance = serializer.save()
        log_activity(self.request.user, 'updated', instance)


class BuyerPartyViewSet(PartyViewSet):
    serializer_class = BuyerPartySerializer
    model = BuyerParty


class SellerPartyViewSet(PartyViewSet):
    serializer_class = SellerPartySerializer
    model = SellerParty


class SellerSaleViewSet(viewsets.ReadOnlyModelViewSet):
    """Sales ledger of one seller party."""

    serializer_class = SaleReadSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return (
            SaleTransaction.objects.filter(seller_party_id=self.kwargs['seller_pk'])
            .select_related('seller_party', 'created_by')
            .prefetch_related('items__item')
        )


class BuyerPurchaseViewSet(viewsets.ReadOnlyModelViewSet):
    """Purchase ledger of one buyer party."""

    serializer_class = PurchaseReadSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return PurchaseTransaction.objects.filter(
            buyer_party_id=self.kwargs['buyer_pk']
        ).select_related('buyer_party', 'item')
