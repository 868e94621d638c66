"""URL routing for the inventory API."""

from django.urls import include, path
from rest_framework.permissions import AllowAny
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers
from rest_framework_simplejwt.views import TokenRefreshView

from .views.activities import ActivityViewSet
from .views.auth import ChangePasswordView, CurrentUserView, LoginView, RegisterUserView
from .views.common import health_check
from .views.company import CompanyInfoViewSet
from .views.items import ItemViewSet
from .views.orders import OrderSheetViewSet
from .views.parties import (
    BuyerPartyViewSet,
    BuyerPurchaseViewSet,
    SellerPartyViewSet,
    SellerSaleViewSet,
)
from .views.purchases import PurchaseViewSet
from .views.reports import returns_report, sales_report
from .views.returns import ReturnViewSet
from .views.sales import SaleViewSet

router = DefaultRouter()
router.register(r'items', ItemViewSet, basename='item')
router.register(r'parties/buyers', BuyerPartyViewSet, basename='buyer-party')
router.register(r'parties/sellers', SellerPartyViewSet, basename='seller-party')
router.register(r'sales', SaleViewSet, basename='sale')
router.register(r'returns', ReturnViewSet, basename='return')
router.register(r'purchases', PurchaseViewSet, basename='purchase')
router.register(r'orders', OrderSheetViewSet, basename='order-sheet')
router.register(r'activities', ActivityViewSet, basename='activity')
router.register(r'company-info', CompanyInfoViewSet, basename='company-info')

sellers_router = routers.NestedSimpleRouter(router, r'parties/sellers', lookup='seller')
sellers_router.register(r'sales', SellerSaleViewSet, basename='seller-sales')

buyers_router = routers.NestedSimpleRouter(router, r'parties/buyers', lookup='buyer')
buyers_router.register(r'purchases', BuyerPurchaseViewSet, basename='buyer-purchases')

urlpatterns = [
    path('auth/login/', LoginView.as_view(), name='login'),
    path(
        'auth/refresh/',
        TokenRefreshView.as_view(permission_classes=[AllowAny]),
        name='refresh_token',
    ),
    path('auth/register/', RegisterUserView.as_view(), name='register'),
    path('auth/me/', CurrentUserView.as_view(), name='current-user'),
    path('auth/change-password/', ChangePasswordView.as_view(), name='change-password'),
    path('reports/sales/', sales_report, name='sales-report'),
    path('reports/returns/', returns_report, name='returns-report'),
    path('health/', health_check, name='health-check'),
    path('', include(router.urls)),
    path('', include(sellers_router.urls)),
    path('', include(buyers_router.urls)),
]
