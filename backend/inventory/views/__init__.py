"""Expose public API views for the application."""

from .activities import ActivityViewSet
from .auth import ChangePasswordView, CurrentUserView, LoginView, RegisterUserView
from .common import health_check
from .company import CompanyInfoViewSet
from .items import ItemViewSet
from .orders import OrderSheetViewSet
from .parties import (
    BuyerPartyViewSet,
    BuyerPurchaseViewSet,
    SellerPartyViewSet,
    SellerSaleViewSet,
)
from .purchases import PurchaseViewSet
from .reports import returns_report, sales_report
from .returns import ReturnViewSet
from .sales import SaleViewSet
