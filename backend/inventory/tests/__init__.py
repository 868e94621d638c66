from decimal import Decimal

from django.contrib.auth.models import User

from ..models import Item, StaffProfile


def create_staff_user(username: str, role: str = StaffProfile.ROLE_SALES, password: str = "pw"):
    user = User.objects.create_user(username=username, password=password)
    StaffProfile.objects.create(user=user, role=role)
    return user


def create_item(product_name: str = "Bolt", **overrides):
    values = {
        "product_name": product_name,
        "sale_rate": Decimal("10.00"),
        "purchase_rate": Decimal("6.00"),
        "quantity": 20,
        "alert_quantity": 0,
        "tax_rate": Decimal("18"),
    }
    values.update(overrides)
    return Item.objects.create(**values)
