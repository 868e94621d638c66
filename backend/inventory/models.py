# backend/inventory/models.py
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import User
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone


ALLOWED_TAX_RATES = (Decimal("0"), Decimal("5"), Decimal("18"), Decimal("28"))
DEFAULT_TAX_RATE = Decimal("18")

mobile_number_validator = RegexValidator(
    regex=r"^\d{10}$",
    message="Mobile number must be exactly 10 digits.",
)


class StaffProfile(models.Model):
    """Role assignment for an application user."""

    ROLE_SUPER_ADMIN = 'super_admin'
    ROLE_ADMIN = 'admin'
    ROLE_SALES = 'sales'
    ROLE_CHOICES = (
        (ROLE_SUPER_ADMIN, 'Super Admin'),
        (ROLE_ADMIN, 'Admin'),
        (ROLE_SALES, 'Sales'),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='staff_profile')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_SALES)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f'{self.user.username} ({self.role})'

    @classmethod
    def role_for(cls, user):
        """Return the role of ``user`` or ``None`` for anonymous callers.

        Django superusers are always treated as super admins so the account
        created by ``createsuperuser`` can manage everything else.
        """
        if user is None or not user.is_authenticated:
            return None
        if user.is_superuser:
            return cls.ROLE_SUPER_ADMIN
        try:
            return user.staff_profile.role
        except cls.DoesNotExist:
            return None


class Item(models.Model):
    product_name = models.CharField(max_length=255)
    product_code = models.CharField(max_length=100, unique=True, blank=True, null=True)
    brand = models.CharField(max_length=255, blank=True, null=True)
    hsn_number = models.CharField(max_length=50, blank=True, null=True)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_TAX_RATE)
    sale_rate = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    purchase_rate = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    quantity = models.PositiveIntegerField(default=0)
    alert_quantity = models.PositiveIntegerField(default=0)
    rack_number = models.CharField(max_length=50, blank=True, null=True)
    remarks = models.CharField(max_length=200, blank=True, null=True)
    image = models.ImageField(upload_to='item_images/', blank=True, null=True)

    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, related_name='items_created', null=True, blank=True
    )
    updated_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, related_name='items_updated', null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['product_name', 'id']

    def __str__(self):
        if self.product_code:
            return f'{self.product_name} ({self.product_code})'
        return self.product_name

    @property
    def needs_reorder(self):
        return self.alert_quantity > 0 and self.quantity <= self.alert_quantity

    @property
    def stock_value(self):
        return (self.purchase_rate or Decimal('0')) * self.quantity


class ItemHistory(models.Model):
    """Append-only snapshot of an item taken whenever the catalog changes."""

    ACTION_CHOICES = (
        ('created', 'Created'),
        ('updated', 'Updated'),
        ('deleted', 'Deleted'),
    )

    # Plain integer so history survives deletion of the item itself.
    item_id = models.PositiveBigIntegerField(db_index=True)
    action = models.CharField(max_length=10, choices=ACTION_CHOICES)
    product_name = models.CharField(max_length=255)
    product_code = models.CharField(max_length=100, blank=True, null=True)
    brand = models.CharField(max_length=255, blank=True, null=True)
    hsn_number = models.CharField(max_length=50, blank=True, null=True)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    sale_rate = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    purchase_rate = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    quantity = models.PositiveIntegerField(default=0)
    alert_quantity = models.PositiveIntegerField(default=0)
    rack_number = models.CharField(max_length=50, blank=True, null=True)
    remarks = models.CharField(max_length=200, blank=True, null=True)
    changed_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, related_name='item_changes', null=True, blank=True
    )
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-changed_at', '-id']
        verbose_name_plural = 'Item history'

    def __str__(self):
        return f'{self.product_name} {self.action} at {self.changed_at}'

    @classmethod
    def record(cls, item, action, user=None):
        return cls.objects.create(
            item_id=item.pk,
            action=action,
            product_name=item.product_name,
            product_code=item.product_code,
            brand=item.brand,
            hsn_number=item.hsn_number,
            tax_rate=item.tax_rate,
            sale_rate=item.sale_rate,
            purchase_rate=item.purchase_rate,
            quantity=item.quantity,
            alert_quantity=item.alert_quantity,
            rack_number=item.rack_number,
            remarks=item.remarks,
            changed_by=user if user is not None and user.is_authenticated else None,
        )


class Party(models.Model):
    """Fields shared by buyers and sellers."""

    party_name = models.CharField(max_length=255)
    mobile_number = models.CharField(
        max_length=10, blank=True, null=True, validators=[mobile_number_validator]
    )
    email = models.EmailField(max_length=254, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    gst_number = models.CharField(max_length=20, blank=True, null=True)
    opening_balance = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    closing_balance = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    balance_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['party_name', 'id']

    def __str__(self):
        return self.party_name

    def save(self, *args, **kwargs):
        # A new party starts out owing exactly its opening balance.
        if self._state.adding and not self.balance_amount:
            self.balance_amount = self.opening_balance or Decimal('0.00')
        super().save(*args, **kwargs)


class BuyerParty(Party):
    """A supplier we buy stock from."""

    class Meta(Party.Meta):
        verbose_name_plural = 'Buyer parties'


class SellerParty(Party):
    """A customer we sell stock to."""

    class Meta(Party.Meta):
        verbose_name_plural = 'Seller parties'


class PurchaseTransaction(models.Model):
    buyer_party = models.ForeignKey(
        BuyerParty, on_delete=models.PROTECT, related_name='purchases', null=True, blank=True
    )
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='purchases')
    quantity = models.PositiveIntegerField()
    purchase_rate = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    transaction_date = models.DateTimeField(default=timezone.now)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, related_name='purchases', null=True, blank=True
    )

    class Meta:
        ordering = ['-transaction_date', '-id']

    def __str__(self):
        return f'Purchase of {self.quantity} x {self.item}'


class SaleTransaction(models.Model):
    PAYMENT_FULLY_PAID = 'fully_paid'
    PAYMENT_PARTIALLY_PAID = 'partially_paid'
    PAYMENT_STATUS_CHOICES = (
        (PAYMENT_FULLY_PAID, 'Fully paid'),
        (PAYMENT_PARTIALLY_PAID, 'Partially paid'),
    )

    bill_number = models.CharField(max_length=50, unique=True)
    seller_party = models.ForeignKey(SellerParty, on_delete=models.PROTECT, related_name='sales')
    transaction_date = models.DateTimeField(default=timezone.now)
    with_gst = models.BooleanField(default=False)
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    # This sale's own value, before any previous balance collected with it.
    invoice_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    previous_balance_paid = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    paid_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    balance_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    payment_status = models.CharField(
        max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_FULLY_PAID
    )
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, related_name='sales', null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-transaction_date', '-id']

    def __str__(self):
        return self.bill_number


class SaleItem(models.Model):
    DISCOUNT_AMOUNT = 'amount'
    DISCOUNT_PERCENTAGE = 'percentage'
    DISCOUNT_TYPE_CHOICES = (
        (DISCOUNT_AMOUNT, 'Amount'),
        (DISCOUNT_PERCENTAGE, 'Percentage'),
    )

    sale = models.ForeignKey(SaleTransaction, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='sale_lines')
    quantity = models.PositiveIntegerField()
    sale_rate = models.DecimalField(max_digits=12, decimal_places=2)
    discount_type = models.CharField(
        max_length=10, choices=DISCOUNT_TYPE_CHOICES, default=DISCOUNT_AMOUNT
    )
    discount_percentage = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    taxable_value = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f'{self.quantity} x {self.item} @ {self.sale_rate}'

    @property
    def gross_amount(self):
        return self.sale_rate * self.quantity


class ReturnTransaction(models.Model):
    PARTY_SELLER = 'seller'
    PARTY_BUYER = 'buyer'
    PARTY_TYPE_CHOICES = (
        (PARTY_SELLER, 'Seller'),
        (PARTY_BUYER, 'Buyer'),
    )

    party_type = models.CharField(max_length=10, choices=PARTY_TYPE_CHOICES)
    seller_party = models.ForeignKey(
        SellerParty, on_delete=models.PROTECT, related_name='returns', null=True, blank=True
    )
    buyer_party = models.ForeignKey(
        BuyerParty, on_delete=models.PROTECT, related_name='returns', null=True, blank=True
    )
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='returns')
    quantity = models.PositiveIntegerField()
    return_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    reason = models.TextField(blank=True, default='')
    balance_adjusted = models.BooleanField(default=False)
    return_date = models.DateTimeField(default=timezone.now)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, related_name='returns', null=True, blank=True
    )

    class Meta:
        ordering = ['-return_date', '-id']

    def __str__(self):
        return f'{self.party_type} return of {self.quantity} x {self.item}'

    @property
    def party(self):
        if self.party_type == self.PARTY_SELLER:
            return self.seller_party
        return self.buyer_party


class OrderSheetEntry(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_ORDERED = 'ordered'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_ORDERED, 'Ordered'),
        (STATUS_COMPLETED, 'Completed'),
    )

    item = models.OneToOneField(Item, on_delete=models.CASCADE, related_name='order_sheet_entry')
    required_quantity = models.PositiveIntegerField(default=1)
    current_quantity = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'Order sheet entries'

    def __str__(self):
        return f'{self.item} needs {self.required_quantity}'


class Activity(models.Model):
    ACTION_TYPES = (
        ('created', 'Created'),
        ('updated', 'Updated'),
        ('deleted', 'Deleted'),
    )

    user = models.ForeignKey(
        User, on_delete=models.SET_NULL, related_name='activities', null=True, blank=True
    )
    action_type = models.CharField(max_length=10, choices=ACTION_TYPES)
    description = models.CharField(max_length=255)
    timestamp = models.DateTimeField(auto_now_add=True)

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField()
    content_object = GenericForeignKey('content_type', 'object_id')

    # Serialized copy of deleted objects
    object_repr = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['-timestamp', '-id']
        verbose_name_plural = 'Activities'

    def __str__(self):
        username = self.user.username if self.user else 'system'
        return f'{username} {self.action_type} - {self.description}'


def _default_company_name():
    return settings.COMPANY_NAME


class CompanyInfo(models.Model):
    """A singleton model holding the invoice letterhead."""
    name = models.CharField(max_length=255, default=_default_company_name)
    address = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    email = models.EmailField(max_length=254, blank=True, null=True)
    gst_number = models.CharField(max_length=20, blank=True, null=True)
    logo = models.ImageField(upload_to='company_logos/', blank=True, null=True)

    class Meta:
        verbose_name_plural = "Company Info"

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        obj, created = cls.objects.get_or_create(pk=1)
        return obj
