# backend/inventory/serializers.py
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers
from rest_framework.exceptions import PermissionDenied
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import (
    Activity,
    BuyerParty,
    CompanyInfo,
    Item,
    ItemHistory,
    OrderSheetEntry,
    PurchaseTransaction,
    ReturnTransaction,
    SaleItem,
    SaleTransaction,
    SellerParty,
    StaffProfile,
)
from .permissions import get_role, is_super_admin
from .services.catalog import check_rates, find_duplicate_item, normalise_tax_rate


def _request_user(serializer):
    request = serializer.context.get('request')
    return getattr(request, 'user', None)


# --- Auth ---------------------------------------------------------------


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Issue a JWT pair that also carries the caller's role."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = get_role(user)
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserProfileSerializer(self.user).data
        return data


class UserProfileSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'first_name', 'last_name', 'email', 'role']
        read_only_fields = ['id', 'username', 'role']

    def get_role(self, obj):
        return get_role(obj)


class RegisterUserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=6, style={'input_type': 'password'})
    role = serializers.ChoiceField(choices=StaffProfile.ROLE_CHOICES)

    class Meta:
        model = User
        fields = ['id', 'username', 'password', 'first_name', 'last_name', 'email', 'role']
        read_only_fields = ['id']
        extra_kwargs = {'username': {'max_length': 50}}

    def create(self, validated_data):
        role = validated_data.pop('role')
        password = validated_data.pop('password')
        with transaction.atomic():
            user = User.objects.create_user(password=password, **validated_data)
            StaffProfile.objects.create(user=user, role=role)
        return user

    def to_representation(self, instance):
        return UserProfileSerializer(instance).data


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect.')
        return value

    def validate_new_password(self, value):
        validate_password(value, self.context['request'].user)
        return value

    def save(self, **kwargs):
        user = self.context['request'].user
        user.set_password(self.validated_data['new_password'])
        user.save(update_fields=['password'])
        return user


# --- Catalog ------------------------------------------------------------


class ItemSerializer(serializers.ModelSerializer):
    image = serializers.ImageField(required=False, allow_null=True)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)
    needs_reorder = serializers.BooleanField(read_only=True)
    stock_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Item
        fields = [
            'id',
            'product_name',
            'product_code',
            'brand',
            'hsn_number',
            'tax_rate',
            'sale_rate',
            'purchase_rate',
            'quantity',
            'alert_quantity',
            'rack_number',
            'remarks',
            'image',
            'needs_reorder',
            'stock_value',
            'created_by',
            'updated_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']
        extra_kwargs = {
            'product_code': {'required': False, 'allow_null': True, 'allow_blank': True},
            'purchase_rate': {'required': False},
        }

    def get_fields(self):
        fields = super().get_fields()
        # Stock only moves through postings; edits may correct it.
        if self.instance is None:
            fields['quantity'].read_only = True
        return fields

    def validate_product_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Product name is required.')
        return value

    def validate_product_code(self, value):
        value = (value or '').strip()
        return value or None

    def validate_tax_rate(self, value):
        return normalise_tax_rate(value)

    def validate_sale_rate(self, value):
        if value < 0:
            raise serializers.ValidationError('Sale rate must be a positive number.')
        return value

    def validate_purchase_rate(self, value):
        if value < 0:
            raise serializers.ValidationError('Purchase rate must be a positive number.')
        return value

    def validate_image(self, value):
        if value and value.size > settings.MAX_IMAGE_SIZE_MB * 1024 * 1024:
            raise serializers.ValidationError(
                f'Image must be smaller than {settings.MAX_IMAGE_SIZE_MB} MB.'
            )
        return value

    def validate(self, attrs):
        user = _request_user(self)
        if 'purchase_rate' in attrs and self.instance is not None and not is_super_admin(user):
            if attrs['purchase_rate'] != self.instance.purchase_rate:
                raise PermissionDenied('Only super admin can update purchase rate.')

        if self.instance is None:
            attrs.setdefault('tax_rate', normalise_tax_rate(None))
            if 'sale_rate' not in attrs:
                raise serializers.ValidationError({'sale_rate': 'Sale rate is required.'})

        sale_rate = attrs.get('sale_rate', getattr(self.instance, 'sale_rate', None))
        purchase_rate = attrs.get('purchase_rate', getattr(self.instance, 'purchase_rate', Decimal('0')))
        if sale_rate is not None and purchase_rate is not None and sale_rate < purchase_rate:
            raise serializers.ValidationError(
                {'sale_rate': 'Sale rate must be greater than or equal to purchase rate.'}
            )

        product_name = attrs.get('product_name', getattr(self.instance, 'product_name', None))
        product_code = attrs.get('product_code', getattr(self.instance, 'product_code', None))
        brand = attrs.get('brand', getattr(self.instance, 'brand', None))
        duplicate = find_duplicate_item(
            product_name,
            product_code,
            brand,
            exclude_pk=getattr(self.instance, 'pk', None),
        )
        if duplicate is not None:
            raise serializers.ValidationError(
                'A product with the same Product Name, Product Code, and Brand already exists.'
            )
        return super().validate(attrs)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not is_super_admin(_request_user(self)):
            data.pop('purchase_rate', None)
            data.pop('stock_value', None)
        return data


class ItemHistorySerializer(serializers.ModelSerializer):
    changed_by = serializers.StringRelatedField()

    class Meta:
        model = ItemHistory
        fields = [
            'id',
            'item_id',
            'action',
            'product_name',
            'product_code',
            'brand',
            'hsn_number',
            'tax_rate',
            'sale_rate',
            'purchase_rate',
            'quantity',
            'alert_quantity',
            'rack_number',
            'remarks',
            'changed_by',
            'changed_at',
        ]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not is_super_admin(_request_user(self)):
            data.pop('purchase_rate', None)
        return data


class AdvancedSearchSerializer(serializers.Serializer):
    product_name = serializers.CharField(required=False, allow_blank=True)
    product_code = serializers.CharField(required=False, allow_blank=True)
    brand = serializers.CharField(required=False, allow_blank=True)
    hsn_number = serializers.CharField(required=False, allow_blank=True)
    rack_number = serializers.CharField(required=False, allow_blank=True)
    remarks = serializers.CharField(required=False, allow_blank=True)


# --- Parties ------------------------------------------------------------


class PartySerializer(serializers.ModelSerializer):
    class Meta:
        fields = [
            'id',
            'party_name',
            'mobile_number',
            'email',
            'address',
            'gst_number',
            'opening_balance',
            'closing_balance',
            'paid_amount',
            'balance_amount',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['paid_amount', 'balance_amount', 'created_at', 'updated_at']

    def validate_party_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Party name is required.')
        return value

    def validate_mobile_number(self, value):
        return value or None

    def validate_email(self, value):
        return value or None

    def get_fields(self):
        fields = super().get_fields()
        # The opening balance seeds the running balance and is fixed afterwards.
        if self.instance is not None:
            fields['opening_balance'].read_only = True
        return fields


class BuyerPartySerializer(PartySerializer):
    class Meta(PartySerializer.Meta):
        model = BuyerParty


class SellerPartySerializer(PartySerializer):
    class Meta(PartySerializer.Meta):
        model = SellerParty


# --- Sales --------------------------------------------------------------


class SaleItemReadSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='item.product_name', read_only=True)
    brand = serializers.CharField(source='item.brand', read_only=True)
    hsn_number = serializers.CharField(source='item.hsn_number', read_only=True)

    class Meta:
        model = SaleItem
        fields = [
            'id',
            'item',
            'product_name',
            'brand',
            'hsn_number',
            'quantity',
            'sale_rate',
            'discount_type',
            'discount_percentage',
            'discount',
            'tax_rate',
            'taxable_value',
            'tax_amount',
            'total_amount',
        ]


class SaleReadSerializer(serializers.ModelSerializer):
    items = SaleItemReadSerializer(many=True, read_only=True)
    party_name = serializers.CharField(source='seller_party.party_name', read_only=True)
    created_by = serializers.StringRelatedField()

    class Meta:
        model = SaleTransaction
        fields = [
            'id',
            'bill_number',
            'seller_party',
            'party_name',
            'transaction_date',
            'with_gst',
            'subtotal',
            'discount',
            'tax_amount',
            'invoice_amount',
            'previous_balance_paid',
            'total_amount',
            'paid_amount',
            'balance_amount',
            'payment_status',
            'items',
            'created_by',
            'created_at',
        ]


class SaleItemWriteSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    sale_rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    discount_type = serializers.ChoiceField(choices=SaleItem.DISCOUNT_TYPE_CHOICES, required=False)
    discount_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False, allow_null=True
    )


class SaleWriteSerializer(serializers.Serializer):
    seller_party_id = serializers.IntegerField()
    items = SaleItemWriteSerializer(many=True, allow_empty=False)
    payment_status = serializers.ChoiceField(
        choices=SaleTransaction.PAYMENT_STATUS_CHOICES,
        default=SaleTransaction.PAYMENT_FULLY_PAID,
    )
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    with_gst = serializers.BooleanField(default=False)
    previous_balance_paid = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, default=Decimal('0')
    )
    transaction_date = serializers.DateTimeField(required=False)

    def validate_items(self, value):
        for line in value:
            # A percentage only applies when the line asks for one.
            if line.get('discount_type') == SaleItem.DISCOUNT_AMOUNT:
                line.pop('discount_percentage', None)
        return value


# --- Returns ------------------------------------------------------------


class ReturnLineSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    return_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    reason = serializers.CharField(required=False, allow_blank=True)


class ReturnWriteSerializer(serializers.Serializer):
    party_type = serializers.ChoiceField(choices=ReturnTransaction.PARTY_TYPE_CHOICES)
    party_id = serializers.IntegerField(required=False)
    seller_party_id = serializers.IntegerField(required=False)
    buyer_party_id = serializers.IntegerField(required=False)
    items = ReturnLineSerializer(many=True, allow_empty=False)
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    adjust_balance = serializers.BooleanField(default=False)
    return_date = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        seller_id = attrs.pop('seller_party_id', None)
        buyer_id = attrs.pop('buyer_party_id', None)
        if seller_id and buyer_id:
            raise serializers.ValidationError('Provide either a seller party or a buyer party, not both.')
        party_id = attrs.get('party_id')
        if party_id is None:
            if attrs['party_type'] == ReturnTransaction.PARTY_SELLER:
                party_id = seller_id
            else:
                party_id = buyer_id
        if party_id is None:
            raise serializers.ValidationError({'party_id': 'A party is required for a return.'})
        attrs['party_id'] = party_id
        return attrs


class ReturnReadSerializer(serializers.ModelSerializer):
    party_name = serializers.SerializerMethodField()
    product_name = serializers.CharField(source='item.product_name', read_only=True)
    brand = serializers.CharField(source='item.brand', read_only=True)

    class Meta:
        model = ReturnTransaction
        fields = [
            'id',
            'party_type',
            'seller_party',
            'buyer_party',
            'party_name',
            'item',
            'product_name',
            'brand',
            'quantity',
            'return_amount',
            'reason',
            'balance_adjusted',
            'return_date',
        ]

    def get_party_name(self, obj):
        party = obj.party
        return party.party_name if party else None


# --- Purchases ----------------------------------------------------------


class PurchaseLineSerializer(serializers.Serializer):
    item_id = serializers.IntegerField(required=False, allow_null=True)
    product_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    product_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    brand = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    hsn_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)
    sale_rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True)
    purchase_rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=1)
    alert_quantity = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    rack_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=200)

    def validate(self, attrs):
        if attrs.get('sale_rate') is not None:
            check_rates(attrs['sale_rate'], attrs['purchase_rate'], attrs.get('product_name') or 'item')
        return attrs


class PurchaseWriteSerializer(serializers.Serializer):
    buyer_party_id = serializers.IntegerField()
    items = PurchaseLineSerializer(many=True, allow_empty=False)
    transaction_date = serializers.DateTimeField(required=False)


class PurchaseReadSerializer(serializers.ModelSerializer):
    party_name = serializers.CharField(source='buyer_party.party_name', read_only=True, default=None)
    product_name = serializers.CharField(source='item.product_name', read_only=True)

    class Meta:
        model = PurchaseTransaction
        fields = [
            'id',
            'buyer_party',
            'party_name',
            'item',
            'product_name',
            'quantity',
            'purchase_rate',
            'total_amount',
            'transaction_date',
        ]


# --- Order sheet --------------------------------------------------------


class OrderSheetEntrySerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='item.product_name', read_only=True)
    product_code = serializers.CharField(source='item.product_code', read_only=True)
    brand = serializers.CharField(source='item.brand', read_only=True)
    alert_quantity = serializers.IntegerField(source='item.alert_quantity', read_only=True)
    rack_number = serializers.CharField(source='item.rack_number', read_only=True)

    class Meta:
        model = OrderSheetEntry
        fields = [
            'id',
            'item',
            'product_name',
            'product_code',
            'brand',
            'rack_number',
            'alert_quantity',
            'required_quantity',
            'current_quantity',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


# --- Misc ---------------------------------------------------------------


class ActivitySerializer(serializers.ModelSerializer):
    user = serializers.StringRelatedField()
    object_type = serializers.CharField(source='content_type.model', read_only=True)

    class Meta:
        model = Activity
        fields = ['id', 'user', 'action_type', 'description', 'object_type', 'object_id', 'timestamp']


class CompanyInfoSerializer(serializers.ModelSerializer):
    logo = serializers.ImageField(required=False, allow_null=True)

    class Meta:
        model = CompanyInfo
        fields = ['id', 'name', 'address', 'location', 'phone', 'email', 'gst_number', 'logo']
        read_only_fields = ['id']
