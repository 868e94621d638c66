from django.contrib import admin

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


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    readonly_fields = ('item', 'quantity', 'sale_rate', 'discount', 'tax_rate', 'total_amount')


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ('product_name', 'product_code', 'brand', 'quantity', 'alert_quantity', 'sale_rate')
    search_fields = ('product_name', 'product_code', 'brand')


@admin.register(SaleTransaction)
class SaleTransactionAdmin(admin.ModelAdmin):
    list_display = ('bill_number', 'seller_party', 'transaction_date', 'total_amount', 'balance_amount')
    inlines = [SaleItemInline]


admin.site.register(StaffProfile)
admin.site.register(ItemHistory)
admin.site.register(BuyerParty)
admin.site.register(SellerParty)
admin.site.register(PurchaseTransaction)
admin.site.register(ReturnTransaction)
admin.site.register(OrderSheetEntry)
admin.site.register(Activity)
admin.site.register(CompanyInfo)
