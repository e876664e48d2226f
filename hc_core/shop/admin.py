from django.contrib import admin

from hc_core.shop.models import Order, OrderItem, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "pharmacy", "category", "price", "stock_quantity", "is_active")
    list_filter = ("category", "requires_prescription", "is_active")
    search_fields = ("name", "sku", "manufacturer")


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "name", "unit_price", "quantity")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "customer", "pharmacy", "total", "status", "payment_status", "created_at")
    list_filter = ("status", "payment_status", "payment_method")
    search_fields = ("order_number", "shipping_name")
    inlines = [OrderItemInline]
    ordering = ("-created_at",)
