import django_filters

from hc_core.common.api.filters import ResourceFilterSet
from hc_core.shop.models import Order, OrderStatus, PaymentStatus, Product, ProductCategory


class ProductFilter(ResourceFilterSet):
    search_fields = ("name", "description", "manufacturer", "sku")
    date_field = "created_at"

    category = django_filters.ChoiceFilter(choices=ProductCategory.choices)
    pharmacy = django_filters.UUIDFilter(field_name="pharmacy_id")
    requires_prescription = django_filters.BooleanFilter()

    class Meta:
        model = Product
        fields = ["category", "pharmacy", "requires_prescription"]


class OrderFilter(ResourceFilterSet):
    search_fields = ("order_number", "shipping_name", "delivery_address")
    date_field = "created_at"

    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    payment_status = django_filters.ChoiceFilter(choices=PaymentStatus.choices)
    pharmacy = django_filters.UUIDFilter(field_name="pharmacy_id")

    class Meta:
        model = Order
        fields = ["status", "payment_status", "pharmacy"]
