# hc_core/shop/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from hc_core.common.permissions import ROLE_ADMIN, has_role
from hc_core.common.validators import phone_error
from hc_core.pharmacies.api.serializers import PharmacyRefSerializer
from hc_core.pharmacies.models import Pharmacy
from hc_core.shop.models import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    Product,
    ProductCategory,
)

PRICE_MSG = "Price must be greater than 0"
SKU_MSG = "A product with this SKU already exists in this pharmacy"


class _ProductWriteMixin:
    def validate_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Product name must be at least 2 characters")
        return value

    def validate_price(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError(PRICE_MSG)
        return value

    def validate_sku(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("SKU is required")
        return value

    def _check_sku(self, pharmacy, sku):
        qs = Product.objects.filter(pharmacy=pharmacy, sku=sku)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError({"sku": [SKU_MSG]})


class ProductCreateSerializer(_ProductWriteMixin, serializers.Serializer):
    pharmacy = serializers.UUIDField()
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    category = serializers.ChoiceField(choices=ProductCategory.choices)
    manufacturer = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    cost_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, default=Decimal("0"))
    stock_quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    reserved_quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    min_stock_level = serializers.IntegerField(min_value=0, required=False, default=10)
    sku = serializers.CharField(max_length=64)
    barcode = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    image_url = serializers.URLField(required=False, allow_blank=True, default="")
    requires_prescription = serializers.BooleanField(required=False, default=False)
    expiry_date = serializers.DateField(required=False, allow_null=True, default=None)

    def validate_pharmacy(self, value):
        request = self.context.get("request")
        qs = Pharmacy.objects.filter(pk=value, is_active=True)
        if request is not None and not has_role(request.user, ROLE_ADMIN):
            qs = qs.filter(created_by=request.user)
        pharmacy = qs.first()
        if pharmacy is None:
            raise serializers.ValidationError("Pharmacy not found")
        return pharmacy

    def validate(self, attrs):
        self._check_sku(attrs["pharmacy"], attrs["sku"])
        return attrs


class ProductUpdateSerializer(_ProductWriteMixin, serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=ProductCategory.choices, required=False)
    manufacturer = serializers.CharField(max_length=100, required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    cost_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    stock_quantity = serializers.IntegerField(min_value=0, required=False)
    reserved_quantity = serializers.IntegerField(min_value=0, required=False)
    min_stock_level = serializers.IntegerField(min_value=0, required=False)
    sku = serializers.CharField(max_length=64, required=False)
    barcode = serializers.CharField(max_length=64, required=False, allow_blank=True)
    image_url = serializers.URLField(required=False, allow_blank=True)
    requires_prescription = serializers.BooleanField(required=False)
    expiry_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        if "sku" in attrs and self.instance is not None:
            self._check_sku(self.instance.pharmacy, attrs["sku"])
        return attrs


class ProductSerializer(serializers.ModelSerializer):
    pharmacy = PharmacyRefSerializer(read_only=True)
    available_quantity = serializers.IntegerField(read_only=True)
    in_stock = serializers.BooleanField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)
    profit_margin = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "pharmacy",
            "name",
            "description",
            "category",
            "manufacturer",
            "price",
            "cost_price",
            "profit_margin",
            "stock_quantity",
            "reserved_quantity",
            "available_quantity",
            "min_stock_level",
            "in_stock",
            "is_low_stock",
            "sku",
            "barcode",
            "image_url",
            "requires_prescription",
            "expiry_date",
            "created_by",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ----------------------------
# Checkout / orders
# ----------------------------
class CheckoutItemSerializer(serializers.Serializer):
    product = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=1000)


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    address = serializers.CharField(max_length=300)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    postal_code = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")

    def validate_phone(self, value):
        err = phone_error(value)
        if err:
            raise serializers.ValidationError(err)
        return value


class CheckoutSerializer(serializers.Serializer):
    items = CheckoutItemSerializer(many=True, allow_empty=False)
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False, default=PaymentMethod.CASH)
    pharmacy = serializers.UUIDField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "name", "unit_price", "quantity", "line_total", "prescription_verified"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    pharmacy = PharmacyRefSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "pharmacy",
            "items",
            "subtotal",
            "shipping",
            "tax",
            "total",
            "payment_method",
            "payment_status",
            "shipping_name",
            "shipping_phone",
            "shipping_email",
            "delivery_address",
            "notes",
            "status",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
