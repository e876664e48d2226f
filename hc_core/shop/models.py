# hc_core/shop/models.py
from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from hc_core.common.display import money
from hc_core.common.models import ResourceModel


class ProductCategory(models.TextChoices):
    PRESCRIPTION = "Prescription", "Prescription"
    OTC = "OTC", "OTC"
    SUPPLEMENTS = "Supplements", "Supplements"
    MEDICAL_DEVICES = "Medical Devices", "Medical Devices"
    PERSONAL_CARE = "Personal Care", "Personal Care"
    FIRST_AID = "First Aid", "First Aid"
    BABY_CARE = "Baby Care", "Baby Care"
    VITAMINS = "Vitamins", "Vitamins"
    OTHER = "Other", "Other"


class Product(ResourceModel):
    pharmacy = models.ForeignKey("pharmacies.Pharmacy", on_delete=models.PROTECT, related_name="products")

    name = models.CharField(max_length=100)
    description = models.TextField(max_length=500, blank=True)
    category = models.CharField(max_length=32, choices=ProductCategory.choices, db_index=True)
    manufacturer = models.CharField(max_length=100, blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2)
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))

    stock_quantity = models.PositiveIntegerField(default=0)
    reserved_quantity = models.PositiveIntegerField(default=0)
    min_stock_level = models.PositiveIntegerField(default=10)

    sku = models.CharField(max_length=64)
    barcode = models.CharField(max_length=64, blank=True)
    image_url = models.URLField(blank=True)

    requires_prescription = models.BooleanField(default=False)
    expiry_date = models.DateField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="products_created",
    )

    class Meta:
        db_table = "shop_product"
        constraints = [
            models.UniqueConstraint(fields=["pharmacy", "sku"], name="uq_product_pharmacy_sku"),
        ]
        indexes = [
            models.Index(fields=["pharmacy", "category"]),
            models.Index(fields=["created_by", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"

    @property
    def available_quantity(self) -> int:
        return max(0, self.stock_quantity - self.reserved_quantity)

    @property
    def in_stock(self) -> bool:
        return self.available_quantity > 0

    @property
    def is_low_stock(self) -> bool:
        return self.available_quantity <= self.min_stock_level

    @property
    def profit_margin(self) -> Decimal:
        if not self.cost_price:
            return Decimal("0.00")
        return money((Decimal(self.price) - Decimal(self.cost_price)) / Decimal(self.cost_price) * 100)


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for delivery"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class PaymentMethod(models.TextChoices):
    CASH = "cash", "Cash on delivery"
    CARD = "card", "Card"
    INSURANCE = "insurance", "Insurance"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class Order(ResourceModel):
    """
    Placed by a patient at checkout. Amounts are computed server-side from
    product prices at the time of the order.
    """
    order_number = models.CharField(max_length=32, unique=True)

    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="orders")
    pharmacy = models.ForeignKey("pharmacies.Pharmacy", on_delete=models.PROTECT, related_name="orders")

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    shipping = models.DecimalField(max_digits=12, decimal_places=2)
    tax = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    payment_status = models.CharField(max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)

    shipping_name = models.CharField(max_length=100)
    shipping_phone = models.CharField(max_length=32, blank=True)
    shipping_email = models.EmailField(blank=True)
    delivery_address = models.CharField(max_length=500)
    notes = models.TextField(max_length=1000, blank=True)

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )

    class Meta:
        db_table = "shop_order"
        indexes = [
            models.Index(fields=["customer", "status"]),
            models.Index(fields=["pharmacy", "status"]),
        ]

    def __str__(self) -> str:
        return self.order_number


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="order_items")

    # snapshot at order time
    name = models.CharField(max_length=100)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()
    prescription_verified = models.BooleanField(default=False)

    class Meta:
        db_table = "shop_order_item"

    def __str__(self) -> str:
        return f"{self.quantity} x {self.name}"

    @property
    def line_total(self) -> Decimal:
        return money(Decimal(self.unit_price) * self.quantity)
