# hc_core/pharmacies/selectors.py
from __future__ import annotations

from decimal import Decimal

from django.db.models import DecimalField, ExpressionWrapper, F, QuerySet, Sum

from hc_core.common.display import money
from hc_core.pharmacies.models import Pharmacy
from hc_core.shop.models import Product


def active_pharmacies() -> QuerySet[Pharmacy]:
    return Pharmacy.objects.filter(is_active=True)


def pharmacies_owned_by(*, user) -> QuerySet[Pharmacy]:
    return Pharmacy.objects.filter(created_by=user)


def pharmacy_stats(*, pharmacy: Pharmacy) -> dict:
    """
    Inventory figures aggregated from the pharmacy's active products.

    available = max(0, stock - reserved), so:
      low stock    <=> stock - reserved <= min_stock_level
      out of stock <=> stock <= reserved
    """
    products = Product.objects.filter(pharmacy=pharmacy, is_active=True)

    inventory_value = products.aggregate(
        v=Sum(
            ExpressionWrapper(
                F("price") * F("stock_quantity"),
                output_field=DecimalField(max_digits=14, decimal_places=2),
            )
        )
    )["v"] or Decimal("0")

    return {
        "pharmacy": str(pharmacy.id),
        "total_products": products.count(),
        "low_stock": products.filter(
            stock_quantity__lte=F("reserved_quantity") + F("min_stock_level")
        ).count(),
        "out_of_stock": products.filter(stock_quantity__lte=F("reserved_quantity")).count(),
        "inventory_value": str(money(inventory_value)),
        "is_open": pharmacy.is_open(),
    }
