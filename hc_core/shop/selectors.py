# hc_core/shop/selectors.py
from __future__ import annotations

from django.db.models import F, QuerySet

from hc_core.common.permissions import ROLE_ADMIN, ROLE_PATIENT, ROLE_PHARMACIST, user_roles
from hc_core.pharmacies.models import PharmacyStatus
from hc_core.shop.models import Order, Product


def products_visible_to(*, user, qs: QuerySet[Product] | None = None) -> QuerySet[Product]:
    """
    Pharmacists manage their own catalogue; patients browse what active
    pharmacies sell.
    """
    qs = Product.objects.all() if qs is None else qs
    roles = user_roles(user)
    if ROLE_ADMIN in roles:
        return qs
    if ROLE_PHARMACIST in roles:
        return qs.filter(created_by=user)
    if ROLE_PATIENT in roles:
        return qs.filter(
            is_active=True,
            pharmacy__is_active=True,
            pharmacy__status=PharmacyStatus.ACTIVE,
        )
    return qs.none()


def low_stock(qs: QuerySet[Product]) -> QuerySet[Product]:
    # available <= min  <=>  stock - reserved <= min  (min is never negative)
    return qs.filter(is_active=True, stock_quantity__lte=F("reserved_quantity") + F("min_stock_level"))


def orders_visible_to(*, user, qs: QuerySet[Order] | None = None) -> QuerySet[Order]:
    qs = Order.objects.all() if qs is None else qs
    roles = user_roles(user)
    if ROLE_ADMIN in roles:
        return qs
    if ROLE_PHARMACIST in roles:
        return qs.filter(pharmacy__created_by=user)
    if ROLE_PATIENT in roles:
        return qs.filter(customer=user)
    return qs.none()
