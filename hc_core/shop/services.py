# hc_core/shop/services.py
from __future__ import annotations

import logging
import random
import time
from typing import Any

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from hc_core.common.services import ResourceService
from hc_core.common.transitions import StatusMachine
from hc_core.pharmacies.models import Pharmacy, PharmacyStatus
from hc_core.shop.cart import CartLine, compute_totals
from hc_core.shop.models import Order, OrderItem, OrderStatus, PaymentMethod, Product

logger = logging.getLogger(__name__)

O = OrderStatus

ORDER_STATUS = StatusMachine(
    {
        O.PENDING: {O.CONFIRMED, O.CANCELLED},
        O.CONFIRMED: {O.PREPARING, O.CANCELLED},
        O.PREPARING: {O.READY, O.CANCELLED},
        O.READY: {O.OUT_FOR_DELIVERY},
        O.OUT_FOR_DELIVERY: {O.DELIVERED},
    }
)


def generate_order_number() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 9999):04d}"


class ProductService(ResourceService):
    model = Product
    event_prefix = "product"
    unique_error = "A product with this SKU already exists in this pharmacy"
    updatable_fields = frozenset(
        {
            "name",
            "description",
            "category",
            "manufacturer",
            "price",
            "cost_price",
            "stock_quantity",
            "reserved_quantity",
            "min_stock_level",
            "sku",
            "barcode",
            "image_url",
            "requires_prescription",
            "expiry_date",
        }
    )

    @classmethod
    def prepare_create(cls, *, actor, data: dict) -> dict:
        data["created_by"] = actor
        return data


class OrderService(ResourceService):
    """
    Orders are only created through checkout. Cancelling (DELETE or
    status=cancelled) puts the ordered quantities back on the shelf.
    """
    model = Order
    event_prefix = "order"
    status_machine = ORDER_STATUS
    deleted_status = O.CANCELLED
    updatable_fields = frozenset({"status", "payment_status", "notes"})

    @classmethod
    def _restock(cls, order: Order) -> None:
        for item in order.items.all():
            Product.objects.filter(pk=item.product_id).update(stock_quantity=F("stock_quantity") + item.quantity)

    @classmethod
    @transaction.atomic
    def update(cls, *, instance, actor, data: dict):
        cancelling = data.get("status") == O.CANCELLED and instance.status != O.CANCELLED
        instance = super().update(instance=instance, actor=actor, data=data)
        if cancelling:
            cls._restock(instance)
        return instance

    @classmethod
    @transaction.atomic
    def soft_delete(cls, *, instance, actor):
        # cancellation still has to be legal from the current status
        if instance.is_active:
            cls.status_machine.check(instance.status, O.CANCELLED)
            if instance.status != O.CANCELLED:
                cls._restock(instance)
        return super().soft_delete(instance=instance, actor=actor)

    @classmethod
    @transaction.atomic
    def checkout(
        cls,
        *,
        actor,
        items: list[dict[str, Any]],
        shipping_address: dict[str, Any],
        payment_method: str = PaymentMethod.CASH,
        pharmacy_id=None,
        notes: str = "",
    ) -> Order:
        """
        Turn a cart into an order in one transaction:
          - lock every product row (select_for_update)
          - re-read prices; client-side prices are never used
          - check availability, decrement stock
          - create Order + OrderItem rows with server-computed totals
        """
        if not items:
            raise ValidationError({"items": ["Cart is empty"]})
        if not (shipping_address or {}).get("name"):
            raise ValidationError({"shipping_address": ["Shipping address is required"]})

        quantities: dict[str, int] = {}
        for entry in items:
            pid = str(entry["product"])
            quantities[pid] = quantities.get(pid, 0) + int(entry["quantity"])

        products = {
            str(p.pk): p
            for p in Product.objects.select_for_update().filter(pk__in=list(quantities.keys()))
        }

        lines: list[CartLine] = []
        for pid, qty in quantities.items():
            product = products.get(pid)
            if product is None or not product.is_active:
                raise ValidationError({"items": [f"Product {pid} not found"]})
            if product.available_quantity < qty:
                raise ValidationError({"items": [f"Insufficient stock for {product.name}"]})
            lines.append(
                CartLine(
                    product_id=pid,
                    name=product.name,
                    price=product.price,
                    quantity=qty,
                    pharmacy_id=str(product.pharmacy_id),
                )
            )

        pharmacy_ids = {line.pharmacy_id for line in lines}
        if pharmacy_id is not None:
            pharmacy_id = str(pharmacy_id)
            if pharmacy_ids != {pharmacy_id}:
                raise ValidationError({"pharmacy": ["All items must come from the selected pharmacy"]})
        elif len(pharmacy_ids) != 1:
            raise ValidationError({"pharmacy": ["Items from more than one pharmacy; choose a pharmacy"]})
        else:
            pharmacy_id = next(iter(pharmacy_ids))

        pharmacy = Pharmacy.objects.filter(pk=pharmacy_id, is_active=True, status=PharmacyStatus.ACTIVE).first()
        if pharmacy is None:
            raise ValidationError({"pharmacy": ["Pharmacy is not accepting orders"]})

        totals = compute_totals(lines)

        address_parts = [
            shipping_address.get("address", ""),
            shipping_address.get("city", ""),
            shipping_address.get("postal_code", ""),
        ]
        order = Order(
            order_number=generate_order_number(),
            customer=actor,
            pharmacy=pharmacy,
            payment_method=payment_method,
            shipping_name=shipping_address["name"],
            shipping_phone=shipping_address.get("phone", ""),
            shipping_email=shipping_address.get("email", ""),
            delivery_address=", ".join(p for p in address_parts if p),
            notes=notes or "",
            **totals,
        )
        cls._save(order, force_insert=True)

        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    name=line.name,
                    unit_price=line.price,
                    quantity=line.quantity,
                )
                for line in lines
            ]
        )
        for line in lines:
            Product.objects.filter(pk=line.product_id).update(stock_quantity=F("stock_quantity") - line.quantity)

        cls._audit(
            "created",
            order,
            actor,
            {"order_number": order.order_number, "total": str(order.total), "items": len(lines)},
        )
        logger.info("checkout order=%s customer=%s total=%s", order.order_number, actor.pk, order.total)
        return order
