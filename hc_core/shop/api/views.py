# hc_core/shop/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import MethodNotAllowed
from rest_framework.views import APIView

from hc_core.common.api.responses import success_response
from hc_core.common.api.views import ResourceViewSet
from hc_core.common.permissions import OrderPermission, ProductPermission
from hc_core.shop.api.serializers import (
    CheckoutSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    ProductCreateSerializer,
    ProductSerializer,
    ProductUpdateSerializer,
)
from hc_core.shop.filters import OrderFilter, ProductFilter
from hc_core.shop.models import Order, Product
from hc_core.shop.selectors import low_stock as low_stock_products, orders_visible_to, products_visible_to
from hc_core.shop.services import OrderService, ProductService


class ProductViewSet(ResourceViewSet):
    permission_classes = [ProductPermission]

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    create_serializer_class = ProductCreateSerializer
    update_serializer_class = ProductUpdateSerializer
    filterset_class = ProductFilter

    service = ProductService
    resource_label = "Product"
    select_related = ("pharmacy",)
    ordering = ("name",)

    def scope_queryset(self, qs):
        return products_visible_to(user=self.request.user, qs=qs)

    @extend_schema(tags=["Shop"], responses={200: ProductSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        qs = self.filter_queryset(low_stock_products(self.get_queryset()))
        return success_response(self.serializer_class(qs, many=True, context=self.get_serializer_context()).data)


class OrderViewSet(ResourceViewSet):
    """
    Orders are created by POST /checkout/ only. DELETE cancels.
    """
    permission_classes = [OrderPermission]
    http_method_names = ["get", "patch", "put", "delete", "head", "options"]

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter

    service = OrderService
    resource_label = "Order"
    select_related = ("pharmacy",)
    prefetch_related = ("items",)

    def scope_queryset(self, qs):
        return orders_visible_to(user=self.request.user, qs=qs)

    def update(self, request, *args, **kwargs):
        raise MethodNotAllowed(request.method)

    def partial_update(self, request, *args, **kwargs):
        raise MethodNotAllowed(request.method)

    @extend_schema(tags=["Shop"], request=OrderStatusSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["patch", "put"], url_path="status")
    def set_status(self, request, pk=None):
        instance = self.get_active_object()

        ser = OrderStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        instance = self.service.update(instance=instance, actor=request.user, data=ser.validated_data)
        return success_response(self.read(instance), message="Status updated successfully")


class CheckoutView(APIView):
    permission_classes = [OrderPermission]

    @extend_schema(tags=["Shop"], request=CheckoutSerializer, responses={201: OrderSerializer})
    def post(self, request):
        ser = CheckoutSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        order = OrderService.checkout(
            actor=request.user,
            items=data["items"],
            shipping_address=data["shipping_address"],
            payment_method=data["payment_method"],
            pharmacy_id=data["pharmacy"],
            notes=data["notes"],
        )
        return success_response(
            OrderSerializer(order).data,
            message="Order placed successfully",
            status=status.HTTP_201_CREATED,
        )
