"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``DomainExceptionHandler``, which renders
them with their status code; views never build error responses.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import (
    CheckoutDTO,
    CheckoutItemDTO,
    CustomerDTO,
    PaymentConfirmationDTO,
    UpdateOrderDTO,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CheckoutSerializer,
    OrderListSerializer,
    OrderSerializer,
    PaymentConfirmationSerializer,
    UpdateOrderSerializer,
)
from modules.orders.services import OrderService
from modules.payments.intents import PaymentIntentInitiator
from modules.payments.providers import get_gateway, get_payment_settings
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories and payment
    collaborators (DIP).  Does **not** extend ``ModelViewSet``: all ORM
    access goes through the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        payment_settings = get_payment_settings()
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            intent_initiator=PaymentIntentInitiator(get_gateway(), payment_settings),
            payment_settings=payment_settings,
        )

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "checkout" if self.action in {"create", "verify_payment"} else None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    @extend_schema(request=CheckoutSerializer, responses={201: OrderSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        COD orders come back as ``{"order"}``; online orders also carry the
        ``gateway`` parameters for the client checkout widget.
        """
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dto = CheckoutDTO(
            customer=CustomerDTO(**data["customer"]),
            payment_method=data["payment_method"],
            items=[
                CheckoutItemDTO(product_ref=item["id"], quantity=item["quantity"])
                for item in data["items"]
            ],
            notes=data.get("notes", ""),
            shipping=data.get("shipping"),
        )
        result = self._service.checkout(request.user, dto)

        body = {"order": OrderSerializer(result.order).data}
        if result.gateway is not None:
            body["gateway"] = result.gateway
        return Response(body, status=status.HTTP_201_CREATED)

    @extend_schema(request=PaymentConfirmationSerializer, responses={200: OrderSerializer})
    @action(detail=False, methods=["post"], url_path="verify-payment")
    def verify_payment(self, request: Request) -> Response:
        """POST /api/v1/orders/verify-payment/"""
        serializer = PaymentConfirmationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.confirm_payment(PaymentConfirmationDTO(**serializer.validated_data))
        return Response({"order": OrderSerializer(order).data})

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Order.objects.none()
        return self._service.list_orders(self.request.user)

    @extend_schema(responses={200: OrderListSerializer(many=True)})
    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?page=&limit=

        Newest first; scoped to the caller unless privileged.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(request.user, pk or "")
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Update / Delete
    # ------------------------------------------------------------------

    @extend_schema(request=UpdateOrderSerializer, responses={200: OrderSerializer})
    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/"""
        serializer = UpdateOrderSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        order = self._service.update_order(
            request.user,
            pk or "",
            UpdateOrderDTO(**serializer.validated_data),
        )
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/  (administrators only)"""
        self._service.delete_order(request.user, pk or "")
        return Response({"detail": "Order deleted."}, status=status.HTTP_200_OK)
