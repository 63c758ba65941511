"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Aggregate creation runs inside ``transaction.atomic()`` so an order is
never visible without its items.

Payment reconciliation is a single conditional ``UPDATE``: whichever of
the client confirmation or the webhook arrives second finds the order
already ``PAID`` and the write-once columns already filled, so the two
paths converge without row locks.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import F, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from modules.orders.builder import OrderDraft
from modules.orders.constants import PaymentStatus
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_from_draft(
        self,
        draft: OrderDraft,
        owner: Any,
        gateway_order_ref: Optional[str] = None,
    ) -> Order:
        totals = draft.totals
        order = Order.objects.create(
            order_id=draft.order_id,
            owner=owner,
            customer=draft.customer,
            subtotal=totals.subtotal,
            tax=totals.tax,
            shipping=totals.shipping,
            total=totals.total,
            payment_method=draft.payment_method,
            payment_status=draft.payment_status,
            gateway_order_ref=gateway_order_ref,
            notes=draft.notes,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    position=position,
                    product_ref=line.product_ref,
                    name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    image_url=line.image_url,
                )
                for position, line in enumerate(draft.lines)
            ]
        )

        log = logger.bind(order_id=order.order_id, item_count=len(draft.lines))
        log.info("order.created", payment_method=order.payment_method, total=str(order.total))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _queryset(self) -> models.QuerySet:
        return Order.objects.select_related("owner").prefetch_related("items")

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order by primary key or by its ``ORD-`` identifier.

        Returns ``None`` for non-existent or invalid IDs.
        """
        queryset = self._queryset()
        if str(id).startswith("ORD-"):
            return queryset.filter(order_id=id).first()
        try:
            return queryset.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_gateway_order_ref(self, ref: str) -> Optional[Order]:
        return self._queryset().filter(gateway_order_ref=ref).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """Return a lazy queryset, newest first.

        Supported filter keys are plain ORM lookups (``owner``,
        ``status``, ``payment_status`` ...).
        """
        queryset = self._queryset().order_by("-created_at")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def mark_paid_by_gateway_ref(
        self,
        gateway_order_ref: str,
        gateway_payment_ref: Optional[str],
        signature: Optional[str] = None,
    ) -> Optional[Order]:
        changes: Dict[str, Any] = {
            "payment_status": PaymentStatus.PAID,
            "gateway_payment_ref": Coalesce(
                F("gateway_payment_ref"),
                Value(gateway_payment_ref, output_field=models.CharField()),
            ),
            "updated_at": timezone.now(),
        }
        if signature is not None:
            changes["gateway_signature"] = Coalesce(
                F("gateway_signature"),
                Value(signature, output_field=models.CharField()),
            )

        matched = Order.objects.filter(gateway_order_ref=gateway_order_ref).update(**changes)
        if not matched:
            return None
        return self.get_by_gateway_order_ref(gateway_order_ref)

    # ------------------------------------------------------------------
    # Update / Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def update(self, order: Order, changes: Dict[str, Any]) -> Order:
        for field, value in changes.items():
            setattr(order, field, value)
        order.save(update_fields=list(changes))
        logger.info("order.updated", order_id=order.order_id, fields=sorted(changes))
        return order

    @transaction.atomic
    def delete(self, order: Order) -> None:
        order_id = order.order_id
        order.delete()
        logger.info("order.deleted", order_id=order_id)
