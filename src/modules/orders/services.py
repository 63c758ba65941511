"""Order service layer (Use Cases).

Orchestrates checkout, payment confirmation and order management.

Business rules enforced:
- Prices always come from the catalog, never from the client.
- Cash-on-delivery orders are created ``PAID``; online orders are only
  persisted once the gateway has issued a transaction reference.
- The gateway call happens before, and outside of, any DB transaction:
  a gateway failure leaves nothing behind.
- Payment confirmation is signature-checked before the reconciler runs.
- Owners see and annotate their own orders; privileged users manage all.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models

from modules.core.permissions import is_privileged
from modules.orders.builder import build_order_draft, ensure_fits, quantize_money
from modules.orders.constants import (
    OWNER_UPDATABLE_FIELDS,
    UPDATABLE_FIELDS,
    PaymentMethod,
    PaymentStatus,
)
from modules.orders.exceptions import (
    InvalidOrderUpdate,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.orders.pricing import PricingResolver
from modules.orders.reconciliation import OrderReconciler
from modules.payments import signatures
from modules.payments.exceptions import InvalidSignature, PaymentsNotConfigured

if TYPE_CHECKING:
    from modules.orders.dtos import CheckoutDTO, PaymentConfirmationDTO, UpdateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.payments.config import PaymentSettings
    from modules.payments.intents import PaymentIntentInitiator
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

NON_NULLABLE_UPDATE_FIELDS = frozenset({"status", "payment_status", "notes", "shipping"})


@dataclass(frozen=True)
class CheckoutResult:
    order: Order
    gateway: Optional[Dict[str, Any]] = None


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and payment collaborators via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        intent_initiator: PaymentIntentInitiator,
        payment_settings: PaymentSettings,
    ) -> None:
        self._order_repo = order_repository
        self._pricing = PricingResolver(product_repository)
        self._intents = intent_initiator
        self._payment_settings = payment_settings
        self._reconciler = OrderReconciler(order_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def checkout(self, owner: Any, dto: CheckoutDTO) -> CheckoutResult:
        """Price, build and persist an order; open a gateway transaction
        first when the order is paid online.

        Raises:
            EmptyOrder / InvalidQuantity / UnknownProduct: bad items.
            PaymentsNotConfigured: online payment requested without a gateway.
            GatewayUnavailable / GatewayRejected: the gateway call failed.
        """
        log = logger.bind(owner_id=str(owner.pk), payment_method=dto.payment_method)
        log.info("order.checkout_started", item_count=len(dto.items))

        lines = self._pricing.resolve(dto.items)
        customer = dto.customer.as_snapshot()
        draft = build_order_draft(
            customer=customer,
            lines=lines,
            payment_method=dto.payment_method,
            shipping=dto.shipping,
            notes=dto.notes,
        )
        log = log.bind(order_id=draft.order_id, total=str(draft.totals.total))

        if not draft.is_online:
            order = self._order_repo.create_from_draft(draft, owner)
            log.info("order.checkout_completed")
            return CheckoutResult(order=order)

        if not self._intents.enabled:
            log.warning("order.checkout_payments_disabled")
            raise PaymentsNotConfigured()

        intent = self._intents.initiate(
            total=draft.totals.total,
            order_id=draft.order_id,
            customer_email=dto.customer.email,
        )
        order = self._order_repo.create_from_draft(
            draft, owner, gateway_order_ref=intent.transaction_ref
        )
        log.info("order.checkout_completed", gateway_order_ref=intent.transaction_ref)
        return CheckoutResult(
            order=order,
            gateway=intent.client_parameters(self._payment_settings, customer),
        )

    def confirm_payment(self, dto: PaymentConfirmationDTO) -> Order:
        """Verify the client's payment confirmation and reconcile the order.

        Raises:
            PaymentsNotConfigured: no key secret to verify with.
            InvalidSignature: the signature does not match.
            OrderNotFound: no order carries ``dto.gateway_order_ref``.
        """
        if not self._payment_settings.online_payments_enabled:
            raise PaymentsNotConfigured()

        log = logger.bind(gateway_order_ref=dto.gateway_order_ref)
        payload = signatures.confirmation_payload(dto.gateway_order_ref, dto.gateway_payment_ref)
        if not signatures.verify(self._payment_settings.key_secret, payload, dto.signature):
            log.warning("payment.signature_mismatch", source="client")
            raise InvalidSignature()

        result = self._reconciler.reconcile(
            dto.gateway_order_ref,
            dto.gateway_payment_ref,
            dto.signature,
            source="client",
        )
        if not result.matched:
            raise OrderNotFound()
        return result.order

    def update_order(self, user: Any, order_id: str, dto: UpdateOrderDTO) -> Order:
        """Apply an allow-listed partial update.

        Raises:
            OrderNotFound / OrderAccessDenied: see ``get_order``.
            OrderAccessDenied: an owner touched a field other than ``notes``.
            InvalidOrderUpdate: the change breaks an order invariant.
            OrderTotalTooLarge: the new shipping pushes the total out of range.
        """
        order = self.get_order(user, order_id)
        changes = {k: v for k, v in dto.changes().items() if k in UPDATABLE_FIELDS}
        if not changes:
            return order

        log = logger.bind(order_id=order.order_id, user_id=str(user.pk))

        if not is_privileged(user):
            forbidden = sorted(set(changes) - OWNER_UPDATABLE_FIELDS)
            if forbidden:
                log.warning("order.update_forbidden", fields=forbidden)
                raise OrderAccessDenied(
                    f"Only administrators may change: {', '.join(forbidden)}."
                )

        for field in sorted(NON_NULLABLE_UPDATE_FIELDS & set(changes)):
            if changes[field] is None:
                raise InvalidOrderUpdate(f"{field} may not be null.")

        if (
            changes.get("payment_status") == PaymentStatus.UNPAID
            and order.payment_method == PaymentMethod.CASH_ON_DELIVERY
        ):
            raise InvalidOrderUpdate("Cash-on-delivery orders cannot be marked unpaid.")

        if "shipping" in changes:
            changes["shipping"] = quantize_money(changes["shipping"])
            changes["total"] = order.subtotal + order.tax + changes["shipping"]
            ensure_fits(changes["total"])

        return self._order_repo.update(order, changes)

    def delete_order(self, user: Any, order_id: str) -> None:
        """Hard-delete an order.  Privileged users only."""
        if not is_privileged(user):
            logger.warning("order.delete_forbidden", user_id=str(user.pk), order_id=order_id)
            raise OrderAccessDenied()
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound()
        self._order_repo.delete(order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, user: Any, order_id: str) -> Order:
        """Retrieve one order visible to *user*.

        Raises:
            OrderNotFound: the order does not exist.
            OrderAccessDenied: *user* is neither owner nor privileged.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound()
        if order.owner_id != user.pk and not is_privileged(user):
            raise OrderAccessDenied()
        return order

    def list_orders(self, user: Any, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """Orders newest first; scoped to *user* unless privileged."""
        scoped = dict(filters or {})
        if not is_privileged(user):
            scoped["owner"] = user
        return self._order_repo.list(scoped)
