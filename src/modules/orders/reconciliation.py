"""Payment reconciliation.

The one place where an order moves to ``PAID`` after creation.  Both the
client confirmation and the gateway webhook end here, keyed by the
gateway order reference, and may race each other: applying the same
(order ref, payment ref) twice leaves the order exactly as after the
first call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    order: Optional[Order]

    @property
    def matched(self) -> bool:
        return self.order is not None


class OrderReconciler:
    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    def reconcile(
        self,
        gateway_order_ref: str,
        gateway_payment_ref: Optional[str],
        signature: Optional[str] = None,
        *,
        source: str = "client",
    ) -> ReconcileResult:
        """Mark the order bound to *gateway_order_ref* as paid.

        A missing order is reported through ``ReconcileResult.matched``;
        it is not an error at this layer.  ``source`` only feeds the logs.
        """
        log = logger.bind(
            gateway_order_ref=gateway_order_ref,
            gateway_payment_ref=gateway_payment_ref,
            source=source,
        )

        order = self._order_repo.mark_paid_by_gateway_ref(
            gateway_order_ref, gateway_payment_ref, signature
        )
        if order is None:
            log.info("payment.reconcile_unmatched")
            return ReconcileResult(order=None)

        if gateway_payment_ref and order.gateway_payment_ref != gateway_payment_ref:
            log.warning(
                "payment.reconcile_payment_ref_conflict",
                stored_payment_ref=order.gateway_payment_ref,
            )

        log.info("payment.reconciled", order_id=order.order_id)
        return ReconcileResult(order=order)
