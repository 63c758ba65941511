"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the checkout,
reconciliation and management flows need.  The Service Layer depends
exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.builder import OrderDraft
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes its ``OrderItem`` children.  Mutations must be
    atomic.
    """

    @abstractmethod
    def create_from_draft(
        self,
        draft: OrderDraft,
        owner: Any,
        gateway_order_ref: Optional[str] = None,
    ) -> Order:
        """Persist the order and all its items in one transaction."""

    @abstractmethod
    def get_by_gateway_order_ref(self, ref: str) -> Optional[Order]:
        """Retrieve the order bound to a gateway transaction."""

    @abstractmethod
    def mark_paid_by_gateway_ref(
        self,
        gateway_order_ref: str,
        gateway_payment_ref: Optional[str],
        signature: Optional[str] = None,
    ) -> Optional[Order]:
        """Atomically mark the matching order ``PAID``.

        Payment reference and signature are write-once: values already
        stored are kept.  Returns the refreshed order or ``None`` when no
        order carries *gateway_order_ref*.
        """

    @abstractmethod
    def update(self, order: Order, changes: Dict[str, Any]) -> Order:
        """Apply *changes* (already validated) and persist them."""

    @abstractmethod
    def delete(self, order: Order) -> None:
        """Remove the order and its items."""
