"""Payment gateway port (abstract interface).

The contract every gateway adapter implements, so the fake gateway used in
development and tests and the Razorpay adapter are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class GatewayOrder:
    """A transaction opened on the gateway side."""

    id: str
    amount: int
    currency: str
    receipt: str
    status: str = "created"
    notes: Dict[str, str] = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Dict[str, str],
    ) -> GatewayOrder:
        """Open a transaction for *amount* minor units.

        Raises:
            GatewayUnavailable: the gateway could not be reached.
            GatewayRejected: the gateway refused the request.
        """
        ...
