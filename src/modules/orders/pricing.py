"""Pricing resolver: turns client line requests into catalog-priced lines.

The catalog is the only pricing authority. Prices, names and images come
from one batch look-up of the requested products; whatever price the
client may have sent is never read.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, List, Sequence
from uuid import UUID

import structlog

from modules.orders.constants import MAX_QUANTITY
from modules.orders.exceptions import EmptyOrder, InvalidQuantity, UnknownProduct

if TYPE_CHECKING:
    from modules.orders.dtos import CheckoutItemDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolvedLineItem:
    product_ref: str
    name: str
    unit_price: Decimal
    quantity: int
    image_url: str = ""

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


def coerce_quantity(raw: object) -> int:
    """Coerce a client quantity to a positive ``int``.

    Accepts ints, integral floats/Decimals and numeric strings (``"2"``).
    Booleans, fractions, non-numbers, values below 1 and values above
    ``MAX_QUANTITY`` are rejected.
    """
    if isinstance(raw, bool) or raw is None:
        raise InvalidQuantity()
    try:
        value = Decimal(str(raw).strip())
    except ArithmeticError:
        raise InvalidQuantity() from None
    if not value.is_finite() or value != value.to_integral_value() or value < 1:
        raise InvalidQuantity()
    if value > MAX_QUANTITY:
        raise InvalidQuantity(f"Quantity may not exceed {MAX_QUANTITY}.")
    return int(value)


class PricingResolver:
    """Resolve requested lines against the product catalog."""

    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    def resolve(self, items: Sequence[CheckoutItemDTO]) -> List[ResolvedLineItem]:
        """Return one priced line per requested item, in request order.

        Raises:
            EmptyOrder: *items* is empty.
            InvalidQuantity: a quantity is not a positive integer.
            UnknownProduct: a reference is malformed, unknown or inactive.
        """
        if not items:
            raise EmptyOrder()

        quantities = [coerce_quantity(item.quantity) for item in items]

        requested = {item.product_ref for item in items}
        ids = set()
        for ref in requested:
            try:
                ids.add(UUID(str(ref)))
            except ValueError:
                logger.info("pricing.malformed_reference", product_ref=str(ref))
                raise UnknownProduct() from None

        products = {str(p.id): p for p in self._product_repo.get_active_by_ids(ids)}
        # Compare canonical UUID strings so "ABC…" and "abc…" count once.
        if len(products) < len(ids):
            missing = sorted(str(i) for i in ids if str(i) not in products)
            logger.info("pricing.unknown_products", missing=missing)
            raise UnknownProduct()

        lines = []
        for item, quantity in zip(items, quantities):
            product = products[str(UUID(str(item.product_ref)))]
            lines.append(
                ResolvedLineItem(
                    product_ref=str(product.id),
                    name=product.name,
                    unit_price=product.price,
                    quantity=quantity,
                    image_url=product.image_url,
                )
            )
        return lines
