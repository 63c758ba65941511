"""Product repository interface.

Extends ``IRepository[Product]`` with the batch look-up used by checkout
pricing.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from uuid import UUID

    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product catalog."""

    @abstractmethod
    def get_active_by_ids(self, ids: Iterable[UUID]) -> List[Product]:
        """Fetch every active product whose id is in *ids* in one query.

        Unknown or inactive ids are simply absent from the result.
        """
