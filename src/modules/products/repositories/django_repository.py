"""Django ORM implementation of the Product repository.

Methods return ``None`` / omit rows instead of raising: the service layer
decides how a missing product translates into an error.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import models

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve an active product; ``None`` for unknown or invalid IDs."""
        try:
            return Product.objects.filter(id=id, is_active=True).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Product.objects.filter(is_active=True)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_active_by_ids(self, ids: Iterable[UUID]) -> List[Product]:
        return list(Product.objects.filter(id__in=list(ids), is_active=True))
