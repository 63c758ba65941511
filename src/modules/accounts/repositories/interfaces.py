"""User repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.accounts.models import User


class IUserRepository(ABC):
    @abstractmethod
    def create(self, *, name: str, email: str, password: str) -> User:
        """Create a user; raises ``EmailAlreadyRegistered`` on duplicates."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by (lower-cased) e-mail."""
