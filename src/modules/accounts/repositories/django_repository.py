"""Django ORM implementation of the User repository."""

from __future__ import annotations

from typing import Optional

import structlog
from django.db import IntegrityError, transaction

from modules.accounts.exceptions import EmailAlreadyRegistered
from modules.accounts.models import User
from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    def create(self, *, name: str, email: str, password: str) -> User:
        """Insert the user, relying on the unique e-mail index for races."""
        try:
            with transaction.atomic():
                user = User.objects.create_user(email=email, password=password, name=name)
        except IntegrityError as exc:
            raise EmailAlreadyRegistered() from exc
        logger.info("user.created", user_id=user.pk)
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return User.objects.filter(email=email.strip().lower()).first()
