"""Account service layer: registration and token issuance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from rest_framework_simplejwt.tokens import RefreshToken

from modules.accounts.exceptions import EmailAlreadyRegistered

if TYPE_CHECKING:
    from modules.accounts.dtos import RegisterUserDTO
    from modules.accounts.models import User
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Registration:
    user: User
    access: str
    refresh: str


class AccountService:
    def __init__(self, user_repository: IUserRepository) -> None:
        self._user_repo = user_repository

    def register(self, dto: RegisterUserDTO) -> Registration:
        """Create an account and return it with a fresh token pair.

        Raises:
            EmailAlreadyRegistered: the e-mail is taken.
        """
        log = logger.bind(email_domain=dto.email.rpartition("@")[2])
        if self._user_repo.get_by_email(dto.email):
            log.info("user.registration_duplicate")
            raise EmailAlreadyRegistered()

        user = self._user_repo.create(name=dto.name, email=dto.email, password=dto.password)
        refresh = RefreshToken.for_user(user)
        log.info("user.registered", user_id=user.pk)
        return Registration(user=user, access=str(refresh.access_token), refresh=str(refresh))
