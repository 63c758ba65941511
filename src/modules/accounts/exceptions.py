"""Account domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import ValidationError


class EmailAlreadyRegistered(ValidationError):
    default_code = "email_taken"
    default_detail = "Email already registered."


class InvalidRegistration(ValidationError):
    """Name, e-mail or password does not satisfy the registration rules."""
