"""Account DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, field_validator

# Letters and digits in any script, plus space, dot, apostrophe and hyphen.
NAME_PATTERN = re.compile(r"^(?:[^\W_]|[ .'\-]){1,100}$")

# At least 8 chars with lower, upper, digit and one of @$!%*?&.
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)

PASSWORD_RULES = (
    "Password must be at least 8 characters long and contain at least one "
    "uppercase letter, one lowercase letter, one number, and one special "
    "character (@$!%*?&)."
)


class RegisterUserDTO(BaseModel):
    """Registration request after transport-level validation.

    ``name`` is trimmed, ``email`` trimmed and lower-cased.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def name_must_use_allowed_characters(cls, v: str) -> str:
        v = v.strip()
        if not NAME_PATTERN.match(v):
            raise ValueError("Name contains invalid characters.")
        return v

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Email is required.")
        return v

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(PASSWORD_RULES)
        return v
