from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.accounts.dtos import RegisterUserDTO

pytestmark = pytest.mark.unit


class TestRegisterUserDTO:
    def test_normalises_email_and_name(self):
        dto = RegisterUserDTO(name="  Asha Verma ", email=" Asha@Example.COM ", password="Secret@123")
        assert dto.name == "Asha Verma"
        assert dto.email == "asha@example.com"

    @pytest.mark.parametrize("name", ["O'Brien", "Jean-Luc", "José Álvarez", "Dr. Rao"])
    def test_accepts_common_names(self, name):
        assert RegisterUserDTO(name=name, email="a@example.com", password="Secret@123").name == name

    @pytest.mark.parametrize("name", ["", "<script>", "name_with_underscore", "x" * 101])
    def test_rejects_bad_names(self, name):
        with pytest.raises(ValidationError):
            RegisterUserDTO(name=name, email="a@example.com", password="Secret@123")

    def test_accepts_eight_character_password(self):
        assert RegisterUserDTO(name="Asha", email="a@example.com", password="Short@1A")

    @pytest.mark.parametrize(
        "password",
        ["Sh@1A", "alllowercase@1", "ALLUPPERCASE@1", "NoDigits@here", "NoSpecial123", "Sp@ce 123A"],
    )
    def test_rejects_weak_passwords(self, password):
        with pytest.raises(ValidationError):
            RegisterUserDTO(name="Asha", email="a@example.com", password=password)

    def test_is_frozen(self):
        dto = RegisterUserDTO(name="Asha", email="a@example.com", password="Secret@123")
        with pytest.raises(ValidationError):
            dto.name = "Other"
