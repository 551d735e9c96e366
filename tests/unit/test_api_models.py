"""
Unit tests for API request/response models.

Tests Pydantic model validation for the auth endpoints.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from src.api.models import ApiResponse, RegisterRequest, ResendOtpRequest, VerifyOtpRequest
from src.domain.ports import NewUser

VALID_REGISTRATION = {
    "name": "Alice",
    "email": "alice@example.com",
    "password": "Secret#123",
    "phone": "5551234567",
    "age": 30,
}


class TestRegisterRequest:
    """Tests for RegisterRequest model."""

    def test_valid_register_request(self) -> None:
        request = RegisterRequest(**VALID_REGISTRATION)
        assert request.email == "alice@example.com"
        assert request.date_of_birth is None
        assert request.gender is None

    def test_email_kept_as_submitted(self) -> None:
        """Unlike EmailStr, the domain part is not lowercased."""
        request = RegisterRequest(**{**VALID_REGISTRATION, "email": "Alice@EXAMPLE.COM"})
        assert request.email == "Alice@EXAMPLE.COM"

    def test_invalid_email_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(**{**VALID_REGISTRATION, "email": "not-an-email"})
        assert "Invalid email format" in str(exc_info.value)

    def test_date_of_birth_alias(self) -> None:
        request = RegisterRequest(**{**VALID_REGISTRATION, "dateOfBirth": "1995-04-02"})
        assert request.date_of_birth == date(1995, 4, 2)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("name", ""),
            ("name", "x" * 101),
            ("password", "Ab#1"),
            ("password", "A#1" + "a" * 98),
            ("phone", "1" * 16),
            ("age", -1),
            ("age", 121),
            ("gender", "x" * 11),
        ],
    )
    def test_field_limits(self, field: str, value: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(**{**VALID_REGISTRATION, field: value})
        assert field in str(exc_info.value)

    @pytest.mark.parametrize("field", ["name", "email", "password", "phone", "age"])
    def test_required_fields(self, field: str) -> None:
        data = dict(VALID_REGISTRATION)
        del data[field]
        with pytest.raises(ValidationError):
            RegisterRequest(**data)

    def test_to_new_user(self) -> None:
        request = RegisterRequest(
            **{**VALID_REGISTRATION, "dateOfBirth": "1995-04-02", "gender": "female"}
        )
        assert request.to_new_user() == NewUser(
            name="Alice",
            email="alice@example.com",
            password="Secret#123",
            phone="5551234567",
            age=30,
            date_of_birth=date(1995, 4, 2),
            gender="female",
        )

    def test_blank_gender_becomes_none(self) -> None:
        request = RegisterRequest(**{**VALID_REGISTRATION, "gender": ""})
        assert request.to_new_user().gender is None


class TestVerifyOtpRequest:
    """Tests for VerifyOtpRequest model."""

    def test_valid_request(self) -> None:
        request = VerifyOtpRequest(email="a@example.com", otp="123456")
        assert request.otp == "123456"

    def test_otp_too_short(self) -> None:
        with pytest.raises(ValidationError):
            VerifyOtpRequest(email="a@example.com", otp="12345")

    def test_otp_too_long(self) -> None:
        with pytest.raises(ValidationError):
            VerifyOtpRequest(email="a@example.com", otp="1234567")

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            VerifyOtpRequest(email="nope", otp="123456")


class TestResendOtpRequest:
    """Tests for ResendOtpRequest model."""

    def test_valid_request(self) -> None:
        assert ResendOtpRequest(email="a@example.com").email == "a@example.com"

    def test_email_required(self) -> None:
        with pytest.raises(ValidationError):
            ResendOtpRequest()


class TestApiResponse:
    """Tests for the response envelope."""

    def test_errors_default_empty(self) -> None:
        response = ApiResponse(success=True, message="ok")
        assert response.model_dump() == {"success": True, "message": "ok", "errors": []}
