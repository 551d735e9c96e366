"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Emails are format-checked but passed through exactly as submitted.
"""

from datetime import date
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from src.domain.ports import NewUser


def _check_email_format(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Invalid email format") from None
    return value


# Unlike EmailStr, leaves the address untouched (no domain lowercasing)
EmailAddress = Annotated[str, AfterValidator(_check_email_format)]


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailAddress
    password: str = Field(
        ..., min_length=6, max_length=100, description="Password (6-100 characters)"
    )
    phone: str = Field(..., min_length=1, max_length=15)
    age: int = Field(..., ge=0, le=120)
    date_of_birth: date | None = Field(None, alias="dateOfBirth")
    gender: str | None = Field(None, max_length=10)

    def to_new_user(self) -> NewUser:
        return NewUser(
            name=self.name,
            email=self.email,
            password=self.password,
            phone=self.phone,
            age=self.age,
            date_of_birth=self.date_of_birth,
            gender=self.gender or None,
        )


class VerifyOtpRequest(BaseModel):
    """Request model for email verification."""

    email: EmailAddress
    otp: str = Field(
        ...,
        min_length=6,
        max_length=6,
        description="6-digit verification code from the email",
    )


class ResendOtpRequest(BaseModel):
    """Request model for verification code re-issue."""

    email: EmailAddress


class ApiResponse(BaseModel):
    """Envelope shared by every auth endpoint, success or failure."""

    success: bool
    message: str
    errors: list[str] = Field(default_factory=list)
