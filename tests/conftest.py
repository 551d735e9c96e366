"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock for expiry tests
- In-memory storage adapters
- A mock email sender
- A wired RegistrationService
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryOtpStore, InMemoryUserDirectory
from src.domain.otp import VerificationEngine
from src.domain.ports import NewUser
from src.domain.registration import RegistrationService

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def make_new_user(email: str = "a@x.com", password: str = "Secret#123", **overrides) -> NewUser:
    """Build a NewUser with valid defaults."""
    fields = {
        "name": "Alice",
        "email": email,
        "password": password,
        "phone": "5551234567",
        "age": 30,
    }
    fields.update(overrides)
    return NewUser(**fields)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def otp_store() -> InMemoryOtpStore:
    return InMemoryOtpStore()


@pytest.fixture
def directory() -> InMemoryUserDirectory:
    # Lowest bcrypt cost keeps unit tests fast
    return InMemoryUserDirectory(bcrypt_cost=4)


@pytest.fixture
def engine(otp_store: InMemoryOtpStore, clock: FakeClock) -> VerificationEngine:
    return VerificationEngine(store=otp_store, clock=clock)


@pytest.fixture
def sender() -> Mock:
    return Mock()


@pytest.fixture
def service(
    directory: InMemoryUserDirectory, engine: VerificationEngine, sender: Mock
) -> RegistrationService:
    return RegistrationService(directory=directory, engine=engine, email_sender=sender)
