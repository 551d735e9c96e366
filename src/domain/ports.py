"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the value types that cross them. Adapters
implement these protocols.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Protocol


class AccountState(str, Enum):
    """
    Verification state of an email address.

    State Transitions (forward-only):
    - UNREGISTERED -> AWAITING_VERIFICATION (account created)
    - AWAITING_VERIFICATION -> AWAITING_VERIFICATION (code re-issued)
    - AWAITING_VERIFICATION -> VERIFIED (code consumed)

    VERIFIED is terminal.
    """

    UNREGISTERED = "UNREGISTERED"
    AWAITING_VERIFICATION = "AWAITING_VERIFICATION"
    VERIFIED = "VERIFIED"


class MarkUsedResult(Enum):
    """Outcome of the atomic used=false -> used=true transition."""

    SUCCESS = "success"
    ALREADY_USED = "already_used"


class VerifyResult(Enum):
    """
    Result of a verification attempt.

    Wrong code, expired code, consumed code and unknown email all map to
    INVALID_OR_EXPIRED so callers cannot tell them apart. ALREADY_VERIFIED
    means the account was confirmed earlier and no code was consumed.
    """

    VERIFIED = "verified"
    INVALID_OR_EXPIRED = "invalid_or_expired"
    ALREADY_VERIFIED = "already_verified"
    ERROR = "error"


class RegisterResult(Enum):
    """Result of a registration attempt."""

    REGISTERED = "registered"
    ALREADY_EXISTS = "already_exists"
    REJECTED = "rejected"
    ERROR = "error"


class ResendResult(Enum):
    """Result of a code re-issue request."""

    SENT = "sent"
    NOT_FOUND = "not_found"
    ALREADY_VERIFIED = "already_verified"
    DELIVERY_FAILED = "delivery_failed"
    ERROR = "error"


@dataclass(frozen=True)
class RegistrationOutcome:
    """Registration result plus the directory's field-level messages."""

    result: RegisterResult
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class OtpRecord:
    """
    A single issued verification code.

    ``id`` is None until the store assigns one on insert.
    """

    email: str
    code: str
    created_at: datetime
    expires_at: datetime
    used: bool = False
    used_at: datetime | None = None
    id: int | None = None

    def is_active(self, now: datetime) -> bool:
        """Unused and not yet expired."""
        return not self.used and self.expires_at > now


@dataclass(frozen=True)
class NewUser:
    """Account attributes submitted at registration."""

    name: str
    email: str
    password: str
    phone: str
    age: int
    date_of_birth: date | None = None
    gender: str | None = None


@dataclass(frozen=True)
class UserAccount:
    """The directory's view of an account, as far as verification cares."""

    email: str
    name: str
    email_confirmed: bool = False


class OtpStore(Protocol):
    """Port interface for OTP record persistence."""

    def insert(self, record: OtpRecord) -> int:
        """
        Persist a new record.

        Returns:
            The identifier assigned to the record

        Raises:
            StorageError: If the backend is unavailable
        """
        ...

    def find_active(self, email: str, code: str, now: datetime) -> OtpRecord | None:
        """
        Return the newest record matching email and code that is unused
        and expires after ``now``, or None.

        Must be a single consistent read.
        """
        ...

    def mark_used(self, record_id: int, used_at: datetime) -> MarkUsedResult:
        """
        Atomically transition used=false -> used=true.

        Under concurrent calls for the same id exactly one caller observes
        SUCCESS; every other caller observes ALREADY_USED.
        """
        ...

    def purge_expired(self, before: datetime) -> int:
        """Delete records whose expiry is at or before ``before``; return count."""
        ...


class UserDirectory(Protocol):
    """Port interface for the user account store."""

    def find_by_email(self, email: str) -> UserAccount | None:
        """Look up an account by exact (case-sensitive) email."""
        ...

    def create(self, new_user: NewUser) -> UserAccount:
        """
        Create an account with email_confirmed=False.

        Raises:
            DirectoryError: Account rejected (duplicate, weak password)
            StorageError: If the backend is unavailable
        """
        ...

    def mark_email_confirmed(self, email: str) -> bool:
        """Flip email_confirmed to True; return False if no such account."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send(self, to: str, subject: str, body: str) -> None:
        """
        Deliver a single message. One attempt, no retry.

        Raises:
            DeliveryError: If the transport fails
        """
        ...
