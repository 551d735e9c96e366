"""
Domain layer - Pure business logic with zero framework imports.

This package contains the OTP lifecycle and the registration /
verification orchestration. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture
decoupling.
"""

from .exceptions import DeliveryError, DirectoryError, RegistrationError, StorageError
from .otp import VerificationEngine, generate_code
from .ports import (
    AccountState,
    EmailSender,
    MarkUsedResult,
    NewUser,
    OtpRecord,
    OtpStore,
    RegisterResult,
    RegistrationOutcome,
    ResendResult,
    UserAccount,
    UserDirectory,
    VerifyResult,
)
from .registration import RegistrationService

__all__ = [
    "AccountState",
    "DeliveryError",
    "DirectoryError",
    "EmailSender",
    "MarkUsedResult",
    "NewUser",
    "OtpRecord",
    "OtpStore",
    "RegisterResult",
    "RegistrationError",
    "RegistrationOutcome",
    "RegistrationService",
    "ResendResult",
    "StorageError",
    "UserAccount",
    "UserDirectory",
    "VerificationEngine",
    "VerifyResult",
    "generate_code",
]
