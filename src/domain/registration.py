"""
Registration domain service - email verification state machine.

This module contains the orchestration for user registration, email
verification and code re-issue.

Verification State Machine (Forward-Only Transitions)
=====================================================

States per email:
- UNREGISTERED: no account in the directory
- AWAITING_VERIFICATION: account exists, email_confirmed is False
- VERIFIED: email_confirmed is True (terminal)

Valid Transitions:
    UNREGISTERED -> AWAITING_VERIFICATION   (register)
    AWAITING_VERIFICATION -> AWAITING_VERIFICATION   (resend, self-loop)
    AWAITING_VERIFICATION -> VERIFIED   (verify with an active code)

Failure policy:
- Registration succeeds once the account exists. Code issuance and
  delivery after that point are best-effort and only logged.
- Resend surfaces delivery failure to the caller.
- Verification consumes the code even if the directory update fails;
  the welcome email is best-effort. A VERIFIED account consumes nothing.
- No method raises. Unexpected exceptions are logged and reported as ERROR.
"""

import logging
from dataclasses import dataclass

from .exceptions import DirectoryError
from .messages import display_name, verification_message, welcome_message
from .otp import VerificationEngine
from .ports import (
    AccountState,
    EmailSender,
    NewUser,
    RegisterResult,
    RegistrationOutcome,
    ResendResult,
    UserAccount,
    UserDirectory,
    VerifyResult,
)

logger = logging.getLogger(__name__)


def account_state(account: UserAccount | None) -> AccountState:
    """Derive the verification state from a directory lookup."""
    if account is None:
        return AccountState.UNREGISTERED
    if account.email_confirmed:
        return AccountState.VERIFIED
    return AccountState.AWAITING_VERIFICATION


@dataclass
class RegistrationService:
    """
    Domain service for registration and email verification.

    Wires the user directory, the verification engine and the email
    sender together. Emails are used exactly as submitted (no case-folding).
    """

    directory: UserDirectory
    engine: VerificationEngine
    email_sender: EmailSender

    def register(self, new_user: NewUser) -> RegistrationOutcome:
        """
        Create an account and send its first verification code.

        Returns:
            REGISTERED once the account exists, ALREADY_EXISTS if the email
            is taken, REJECTED with the directory's messages, or ERROR
        """
        email = new_user.email
        logger.info("Starting registration for %s", email)
        try:
            if self.directory.find_by_email(email) is not None:
                logger.warning("Registration failed: %s already exists", email)
                return RegistrationOutcome(RegisterResult.ALREADY_EXISTS)

            try:
                self.directory.create(new_user)
            except DirectoryError as e:
                logger.warning("User creation failed for %s: %s", email, ", ".join(e.errors))
                return RegistrationOutcome(RegisterResult.REJECTED, tuple(e.errors))
        except Exception:
            logger.exception("Error during registration for %s", email)
            return RegistrationOutcome(RegisterResult.ERROR)

        try:
            code = self.engine.issue(email)
        except Exception:
            logger.exception("Could not issue verification code for %s", email)
        else:
            self._deliver_code(email, new_user.name, code)

        logger.info("User %s registered successfully", email)
        return RegistrationOutcome(RegisterResult.REGISTERED)

    def verify_email(self, email: str, code: str) -> VerifyResult:
        """
        Consume a code and confirm the account's email.

        Returns:
            VERIFIED, ALREADY_VERIFIED (account confirmed earlier, nothing
            consumed), INVALID_OR_EXPIRED (every other rejection), or ERROR
        """
        logger.info("Verifying code for %s", email)
        try:
            if account_state(self.directory.find_by_email(email)) is AccountState.VERIFIED:
                logger.warning("Verification refused: %s is already verified", email)
                return VerifyResult.ALREADY_VERIFIED

            result = self.engine.verify(email, code)
        except Exception:
            logger.exception("Error during verification for %s", email)
            return VerifyResult.ERROR

        if result is not VerifyResult.VERIFIED:
            logger.warning("Invalid or expired code for %s", email)
            return result

        try:
            if not self.directory.mark_email_confirmed(email):
                logger.warning("Verified code for %s but no account to confirm", email)
        except Exception:
            logger.exception("Code consumed but account update failed for %s", email)

        subject, body = welcome_message(display_name(email))
        try:
            self.email_sender.send(email, subject, body)
        except Exception:
            logger.exception("Failed to send welcome email to %s", email)

        logger.info("Email verified successfully for %s", email)
        return VerifyResult.VERIFIED

    def resend(self, email: str) -> ResendResult:
        """
        Issue a new code for an account still awaiting verification.

        Earlier codes stay valid until they expire.
        """
        logger.info("Resending verification code for %s", email)
        try:
            state = account_state(self.directory.find_by_email(email))
            if state is AccountState.UNREGISTERED:
                logger.warning("Resend failed: %s not found", email)
                return ResendResult.NOT_FOUND
            if state is AccountState.VERIFIED:
                logger.warning("Resend refused: %s is already verified", email)
                return ResendResult.ALREADY_VERIFIED

            code = self.engine.issue(email)
        except Exception:
            logger.exception("Error during code resend for %s", email)
            return ResendResult.ERROR

        if not self._deliver_code(email, display_name(email), code):
            return ResendResult.DELIVERY_FAILED

        logger.info("Verification code resent to %s", email)
        return ResendResult.SENT

    def _deliver_code(self, email: str, name: str, code: str) -> bool:
        """Send a verification code; log and report failure instead of raising."""
        subject, body = verification_message(name, code, self._ttl_minutes)
        try:
            self.email_sender.send(email, subject, body)
        except Exception:
            logger.exception("Failed to send verification email to %s", email)
            return False
        return True

    @property
    def _ttl_minutes(self) -> int:
        return int(self.engine.ttl.total_seconds() // 60)
