"""
OTP lifecycle - code generation, issuance, consumption and retention.

Each issued code is stored as its own record. Re-issuing a code does not
invalidate earlier ones; verification always consumes the newest active
record matching (email, code). Consumption is delegated to the store's
atomic mark_used so concurrent attempts on the same code resolve to
exactly one winner.
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .ports import MarkUsedResult, OtpRecord, OtpStore, VerifyResult

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
DEFAULT_TTL = timedelta(minutes=10)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_code() -> str:
    """
    Generate a 6-digit code in [100000, 999999].

    Uses the secrets module for cryptographic randomness. Returns a string
    so the representation is fixed at the storage boundary.
    """
    return str(100000 + secrets.randbelow(900000))


@dataclass
class VerificationEngine:
    """
    Issues and consumes one-time codes against an OtpStore.

    Storage failures propagate as StorageError; callers decide how to
    surface them.
    """

    store: OtpStore
    ttl: timedelta = DEFAULT_TTL
    clock: Callable[[], datetime] = field(default=utc_now)

    def issue(self, email: str) -> str:
        """
        Create and persist a fresh code for ``email``.

        Returns:
            The generated code, for the caller to deliver

        Raises:
            StorageError: If the record could not be persisted
        """
        now = self.clock()
        record = OtpRecord(
            email=email,
            code=generate_code(),
            created_at=now,
            expires_at=now + self.ttl,
        )
        record_id = self.store.insert(record)
        logger.info("Issued verification code %s for %s", record_id, email)
        return record.code

    def verify(self, email: str, code: str) -> VerifyResult:
        """
        Consume the newest active record for (email, code).

        Returns VERIFIED only for the caller whose mark_used succeeded.
        Every other path returns INVALID_OR_EXPIRED.
        """
        now = self.clock()
        record = self.store.find_active(email, code, now)
        if record is None:
            return VerifyResult.INVALID_OR_EXPIRED

        if self.store.mark_used(record.id, now) is MarkUsedResult.ALREADY_USED:
            logger.info("Code %s for %s consumed by a concurrent request", record.id, email)
            return VerifyResult.INVALID_OR_EXPIRED

        return VerifyResult.VERIFIED

    def purge_expired(self, retention: timedelta = timedelta(0)) -> int:
        """Delete records that expired more than ``retention`` ago."""
        removed = self.store.purge_expired(self.clock() - retention)
        if removed:
            logger.info("Purged %d expired verification code(s)", removed)
        return removed
