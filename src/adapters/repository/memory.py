"""
In-memory repository adapters - Implement OtpStore and UserDirectory.

Process-local stores for development and tests. A single lock per store
serialises every read and write, which gives mark_used the same
exactly-once guarantee the PostgreSQL conditional UPDATE provides.
"""

import itertools
import threading
from dataclasses import replace
from datetime import datetime

from src.adapters.repository.passwords import (
    duplicate_email_error,
    hash_password,
    password_policy_errors,
)
from src.domain.exceptions import DirectoryError
from src.domain.ports import MarkUsedResult, NewUser, OtpRecord, UserAccount


class InMemoryOtpStore:
    """
    Implements OtpStore protocol with a dict guarded by a lock.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._records: dict[int, OtpRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, record: OtpRecord) -> int:
        with self._lock:
            record_id = next(self._ids)
            self._records[record_id] = replace(record, id=record_id)
            return record_id

    def find_active(self, email: str, code: str, now: datetime) -> OtpRecord | None:
        with self._lock:
            candidates = [
                r
                for r in self._records.values()
                if r.email == email and r.code == code and r.is_active(now)
            ]
        if not candidates:
            return None
        # Newest first; id breaks ties between records issued in the same instant
        return max(candidates, key=lambda r: (r.created_at, r.id))

    def mark_used(self, record_id: int, used_at: datetime) -> MarkUsedResult:
        with self._lock:
            record = self._records.get(record_id)
            if record is None or record.used:
                return MarkUsedResult.ALREADY_USED
            self._records[record_id] = replace(record, used=True, used_at=used_at)
            return MarkUsedResult.SUCCESS

    def purge_expired(self, before: datetime) -> int:
        with self._lock:
            expired = [i for i, r in self._records.items() if r.expires_at <= before]
            for record_id in expired:
                del self._records[record_id]
            return len(expired)

    def get(self, record_id: int) -> OtpRecord | None:
        """Fetch a record by id regardless of state."""
        with self._lock:
            return self._records.get(record_id)

    def records_for(self, email: str) -> list[OtpRecord]:
        """All records for an email, oldest first."""
        with self._lock:
            return [r for r in self._records.values() if r.email == email]


class InMemoryUserDirectory:
    """
    Implements UserDirectory protocol with a dict guarded by a lock.

    Passwords are hashed exactly as the PostgreSQL directory does.
    """

    def __init__(self, bcrypt_cost: int = 10) -> None:
        self._bcrypt_cost = bcrypt_cost
        self._accounts: dict[str, UserAccount] = {}
        self._password_hashes: dict[str, str] = {}
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> UserAccount | None:
        with self._lock:
            return self._accounts.get(email)

    def create(self, new_user: NewUser) -> UserAccount:
        errors = password_policy_errors(new_user.password)
        if errors:
            raise DirectoryError(errors)
        password_hash = hash_password(new_user.password, self._bcrypt_cost)

        account = UserAccount(email=new_user.email, name=new_user.name)
        with self._lock:
            if new_user.email in self._accounts:
                raise DirectoryError([duplicate_email_error(new_user.email)])
            self._accounts[new_user.email] = account
            self._password_hashes[new_user.email] = password_hash
        return account

    def mark_email_confirmed(self, email: str) -> bool:
        with self._lock:
            account = self._accounts.get(email)
            if account is None:
                return False
            self._accounts[email] = replace(account, email_confirmed=True)
            return True
