"""
PostgreSQL repository adapters - Implement OtpStore and UserDirectory.

This module provides the PostgreSQL implementation of the domain's
storage ports using psycopg3 with raw SQL.

Concurrency Design - Exactly-Once Consumption:
---------------------------------------------
Two verification requests carrying the same code can both find the same
active record. Consumption is therefore a single conditional UPDATE:

    UPDATE email_verification_otps SET used = TRUE, used_at = %s
    WHERE id = %s AND used = FALSE

PostgreSQL takes a row lock for the UPDATE and re-evaluates the WHERE
clause after a concurrent writer commits, so exactly one statement
reports rowcount == 1. Every other caller sees 0 and is told ALREADY_USED.
No application-level locking is involved.

Any psycopg error is translated to StorageError with the original
exception chained, so the domain never sees driver types.
"""

import logging
from datetime import datetime
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from src.adapters.repository.passwords import (
    duplicate_email_error,
    hash_password,
    password_policy_errors,
)
from src.domain.exceptions import DirectoryError, StorageError
from src.domain.ports import MarkUsedResult, NewUser, OtpRecord, UserAccount

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"

_OTP_COLUMNS = "id, email, code, created_at, expires_at, used, used_at"


def _row_to_record(row: tuple) -> OtpRecord:
    return OtpRecord(
        id=row[0],
        email=row[1],
        code=row[2],
        created_at=row[3],
        expires_at=row[4],
        used=row[5],
        used_at=row[6],
    )


class PostgresOtpStore:
    """
    Implements OtpStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def insert(self, record: OtpRecord) -> int:
        sql = """
            INSERT INTO email_verification_otps (email, code, created_at, expires_at, used, used_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING id
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql,
                    (
                        record.email,
                        record.code,
                        record.created_at,
                        record.expires_at,
                        record.used,
                        record.used_at,
                    ),
                )
                record_id = cursor.fetchone()[0]
                conn.commit()
                return record_id
        except psycopg.Error as e:
            raise StorageError("Failed to insert verification code") from e

    def find_active(self, email: str, code: str, now: datetime) -> OtpRecord | None:
        """
        Return the newest unused, unexpired record for (email, code).

        Served by the (email, code, used) composite index; id breaks ties
        between records created in the same instant.
        """
        sql = f"""
            SELECT {_OTP_COLUMNS}
            FROM email_verification_otps
            WHERE email = %s
              AND code = %s
              AND used = FALSE
              AND expires_at > %s
            ORDER BY created_at DESC, id DESC
            LIMIT 1
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email, code, now))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise StorageError("Failed to look up verification code") from e
        return _row_to_record(row) if row is not None else None

    def mark_used(self, record_id: int, used_at: datetime) -> MarkUsedResult:
        sql = """
            UPDATE email_verification_otps
            SET used = TRUE, used_at = %s
            WHERE id = %s AND used = FALSE
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (used_at, record_id))
                conn.commit()
                # 1 only for the transaction that flipped the flag
                updated = cursor.rowcount == 1
        except psycopg.Error as e:
            raise StorageError("Failed to consume verification code") from e
        return MarkUsedResult.SUCCESS if updated else MarkUsedResult.ALREADY_USED

    def purge_expired(self, before: datetime) -> int:
        sql = "DELETE FROM email_verification_otps WHERE expires_at <= %s"
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (before,))
                conn.commit()
                return cursor.rowcount
        except psycopg.Error as e:
            raise StorageError("Failed to purge expired verification codes") from e


class PostgresUserDirectory:
    """
    Implements UserDirectory protocol via psycopg3.

    Password policy is checked before touching the database; duplicates are
    detected atomically by the UNIQUE constraint on email.
    """

    def __init__(self, pool: ConnectionPool, bcrypt_cost: int = 10) -> None:
        self._pool = pool
        self._bcrypt_cost = bcrypt_cost

    def find_by_email(self, email: str) -> UserAccount | None:
        sql = "SELECT email, name, email_confirmed FROM users WHERE email = %s"
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email,))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise StorageError("Failed to look up user") from e
        if row is None:
            return None
        return UserAccount(email=row[0], name=row[1], email_confirmed=row[2])

    def create(self, new_user: NewUser) -> UserAccount:
        errors = password_policy_errors(new_user.password)
        if errors:
            raise DirectoryError(errors)

        sql = """
            INSERT INTO users (name, email, password_hash, phone, age, date_of_birth, gender,
                               email_confirmed, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, FALSE, NOW())
            ON CONFLICT (email) DO NOTHING
        """
        password_hash = hash_password(new_user.password, self._bcrypt_cost)
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql,
                    (
                        new_user.name,
                        new_user.email,
                        password_hash,
                        new_user.phone,
                        new_user.age,
                        new_user.date_of_birth,
                        new_user.gender,
                    ),
                )
                conn.commit()
                created = cursor.rowcount == 1
        except psycopg.Error as e:
            raise StorageError("Failed to create user") from e

        if not created:
            raise DirectoryError([duplicate_email_error(new_user.email)])
        return UserAccount(email=new_user.email, name=new_user.name)

    def mark_email_confirmed(self, email: str) -> bool:
        sql = "UPDATE users SET email_confirmed = TRUE WHERE email = %s"
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email,))
                conn.commit()
                return cursor.rowcount == 1
        except psycopg.Error as e:
            raise StorageError("Failed to confirm user email") from e


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """Apply every ``*.sql`` file in filename order; each must be idempotent."""
    with pool.connection() as conn:
        for sql_file in sorted(migrations_dir.glob("*.sql")):
            logger.info("Applying migration %s", sql_file.name)
            try:
                conn.execute(sql_file.read_text())
            except psycopg.Error as e:
                raise StorageError(f"Migration failed: {sql_file.name}") from e
