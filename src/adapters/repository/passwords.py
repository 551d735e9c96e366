"""
Password policy and hashing for the user directory adapters.

The policy mirrors the common identity-framework default: minimum length
plus one character from each of four classes. Every violated rule yields
its own message so the API can report them all at once.
"""

import bcrypt

MIN_LENGTH = 6


def password_policy_errors(password: str) -> list[str]:
    """Return one message per violated rule; empty if the password is acceptable."""
    errors = []
    if len(password) < MIN_LENGTH:
        errors.append(f"Passwords must be at least {MIN_LENGTH} characters.")
    if not any(ch.isdigit() for ch in password):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not any(ch.islower() for ch in password):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not any(ch.isupper() for ch in password):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")
    if all(ch.isalnum() for ch in password):
        errors.append("Passwords must have at least one non alphanumeric character.")
    return errors


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def duplicate_email_error(email: str) -> str:
    return f"Email '{email}' is already taken."
