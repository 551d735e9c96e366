"""Plain-text bodies for the verification and welcome emails."""


def display_name(email: str) -> str:
    """Local part of the address, used when no name is on hand."""
    return email.split("@")[0]


def verification_message(name: str, code: str, ttl_minutes: int) -> tuple[str, str]:
    subject = "Verify Your Email"
    body = (
        f"Hello {name},\n\n"
        f"Your verification code is: {code}\n\n"
        f"This code expires in {ttl_minutes} minutes. "
        "If you did not request it, you can ignore this email.\n"
    )
    return subject, body


def welcome_message(name: str) -> tuple[str, str]:
    subject = "Welcome!"
    body = (
        f"Hello {name},\n\n"
        "Your email address has been verified and your account is now active. "
        "You can now log in.\n"
    )
    return subject, body
