"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
The adapters themselves are created once during app lifespan
startup and stored in app.state.
"""

from datetime import timedelta

from fastapi import Request

from src.config.settings import get_settings
from src.domain.otp import VerificationEngine
from src.domain.ports import EmailSender, OtpStore, UserDirectory
from src.domain.registration import RegistrationService


def get_otp_store(request: Request) -> OtpStore:
    return request.app.state.otp_store


def get_user_directory(request: Request) -> UserDirectory:
    return request.app.state.user_directory


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_verification_engine(request: Request) -> VerificationEngine:
    """Create verification engine over the app's OTP store."""
    settings = get_settings()
    return VerificationEngine(
        store=get_otp_store(request),
        ttl=timedelta(minutes=settings.otp_ttl_minutes),
    )


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the user directory, verification engine and email
    sender for the domain service.
    """
    return RegistrationService(
        directory=get_user_directory(request),
        engine=get_verification_engine(request),
        email_sender=get_email_sender(request),
    )
